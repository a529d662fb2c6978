"""Countdown standings.

Lower remaining score ranks higher. Players who have not thrown yet are
left out of the table. Equal scores share a rank and the next score takes
its position (1, 1, 3).
"""


def calculate_countdown_rankings(players):
    """
    Rank countdown players by remaining score.

    Args:
        players: Sequence of CountdownPlayer

    Returns:
        List of (rank, player) tuples, best first. Empty if nobody has thrown.
    """
    played = [p for p in players if p.score_history]
    ordered = sorted(played, key=lambda p: p.score)

    rankings = []
    rank = 0
    for position, player in enumerate(ordered, start=1):
        if position == 1 or player.score != ordered[position - 2].score:
            rank = position
        rankings.append((rank, player))
    return rankings


def get_player_rank(player, players):
    """Return the player's 1-based rank, or None if they have not thrown yet."""
    for rank, ranked in calculate_countdown_rankings(players):
        if ranked.id == player.id:
            return rank
    return None
