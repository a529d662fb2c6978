"""
Rankings Test Suite

Countdown standings: lowest remaining score first, ties share a rank.
"""
from dataclasses import replace

from game_engine import create_game_state, get_current_player, start_game, update_player_score
from rankings import calculate_countdown_rankings, get_player_rank


# ── Helpers ──────────────────────────────────────────────────────────────────

def play(names, throws, starting_score=501):
    """Countdown game after throws are submitted in turn order."""
    state = start_game(create_game_state(list(names), starting_score, "countdown"))
    for thrown in throws:
        state = update_player_score(state, get_current_player(state).id, thrown)
    return state


def ranked_names(players):
    return [(rank, p.name) for rank, p in calculate_countdown_rankings(players)]


# ── Tests ────────────────────────────────────────────────────────────────────

class TestCountdownRankings:

    def test_nobody_has_thrown(self):
        state = play(["Alice", "Bob"], [])
        assert calculate_countdown_rankings(state.players) == []

    def test_lowest_remaining_first(self):
        state = play(["Alice", "Bob", "Cara"], [60, 100, 45])
        assert ranked_names(state.players) == [(1, "Bob"), (2, "Alice"), (3, "Cara")]

    def test_players_without_throws_left_out(self):
        state = play(["Alice", "Bob", "Cara"], [60])
        assert ranked_names(state.players) == [(1, "Alice")]

    def test_ties_share_rank_and_skip_next(self):
        state = play(["Alice", "Bob", "Cara"], [60, 60, 20])
        assert ranked_names(state.players) == [(1, "Alice"), (1, "Bob"), (3, "Cara")]

    def test_bust_still_counts_as_played(self):
        state = play(["Alice", "Bob"], [51], starting_score=50)
        assert ranked_names(state.players) == [(1, "Alice")]

    def test_winner_ranks_first(self):
        state = play(["Alice", "Bob"], [40, 50], starting_score=50)
        assert state.game_finished is True
        assert ranked_names(state.players)[0] == (1, "Bob")

    def test_input_order_does_not_matter(self):
        state = play(["Alice", "Bob", "Cara"], [60, 100, 45])
        assert ranked_names(reversed(state.players)) == ranked_names(state.players)


class TestGetPlayerRank:

    def test_rank_of_each_player(self):
        state = play(["Alice", "Bob", "Cara"], [60, 100, 45])
        alice, bob, cara = state.players
        assert get_player_rank(bob, state.players) == 1
        assert get_player_rank(alice, state.players) == 2
        assert get_player_rank(cara, state.players) == 3

    def test_player_who_has_not_thrown(self):
        state = play(["Alice", "Bob"], [60])
        assert get_player_rank(state.players[1], state.players) is None

    def test_matches_by_id(self):
        state = play(["Alice", "Bob"], [60, 100])
        stale_bob = replace(state.players[1], score=999)
        assert get_player_rank(stale_bob, state.players) == 1
