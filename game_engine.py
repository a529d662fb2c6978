"""
Darts Game Engine - Pure game logic without UI dependencies

This module contains all the scorekeeping rules for the three play modes
(Countdown, High-Low, Rounds). It uses immutable data structures and pure
functions: every action takes the current game state and returns a new one,
so the rules can be unit tested without any front-end.
"""
from dataclasses import dataclass, replace
from enum import Enum
from typing import ClassVar, Optional, Tuple, Union
import time
import uuid

from validation import (
    DEFAULT_STARTING_LIVES,
    DEFAULT_STARTING_SCORE,
    DEFAULT_TOTAL_ROUNDS,
    HIGH_LOW_STARTING_SCORE,
    MAX_PLAYERS,
    MIN_PLAYERS,
    is_valid_player_count,
    is_valid_starting_lives,
    is_valid_starting_score,
    is_valid_total_rounds,
    validate_player_name,
    validate_score,
)


class GameMode(Enum):
    """Supported play modes"""
    COUNTDOWN = "countdown"
    HIGH_LOW = "high-low"
    ROUNDS = "rounds"


class ChallengeDirection(Enum):
    """Which side of the target a High-Low throw has to land on"""
    HIGHER = "higher"
    LOWER = "lower"


# ══════════════════════════════════════════════════════════════════════════════
# Errors
# ══════════════════════════════════════════════════════════════════════════════

class GameError(Exception):
    """Base class for every rule violation raised by the engine."""


class PlayerNotFound(GameError, LookupError):
    """The referenced player id is not part of the game."""


class InvalidScore(GameError, ValueError):
    """A thrown value outside 0-180."""


class InvalidMode(GameError, TypeError):
    """A mode-specific action was called on a game of another mode."""


class NoChallengeSet(GameError):
    """A High-Low throw was submitted before a challenge was set."""


class WrongPlayer(GameError):
    """A High-Low throw came from someone other than the challenged player."""


class InvalidConfiguration(GameError, ValueError):
    """Bad player names, player count, or starting values."""


class InvalidChallenge(GameError, ValueError):
    """Unknown challenge direction or a target outside 0-180."""


class GameAlreadyFinished(GameError):
    """A score was submitted after a winner was decided."""


# ══════════════════════════════════════════════════════════════════════════════
# Entity model
# ══════════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class ScoreHistoryEntry:
    """One submitted throw - immutable.

    previous_score is the value the throw was applied to: the remaining
    score (Countdown), the last thrown value (High-Low), or the score of
    the active round (Rounds).
    """
    score: int
    previous_score: int
    timestamp: int  # epoch milliseconds, strictly increasing within a game
    turn_number: int  # 1-based per player
    round_number: Optional[int] = None
    challenge_direction: Optional[ChallengeDirection] = None
    challenge_target: Optional[int] = None
    challenger_id: Optional[str] = None
    passed_challenge: Optional[bool] = None
    lives_before: Optional[int] = None
    lives_after: Optional[int] = None


@dataclass(frozen=True)
class CountdownPlayer:
    id: str
    name: str
    score: int
    turn_start_score: int  # bust reverts here
    is_winner: bool = False
    score_history: Tuple[ScoreHistoryEntry, ...] = ()


@dataclass(frozen=True)
class HighLowPlayer:
    id: str
    name: str
    score: int  # last thrown value, not cumulative
    lives: int
    turn_start_score: int
    is_winner: bool = False
    score_history: Tuple[ScoreHistoryEntry, ...] = ()


@dataclass(frozen=True)
class RoundsPlayer:
    id: str
    name: str
    total_score: int = 0
    current_round_score: int = 0
    rounds_completed: int = 0
    is_winner: bool = False
    score_history: Tuple[ScoreHistoryEntry, ...] = ()


Player = Union[CountdownPlayer, HighLowPlayer, RoundsPlayer]


@dataclass(frozen=True)
class HighLowChallenge:
    """Active High-Low challenge: player_id must throw direction of target_score"""
    player_id: str
    direction: ChallengeDirection
    target_score: int


@dataclass(frozen=True)
class CountdownGameState:
    """Immutable Countdown game state (race from starting_score down to exactly 0)"""
    mode: ClassVar[GameMode] = GameMode.COUNTDOWN
    players: Tuple[CountdownPlayer, ...]
    starting_score: int = DEFAULT_STARTING_SCORE
    current_player_index: int = 0
    game_finished: bool = False
    winner: Optional[CountdownPlayer] = None
    last_throw_was_bust: bool = False


@dataclass(frozen=True)
class HighLowGameState:
    """Immutable High-Low game state (beat the challenge or lose a life)"""
    mode: ClassVar[GameMode] = GameMode.HIGH_LOW
    players: Tuple[HighLowPlayer, ...]
    starting_lives: int = DEFAULT_STARTING_LIVES
    high_low_challenge: Optional[HighLowChallenge] = None
    current_player_index: int = 0
    game_finished: bool = False
    winner: Optional[HighLowPlayer] = None
    last_throw_was_bust: bool = False


@dataclass(frozen=True)
class RoundsGameState:
    """Immutable Rounds game state (highest total after total_rounds wins).

    current_round reaches total_rounds + 1 only once the game is finished.
    last_throw_was_bust is never set in this mode.
    """
    mode: ClassVar[GameMode] = GameMode.ROUNDS
    players: Tuple[RoundsPlayer, ...]
    total_rounds: int = DEFAULT_TOTAL_ROUNDS
    current_round: int = 1
    current_player_index: int = 0
    game_finished: bool = False
    winner: Optional[RoundsPlayer] = None
    last_throw_was_bust: bool = False


GameState = Union[CountdownGameState, HighLowGameState, RoundsGameState]


# ══════════════════════════════════════════════════════════════════════════════
# Helpers
# ══════════════════════════════════════════════════════════════════════════════

def _now_ms() -> int:
    return int(time.time() * 1000)


def _new_player_id() -> str:
    """Timestamp plus a random suffix, so players made in the same millisecond differ."""
    return f"{_now_ms()}-{uuid.uuid4().hex[:8]}"


def _latest_timestamp(state) -> int:
    return max((entry.timestamp for player in state.players for entry in player.score_history),
               default=0)


def _next_timestamp(state) -> int:
    """Wall clock in ms, bumped past the newest entry so history never ties."""
    return max(_now_ms(), _latest_timestamp(state) + 1)


def _as_mode(mode) -> GameMode:
    try:
        return GameMode(mode)
    except ValueError:
        raise InvalidConfiguration(f"Unknown game mode: {mode!r}") from None


def _as_direction(direction) -> ChallengeDirection:
    try:
        return ChallengeDirection(direction)
    except ValueError:
        raise InvalidChallenge(f"Unknown challenge direction: {direction!r}") from None


def _replace_player(players, index, player):
    """Return a new players tuple with players[index] swapped for player."""
    players_list = list(players)
    players_list[index] = player
    return tuple(players_list)


def _check_thrown(thrown):
    result = validate_score(thrown)
    if not result.is_valid:
        raise InvalidScore(result.error_message)


def _check_in_progress(state):
    if state.game_finished:
        raise GameAlreadyFinished("The game is already finished")


def _winner_index(state) -> Optional[int]:
    """Index of the player who has won in state, or None while play continues."""
    players = state.players
    if not players:
        return None

    if state.mode is GameMode.COUNTDOWN:
        for i, player in enumerate(players):
            if player.score == 0:
                return i
        return None

    elif state.mode is GameMode.HIGH_LOW:
        alive = [i for i, player in enumerate(players) if player.lives > 0]
        if len(alive) == 1:
            return alive[0]
        if not alive:
            # Everyone out at once: most lives left, then lowest index
            return max(range(len(players)), key=lambda i: (players[i].lives, -i))
        return None

    elif state.mode is GameMode.ROUNDS:
        if state.current_round <= state.total_rounds:
            return None
        # max() keeps the first of equal totals
        return max(range(len(players)), key=lambda i: players[i].total_score)

    raise InvalidMode(f"Unsupported game mode: {state.mode!r}")


def _settle_winner(state):
    """Recompute is_winner, winner and game_finished from the players."""
    winner_index = _winner_index(state)
    players = tuple(
        player if player.is_winner == (i == winner_index)
        else replace(player, is_winner=(i == winner_index))
        for i, player in enumerate(state.players)
    )
    winner = players[winner_index] if winner_index is not None else None
    return replace(state,
                   players=players,
                   game_finished=winner is not None,
                   winner=winner)


def find_player_index(state: GameState, player_id: str) -> int:
    """
    Locate a player by id.

    Raises:
        PlayerNotFound: if no player has that id
    """
    for i, player in enumerate(state.players):
        if player.id == player_id:
            return i
    raise PlayerNotFound(f"Player not found: {player_id!r}")


def get_current_player(state: GameState) -> Optional[Player]:
    """Return the player whose turn it is, or None if the game has no players."""
    if 0 <= state.current_player_index < len(state.players):
        return state.players[state.current_player_index]
    return None


def is_eliminated(player: Player) -> bool:
    """High-Low players with no lives left are out; other modes never eliminate."""
    return isinstance(player, HighLowPlayer) and player.lives <= 0


def active_players(state: GameState) -> Tuple[Player, ...]:
    """Players still in the turn rotation."""
    return tuple(p for p in state.players if not is_eliminated(p))


def is_valid_score(current_score: int, score_to_subtract: int) -> bool:
    """Countdown pre-check: a 0-180 throw that does not take the score below zero."""
    if not validate_score(score_to_subtract).is_valid:
        return False
    return current_score - score_to_subtract >= 0


def is_valid_rounds_score(score: int) -> bool:
    return validate_score(score).is_valid


def is_bust(current_score: int, score_to_subtract: int) -> bool:
    """
    Check whether a Countdown throw busts.

    A throw busts when it exceeds the remaining score, would take the
    score below zero, or would leave exactly 1 (which no dart can finish).
    """
    if score_to_subtract > current_score:
        return True
    new_score = current_score - score_to_subtract
    if new_score < 0:
        return True
    if new_score == 1:
        return True
    return False


# ══════════════════════════════════════════════════════════════════════════════
# Factory
# ══════════════════════════════════════════════════════════════════════════════

def create_player(name: str,
                  starting_score: int = DEFAULT_STARTING_SCORE,
                  mode=GameMode.COUNTDOWN,
                  lives: int = DEFAULT_STARTING_LIVES) -> Player:
    """
    Create a fresh player for the given mode.

    High-Low players always start on 40 whatever starting_score is;
    Rounds players start with every total at 0.

    Raises:
        InvalidConfiguration: if the trimmed name is empty or too long
    """
    mode = _as_mode(mode)
    name_check = validate_player_name(name)
    if not name_check.is_valid:
        raise InvalidConfiguration(name_check.error_message)
    name = name.strip()
    player_id = _new_player_id()

    if mode is GameMode.HIGH_LOW:
        return HighLowPlayer(id=player_id, name=name,
                             score=HIGH_LOW_STARTING_SCORE,
                             lives=lives,
                             turn_start_score=HIGH_LOW_STARTING_SCORE)
    elif mode is GameMode.ROUNDS:
        return RoundsPlayer(id=player_id, name=name)
    else:
        return CountdownPlayer(id=player_id, name=name,
                               score=starting_score,
                               turn_start_score=starting_score)


def create_game_state(player_names,
                      starting_score: int = DEFAULT_STARTING_SCORE,
                      mode=GameMode.COUNTDOWN,
                      lives: int = DEFAULT_STARTING_LIVES,
                      total_rounds: int = DEFAULT_TOTAL_ROUNDS) -> GameState:
    """
    Create a fresh game with one player per name, in the given order.

    Args:
        player_names: 2-8 player names (trimmed; 1-20 characters each)
        starting_score: Countdown starting score
        mode: GameMode or its string value
        lives: High-Low starting lives (1-10)
        total_rounds: Rounds game length

    Returns:
        New game state for the mode, first player to throw

    Raises:
        InvalidConfiguration: on a bad player count, name or starting value
    """
    mode = _as_mode(mode)
    player_names = list(player_names)
    if not is_valid_player_count(len(player_names)):
        raise InvalidConfiguration(
            f"A game needs {MIN_PLAYERS}-{MAX_PLAYERS} players, got {len(player_names)}")

    if mode is GameMode.COUNTDOWN:
        if not is_valid_starting_score(starting_score):
            raise InvalidConfiguration("Starting score must be greater than 0")
        players = tuple(create_player(name, starting_score, mode, lives) for name in player_names)
        return CountdownGameState(players=players, starting_score=starting_score)

    elif mode is GameMode.HIGH_LOW:
        if not is_valid_starting_lives(lives):
            raise InvalidConfiguration("Starting lives must be between 1 and 10")
        players = tuple(create_player(name, starting_score, mode, lives) for name in player_names)
        return HighLowGameState(players=players, starting_lives=lives)

    else:
        if not is_valid_total_rounds(total_rounds):
            raise InvalidConfiguration("Number of rounds must be greater than 0")
        players = tuple(create_player(name, starting_score, mode, lives) for name in player_names)
        return RoundsGameState(players=players, total_rounds=total_rounds)


# ══════════════════════════════════════════════════════════════════════════════
# Turn engine
# ══════════════════════════════════════════════════════════════════════════════

def _with_turn_start(players, index):
    """Snapshot players[index].score as its bust-reversion baseline."""
    player = players[index]
    if player.turn_start_score == player.score:
        return players
    return _replace_player(players, index, replace(player, turn_start_score=player.score))


def next_player(state: GameState) -> GameState:
    """
    Pass the turn to the next player.

    High-Low skips eliminated players; if nobody has lives left the index
    lands on the plain next seat. Countdown also records the incoming
    player's turn-start score. A finished game is returned unchanged.
    """
    if state.game_finished or not state.players:
        return state

    total = len(state.players)
    next_index = (state.current_player_index + 1) % total

    if state.mode is GameMode.HIGH_LOW:
        candidate = next_index
        for _ in range(total):
            if state.players[candidate].lives > 0:
                next_index = candidate
                break
            candidate = (candidate + 1) % total

    if state.mode is GameMode.COUNTDOWN:
        return replace(state,
                       current_player_index=next_index,
                       players=_with_turn_start(state.players, next_index))
    return replace(state, current_player_index=next_index)


def start_game(state: GameState) -> GameState:
    """Initialise the first thrower's turn-start score (Countdown only)."""
    if state.mode is not GameMode.COUNTDOWN or not state.players:
        return state
    return replace(state, players=_with_turn_start(state.players, state.current_player_index))


# ══════════════════════════════════════════════════════════════════════════════
# Score application
# ══════════════════════════════════════════════════════════════════════════════

def update_player_score(state: GameState, player_id: str, thrown: int) -> GameState:
    """
    Apply a thrown score for a player.

    Countdown rules apply on a Countdown game, Rounds rules on a Rounds game.
    High-Low throws go through set_high_low_challenge/process_high_low_turn.

    Raises:
        PlayerNotFound, InvalidScore, GameAlreadyFinished, InvalidMode
    """
    if state.mode is GameMode.COUNTDOWN:
        return _update_countdown_player_score(state, player_id, thrown)
    elif state.mode is GameMode.ROUNDS:
        return update_rounds_player_score(state, player_id, thrown)
    elif state.mode is GameMode.HIGH_LOW:
        raise InvalidMode("High-Low throws must be submitted with process_high_low_turn")
    raise InvalidMode(f"Unsupported game mode: {state.mode!r}")


def _update_countdown_player_score(state, player_id, thrown):
    """
    Subtract a throw from the player's remaining score.

    1. Bust (over the remaining score, or leaving 1): the throw is logged,
       the score reverts to turn_start_score and the same player throws again
    2. Otherwise the score drops; exactly 0 wins the game
    3. Either way a non-bust passes the turn to the next seat
    """
    index = find_player_index(state, player_id)
    _check_thrown(thrown)
    _check_in_progress(state)

    player = state.players[index]
    entry = ScoreHistoryEntry(score=thrown,
                              previous_score=player.score,
                              timestamp=_next_timestamp(state),
                              turn_number=len(player.score_history) + 1)
    history = player.score_history + (entry,)

    if is_bust(player.score, thrown):
        busted = replace(player, score=player.turn_start_score, score_history=history)
        return replace(state,
                       players=_replace_player(state.players, index, busted),
                       last_throw_was_bust=True)

    scored = replace(player, score=player.score - thrown, score_history=history)
    players = _replace_player(state.players, index, scored)
    next_index = (index + 1) % len(players)
    players = _with_turn_start(players, next_index)

    return _settle_winner(replace(state,
                                  players=players,
                                  current_player_index=next_index,
                                  last_throw_was_bust=False))


def set_high_low_challenge(state: GameState, player_id: str, direction, target_score: int) -> GameState:
    """
    Set the challenge the next High-Low throw has to beat.

    Args:
        player_id: Player who must throw against the challenge
        direction: ChallengeDirection or "higher"/"lower"
        target_score: Reference score (conventionally the previous throw, 40 at first)

    Raises:
        InvalidMode, GameAlreadyFinished, PlayerNotFound, InvalidChallenge
    """
    if state.mode is not GameMode.HIGH_LOW:
        raise InvalidMode("Can only set a High-Low challenge in High-Low game mode")
    _check_in_progress(state)
    find_player_index(state, player_id)
    direction = _as_direction(direction)
    target_check = validate_score(target_score)
    if not target_check.is_valid:
        raise InvalidChallenge(f"Invalid challenge target: {target_check.error_message}")

    return replace(state,
                   high_low_challenge=HighLowChallenge(player_id=player_id,
                                                       direction=direction,
                                                       target_score=target_score))


def suggested_challenge_target(state: GameState) -> int:
    """The current player's last High-Low throw (40 before their first), the usual target."""
    if state.mode is not GameMode.HIGH_LOW:
        raise InvalidMode("Challenge targets only exist in High-Low game mode")
    player = get_current_player(state)
    if player is None:
        return HIGH_LOW_STARTING_SCORE
    return player.score


def process_high_low_turn(state: GameState, player_id: str, thrown: int) -> GameState:
    """
    Resolve a High-Low throw against the active challenge.

    The throw becomes the player's score. Missing the challenge costs a
    life; once a single player has lives left, that player wins. The
    challenge is cleared and the turn passes on, skipping eliminated players.

    Raises:
        InvalidMode, NoChallengeSet, WrongPlayer, PlayerNotFound,
        InvalidScore, GameAlreadyFinished
    """
    if state.mode is not GameMode.HIGH_LOW:
        raise InvalidMode("Can only process a High-Low turn in High-Low game mode")
    _check_in_progress(state)
    challenge = state.high_low_challenge
    if challenge is None:
        raise NoChallengeSet("No challenge set for High-Low turn")
    if challenge.player_id != player_id:
        raise WrongPlayer("Wrong player attempting turn")
    index = find_player_index(state, player_id)
    _check_thrown(thrown)

    player = state.players[index]
    if player.lives <= 0:
        raise WrongPlayer(f"{player.name} has been eliminated")

    if challenge.direction is ChallengeDirection.HIGHER:
        passed = thrown > challenge.target_score
    else:
        passed = thrown < challenge.target_score
    lives_after = player.lives if passed else player.lives - 1

    entry = ScoreHistoryEntry(score=thrown,
                              previous_score=player.score,
                              timestamp=_next_timestamp(state),
                              turn_number=len(player.score_history) + 1,
                              challenge_direction=challenge.direction,
                              challenge_target=challenge.target_score,
                              challenger_id=challenge.player_id,
                              passed_challenge=passed,
                              lives_before=player.lives,
                              lives_after=lives_after)
    updated = replace(player,
                      score=thrown,
                      lives=lives_after,
                      score_history=player.score_history + (entry,))

    settled = _settle_winner(replace(state,
                                     players=_replace_player(state.players, index, updated),
                                     current_player_index=index,
                                     high_low_challenge=None,
                                     last_throw_was_bust=False))
    return next_player(settled)


def _round_complete(players, round_number) -> bool:
    """True once every player has a throw logged for round_number."""
    return all(any(entry.round_number == round_number for entry in player.score_history)
               for player in players)


def update_rounds_player_score(state: GameState, player_id: str, thrown: int) -> GameState:
    """
    Add a throw to the player's round and running totals.

    When the throw completes the round (every player has thrown in it)
    the round advances and the first player starts the next one; after
    the last round the highest total wins, ties going to the earlier seat.

    Raises:
        InvalidMode, PlayerNotFound, InvalidScore, GameAlreadyFinished
    """
    if state.mode is not GameMode.ROUNDS:
        raise InvalidMode("Can only add round scores in Rounds game mode")
    index = find_player_index(state, player_id)
    _check_thrown(thrown)
    _check_in_progress(state)

    player = state.players[index]
    entry = ScoreHistoryEntry(score=thrown,
                              previous_score=player.current_round_score,
                              timestamp=_next_timestamp(state),
                              turn_number=len(player.score_history) + 1,
                              round_number=state.current_round)
    updated = replace(player,
                      current_round_score=player.current_round_score + thrown,
                      total_score=player.total_score + thrown,
                      score_history=player.score_history + (entry,))
    players = _replace_player(state.players, index, updated)

    if _round_complete(players, state.current_round):
        players = tuple(replace(p, current_round_score=0, rounds_completed=p.rounds_completed + 1)
                        for p in players)
        new_round = state.current_round + 1
        next_index = 0 if new_round <= state.total_rounds else state.current_player_index
    else:
        new_round = state.current_round
        next_index = (index + 1) % len(players)

    return _settle_winner(replace(state,
                                  players=players,
                                  current_round=new_round,
                                  current_player_index=next_index,
                                  last_throw_was_bust=False))


# ══════════════════════════════════════════════════════════════════════════════
# Undo and reset
# ══════════════════════════════════════════════════════════════════════════════

def _latest_entry(state):
    """(player_index, entry_index, entry) of the newest throw, or None."""
    latest = None
    for player_index, player in enumerate(state.players):
        for entry_index, entry in enumerate(player.score_history):
            if latest is None or entry.timestamp > latest[2].timestamp:
                latest = (player_index, entry_index, entry)
    return latest


def undo_last_score(state: GameState) -> GameState:
    """
    Take back the most recent throw in the game, whoever made it.

    The thrower's score (and High-Low lives) return to what they were
    before the throw and the turn goes back to them. A winning throw
    reopens the game. In Rounds mode undoing the throw that completed a
    round also rewinds the round. With no history the state is returned
    unchanged.
    """
    latest = _latest_entry(state)
    if latest is None:
        return state

    player_index, entry_index, entry = latest
    player = state.players[player_index]
    history = player.score_history[:entry_index] + player.score_history[entry_index + 1:]
    changes = {}

    if state.mode is GameMode.COUNTDOWN:
        restored = replace(player,
                           score=entry.previous_score,
                           turn_start_score=entry.previous_score,
                           score_history=history)
        players = _replace_player(state.players, player_index, restored)

    elif state.mode is GameMode.HIGH_LOW:
        lives = player.lives
        if entry.lives_before is not None and entry.lives_after is not None:
            lives = entry.lives_before
        restored = replace(player,
                           score=entry.previous_score,
                           lives=lives,
                           score_history=history)
        players = _replace_player(state.players, player_index, restored)
        # Any pending challenge was set for a later turn
        changes["high_low_challenge"] = None

    elif state.mode is GameMode.ROUNDS:
        restored = replace(player,
                           total_score=player.total_score - entry.score,
                           current_round_score=entry.previous_score,
                           score_history=history)
        players = _replace_player(state.players, player_index, restored)

        # The undone throw completed its round: step back into that round
        round_number = entry.round_number
        if round_number is not None and round_number < state.current_round:
            players = tuple(
                replace(p,
                        rounds_completed=max(p.rounds_completed - 1, 0),
                        current_round_score=sum(e.score for e in p.score_history
                                                if e.round_number == round_number))
                for p in players
            )
            changes["current_round"] = round_number

    else:
        raise InvalidMode(f"Unsupported game mode: {state.mode!r}")

    return _settle_winner(replace(state,
                                  players=players,
                                  current_player_index=player_index,
                                  last_throw_was_bust=False,
                                  **changes))


def reset_game(state: GameState,
               starting_lives: Optional[int] = None,
               starting_score: Optional[int] = None,
               total_rounds: Optional[int] = None) -> GameState:
    """
    Start the same game over: same players, same order, same mode.

    Starting values default to those the game was created with; an
    explicit value overrides them and is kept as the new configuration.

    Raises:
        InvalidConfiguration: if an override is out of range
    """
    if state.mode is GameMode.COUNTDOWN:
        score = starting_score if starting_score is not None else (
            state.starting_score or DEFAULT_STARTING_SCORE)
        if not is_valid_starting_score(score):
            raise InvalidConfiguration("Starting score must be greater than 0")
        players = tuple(replace(p, score=score, turn_start_score=score,
                                score_history=(), is_winner=False)
                        for p in state.players)
        return replace(state,
                       players=players,
                       starting_score=score,
                       current_player_index=0,
                       game_finished=False,
                       winner=None,
                       last_throw_was_bust=False)

    elif state.mode is GameMode.HIGH_LOW:
        lives = starting_lives if starting_lives is not None else (
            state.starting_lives or DEFAULT_STARTING_LIVES)
        if not is_valid_starting_lives(lives):
            raise InvalidConfiguration("Starting lives must be between 1 and 10")
        players = tuple(replace(p, score=HIGH_LOW_STARTING_SCORE,
                                turn_start_score=HIGH_LOW_STARTING_SCORE,
                                lives=lives, score_history=(), is_winner=False)
                        for p in state.players)
        return replace(state,
                       players=players,
                       starting_lives=lives,
                       high_low_challenge=None,
                       current_player_index=0,
                       game_finished=False,
                       winner=None,
                       last_throw_was_bust=False)

    elif state.mode is GameMode.ROUNDS:
        rounds = total_rounds if total_rounds is not None else (
            state.total_rounds or DEFAULT_TOTAL_ROUNDS)
        if not is_valid_total_rounds(rounds):
            raise InvalidConfiguration("Number of rounds must be greater than 0")
        players = tuple(replace(p, total_score=0, current_round_score=0, rounds_completed=0,
                                score_history=(), is_winner=False)
                        for p in state.players)
        return replace(state,
                       players=players,
                       total_rounds=rounds,
                       current_round=1,
                       current_player_index=0,
                       game_finished=False,
                       winner=None,
                       last_throw_was_bust=False)

    raise InvalidMode(f"Unsupported game mode: {state.mode!r}")
