"""Autosave persistence for darts games.

Stores the current game in ~/.darts_autosave.json as plain JSON so a game
survives closing the terminal. Timestamps are kept as epoch milliseconds,
which preserves the order undo relies on. Saving and loading never raise
into the caller: failures are logged and treated as "no saved game".
"""
import json
import logging
import os
import tempfile
from pathlib import Path

from game_engine import (
    ChallengeDirection,
    CountdownGameState,
    CountdownPlayer,
    GameMode,
    HighLowChallenge,
    HighLowGameState,
    HighLowPlayer,
    RoundsGameState,
    RoundsPlayer,
    ScoreHistoryEntry,
)

logger = logging.getLogger(__name__)

FORMAT_VERSION = 1

_STATE_TYPES = {
    GameMode.COUNTDOWN: CountdownGameState,
    GameMode.HIGH_LOW: HighLowGameState,
    GameMode.ROUNDS: RoundsGameState,
}

_PLAYER_TYPES = {
    GameMode.COUNTDOWN: CountdownPlayer,
    GameMode.HIGH_LOW: HighLowPlayer,
    GameMode.ROUNDS: RoundsPlayer,
}

# Mode-specific integer fields, on top of the common ones
_PLAYER_FIELDS = {
    GameMode.COUNTDOWN: ("score", "turn_start_score"),
    GameMode.HIGH_LOW: ("score", "lives", "turn_start_score"),
    GameMode.ROUNDS: ("total_score", "current_round_score", "rounds_completed"),
}

_STATE_FIELDS = {
    GameMode.COUNTDOWN: ("starting_score",),
    GameMode.HIGH_LOW: ("starting_lives",),
    GameMode.ROUNDS: ("total_rounds", "current_round"),
}

_OPTIONAL_ENTRY_FIELDS = (
    "round_number", "challenge_target", "challenger_id",
    "passed_challenge", "lives_before", "lives_after",
)


def _default_path():
    """Return the default path for the autosave file."""
    return Path.home() / ".darts_autosave.json"


def _int(data, key):
    value = data[key]
    if not isinstance(value, int) or isinstance(value, bool):
        raise ValueError(f"{key} must be an integer, got {value!r}")
    return value


# ── Encoding ─────────────────────────────────────────────────────────────────

def _entry_to_dict(entry):
    data = {
        "score": entry.score,
        "previous_score": entry.previous_score,
        "timestamp": entry.timestamp,
        "turn_number": entry.turn_number,
    }
    if entry.challenge_direction is not None:
        data["challenge_direction"] = entry.challenge_direction.value
    for key in _OPTIONAL_ENTRY_FIELDS:
        value = getattr(entry, key)
        if value is not None:
            data[key] = value
    return data


def _player_to_dict(player, mode):
    data = {
        "id": player.id,
        "name": player.name,
        "is_winner": player.is_winner,
    }
    for key in _PLAYER_FIELDS[mode]:
        data[key] = getattr(player, key)
    data["score_history"] = [_entry_to_dict(e) for e in player.score_history]
    return data


def state_to_dict(state):
    """Serialize a game state to a JSON-safe dict."""
    mode = state.mode
    data = {
        "version": FORMAT_VERSION,
        "mode": mode.value,
        "players": [_player_to_dict(p, mode) for p in state.players],
        "current_player_index": state.current_player_index,
        "game_finished": state.game_finished,
        "winner_id": state.winner.id if state.winner is not None else None,
        "last_throw_was_bust": state.last_throw_was_bust,
    }
    for key in _STATE_FIELDS[mode]:
        data[key] = getattr(state, key)
    if mode is GameMode.HIGH_LOW:
        challenge = state.high_low_challenge
        data["high_low_challenge"] = None if challenge is None else {
            "player_id": challenge.player_id,
            "direction": challenge.direction.value,
            "target_score": challenge.target_score,
        }
    return data


# ── Decoding ─────────────────────────────────────────────────────────────────

def _dict_to_entry(data):
    kwargs = {
        "score": _int(data, "score"),
        "previous_score": _int(data, "previous_score"),
        "timestamp": _int(data, "timestamp"),
        "turn_number": _int(data, "turn_number"),
    }
    if data.get("challenge_direction") is not None:
        kwargs["challenge_direction"] = ChallengeDirection(data["challenge_direction"])
    for key in _OPTIONAL_ENTRY_FIELDS:
        if data.get(key) is not None:
            kwargs[key] = data[key]
    return ScoreHistoryEntry(**kwargs)


def _dict_to_player(data, mode):
    kwargs = {
        "id": str(data["id"]),
        "name": str(data["name"]),
        "is_winner": bool(data.get("is_winner", False)),
        "score_history": tuple(_dict_to_entry(e) for e in data.get("score_history", [])),
    }
    for key in _PLAYER_FIELDS[mode]:
        kwargs[key] = _int(data, key)
    return _PLAYER_TYPES[mode](**kwargs)


def _decode_state(data):
    version = data.get("version")
    if version != FORMAT_VERSION:
        raise ValueError(f"Unsupported save format version: {version!r}")
    mode = GameMode(data["mode"])
    players = tuple(_dict_to_player(p, mode) for p in data["players"])

    current_player_index = _int(data, "current_player_index")
    if players and not (0 <= current_player_index < len(players)):
        raise ValueError(f"current_player_index {current_player_index} out of range")

    winner = None
    winner_id = data.get("winner_id")
    if winner_id is not None:
        matches = [p for p in players if p.id == winner_id]
        if not matches:
            raise ValueError(f"winner {winner_id!r} is not one of the players")
        winner = matches[0]

    kwargs = {
        "players": players,
        "current_player_index": current_player_index,
        "game_finished": bool(data.get("game_finished", False)),
        "winner": winner,
        "last_throw_was_bust": bool(data.get("last_throw_was_bust", False)),
    }
    for key in _STATE_FIELDS[mode]:
        kwargs[key] = _int(data, key)

    if mode is GameMode.HIGH_LOW:
        challenge = data.get("high_low_challenge")
        if challenge is not None:
            kwargs["high_low_challenge"] = HighLowChallenge(
                player_id=str(challenge["player_id"]),
                direction=ChallengeDirection(challenge["direction"]),
                target_score=_int(challenge, "target_score"),
            )
    return _STATE_TYPES[mode](**kwargs)


def state_from_dict(data):
    """
    Rebuild a game state from state_to_dict output.

    Raises:
        ValueError: if the payload is missing fields or has the wrong shape
    """
    if not isinstance(data, dict):
        raise ValueError("Saved game must be a JSON object")
    try:
        return _decode_state(data)
    except (KeyError, TypeError, AttributeError) as exc:
        raise ValueError(f"Malformed saved game: {exc!r}") from exc


# ── File I/O ─────────────────────────────────────────────────────────────────

def save_game(state, path=None):
    """Write the game to the autosave file atomically. Logs and ignores write errors."""
    if path is None:
        path = _default_path()
    path = Path(path)

    try:
        raw = json.dumps(state_to_dict(state), indent=2).encode()
        fd, tmp = tempfile.mkstemp(dir=path.parent, suffix=".tmp")
        closed = False
        try:
            os.write(fd, raw)
            os.close(fd)
            closed = True
            os.replace(tmp, path)
        except BaseException:
            if not closed:
                os.close(fd)
            try:
                os.unlink(tmp)
            except OSError:
                pass
            raise
    except OSError:
        logger.warning("Could not save game to %s", path, exc_info=True)


def load_game(path=None):
    """Load the autosaved game. Returns None if missing, unreadable or corrupt."""
    if path is None:
        path = _default_path()
    path = Path(path)

    try:
        data = json.loads(path.read_text())
    except FileNotFoundError:
        return None
    except (json.JSONDecodeError, UnicodeDecodeError, OSError):
        logger.warning("Ignoring unreadable autosave %s", path, exc_info=True)
        return None

    try:
        return state_from_dict(data)
    except ValueError:
        logger.warning("Ignoring corrupt autosave %s", path, exc_info=True)
        return None


def has_saved_game(path=None):
    """Whether an autosave file exists."""
    if path is None:
        path = _default_path()
    return Path(path).is_file()


def clear_saved_game(path=None):
    """Delete the autosave file."""
    if path is None:
        path = _default_path()
    path = Path(path)
    try:
        path.unlink()
    except FileNotFoundError:
        pass
