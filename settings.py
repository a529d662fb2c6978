"""Persistent settings for the darts scorekeeper.

Stores user preferences in ~/.darts_settings.json: the game setup used
when none is given on the command line, plus display options.
No UI dependency — follows the same pattern as game_store.py.
"""

import json
from pathlib import Path

from validation import (
    DEFAULT_STARTING_LIVES,
    DEFAULT_STARTING_SCORE,
    DEFAULT_TOTAL_ROUNDS,
    is_valid_starting_lives,
    is_valid_starting_score,
    is_valid_total_rounds,
)

GAME_MODES = ("countdown", "high-low", "rounds")

DEFAULTS = {
    "game_mode": "countdown",
    "starting_score": DEFAULT_STARTING_SCORE,
    "starting_lives": DEFAULT_STARTING_LIVES,
    "total_rounds": DEFAULT_TOTAL_ROUNDS,
    "dark_mode": False,
}

# A stored value failing its check falls back to the default
_CHECKS = {
    "game_mode": lambda v: v in GAME_MODES,
    "starting_score": is_valid_starting_score,
    "starting_lives": is_valid_starting_lives,
    "total_rounds": is_valid_total_rounds,
    "dark_mode": lambda v: isinstance(v, bool),
}


def _default_path():
    """Return the default path for the settings file."""
    return Path.home() / ".darts_settings.json"


def load_settings(path=None):
    """Load settings from JSON file. Returns DEFAULTS on missing/corrupt.

    Merges with DEFAULTS so missing or out-of-range keys get default values.
    Unknown keys are ignored.
    """
    if path is None:
        path = _default_path()
    path = Path(path)
    try:
        data = json.loads(path.read_text())
    except (FileNotFoundError, json.JSONDecodeError, UnicodeDecodeError, OSError):
        return dict(DEFAULTS)
    if not isinstance(data, dict):
        return dict(DEFAULTS)

    result = dict(DEFAULTS)
    for key, check in _CHECKS.items():
        if key in data and check(data[key]):
            result[key] = data[key]
    return result


def save_settings(settings, path=None):
    """Write settings dict to JSON. Silently ignores write errors."""
    if path is None:
        path = _default_path()
    path = Path(path)
    try:
        path.write_text(json.dumps(settings, indent=2))
    except OSError:
        pass
