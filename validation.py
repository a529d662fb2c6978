"""Game constants and input validation for the darts scorekeeper.

No UI dependency. Every check here is a plain function so the engine,
the coordinator and the terminal front-end share one set of limits.
"""
from dataclasses import dataclass
from typing import Optional

# Score limits (a single visit of three darts tops out at 180)
MIN_SCORE = 0
MAX_SCORE = 180

# Default starting values
DEFAULT_STARTING_SCORE = 501
DEFAULT_STARTING_LIVES = 5
DEFAULT_TOTAL_ROUNDS = 10
HIGH_LOW_STARTING_SCORE = 40

# Player limits
MIN_PLAYERS = 2
MAX_PLAYERS = 8
MAX_PLAYER_NAME_LENGTH = 20

MIN_STARTING_LIVES = 1
MAX_STARTING_LIVES = 10


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of a validation check - immutable"""
    is_valid: bool
    error_message: Optional[str] = None


def _is_int(value):
    """True for real integers (bool is rejected even though it subclasses int)."""
    return isinstance(value, int) and not isinstance(value, bool)


def validate_score(score) -> ValidationResult:
    """
    Check that a thrown score is within the range a dart visit can produce.

    Args:
        score: The value to check

    Returns:
        ValidationResult with an error message when invalid
    """
    if not _is_int(score):
        return ValidationResult(False, "Score must be a valid number")
    if score < MIN_SCORE:
        return ValidationResult(False, "Score cannot be negative")
    if score > MAX_SCORE:
        return ValidationResult(False, f"Score cannot exceed {MAX_SCORE}")
    return ValidationResult(True)


def is_valid_score(score) -> bool:
    """Check if a thrown score is between 0 and 180."""
    return validate_score(score).is_valid


def parse_score(text) -> Optional[int]:
    """Parse typed score input. Returns None if the text is not an integer."""
    if text is None:
        return None
    text = str(text).strip()
    if not text:
        return None
    try:
        return int(text)
    except ValueError:
        return None


def validate_player_name(name) -> ValidationResult:
    """
    Check that a player name is non-empty and not too long once trimmed.

    Args:
        name: Raw name as typed by the user

    Returns:
        ValidationResult with an error message when invalid
    """
    if not isinstance(name, str):
        return ValidationResult(False, "Player name must be text")
    trimmed = name.strip()
    if not trimmed:
        return ValidationResult(False, "Player name cannot be empty")
    if len(trimmed) > MAX_PLAYER_NAME_LENGTH:
        return ValidationResult(
            False, f"Player name cannot exceed {MAX_PLAYER_NAME_LENGTH} characters")
    return ValidationResult(True)


def is_valid_player_name(name) -> bool:
    return validate_player_name(name).is_valid


def is_valid_player_count(count) -> bool:
    """Check if the number of players is between 2 and 8."""
    return _is_int(count) and MIN_PLAYERS <= count <= MAX_PLAYERS


def is_valid_starting_lives(lives) -> bool:
    """Check if a High-Low starting lives value is between 1 and 10."""
    return _is_int(lives) and MIN_STARTING_LIVES <= lives <= MAX_STARTING_LIVES


def is_valid_starting_score(score) -> bool:
    """Check if a Countdown starting score is positive."""
    return _is_int(score) and score > 0


def is_valid_total_rounds(rounds) -> bool:
    """Check if a Rounds game length is positive."""
    return _is_int(rounds) and rounds > 0
