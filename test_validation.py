"""
Validation Test Suite

Input limits shared by the engine, the coordinator and the terminal UI.

Sections:
    1. Scores — 0-180 integers, typed input parsing
    2. Players — names and player counts
    3. Game setup — starting score, lives, rounds
"""
import pytest

from validation import (
    MAX_PLAYER_NAME_LENGTH,
    ValidationResult,
    is_valid_player_count,
    is_valid_player_name,
    is_valid_score,
    is_valid_starting_lives,
    is_valid_starting_score,
    is_valid_total_rounds,
    parse_score,
    validate_player_name,
    validate_score,
)


# ═══════════════════════════════════════════════════════════════════════════════
# 1. SCORES
# ═══════════════════════════════════════════════════════════════════════════════

class TestScores:

    @pytest.mark.parametrize("score", [0, 1, 60, 180])
    def test_valid(self, score):
        assert validate_score(score) == ValidationResult(True)
        assert is_valid_score(score) is True

    def test_negative(self):
        result = validate_score(-1)
        assert result.is_valid is False
        assert result.error_message == "Score cannot be negative"

    def test_too_high(self):
        result = validate_score(181)
        assert result.is_valid is False
        assert result.error_message == "Score cannot exceed 180"

    @pytest.mark.parametrize("score", [1.5, 60.0, "60", None, True, float("nan")])
    def test_not_an_integer(self, score):
        result = validate_score(score)
        assert result.is_valid is False
        assert result.error_message == "Score must be a valid number"


class TestParseScore:

    @pytest.mark.parametrize("text,expected", [
        ("60", 60),
        ("  180 ", 180),
        ("0", 0),
        ("-5", -5),
        ("999", 999),
    ])
    def test_integers_parse(self, text, expected):
        # Range checks happen afterwards
        assert parse_score(text) == expected

    @pytest.mark.parametrize("text", ["", "   ", "abc", "12.5", "1e2", None])
    def test_non_integers(self, text):
        assert parse_score(text) is None


# ═══════════════════════════════════════════════════════════════════════════════
# 2. PLAYERS
# ═══════════════════════════════════════════════════════════════════════════════

class TestPlayerNames:

    def test_valid(self):
        assert validate_player_name("Alice").is_valid is True

    def test_trimmed_before_checking(self):
        assert is_valid_player_name("  " + "x" * MAX_PLAYER_NAME_LENGTH + "  ") is True

    @pytest.mark.parametrize("name", ["", "   ", "\t\n"])
    def test_empty(self, name):
        result = validate_player_name(name)
        assert result.is_valid is False
        assert result.error_message == "Player name cannot be empty"

    def test_too_long(self):
        result = validate_player_name("x" * 21)
        assert result.is_valid is False
        assert result.error_message == "Player name cannot exceed 20 characters"

    def test_not_text(self):
        assert validate_player_name(42).is_valid is False


class TestPlayerCount:

    @pytest.mark.parametrize("count", [2, 5, 8])
    def test_valid(self, count):
        assert is_valid_player_count(count) is True

    @pytest.mark.parametrize("count", [0, 1, 9, 2.0])
    def test_invalid(self, count):
        assert is_valid_player_count(count) is False


# ═══════════════════════════════════════════════════════════════════════════════
# 3. GAME SETUP
# ═══════════════════════════════════════════════════════════════════════════════

class TestSetupValues:

    def test_starting_score(self):
        assert is_valid_starting_score(501) is True
        assert is_valid_starting_score(1) is True
        assert is_valid_starting_score(0) is False
        assert is_valid_starting_score(-301) is False

    def test_starting_lives(self):
        assert is_valid_starting_lives(1) is True
        assert is_valid_starting_lives(10) is True
        assert is_valid_starting_lives(0) is False
        assert is_valid_starting_lives(11) is False

    def test_total_rounds(self):
        assert is_valid_total_rounds(1) is True
        assert is_valid_total_rounds(0) is False
        assert is_valid_total_rounds(False) is False
