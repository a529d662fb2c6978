"""
GameCoordinator — All non-UI game coordination logic.

Owns the current game state and applies exactly one engine transition per
user action, so actions are naturally serialized. Engine errors are caught
here, logged and turned into a message for the UI; the held state is only
replaced when a transition succeeds. Every change is autosaved.
The front-end (tui.py) only renders and forwards input.
"""
from __future__ import annotations

import argparse
import logging
from pathlib import Path

import game_store
from game_engine import (
    GameError,
    GameMode,
    create_game_state,
    get_current_player,
    next_player,
    process_high_low_turn,
    reset_game,
    set_high_low_challenge,
    start_game,
    suggested_challenge_target,
    undo_last_score,
    update_player_score,
)
from settings import GAME_MODES, load_settings
from validation import parse_score, validate_score

logger = logging.getLogger(__name__)


class GameCoordinator:
    """Holds one game and exposes the actions a front-end can trigger.

    Action methods return True when the game changed and False when the
    action was rejected; on rejection last_error explains why.
    """

    def __init__(self, state=None, autosave_path: str | Path | None = None,
                 autosave: bool = True) -> None:
        """Initialize the coordinator.

        Args:
            state: Optional game state to continue (e.g. from an autosave).
            autosave_path: Autosave file; None uses game_store's default.
            autosave: Whether to write the autosave after each change.
        """
        self._state = state
        self.autosave_path = autosave_path
        self.autosave = autosave
        self.last_error: str | None = None

    # ── Properties ───────────────────────────────────────────────────────

    @property
    def state(self):
        """The current game state (None before a game is created)."""
        return self._state

    @property
    def has_game(self) -> bool:
        return self._state is not None

    @property
    def mode(self) -> GameMode | None:
        return self._state.mode if self._state is not None else None

    @property
    def current_player(self):
        """The player whose turn it is."""
        if self._state is None:
            return None
        return get_current_player(self._state)

    @property
    def game_finished(self) -> bool:
        return self._state is not None and self._state.game_finished

    @property
    def winner(self):
        return self._state.winner if self._state is not None else None

    @property
    def last_throw_was_bust(self) -> bool:
        return self._state is not None and self._state.last_throw_was_bust

    @property
    def challenge(self):
        """Active High-Low challenge, or None."""
        if self.mode is not GameMode.HIGH_LOW:
            return None
        return self._state.high_low_challenge

    @property
    def can_undo(self) -> bool:
        """Whether any throw has been recorded that undo could take back."""
        if self._state is None:
            return False
        return any(p.score_history for p in self._state.players)

    # ── Action methods (called by the UI on input) ───────────────────────

    def _apply(self, action: str, transition) -> bool:
        """Run transition(state) and keep the result, or record why it failed."""
        if self._state is None:
            self.last_error = "No game in progress"
            return False

        try:
            new_state = transition(self._state)
        except GameError as exc:
            logger.warning("%s rejected: %s", action, exc)
            self.last_error = str(exc)
            return False

        was_finished = self._state.game_finished
        self._state = new_state
        self.last_error = None
        logger.debug("%s applied", action)
        if new_state.game_finished and not was_finished:
            logger.info("Game won by %s", new_state.winner.name)
        self._autosave_if_active()
        return True

    def new_game(self, names, mode="countdown", starting_score: int = 501,
                 lives: int = 5, total_rounds: int = 10) -> bool:
        """Replace the current game with a fresh one."""
        try:
            state = start_game(create_game_state(names, starting_score, mode, lives, total_rounds))
        except GameError as exc:
            logger.warning("new game rejected: %s", exc)
            self.last_error = str(exc)
            return False

        self._state = state
        self.last_error = None
        logger.info("New %s game for %s", state.mode.value,
                    ", ".join(p.name for p in state.players))
        self._autosave_if_active()
        return True

    def submit_score(self, thrown: int) -> bool:
        """Record a throw for the current player using the mode's rules."""
        player = self.current_player
        if player is None:
            self.last_error = "No game in progress"
            return False

        if self.mode is GameMode.HIGH_LOW:
            return self._apply("score", lambda s: process_high_low_turn(s, player.id, thrown))
        return self._apply("score", lambda s: update_player_score(s, player.id, thrown))

    def submit_score_text(self, text: str) -> bool:
        """Parse typed input and submit it. Rejects non-numbers without touching the game."""
        thrown = parse_score(text)
        if thrown is None:
            self.last_error = validate_score(text).error_message
            return False
        return self.submit_score(thrown)

    def set_challenge(self, direction, target: int | None = None) -> bool:
        """Set a High-Low challenge for the current player.

        Args:
            direction: "higher"/"lower" or a ChallengeDirection.
            target: Score to beat; defaults to the player's last throw.
        """
        player = self.current_player
        if player is None:
            self.last_error = "No game in progress"
            return False

        def transition(state):
            score = target if target is not None else suggested_challenge_target(state)
            return set_high_low_challenge(state, player.id, direction, score)

        return self._apply("challenge", transition)

    def advance(self) -> bool:
        """Pass the turn without a throw."""
        return self._apply("advance", next_player)

    def undo(self) -> bool:
        """Take back the most recent throw. Returns False if there is none."""
        if not self.can_undo:
            self.last_error = "Nothing to undo"
            return False
        return self._apply("undo", undo_last_score)

    def reset(self) -> bool:
        """Start the same game over with the same players and settings."""
        return self._apply("reset", reset_game)

    # ── Autosave ─────────────────────────────────────────────────────────

    def _autosave_if_active(self) -> None:
        """Save state after a change, or clear autosave if game is over."""
        if not self.autosave or self._state is None:
            return
        if self._state.game_finished:
            game_store.clear_saved_game(self.autosave_path)
        else:
            game_store.save_game(self._state, self.autosave_path)

    @classmethod
    def load_state(cls, path: str | Path | None = None) -> GameCoordinator | None:
        """Return a coordinator resuming the autosaved game, or None.

        Finished games are not resumed.
        """
        state = game_store.load_game(path)
        if state is None or state.game_finished:
            return None
        logger.info("Resuming saved %s game", state.mode.value)
        return cls(state=state, autosave_path=path)


def default_player_names(count: int) -> list[str]:
    """Placeholder names for a quick start."""
    return [f"Player {i + 1}" for i in range(count)]


def parse_args(argv: list[str] | None = None, settings: dict | None = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Args:
        argv: Optional list of args (for testing). None uses sys.argv.
        settings: Saved settings supplying defaults. None loads them from disk.

    Returns:
        Parsed argparse.Namespace.
    """
    if settings is None:
        settings = load_settings()

    parser = argparse.ArgumentParser(description="Darts scorekeeper")
    parser.add_argument("--mode", choices=GAME_MODES, default=settings["game_mode"],
                        help="Game mode (default: %(default)s)")
    parser.add_argument("--names", nargs="+", metavar="NAME",
                        help="Player names in throwing order (2-8)")
    parser.add_argument("--score", type=int, default=settings["starting_score"],
                        help="Countdown starting score (default: %(default)s)")
    parser.add_argument("--lives", type=int, default=settings["starting_lives"],
                        help="High-Low starting lives (default: %(default)s)")
    parser.add_argument("--rounds", type=int, default=settings["total_rounds"],
                        help="Number of rounds in Rounds mode (default: %(default)s)")
    parser.add_argument("--new", action="store_true",
                        help="Start a new game even if an autosave exists")
    parser.add_argument("--log-file", metavar="PATH",
                        help="Write debug logging to this file")
    return parser.parse_args(argv)
