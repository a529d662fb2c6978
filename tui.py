#!/usr/bin/env python3
"""
Darts TUI — Terminal scoreboard using Textual.

Keyboard-driven: type a score and press Enter. All rules live in the
engine; this module only renders the coordinator's state and forwards
input to it.
"""
import logging
import sys

from rich.markup import escape
from textual import on
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Center, Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widget import Widget
from textual.widgets import Footer, Header, Input, Static

from game_coordinator import GameCoordinator, default_player_names, parse_args
from game_engine import GameMode, active_players, suggested_challenge_target
from rankings import get_player_rank
from settings import load_settings, save_settings

logger = logging.getLogger(__name__)


# ── Widgets ──────────────────────────────────────────────────────────────────

def _player_line(state, index, player):
    """One scoreboard row for a player, by mode."""
    current = index == state.current_player_index and not state.game_finished
    marker = "▸" if current else " "
    name = escape(player.name.ljust(20))
    if player.is_winner:
        name = f"[bold green]★ {name}[/bold green]"
    elif current:
        name = f"[bold]{name}[/bold]"

    if state.mode is GameMode.COUNTDOWN:
        rank = get_player_rank(player, state.players)
        rank_text = f"  #{rank}" if rank is not None else ""
        return f"{marker} {name} {player.score:>4}{rank_text}"

    elif state.mode is GameMode.HIGH_LOW:
        lives = "OUT" if player.lives <= 0 else "♥" * player.lives
        return f"{marker} {name} last {player.score:>3}  {lives}"

    else:
        return (f"{marker} {name} {player.total_score:>5}"
                f"  (round {player.current_round_score})")


class PlayersDisplay(Widget):
    """Scoreboard: one row per player in throwing order."""

    def render(self):
        state = self.app.coordinator.state
        if state is None:
            return "No game in progress"
        return "\n".join(_player_line(state, i, p) for i, p in enumerate(state.players))


class StatusDisplay(Widget):
    """Whose turn, challenge prompt, bust/error feedback, winner."""

    def render(self):
        coord = self.app.coordinator
        state = coord.state
        if state is None:
            return ""

        lines = []
        if coord.game_finished:
            lines.append(f"[bold green]{escape(coord.winner.name)} wins![/bold green]")
            lines.append("[dim]Ctrl+R play again · Ctrl+Z undo last throw[/dim]")
        else:
            lines.append(f"[bold]{escape(coord.current_player.name)}[/bold] to throw")
            if coord.mode is GameMode.HIGH_LOW:
                challenge = coord.challenge
                if challenge is None:
                    target = suggested_challenge_target(state)
                    lines.append(f"Set a challenge: ↑ higher / ↓ lower than {target}")
                else:
                    lines.append(f"Challenge: throw {challenge.direction.value} "
                                 f"than {challenge.target_score}")
                lines.append(f"[dim]{len(active_players(state))} players still in[/dim]")

        if coord.last_throw_was_bust:
            lines.append("[bold red]BUST! Score reverted to turn start.[/bold red]")
        if coord.last_error:
            lines.append(f"[red]{escape(coord.last_error)}[/red]")
        return "\n".join(lines)


def _mode_text(state):
    if state is None:
        return ""
    if state.mode is GameMode.COUNTDOWN:
        return f"Countdown ({state.starting_score})"
    elif state.mode is GameMode.HIGH_LOW:
        return f"High-Low Challenge ({state.starting_lives} lives)"
    return f"Rounds | Round {min(state.current_round, state.total_rounds)}/{state.total_rounds}"


# ── Modal Screens ────────────────────────────────────────────────────────────

class HelpScreen(ModalScreen):
    """Help overlay showing key bindings."""

    BINDINGS = [
        Binding("escape", "dismiss", "Close"),
        Binding("f1", "dismiss", "Close"),
    ]

    def compose(self) -> ComposeResult:
        controls = [
            ("0-180 + Enter", "Submit score for current player"),
            ("↑ / ↓", "High-Low: challenge higher / lower"),
            ("Ctrl+Z", "Undo last throw"),
            ("Ctrl+N", "Skip to next player"),
            ("Ctrl+R", "Restart game"),
            ("F3", "Dark mode"),
            ("Esc", "Close overlay / Quit"),
            ("F1", "This help screen"),
        ]
        text = "[bold]CONTROLS[/bold]\n\n"
        for key, desc in controls:
            text += f"  {key:<16} {desc}\n"
        text += "\n[dim]Press Esc or F1 to close[/dim]"
        yield Center(Static(text, id="help-panel"))


# ── Main App ─────────────────────────────────────────────────────────────────

class DartsApp(App):
    """Darts scorekeeper terminal UI application."""

    CSS = """
    Screen {
        layout: vertical;
    }
    #mode-display {
        height: 1;
        padding: 0 1;
        text-style: bold;
    }
    #game-area {
        height: 1fr;
    }
    #players-display {
        width: 2fr;
        padding: 1 2;
        border: round $accent;
    }
    #side-panel {
        width: 1fr;
    }
    #status-display {
        height: 1fr;
        padding: 1 1;
    }
    #help-panel {
        width: 60;
        padding: 1 2;
        border: thick $accent;
        background: $surface;
    }
    HelpScreen {
        align: center middle;
    }
    """

    BINDINGS = [
        Binding("up", "challenge('higher')", "Higher", priority=True),
        Binding("down", "challenge('lower')", "Lower", priority=True),
        Binding("ctrl+z", "undo", "Undo", priority=True),
        Binding("ctrl+n", "skip", "Skip turn", priority=True),
        Binding("ctrl+r", "restart", "Restart", priority=True),
        Binding("f1", "help", "Help"),
        Binding("f3", "toggle_dark", "Dark mode"),
        Binding("escape", "quit_or_close", "Quit"),
    ]

    def __init__(self, coordinator, settings=None):
        super().__init__()
        self.coordinator = coordinator
        self.settings = settings if settings is not None else load_settings()

    def compose(self) -> ComposeResult:
        yield Header()
        yield Static("", id="mode-display")
        with Horizontal(id="game-area"):
            yield PlayersDisplay(id="players-display")
            with Vertical(id="side-panel"):
                yield StatusDisplay(id="status-display")
                yield Input(placeholder="Enter score (0-180)", id="score-input")
        yield Footer()

    def on_mount(self):
        self.title = "Darts"
        self._apply_theme()
        self.query_one("#score-input", Input).focus()
        self._refresh_display()

    def _apply_theme(self):
        self.theme = "textual-dark" if self.settings.get("dark_mode") else "textual-light"

    def _refresh_display(self):
        """Refresh all display widgets."""
        self.query_one("#mode-display", Static).update(_mode_text(self.coordinator.state))
        self.query_one("#players-display", PlayersDisplay).refresh()
        self.query_one("#status-display", StatusDisplay).refresh()

    # ── Actions ──────────────────────────────────────────────────────────

    @on(Input.Submitted, "#score-input")
    def on_score_submitted(self, event: Input.Submitted):
        if self.coordinator.submit_score_text(event.value):
            event.input.value = ""
        self._refresh_display()

    def action_challenge(self, direction: str):
        if self.coordinator.mode is not GameMode.HIGH_LOW:
            return
        self.coordinator.set_challenge(direction)
        self._refresh_display()

    def action_undo(self):
        self.coordinator.undo()
        self._refresh_display()

    def action_skip(self):
        self.coordinator.advance()
        self._refresh_display()

    def action_restart(self):
        self.coordinator.reset()
        self._refresh_display()

    def action_help(self):
        self.push_screen(HelpScreen())

    def action_toggle_dark(self):
        self.settings["dark_mode"] = not self.settings.get("dark_mode", False)
        save_settings(self.settings)
        self._apply_theme()

    def action_quit_or_close(self):
        # If any screen is stacked, pop it
        if len(self.screen_stack) > 1:
            self.pop_screen()
        else:
            self.exit()


def main(argv=None):
    """Entry point for the TUI."""
    settings = load_settings()
    args = parse_args(argv, settings=settings)

    if args.log_file:
        logging.basicConfig(filename=args.log_file, level=logging.DEBUG,
                            format="%(asctime)s %(name)s %(levelname)s %(message)s")

    coordinator = None
    if not args.new:
        coordinator = GameCoordinator.load_state()

    if coordinator is None:
        names = args.names or default_player_names(2)
        coordinator = GameCoordinator()
        if not coordinator.new_game(names, mode=args.mode, starting_score=args.score,
                                    lives=args.lives, total_rounds=args.rounds):
            print(f"Error: {coordinator.last_error}")
            sys.exit(1)

    logger.debug("Starting %s game", coordinator.mode.value)
    app = DartsApp(coordinator, settings=settings)
    app.run()


if __name__ == "__main__":
    main()
