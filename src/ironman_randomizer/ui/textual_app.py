from __future__ import annotations

from collections.abc import Sequence

from textual import on
from textual.app import App, ComposeResult
from textual.containers import Container, Grid, Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, Footer, Header, Label

from ..core.models import RunState
from ..core.roster import DEFAULT_ROSTER, display_order, progress_pct, pyramid_rows
from ..features.run import RunManager

_CHAR_PREFIX = "char-"

_FAIL_PROMPT = "Mark this run as failed? This cannot be undone."
_RESET_PROMPT = "Reset the current run? All progress will be lost."


class ConfirmScreen(ModalScreen[bool]):
    """Yes/no dialog; dismisses with ``True`` only when confirmed."""

    DEFAULT_CSS = """
    ConfirmScreen { align: center middle; }
    #dialog {
        grid-size: 2;
        grid-gutter: 1 2;
        grid-rows: auto 3;
        padding: 1 2;
        width: 60;
        height: auto;
        border: thick $warning 80%;
        background: $surface;
    }
    #question { column-span: 2; width: 100%; content-align: center middle; }
    #dialog Button { width: 100%; }
    """

    BINDINGS = [("y", "confirm", "Yes"), ("n,escape", "cancel", "No")]

    def __init__(self, question: str) -> None:
        super().__init__()
        self.question = question

    def compose(self) -> ComposeResult:  # type: ignore[override]
        with Grid(id="dialog"):
            yield Label(self.question, id="question")
            yield Button("Yes", id="btn-yes", variant="error")
            yield Button("No", id="btn-no", variant="primary")

    def action_confirm(self) -> None:
        self.dismiss(True)

    def action_cancel(self) -> None:
        self.dismiss(False)

    @on(Button.Pressed, "#btn-yes")
    def _on_yes(self) -> None:
        self.dismiss(True)

    @on(Button.Pressed, "#btn-no")
    def _on_no(self) -> None:
        self.dismiss(False)


class IronManRunApp(App[None]):
    CSS = """
    Screen {
        layout: vertical;
    }
    .section { padding: 1; }
    #title { text-align: center; width: 100%; }
    #status { text-align: center; width: 100%; }
    #controls { height: auto; align: center middle; }
    #controls Button { margin: 0 1; }
    #pyramid { height: auto; align: center top; }
    .pyramid-row { height: auto; align: center middle; }
    .character { min-width: 14; margin: 0 1; }
    .character.completed { text-style: strike; opacity: 60%; }
    .character.failed { background: $error 30%; }
    """

    BINDINGS = [
        ("s", "start_run", "Start"),
        ("n", "complete_next", "Next"),
        ("f", "fail_run", "Fail"),
        ("r", "reset_run", "Reset"),
        ("q", "quit", "Quit"),
    ]

    def __init__(
        self,
        *,
        roster: Sequence[str] = DEFAULT_ROSTER,
        seed: int | None = None,
        manager: RunManager | None = None,
    ) -> None:
        super().__init__()
        self._roster = list(roster)
        self._seed = seed
        self._manager = manager if manager is not None else RunManager()
        self._state = self._manager.get_run_state()
        self._button_names: dict[str, str] = {}

    # --- Compose UI ---
    def compose(self) -> ComposeResult:  # type: ignore[override]
        yield Header(show_clock=False)
        with Container(classes="section"):
            yield Label("Iron Man Run", id="title")
            yield Label("", id="status")
        with Horizontal(id="controls", classes="section"):
            yield Button("Start New Run", id="btn-start", variant="success")
            yield Button("Mark Failed", id="btn-fail", variant="warning")
            yield Button("Reset Run", id="btn-reset", variant="error")
        yield Vertical(id="pyramid", classes="section")
        yield Footer()

    async def on_mount(self) -> None:  # type: ignore[override]
        await self._render_state(self._state)

    # --- Rendering ---
    def format_status(self, state: RunState) -> str:
        if not state.has_started:
            return "No active run."
        if state.failed:
            outcome = "[bold red]Run failed[/]"
        elif state.drained:
            outcome = "[bold green]Run complete[/]"
        else:
            outcome = f"Next up: [bold]{state.queue[0]}[/]"
        return f"Run #{state.run_id} - {len(state.completed)}/{state.total} ({progress_pct(state)}%) - {outcome}"

    def character_locked(self, completed: bool, state: RunState) -> bool:
        # A failed run is resumed with the "next" key, not by clicking portraits.
        return completed or state.failed

    async def _render_state(self, state: RunState) -> None:
        self._state = state
        started = state.has_started
        self.query_one("#status", Label).update(self.format_status(state))
        self.query_one("#btn-start", Button).display = not started
        self.query_one("#btn-reset", Button).display = started
        self.query_one("#btn-fail", Button).display = started and not state.failed

        pyramid = self.query_one("#pyramid", Vertical)
        await pyramid.remove_children()
        self._button_names.clear()
        position = 0
        rows: list[Horizontal] = []
        for row in pyramid_rows(display_order(state)):
            buttons: list[Button] = []
            for name, completed in row:
                button_id = f"{_CHAR_PREFIX}{position}"
                position += 1
                self._button_names[button_id] = name
                classes = "character"
                if completed:
                    classes += " completed"
                if state.failed:
                    classes += " failed"
                buttons.append(
                    Button(name, id=button_id, classes=classes, disabled=self.character_locked(completed, state))
                )
            rows.append(Horizontal(*buttons, classes="pyramid-row"))
        await pyramid.mount_all(rows)

    # --- Actions ---
    async def action_start_run(self) -> None:
        await self._render_state(self._manager.start_run(self._roster, self._seed))

    async def action_complete_next(self) -> None:
        await self._render_state(self._manager.complete_character())

    async def action_fail_run(self) -> None:
        if not self._state.has_started or self._state.failed:
            return
        self.push_screen(ConfirmScreen(_FAIL_PROMPT), self.fail_confirmed)

    async def action_reset_run(self) -> None:
        if not self._state.has_started:
            return
        self.push_screen(ConfirmScreen(_RESET_PROMPT), self.reset_confirmed)

    async def fail_confirmed(self, confirmed: bool | None) -> None:
        if confirmed:
            await self._render_state(self._manager.fail_run())

    async def reset_confirmed(self, confirmed: bool | None) -> None:
        if confirmed:
            await self._render_state(self._manager.reset_run())

    # --- UI events ---
    @on(Button.Pressed, "#btn-start")
    async def _on_start(self) -> None:
        await self.action_start_run()

    @on(Button.Pressed, "#btn-fail")
    async def _on_fail(self) -> None:
        await self.action_fail_run()

    @on(Button.Pressed, "#btn-reset")
    async def _on_reset(self) -> None:
        await self.action_reset_run()

    @on(Button.Pressed, ".character")
    async def _on_character(self, event: Button.Pressed) -> None:
        name = self._button_names.get(event.button.id or "")
        if name is None:
            return
        await self._render_state(self._manager.complete_character(name))


def run_textual(roster: Sequence[str] = DEFAULT_ROSTER, seed: int | None = None) -> None:
    app = IronManRunApp(roster=roster, seed=seed)
    app.run()
