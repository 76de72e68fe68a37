from __future__ import annotations

from collections.abc import Sequence

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..core.models import RunState
from ..core.roster import display_order, progress_pct, pyramid_rows


class RichPresenter:
    def __init__(self, *, no_color: bool = False, console: Console | None = None):
        if console is not None:
            self.console = console
        elif no_color:
            self.console = Console(force_terminal=False, color_system=None)
        else:
            self.console = Console(force_terminal=True, color_system="auto")

    def show_permutation(self, indices: Sequence[int], names: Sequence[str] | None = None) -> None:
        table = Table(show_header=True, header_style="bold blue")
        table.add_column("#", justify="right")
        table.add_column("Index", justify="right")
        if names is not None:
            table.add_column("Character")
        for position, idx in enumerate(indices, 1):
            row = [str(position), str(idx)]
            if names is not None:
                row.append(names[idx] if 0 <= idx < len(names) else "?")
            table.add_row(*row)
        self.console.print(table)

    def show_run(self, state: RunState) -> None:
        if not state.has_started:
            self.console.print(Panel.fit("No active run. Press [bold]s[/] to start one.", title="Iron Man Run"))
            return

        if state.failed:
            status = "[bold red]FAILED[/]"
        elif state.drained:
            status = "[bold green]complete[/]"
        else:
            status = "[green]in progress[/]"
        header = (
            f"Run #{state.run_id} | {status} | "
            f"{len(state.completed)}/{state.total} done ({progress_pct(state)}%)"
        )
        self.console.print(Panel.fit(header, title="Iron Man Run", style="bold cyan"))
        for row in pyramid_rows(display_order(state)):
            self.console.print("  ".join(self.format_entry(name, done, state) for name, done in row), justify="center")
        if state.queue:
            self.console.print(f"[dim]Up next:[/] [bold]{state.queue[0]}[/]")

    def format_entry(self, name: str, completed: bool, state: RunState) -> str:
        if completed:
            return f"[strike dim]{name}[/]"
        if state.failed:
            return f"[red]{name}[/]"
        if state.queue and name == state.queue[0]:
            return f"[bold yellow]{name}[/]"
        return f"[bold]{name}[/]"

    def notice(self, message: str) -> None:
        self.console.print(f"[yellow]{message}[/]")

    def print_help(self) -> None:
        table = Table(show_header=False)
        table.add_row("Complete next character:", "Enter")
        table.add_row("Complete a specific character:", "<name>")
        table.add_row("Mark run failed:", "f")
        table.add_row("Reset run:", "r")
        table.add_row("Start a new run:", "s")
        table.add_row("Help:", "h")
        table.add_row("Quit:", "q")
        self.console.print(Panel.fit(table, title="Controls", style="dim"))
