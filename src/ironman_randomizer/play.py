from __future__ import annotations

from collections.abc import Callable, Sequence

from .core.models import RunState
from .features.run import RunManager
from .ui.presenters import RichPresenter


def _match_queued(raw: str, queue: Sequence[str]) -> str | None:
    wanted = raw.casefold()
    for name in queue:
        if name.casefold() == wanted:
            return name
    return None


def _confirm(prompt: str, input_fn: Callable[[str], str]) -> bool:
    try:
        answer = input_fn(f"{prompt} [y/N] ")
    except EOFError:
        return False
    return answer.strip().lower() in {"y", "yes"}


def run_play(
    roster: Sequence[str],
    seed: int | None = None,
    no_color: bool = False,
    *,
    manager: RunManager | None = None,
    presenter: RichPresenter | None = None,
    _input_fn: Callable[[str], str] = input,
) -> RunState:
    """Drive one console session and return the last snapshot shown."""

    manager = manager if manager is not None else RunManager()
    presenter = presenter if presenter is not None else RichPresenter(no_color=no_color)

    state = manager.start_run(list(roster), seed)
    presenter.show_run(state)
    presenter.console.print("[dim]Enter = next, <name> = that character, f/r/s/h/q[/]")

    while True:
        try:
            raw = _input_fn("> ").strip()
        except EOFError:
            break
        command = raw.lower()

        # Queued names win over the single-letter commands.
        target = _match_queued(raw, state.queue) if raw else None
        if target is not None:
            state = manager.complete_character(target)
            presenter.show_run(state)
            continue

        if command in {"q", "quit"}:
            break
        if command in {"h", "help", "?"}:
            presenter.print_help()
            continue

        if command == "f":
            if not state.has_started:
                presenter.notice("No run to fail.")
                continue
            if not _confirm("Mark this run as failed? This cannot be undone.", _input_fn):
                continue
            state = manager.fail_run()
        elif command == "r":
            if not state.has_started:
                presenter.notice("No run to reset.")
                continue
            if not _confirm("Reset the current run? All progress will be lost.", _input_fn):
                continue
            state = manager.reset_run()
        elif command == "s":
            state = manager.start_run(list(roster), None)
        elif not raw:
            state = manager.complete_character()
        else:
            presenter.notice(f"{raw!r} is not queued in this run.")
            continue

        presenter.show_run(state)
    return state
