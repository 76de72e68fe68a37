from __future__ import annotations

import argparse
import json
import sys
from collections.abc import Sequence

from .core.config import LOG_LEVELS, Settings, configure_logging, load_settings, parse_roster
from .core.shuffle import U32_MASK, shuffle_characters


def _u32(raw: str) -> int:
    value = int(raw)
    if not (0 <= value <= U32_MASK):
        raise argparse.ArgumentTypeError(f"{raw} is not an unsigned 32-bit value")
    return value


def _build_parser(settings: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="ironman-randomizer", description="Shuffled iron-man run tracker")
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        default=settings.log_level,
        help="Root log level (default: %(default)s)",
    )
    parser.add_argument("--no-color", action="store_true", help="Disable colored output")
    sub = parser.add_subparsers(dest="command", required=True)

    shuffle = sub.add_parser("shuffle", help="Print a shuffled index permutation")
    shuffle.add_argument("--len", dest="length", type=_u32, required=True, help="Number of items to shuffle")
    # If omitted, the seed is derived from the clock. Pass one to reproduce an order.
    shuffle.add_argument("--seed", type=_u32, default=None, help="32-bit seed (clock-derived if omitted)")
    shuffle.add_argument("--json", action="store_true", help="Print the permutation as a JSON array")

    play = sub.add_parser("play", help="Play a run in the console")
    play.add_argument("--seed", type=_u32, default=None, help="32-bit seed (clock-derived if omitted)")
    play.add_argument("--roster", default=None, help="Comma-separated characters (default: built-in roster)")

    serve = sub.add_parser("serve", help="Serve the HTTP API")
    serve.add_argument("--bind", default=settings.bind, help="Bind address (default: %(default)s)")
    serve.add_argument("--port", type=int, default=settings.port, help="Port (default: %(default)s)")

    tui = sub.add_parser("tui", help="Open the terminal UI")
    tui.add_argument("--seed", type=_u32, default=None, help="32-bit seed (clock-derived if omitted)")
    tui.add_argument("--roster", default=None, help="Comma-separated characters (default: built-in roster)")
    return parser


def _roster(raw: str | None, settings: Settings) -> tuple[str, ...]:
    return parse_roster(raw) or settings.roster


def main(argv: Sequence[str] | None = None) -> None:
    settings = load_settings()
    args = _build_parser(settings).parse_args(list(argv) if argv is not None else sys.argv[1:])
    configure_logging(args.log_level)

    if args.command == "shuffle":
        indices = shuffle_characters(args.length, args.seed)
        if args.json:
            print(json.dumps(indices))
            return
        from .ui.presenters import RichPresenter

        RichPresenter(no_color=args.no_color).show_permutation(indices)
    elif args.command == "play":
        from .play import run_play

        run_play(_roster(args.roster, settings), seed=args.seed, no_color=args.no_color)
    elif args.command == "serve":
        from .web.app import main as serve_main

        serve_main(Settings(bind=args.bind, port=args.port, log_level=args.log_level, roster=settings.roster))
    elif args.command == "tui":
        from .ui.textual_app import run_textual

        run_textual(_roster(args.roster, settings), seed=args.seed)


if __name__ == "__main__":
    main()
