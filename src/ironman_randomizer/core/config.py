"""Runtime settings read from the environment.

Settings are resolved once at startup; command-line flags override them.

``IRONMAN_BIND`` / ``IRONMAN_PORT``
    Address for the web app.
``IRONMAN_LOG_LEVEL``
    Root log level name (``DEBUG``, ``INFO``, ...).
``IRONMAN_ROSTER``
    Comma-separated character names replacing the default roster.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Final

from .roster import DEFAULT_ROSTER

__all__ = ["LOG_LEVELS", "Settings", "configure_logging", "load_settings", "normalise_log_level", "parse_roster"]

logger = logging.getLogger(__name__)

_PREFIX: Final = "IRONMAN_"
_DEFAULT_BIND: Final = "127.0.0.1"
_DEFAULT_PORT: Final = 8000
_LOG_FORMAT: Final = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# Level names the web server accepts, in the same order it lists them.
LOG_LEVELS: Final = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG", "TRACE")
_LOG_LEVEL_ALIASES: Final = {"WARN": "WARNING", "FATAL": "CRITICAL"}


@dataclass(frozen=True)
class Settings:
    bind: str = _DEFAULT_BIND
    port: int = _DEFAULT_PORT
    log_level: str = "INFO"
    roster: tuple[str, ...] = DEFAULT_ROSTER


def parse_roster(raw: str | Iterable[str] | None) -> tuple[str, ...]:
    """Split a comma-separated roster, dropping blanks and repeated names."""

    if raw is None:
        return ()
    entries = raw.split(",") if isinstance(raw, str) else raw
    names: list[str] = []
    for entry in entries:
        name = entry.strip()
        if name and name not in names:
            names.append(name)
    return tuple(names)


def _parse_port(raw: str | None) -> int:
    if not raw:
        return _DEFAULT_PORT
    try:
        port = int(raw)
    except ValueError:
        port = -1
    if not (0 < port < 65536):
        logger.warning("Ignoring invalid %sPORT=%r; using %d", _PREFIX, raw, _DEFAULT_PORT)
        return _DEFAULT_PORT
    return port


def normalise_log_level(raw: str | None) -> str:
    """Map a level name onto one of ``LOG_LEVELS``, falling back to INFO."""

    if not raw or not raw.strip():
        return "INFO"
    name = raw.strip().upper()
    name = _LOG_LEVEL_ALIASES.get(name, name)
    if name not in LOG_LEVELS:
        logger.warning("Ignoring invalid %sLOG_LEVEL=%r; using INFO", _PREFIX, raw)
        return "INFO"
    return name


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    env = os.environ if environ is None else environ
    roster = parse_roster(env.get(f"{_PREFIX}ROSTER")) or DEFAULT_ROSTER
    return Settings(
        bind=env.get(f"{_PREFIX}BIND", "").strip() or _DEFAULT_BIND,
        port=_parse_port(env.get(f"{_PREFIX}PORT")),
        log_level=normalise_log_level(env.get(f"{_PREFIX}LOG_LEVEL")),
        roster=roster,
    )


def configure_logging(level: str | int = "INFO") -> None:
    """Install a basic root handler; only entry points should call this."""

    if isinstance(level, str):
        name = normalise_log_level(level)
        # TRACE only exists in the web server; stdlib logging treats it as DEBUG.
        resolved = logging.DEBUG if name == "TRACE" else logging.getLevelName(name)
    else:
        resolved = level
    logging.basicConfig(level=resolved, format=_LOG_FORMAT)
