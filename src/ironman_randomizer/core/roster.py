"""Character roster and layout helpers shared by the front ends.

The run service only ever sees plain strings; these helpers decide what the
default roster is and how a snapshot is arranged on screen.  Characters are
shown in a 5/4/3/2 "pyramid", completed ones first.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from typing import TypeVar

from .models import RunState

__all__ = ["DEFAULT_ROSTER", "ROW_SIZES", "display_order", "progress_pct", "pyramid_rows"]

T = TypeVar("T")

DEFAULT_ROSTER: tuple[str, ...] = (
    "Absa",
    "Clairen",
    "Etalus",
    "Fleet",
    "Forsburn",
    "Galvan",
    "Kragg",
    "Loxodont",
    "Maypul",
    "Olympia",
    "Orcane",
    "Wrastor",
    "Zetterburn",
    "Ranno",
)

ROW_SIZES: tuple[int, ...] = (5, 4, 3, 2)


def pyramid_rows(items: Sequence[T]) -> list[list[T]]:
    """Slice ``items`` into consecutive rows of ``ROW_SIZES``, skipping empty rows."""

    rows: list[list[T]] = []
    cursor = 0
    for size in ROW_SIZES:
        row = list(items[cursor : cursor + size])
        if row:
            rows.append(row)
        cursor += size
    return rows


def display_order(state: RunState) -> list[tuple[str, bool]]:
    """Return ``(name, is_completed)`` pairs: completed first, then the queue."""

    return [(name, True) for name in state.completed] + [(name, False) for name in state.queue]


def progress_pct(state: RunState) -> int:
    total = state.total
    if total <= 0:
        return 0
    # Round half up, not to even.
    return math.floor(100 * len(state.completed) / total + 0.5)
