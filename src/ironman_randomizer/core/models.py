from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class RunState:
    """Snapshot of the single active run.

    ``run_id`` 0 means no run has started since the last reset.  ``queue`` and
    ``completed`` partition the characters the run was started with; the queue
    keeps shuffle order and ``completed`` keeps the order items were finished in.
    """

    run_id: int = 0
    queue: tuple[str, ...] = ()
    completed: tuple[str, ...] = ()
    failed: bool = False
    started_at_ms: int | None = None
    updated_at_ms: int | None = None

    @property
    def has_started(self) -> bool:
        return self.started_at_ms is not None

    @property
    def drained(self) -> bool:
        return self.has_started and not self.queue

    @property
    def total(self) -> int:
        return len(self.queue) + len(self.completed)

    def to_dict(self) -> dict[str, Any]:
        return {
            "run_id": self.run_id,
            "queue": list(self.queue),
            "completed": list(self.completed),
            "failed": self.failed,
            "started_at_ms": self.started_at_ms,
            "updated_at_ms": self.updated_at_ms,
        }
