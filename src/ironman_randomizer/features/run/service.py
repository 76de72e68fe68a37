from __future__ import annotations

import logging
import threading
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from dataclasses import replace

from ...core.models import RunState
from ...core.shuffle import now_millis, random_seed, shuffled_indices
from .concurrency import run_blocking

__all__ = ["RUN_ID_MASK", "RunManager", "RunStatePoisoned"]

logger = logging.getLogger(__name__)

RUN_ID_MASK = (1 << 64) - 1


class RunStatePoisoned(RuntimeError):
    """An earlier operation failed mid-update; the shared run state is unusable."""


def _next_run_id(run_id: int) -> int:
    return max((run_id + 1) & RUN_ID_MASK, 1)


class RunManager:
    """Owns the single current run and serialises every access to it.

    All operations return a snapshot taken while the lock is held.  Snapshots
    are immutable, so callers can compare the previous and returned values to
    tell whether anything happened.
    """

    def __init__(self, initial: RunState | None = None) -> None:
        self._state = initial if initial is not None else RunState()
        self._lock = threading.Lock()
        self._poisoned = False

    @property
    def poisoned(self) -> bool:
        return self._poisoned

    @contextmanager
    def _guard(self) -> Iterator[None]:
        with self._lock:
            if self._poisoned:
                raise RunStatePoisoned("run state lock poisoned by an earlier failure")
            try:
                yield
            except BaseException:
                self._poisoned = True
                logger.error("Run state update failed; refusing further access", exc_info=True)
                raise

    def start_run(self, characters: Sequence[str], seed: int | None = None) -> RunState:
        if not characters:
            return self.get_run_state()

        actual_seed = seed if seed is not None else random_seed()
        order = shuffled_indices(len(characters), actual_seed)
        queue = tuple(characters[idx] for idx in order if idx < len(characters))
        timestamp = now_millis()

        with self._guard():
            self._state = RunState(
                run_id=_next_run_id(self._state.run_id),
                queue=queue,
                completed=(),
                failed=False,
                started_at_ms=timestamp,
                updated_at_ms=timestamp,
            )
            snapshot = self._state
        logger.info(
            "Run started",
            extra={"run_id": snapshot.run_id, "seed": actual_seed, "characters": len(queue)},
        )
        return snapshot

    async def start_run_async(self, characters: Sequence[str], seed: int | None = None) -> RunState:
        return await run_blocking(self.start_run, characters, seed)

    def complete_character(self, character: str | None = None) -> RunState:
        with self._guard():
            state = self._state
            if not state.queue:
                return state

            if character is None:
                index: int | None = 0
            else:
                index = state.queue.index(character) if character in state.queue else None

            if index is None or index >= len(state.queue):
                logger.debug("Character not queued; nothing completed", extra={"character": character})
                return state

            finished = state.queue[index]
            self._state = replace(
                state,
                queue=state.queue[:index] + state.queue[index + 1 :],
                completed=state.completed + (finished,),
                failed=False,
                updated_at_ms=now_millis(),
            )
            snapshot = self._state
        logger.debug(
            "Character completed",
            extra={"run_id": snapshot.run_id, "character": finished, "remaining": len(snapshot.queue)},
        )
        return snapshot

    async def complete_character_async(self, character: str | None = None) -> RunState:
        return await run_blocking(self.complete_character, character)

    def fail_run(self) -> RunState:
        with self._guard():
            if not self._state.has_started:
                return self._state
            self._state = replace(self._state, failed=True, updated_at_ms=now_millis())
            snapshot = self._state
        logger.info("Run marked failed", extra={"run_id": snapshot.run_id, "remaining": len(snapshot.queue)})
        return snapshot

    async def fail_run_async(self) -> RunState:
        return await run_blocking(self.fail_run)

    def reset_run(self) -> RunState:
        with self._guard():
            previous = self._state.run_id
            self._state = RunState()
            snapshot = self._state
        logger.info("Run reset", extra={"previous_run_id": previous})
        return snapshot

    async def reset_run_async(self) -> RunState:
        return await run_blocking(self.reset_run)

    def get_run_state(self) -> RunState:
        with self._guard():
            return self._state

    async def get_run_state_async(self) -> RunState:
        return await run_blocking(self.get_run_state)
