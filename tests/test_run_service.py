from __future__ import annotations

import asyncio
import threading

import pytest

from ironman_randomizer.core.models import RunState
from ironman_randomizer.features.run import RunManager, RunStatePoisoned
from ironman_randomizer.features.run import service as run_service
from ironman_randomizer.features.run.service import RUN_ID_MASK


def test_initial_state_is_default(manager: RunManager):
    state = manager.get_run_state()
    assert state == RunState()
    assert state.run_id == 0
    assert state.started_at_ms is None and state.updated_at_ms is None
    assert not state.has_started


def test_start_run_with_no_characters_is_noop(manager: RunManager):
    before = manager.start_run(["a", "b"], 1)
    after = manager.start_run([], 42)
    assert after == before


def test_start_run_shuffles_and_stamps(manager: RunManager, monkeypatch):
    monkeypatch.setattr(run_service, "now_millis", lambda: 1_700_000_000_000)
    state = manager.start_run(["a", "b", "c"], 42)
    assert state.run_id == 1
    assert state.queue == ("c", "a", "b")
    assert state.completed == ()
    assert state.failed is False
    assert state.started_at_ms == state.updated_at_ms == 1_700_000_000_000


def test_start_run_increments_run_id(manager: RunManager):
    first = manager.start_run(["a", "b", "c"], 42)
    second = manager.start_run(["a", "b", "c"], 42)
    assert second.run_id == first.run_id + 1
    assert sorted(second.queue) == ["a", "b", "c"]


def test_start_run_without_seed_is_a_permutation(manager: RunManager):
    state = manager.start_run(["a", "b", "c", "d"])
    assert sorted(state.queue) == ["a", "b", "c", "d"]


def test_start_run_replaces_progress(manager: RunManager):
    manager.start_run(["a", "b"], 3)
    manager.complete_character()
    manager.fail_run()
    state = manager.start_run(["x", "y"], 3)
    assert state.completed == ()
    assert state.failed is False
    assert sorted(state.queue) == ["x", "y"]


def test_run_id_wraps_with_floor_of_one():
    manager = RunManager(initial=RunState(run_id=RUN_ID_MASK, started_at_ms=1, updated_at_ms=1))
    assert manager.start_run(["a"], 0).run_id == 1


def test_complete_without_character_takes_front(active_run: RunState):
    manager = RunManager(initial=active_run)
    state = manager.complete_character(None)
    assert state.queue == ("y",)
    assert state.completed == ("x",)
    assert state.updated_at_ms is not None and state.updated_at_ms >= active_run.updated_at_ms


def test_complete_named_character_records_completion_order(active_run: RunState):
    manager = RunManager(initial=active_run)
    manager.complete_character("y")
    state = manager.complete_character("x")
    assert state.queue == ()
    assert state.completed == ("y", "x")
    assert state.drained


def test_complete_unknown_character_leaves_state_unchanged(active_run: RunState):
    manager = RunManager(initial=active_run)
    state = manager.complete_character("z")
    assert state == active_run
    assert manager.get_run_state() == active_run


def test_complete_on_empty_queue_is_noop(manager: RunManager):
    assert manager.complete_character() == RunState()
    manager.start_run(["solo"], 9)
    drained = manager.complete_character()
    assert manager.complete_character() == drained
    assert manager.complete_character("solo") == drained


def test_complete_targets_first_occurrence():
    manager = RunManager(initial=RunState(run_id=1, queue=("a", "b", "a"), started_at_ms=1, updated_at_ms=1))
    state = manager.complete_character("a")
    assert state.queue == ("b", "a")
    assert state.completed == ("a",)


def test_fail_before_any_run_is_noop(manager: RunManager):
    assert manager.fail_run() == RunState()


def test_fail_sets_flag_and_completion_clears_it(manager: RunManager):
    started = manager.start_run(["a", "b", "c"], 42)
    failed = manager.fail_run()
    assert failed.failed is True
    assert failed.queue == started.queue
    assert failed.completed == started.completed
    resumed = manager.complete_character()
    assert resumed.failed is False
    assert resumed.completed == (started.queue[0],)


def test_failed_flag_survives_unknown_completion(manager: RunManager):
    manager.start_run(["a", "b"], 1)
    failed = manager.fail_run()
    assert manager.complete_character("nobody") == failed


def test_reset_always_returns_default(manager: RunManager):
    assert manager.reset_run() == RunState()
    manager.start_run(["a", "b", "c"], 42)
    manager.complete_character()
    manager.fail_run()
    assert manager.reset_run() == RunState()
    assert manager.get_run_state() == RunState()
    assert manager.start_run(["a"], 1).run_id == 1


def test_snapshots_are_immutable(manager: RunManager):
    state = manager.start_run(["a", "b"], 5)
    with pytest.raises(AttributeError):
        state.failed = True  # type: ignore[misc]
    manager.complete_character()
    assert len(state.queue) == 2


def test_to_dict_uses_contract_field_names(manager: RunManager):
    data = manager.start_run(["a", "b"], 5).to_dict()
    assert list(data) == ["run_id", "queue", "completed", "failed", "started_at_ms", "updated_at_ms"]
    assert isinstance(data["queue"], list)
    assert RunState().to_dict()["started_at_ms"] is None


def test_failure_mid_update_poisons_manager(active_run: RunState, monkeypatch):
    manager = RunManager(initial=active_run)

    def _boom() -> int:
        raise RuntimeError("clock exploded")

    monkeypatch.setattr(run_service, "now_millis", _boom)
    with pytest.raises(RuntimeError, match="clock exploded"):
        manager.complete_character()
    assert manager.poisoned
    with pytest.raises(RunStatePoisoned):
        manager.get_run_state()
    with pytest.raises(RunStatePoisoned):
        manager.reset_run()


def test_concurrent_start_runs_do_not_tear(manager: RunManager):
    first = [f"a{i}" for i in range(50)]
    second = [f"b{i}" for i in range(50)]
    barrier = threading.Barrier(2)

    def _start(characters: list[str]) -> None:
        barrier.wait()
        manager.start_run(characters, 11)

    threads = [threading.Thread(target=_start, args=(chars,)) for chars in (first, second)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    state = manager.get_run_state()
    assert state.run_id == 2
    assert state.completed == ()
    assert sorted(state.queue) in (sorted(first), sorted(second))


def test_concurrent_completions_partition_the_roster(manager: RunManager):
    roster = [f"c{i}" for i in range(200)]
    manager.start_run(roster, 3)
    barrier = threading.Barrier(8)

    def _worker() -> None:
        barrier.wait()
        for _ in range(30):
            manager.complete_character()

    threads = [threading.Thread(target=_worker) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    state = manager.get_run_state()
    assert len(state.completed) == 200
    assert state.queue == ()
    assert sorted(state.completed) == sorted(roster)


def test_async_variants_share_state(manager: RunManager):
    async def _flow() -> RunState:
        await manager.start_run_async(["a", "b", "c"], 42)
        await manager.complete_character_async("a")
        await manager.fail_run_async()
        return await manager.get_run_state_async()

    state = asyncio.run(_flow())
    assert state.completed == ("a",)
    assert state.queue == ("c", "b")
    assert state.failed is True
    assert asyncio.run(manager.reset_run_async()) == RunState()
