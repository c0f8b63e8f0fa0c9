"""Tests for ToolHistory — lifecycle, bounded storage, snapshots."""

import threading

import pytest

from toolscope.core.errors import NotInitializedError
from toolscope.core.identifiers import InstanceId
from toolscope.core.lifecycle import LifecycleState
from toolscope.history.store import MAX_ENTRIES, ToolHistory
from toolscope.schemas.query import ToolCallQuery

from tests.conftest import make_record, numbered_records


class TestLifecycle:
    def test_uninitialized_rejects_reads_and_writes(self) -> None:
        store = ToolHistory()
        assert store.state == LifecycleState.UNINITIALIZED
        with pytest.raises(NotInitializedError, match="Tool history not initialized"):
            store.append(make_record())
        with pytest.raises(NotInitializedError):
            store.snapshot()
        with pytest.raises(NotInitializedError):
            store.stats()
        with pytest.raises(NotInitializedError):
            store.get_recent_calls()

    def test_initialize_then_active(self) -> None:
        store = ToolHistory()
        store.initialize(InstanceId("i-1"))
        assert store.state == LifecycleState.INITIALIZED
        assert store.instance_id == "i-1"
        store.append(make_record())
        assert store.state == LifecycleState.ACTIVE

    def test_initialize_is_idempotent(self, history: ToolHistory) -> None:
        history.append(make_record())
        history.initialize(InstanceId("other"))
        assert history.instance_id == "test-instance"
        assert history.stats().total_entries == 1

    def test_invalid_capacity(self) -> None:
        with pytest.raises(ValueError):
            ToolHistory(max_entries=0)


class TestBoundedStorage:
    def test_default_capacity(self) -> None:
        assert MAX_ENTRIES == 1000
        assert ToolHistory().max_entries == 1000

    def test_fifo_eviction(self, history: ToolHistory) -> None:
        for record in numbered_records(1200):
            history.append(record)

        assert history.stats().total_entries == 1000
        calls = history.snapshot()
        assert calls[0].arguments["n"] == 201
        assert calls[-1].arguments["n"] == 1200

    def test_most_recent_after_eviction(self, history: ToolHistory) -> None:
        for record in numbered_records(1200):
            history.append(record)

        result = history.get_recent_calls(ToolCallQuery(offset=-1, max_results=1))
        assert result.count == 1
        assert result.calls[0].arguments["n"] == 1200
        assert result.total_entries_in_memory == 1000

    def test_small_capacity(self) -> None:
        store = ToolHistory(max_entries=3)
        store.initialize(InstanceId("i"))
        for record in numbered_records(5):
            store.append(record)
        assert [r.arguments["n"] for r in store.snapshot()] == [3, 4, 5]
        assert len(store) == 3


class TestReads:
    def test_snapshot_is_a_copy(self, history: ToolHistory) -> None:
        history.append(make_record("a"))
        snap = history.snapshot()
        history.append(make_record("b"))
        assert len(snap) == 1
        assert history.stats().total_entries == 2

    def test_history_snapshot_shape(self, history: ToolHistory) -> None:
        history.append(make_record("a"))
        history.append(make_record("b", seconds=1))
        snap = history.history_snapshot()
        assert snap.instance_id == "test-instance"
        assert snap.total_entries == 2
        assert [c.tool_name for c in snap.calls] == ["a", "b"]

    def test_get_recent_calls_defaults(self, history: ToolHistory) -> None:
        for record in numbered_records(3):
            history.append(record)
        result = history.get_recent_calls()
        assert [c.arguments["n"] for c in result.calls] == [3, 2, 1]
        assert result.count == 3

    def test_empty_store(self, history: ToolHistory) -> None:
        result = history.get_recent_calls()
        assert result.calls == []
        assert result.count == 0
        assert result.total_entries_in_memory == 0

    def test_in_memory_flush_is_noop(self, history: ToolHistory) -> None:
        assert history.journal_path is None
        assert history.flush() is True
        history.close()


class TestConcurrency:
    def test_concurrent_appends(self, history: ToolHistory) -> None:
        per_thread = 200
        threads = [
            threading.Thread(
                target=lambda name=f"tool_{t}": [
                    history.append(make_record(name, seconds=i)) for i in range(per_thread)
                ]
            )
            for t in range(4)
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        calls = history.snapshot()
        assert len(calls) == 800
        for t in range(4):
            assert sum(1 for c in calls if c.tool_name == f"tool_{t}") == per_thread

    def test_concurrent_appends_respect_capacity(self) -> None:
        store = ToolHistory(max_entries=100)
        store.initialize(InstanceId("i"))
        threads = [
            threading.Thread(
                target=lambda: [store.append(make_record()) for _ in range(100)]
            )
            for _ in range(5)
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert store.stats().total_entries == 100

    def test_reads_during_writes(self, history: ToolHistory) -> None:
        errors: list[Exception] = []
        done = threading.Event()

        def reader() -> None:
            while not done.is_set():
                try:
                    result = history.get_recent_calls(ToolCallQuery(max_results=10))
                    assert result.count <= 10
                except Exception as exc:
                    errors.append(exc)

        reading = threading.Thread(target=reader)
        reading.start()
        for record in numbered_records(500):
            history.append(record)
        done.set()
        reading.join()

        assert errors == []
        assert history.stats().total_entries == 500
