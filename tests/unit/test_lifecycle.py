"""Tests for the Lifecycle guard."""

import logging
import threading

import pytest

from toolscope.core.errors import NotInitializedError
from toolscope.core.identifiers import InstanceId
from toolscope.core.lifecycle import Lifecycle, LifecycleState


class TestLifecycle:
    def test_starts_uninitialized(self) -> None:
        lifecycle = Lifecycle("Widget")
        assert lifecycle.state == LifecycleState.UNINITIALIZED
        assert lifecycle.instance_id is None
        assert lifecycle.is_initialized is False
        with pytest.raises(NotInitializedError, match="Widget not initialized"):
            lifecycle.require_initialized()

    def test_transitions(self) -> None:
        lifecycle = Lifecycle("Widget")
        assert lifecycle.initialize(InstanceId("a")) is True
        assert lifecycle.state == LifecycleState.INITIALIZED
        lifecycle.require_initialized()
        lifecycle.mark_active()
        assert lifecycle.state == LifecycleState.ACTIVE

    def test_mark_active_before_initialize_is_ignored(self) -> None:
        lifecycle = Lifecycle("Widget")
        lifecycle.mark_active()
        assert lifecycle.state == LifecycleState.UNINITIALIZED

    def test_second_initialize_is_noop(self) -> None:
        lifecycle = Lifecycle("Widget")
        lifecycle.initialize(InstanceId("a"))
        lifecycle.mark_active()
        assert lifecycle.initialize(InstanceId("a")) is False
        assert lifecycle.state == LifecycleState.ACTIVE

    def test_conflicting_initialize_warns(self, caplog) -> None:
        lifecycle = Lifecycle("Widget")
        lifecycle.initialize(InstanceId("a"))
        with caplog.at_level(logging.WARNING, logger="toolscope.core.lifecycle"):
            assert lifecycle.initialize(InstanceId("b")) is False
        assert lifecycle.instance_id == "a"
        assert "already initialized" in caplog.text

    def test_concurrent_initialize_wins_once(self) -> None:
        lifecycle = Lifecycle("Widget")
        results: list[bool] = []
        lock = threading.Lock()

        def init(n: int) -> None:
            won = lifecycle.initialize(InstanceId(f"id-{n}"))
            with lock:
                results.append(won)

        threads = [threading.Thread(target=init, args=(n,)) for n in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert results.count(True) == 1
