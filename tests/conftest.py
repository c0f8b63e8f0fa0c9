"""Shared test fixtures for toolscope."""

from __future__ import annotations

import time
from datetime import UTC, datetime, timedelta
from typing import Any

import pytest
from pydantic import BaseModel

from toolscope.core.identifiers import InstanceId
from toolscope.fleet.backends import BackendClient
from toolscope.history.store import ToolHistory
from toolscope.schemas.history import HistorySnapshot
from toolscope.schemas.tool_call import ToolCallRecord
from toolscope.schemas.usage import UsageStats
from toolscope.tools.base import BaseTool, SideEffect
from toolscope.usage.tracker import UsageTracker

BASE_TIME = datetime(2024, 10, 12, 20, 0, 0, tzinfo=UTC)


# ── Fixtures ───────────────────────────────────────────────────────


@pytest.fixture()
def history() -> ToolHistory:
    """Initialized in-memory ToolHistory (no journal)."""
    store = ToolHistory()
    store.initialize(InstanceId("test-instance"))
    return store


@pytest.fixture()
def journal_path(tmp_path):
    return tmp_path / "tool-history.jsonl"


@pytest.fixture()
def journaled_history(journal_path):
    """Initialized ToolHistory backed by a JSONL journal in tmp_path."""
    store = ToolHistory(journal_path)
    store.initialize(InstanceId("test-instance"))
    yield store
    store.close()


@pytest.fixture()
def usage() -> UsageTracker:
    """Initialized UsageTracker."""
    tracker = UsageTracker()
    tracker.initialize(InstanceId("test-instance"))
    return tracker


# ── Builders ───────────────────────────────────────────────────────


def make_record(
    tool_name: str = "read_file",
    seconds: float = 0,
    *,
    duration_ms: int = 5,
    success: bool = True,
    **fields: Any,
) -> ToolCallRecord:
    """Record completing ``seconds`` after BASE_TIME."""
    return ToolCallRecord(
        tool_name=tool_name,
        timestamp=BASE_TIME + timedelta(seconds=seconds),
        duration_ms=duration_ms,
        arguments=fields.pop("arguments", {"path": f"/tmp/{tool_name}"}),
        output=fields.pop("output", {"ok": True} if success else None),
        success=success,
        **fields,
    )


def numbered_records(count: int, tool_name: str = "read_file") -> list[ToolCallRecord]:
    """Records numbered 1..count (in ``arguments["n"]``), one second apart."""
    return [
        make_record(tool_name, seconds=n, arguments={"n": n}) for n in range(1, count + 1)
    ]


# ── Stub backends ──────────────────────────────────────────────────


class StubBackend(BackendClient):
    """Backend returning canned snapshots, or raising a canned error."""

    def __init__(
        self,
        name: str,
        *,
        stats: UsageStats | None = None,
        history: HistorySnapshot | None = None,
        error: Exception | None = None,
        delay: float = 0.0,
    ) -> None:
        self._name = name
        self._stats = stats or UsageStats()
        self._history = history or HistorySnapshot()
        self._error = error
        self._delay = delay
        self.connection_ids: list[str] = []

    @property
    def name(self) -> str:
        return self._name

    def _respond(self, connection_id: str, value: Any) -> Any:
        self.connection_ids.append(connection_id)
        if self._delay:
            time.sleep(self._delay)
        if self._error is not None:
            raise self._error
        return value

    def fetch_history(self, connection_id: str) -> HistorySnapshot:
        return self._respond(connection_id, self._history)

    def fetch_usage(self, connection_id: str) -> UsageStats:
        return self._respond(connection_id, self._stats)


# ── Sample tools ───────────────────────────────────────────────────


class EchoInput(BaseModel):
    text: str


class EchoOutput(BaseModel):
    text: str


class EchoTool(BaseTool):
    """Returns its input; raises when asked to echo 'boom'."""

    def __init__(self, tool_name: str = "echo") -> None:
        self._name = tool_name

    @property
    def name(self) -> str:
        return self._name

    @property
    def version(self) -> str:
        return "1.0.0"

    @property
    def input_schema(self) -> type[BaseModel]:
        return EchoInput

    @property
    def output_schema(self) -> type[BaseModel]:
        return EchoOutput

    @property
    def side_effect(self) -> SideEffect:
        return SideEffect.PURE

    def execute(self, input_data: BaseModel) -> BaseModel:
        assert isinstance(input_data, EchoInput)
        if input_data.text == "boom":
            raise RuntimeError("echo exploded")
        return EchoOutput(text=input_data.text)
