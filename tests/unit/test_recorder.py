"""Tests for ToolCallRecorder — every tracked call lands in history and usage."""

import pytest
from pydantic import BaseModel, ValidationError

from toolscope.core.errors import ToolValidationError
from toolscope.history.store import ToolHistory
from toolscope.runtime.recorder import ToolCallRecorder
from toolscope.tools.registry import ToolRegistry
from toolscope.usage.tracker import UsageTracker

from tests.conftest import EchoOutput, EchoTool


class _UntrackedEcho(EchoTool):
    @property
    def tracked(self) -> bool:
        return False


class _Count(BaseModel):
    count: int


class _WrongOutputEcho(EchoTool):
    def execute(self, input_data: BaseModel) -> BaseModel:
        return _Count(count=len(input_data.text))


@pytest.fixture()
def recorder(history: ToolHistory, usage: UsageTracker) -> ToolCallRecorder:
    registry = ToolRegistry([EchoTool(), _UntrackedEcho("quiet"), _WrongOutputEcho("wrong")])
    return ToolCallRecorder(registry, history, usage)


class TestToolCallRecorder:
    def test_successful_call_recorded(
        self, recorder: ToolCallRecorder, history: ToolHistory, usage: UsageTracker
    ) -> None:
        out = recorder.call("echo", {"text": "hello"})
        assert out == EchoOutput(text="hello")

        (record,) = history.snapshot()
        assert record.tool_name == "echo"
        assert record.arguments == {"text": "hello"}
        assert record.output == {"text": "hello"}
        assert record.success is True
        assert record.error is None
        assert record.duration_ms >= 0

        stats = usage.stats()
        assert stats.total_calls == 1
        assert stats.successful_calls == 1
        assert stats.last_used == record.timestamp

    def test_failed_call_recorded_and_reraised(
        self, recorder: ToolCallRecorder, history: ToolHistory, usage: UsageTracker
    ) -> None:
        with pytest.raises(RuntimeError, match="echo exploded"):
            recorder.call("echo", {"text": "boom"})

        (record,) = history.snapshot()
        assert record.success is False
        assert record.output is None
        assert record.error == "RuntimeError: echo exploded"
        assert usage.stats().failed_calls == 1

    def test_invalid_input_recorded_as_failure(
        self, recorder: ToolCallRecorder, history: ToolHistory, usage: UsageTracker
    ) -> None:
        with pytest.raises(ValidationError):
            recorder.call("echo", {})
        assert history.snapshot()[0].error.startswith("ValidationError")
        assert usage.stats().failed_calls == 1

    def test_invalid_output_recorded_as_failure(
        self, recorder: ToolCallRecorder, history: ToolHistory, usage: UsageTracker
    ) -> None:
        with pytest.raises(ValidationError):
            recorder.call("wrong", {"text": "abc"})
        (record,) = history.snapshot()
        assert record.success is False
        assert record.output is None
        assert record.error.startswith("ValidationError")
        assert usage.stats().failed_calls == 1

    def test_untracked_tool_not_recorded(
        self, recorder: ToolCallRecorder, history: ToolHistory, usage: UsageTracker
    ) -> None:
        assert recorder.call("quiet", {"text": "x"}) == EchoOutput(text="x")
        assert history.stats().total_entries == 0
        assert usage.stats().total_calls == 0

    def test_unknown_tool(self, recorder: ToolCallRecorder, history: ToolHistory) -> None:
        with pytest.raises(ToolValidationError):
            recorder.call("missing", {})
        assert history.stats().total_entries == 0

    def test_counts_match_history(
        self, recorder: ToolCallRecorder, history: ToolHistory, usage: UsageTracker
    ) -> None:
        for text in ["a", "boom", "b", "boom", "c"]:
            try:
                recorder.call("echo", {"text": text})
            except RuntimeError:
                pass
        stats = usage.stats()
        calls = history.snapshot()
        assert stats.total_calls == len(calls) == 5
        assert stats.failed_calls == sum(1 for c in calls if not c.success) == 2
