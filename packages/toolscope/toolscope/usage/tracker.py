"""Usage tracker — process-wide aggregate call counters."""

from __future__ import annotations

import threading
from datetime import UTC, datetime

from toolscope.core.identifiers import InstanceId
from toolscope.core.lifecycle import Lifecycle, LifecycleState
from toolscope.formatting import format_usage_summary, usage_output
from toolscope.schemas.tool_call import ToolCallRecord, parse_timestamp
from toolscope.schemas.usage import InspectUsageOutput, UsageStats


class UsageTracker:
    """Counts calls, outcomes, and per-tool usage over the process lifetime.

    Counters only grow. Each ``record`` call updates every counter under a
    single lock, so ``successful_calls + failed_calls == total_calls`` and
    the per-tool counts sum to ``total_calls`` at every observable point.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._lifecycle = Lifecycle("Usage tracker")
        self._total_calls = 0
        self._successful_calls = 0
        self._failed_calls = 0
        self._tool_counts: dict[str, int] = {}
        self._tool_durations_ms: dict[str, int] = {}
        self._first_used: datetime | None = None
        self._last_used: datetime | None = None

    @property
    def state(self) -> LifecycleState:
        return self._lifecycle.state

    def initialize(self, instance_id: InstanceId) -> None:
        """Set up the tracker once. Later calls are no-ops."""
        self._lifecycle.initialize(instance_id)

    def require_initialized(self) -> None:
        self._lifecycle.require_initialized()

    def record(
        self,
        tool_name: str,
        success: bool,
        timestamp: str | int | datetime | None = None,
        duration_ms: int = 0,
    ) -> None:
        """Count one completed call."""
        self._lifecycle.require_initialized()
        if duration_ms < 0:
            raise ValueError("duration_ms must be >= 0")
        when = datetime.now(UTC) if timestamp is None else parse_timestamp(timestamp)
        with self._lock:
            self._total_calls += 1
            if success:
                self._successful_calls += 1
            else:
                self._failed_calls += 1
            self._tool_counts[tool_name] = self._tool_counts.get(tool_name, 0) + 1
            self._tool_durations_ms[tool_name] = (
                self._tool_durations_ms.get(tool_name, 0) + duration_ms
            )
            if self._first_used is None or when < self._first_used:
                self._first_used = when
            if self._last_used is None or when > self._last_used:
                self._last_used = when
        self._lifecycle.mark_active()

    def record_call(self, record: ToolCallRecord) -> None:
        """Count a completed call from its history record."""
        self.record(
            record.tool_name,
            record.success,
            timestamp=record.timestamp,
            duration_ms=record.duration_ms,
        )

    def stats(self) -> UsageStats:
        """Consistent copy of the counters."""
        self._lifecycle.require_initialized()
        with self._lock:
            return UsageStats(
                total_calls=self._total_calls,
                successful_calls=self._successful_calls,
                failed_calls=self._failed_calls,
                tool_counts=dict(self._tool_counts),
                tool_durations_ms=dict(self._tool_durations_ms),
                first_used=self._first_used,
                last_used=self._last_used,
            )

    def summary(self) -> tuple[str, InspectUsageOutput]:
        """Human-readable line plus the structured usage output."""
        output = usage_output(self.stats())
        return format_usage_summary(output), output
