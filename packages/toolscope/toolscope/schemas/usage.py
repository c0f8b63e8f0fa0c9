"""Usage counter schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class UsageStats(BaseModel):
    """Aggregate call counters for one process."""

    total_calls: int = Field(default=0, ge=0)
    successful_calls: int = Field(default=0, ge=0)
    failed_calls: int = Field(default=0, ge=0)
    tool_counts: dict[str, int] = Field(default_factory=dict)
    tool_durations_ms: dict[str, int] = Field(default_factory=dict)
    first_used: datetime | None = None
    last_used: datetime | None = None

    @property
    def session_duration_ms(self) -> int:
        """Milliseconds between first and last recorded call, never negative."""
        if self.first_used is None or self.last_used is None:
            return 0
        delta = self.last_used - self.first_used
        return max(0, int(delta.total_seconds() * 1000))


class ToolUsageStats(BaseModel):
    """Per-tool breakdown entry."""

    tool_name: str
    call_count: int = 0
    total_duration_ms: int = 0
    avg_duration_ms: int = 0


class InspectUsageOutput(BaseModel):
    """Structured output of the inspect_usage_stats tool."""

    success: bool = True
    total_calls: int = 0
    tools_used: int = 0
    tool_usage: list[ToolUsageStats] = Field(default_factory=list)
    session_duration_ms: int = 0
    success_rate: float = 0.0
    successful_calls: int = 0
    failed_calls: int = 0
