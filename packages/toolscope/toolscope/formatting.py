"""Output mapping — canonical records/stats to tool output shapes and summaries.

Every structured output and every summary line goes through this module, so
the success rate policy is applied in exactly one place: with no recorded
calls the rate is 0.0 ("no data"), never 100.
"""

from __future__ import annotations

from collections.abc import Sequence

from toolscope.schemas.query import InspectToolCallsOutput, QueryResult, ToolCallQuery
from toolscope.schemas.tool_call import ToolCallRecord
from toolscope.schemas.usage import InspectUsageOutput, ToolUsageStats, UsageStats

_MAGENTA = "\x1b[35m"
_RESET = "\x1b[0m"


def success_rate(successful_calls: int, total_calls: int) -> float:
    """Percentage of successful calls; 0.0 when nothing was recorded."""
    if total_calls <= 0:
        return 0.0
    return successful_calls / total_calls * 100.0


def _title(text: str) -> str:
    return f"{_MAGENTA}{text}{_RESET}"


def format_history_summary(calls: Sequence[ToolCallRecord]) -> str:
    """Two-line terminal summary for a history query result."""
    if not calls:
        return f"{_title('Tool Call History')}\nCalls: 0 · No calls matching criteria"
    return f"{_title('Tool Call History')}\nCalls: {len(calls)} · Latest: {calls[0].tool_name}"


def format_usage_summary(output: InspectUsageOutput) -> str:
    """Two-line terminal summary for usage statistics."""
    return (
        f"{_title('Usage Statistics')}\n"
        f"Total: {output.total_calls} · Success: {output.successful_calls} · "
        f"Failed: {output.failed_calls} · Rate: {output.success_rate:.1f}%"
    )


def tool_usage_breakdown(
    tool_counts: dict[str, int],
    tool_durations_ms: dict[str, int] | None = None,
) -> list[ToolUsageStats]:
    """Per-tool entries sorted by call count (descending), then name."""
    durations = tool_durations_ms or {}
    entries = []
    for tool_name, call_count in tool_counts.items():
        total_ms = durations.get(tool_name, 0)
        entries.append(
            ToolUsageStats(
                tool_name=tool_name,
                call_count=call_count,
                total_duration_ms=total_ms,
                avg_duration_ms=total_ms // call_count if call_count else 0,
            )
        )
    entries.sort(key=lambda e: (-e.call_count, e.tool_name))
    return entries


def usage_output(stats: UsageStats, *, session_duration_ms: int | None = None) -> InspectUsageOutput:
    """Map usage counters to the inspect_usage_stats output shape."""
    tool_usage = tool_usage_breakdown(stats.tool_counts, stats.tool_durations_ms)
    return InspectUsageOutput(
        success=True,
        total_calls=stats.total_calls,
        tools_used=len(tool_usage),
        tool_usage=tool_usage,
        session_duration_ms=(
            stats.session_duration_ms if session_duration_ms is None else session_duration_ms
        ),
        success_rate=success_rate(stats.successful_calls, stats.total_calls),
        successful_calls=stats.successful_calls,
        failed_calls=stats.failed_calls,
    )


def tool_calls_output(result: QueryResult, query: ToolCallQuery) -> InspectToolCallsOutput:
    """Map a query result to the inspect_tool_calls output shape."""
    return InspectToolCallsOutput(
        success=True,
        count=result.count,
        total_entries_in_memory=result.total_entries_in_memory,
        calls=result.calls,
        filter_tool_name=query.tool_name,
        filter_since=query.since,
        offset=query.offset,
        max_results=query.max_results,
    )
