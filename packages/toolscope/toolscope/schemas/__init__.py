"""toolscope schemas — Pydantic v2 models for records, queries, and stats."""

from toolscope.schemas.fleet import (
    FleetHistorySnapshot,
    FleetUsageSnapshot,
    ServerHistory,
    ServerStatus,
    ServerUsage,
)
from toolscope.schemas.history import HistorySnapshot, HistoryStats
from toolscope.schemas.query import (
    DEFAULT_MAX_RESULTS,
    InspectToolCallsOutput,
    QueryResult,
    ToolCallQuery,
    parse_query,
)
from toolscope.schemas.tool_call import ToolCallRecord, parse_timestamp
from toolscope.schemas.usage import InspectUsageOutput, ToolUsageStats, UsageStats

__all__ = [
    "DEFAULT_MAX_RESULTS",
    "FleetHistorySnapshot",
    "FleetUsageSnapshot",
    "HistorySnapshot",
    "HistoryStats",
    "InspectToolCallsOutput",
    "InspectUsageOutput",
    "QueryResult",
    "ServerHistory",
    "ServerStatus",
    "ServerUsage",
    "ToolCallQuery",
    "ToolCallRecord",
    "ToolUsageStats",
    "UsageStats",
    "parse_query",
    "parse_timestamp",
]
