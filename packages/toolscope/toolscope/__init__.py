"""toolscope — tool call history, usage statistics, and fleet aggregation."""

from toolscope.history.store import MAX_ENTRIES, ToolHistory
from toolscope.runtime.context import IntrospectionRuntime
from toolscope.schemas.tool_call import ToolCallRecord
from toolscope.usage.tracker import UsageTracker

__version__ = "0.1.0"

__all__ = [
    "IntrospectionRuntime",
    "MAX_ENTRIES",
    "ToolCallRecord",
    "ToolHistory",
    "UsageTracker",
]
