"""toolscope tools — typed tool interface, registry, and introspection tools."""

from toolscope.tools.base import BaseTool, SideEffect
from toolscope.tools.introspection import (
    INSPECT_TOOL_CALLS,
    INSPECT_USAGE_STATS,
    InspectToolCallsTool,
    InspectUsageStatsTool,
)
from toolscope.tools.registry import ToolDescriptor, ToolRegistry

__all__ = [
    "BaseTool",
    "INSPECT_TOOL_CALLS",
    "INSPECT_USAGE_STATS",
    "InspectToolCallsTool",
    "InspectUsageStatsTool",
    "SideEffect",
    "ToolDescriptor",
    "ToolRegistry",
]
