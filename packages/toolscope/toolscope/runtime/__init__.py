"""toolscope runtime — recorder and per-process runtime wiring."""

from toolscope.runtime.context import IntrospectionRuntime
from toolscope.runtime.recorder import ToolCallRecorder

__all__ = [
    "IntrospectionRuntime",
    "ToolCallRecorder",
]
