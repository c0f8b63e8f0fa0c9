"""toolscope core — identifiers, lifecycle guard, and the error hierarchy."""

from toolscope.core.errors import (
    InvalidFilterError,
    JournalError,
    NotInitializedError,
    RemoteUnavailableError,
    ToolscopeError,
    ToolValidationError,
)
from toolscope.core.identifiers import (
    InstanceId,
    generate_id,
    generate_instance_id,
)
from toolscope.core.lifecycle import Lifecycle, LifecycleState

__all__ = [
    "InstanceId",
    "InvalidFilterError",
    "JournalError",
    "Lifecycle",
    "LifecycleState",
    "NotInitializedError",
    "RemoteUnavailableError",
    "ToolValidationError",
    "ToolscopeError",
    "generate_id",
    "generate_instance_id",
]
