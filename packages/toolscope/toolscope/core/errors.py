"""Core error hierarchy for toolscope."""

from __future__ import annotations


class ToolscopeError(Exception):
    """Base exception for all toolscope errors."""


class NotInitializedError(ToolscopeError):
    """Raised when history or usage state is used before process-wide setup."""


class RemoteUnavailableError(ToolscopeError):
    """Raised when a backend process cannot answer a snapshot request."""


class InvalidFilterError(ToolscopeError):
    """Raised when query filter or pagination input is malformed."""


class JournalError(ToolscopeError):
    """Raised when a record cannot be serialized to or read from the journal."""


class ToolValidationError(ToolscopeError):
    """Raised when tool registration or lookup fails."""
