"""History store snapshot shapes exchanged between processes."""

from __future__ import annotations

from pydantic import BaseModel, Field

from toolscope.schemas.tool_call import ToolCallRecord


class HistoryStats(BaseModel):
    """In-memory size of a history store (not the lifetime count)."""

    total_entries: int = 0


class HistorySnapshot(BaseModel):
    """Point-in-time copy of one process's history, in insertion order."""

    instance_id: str = ""
    total_entries: int = 0
    calls: list[ToolCallRecord] = Field(default_factory=list)
