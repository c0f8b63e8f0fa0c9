"""Query parameters and result shapes for tool call history."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from toolscope.core.errors import InvalidFilterError
from toolscope.schemas.tool_call import ToolCallRecord, to_utc

DEFAULT_MAX_RESULTS = 50


class ToolCallQuery(BaseModel):
    """Filter and pagination options for a history query.

    A negative ``offset`` is tail-relative: ``offset=-20`` selects the 20
    most recent matching calls.
    """

    model_config = ConfigDict(frozen=True)

    max_results: int = Field(default=DEFAULT_MAX_RESULTS, ge=0)
    offset: int = 0
    tool_name: str | None = None
    since: datetime | None = Field(
        default=None, description="Inclusive lower bound on call timestamp"
    )

    @field_validator("since")
    @classmethod
    def _normalize_since(cls, value: datetime | None) -> datetime | None:
        return to_utc(value) if value is not None else None


def parse_query(raw: dict[str, Any] | None = None) -> ToolCallQuery:
    """Validate raw query parameters.

    Raises:
        InvalidFilterError: If any parameter is malformed (e.g. an
            unparseable ``since`` timestamp or a negative ``max_results``).
    """
    try:
        return ToolCallQuery.model_validate(raw or {})
    except ValidationError as exc:
        fields = ", ".join(
            ".".join(str(p) for p in err["loc"]) or "query" for err in exc.errors()
        )
        raise InvalidFilterError(f"Invalid query parameters ({fields}): {exc}") from exc


class QueryResult(BaseModel):
    """Selected calls plus caller context."""

    calls: list[ToolCallRecord] = Field(default_factory=list)
    count: int = 0
    total_entries_in_memory: int = 0


class InspectToolCallsOutput(BaseModel):
    """Structured output of the inspect_tool_calls tool."""

    success: bool = True
    count: int = 0
    total_entries_in_memory: int = 0
    calls: list[ToolCallRecord] = Field(default_factory=list)
    filter_tool_name: str | None = None
    filter_since: datetime | None = None
    offset: int = 0
    max_results: int = DEFAULT_MAX_RESULTS
