"""Tool call record schema."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator

_DATETIME_ADAPTER = TypeAdapter(datetime)


def _utc_now() -> datetime:
    return datetime.now(UTC)


def to_utc(value: datetime) -> datetime:
    """Return ``value`` as an aware UTC datetime (naive values are taken as UTC)."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def parse_timestamp(value: str | int | float | datetime) -> datetime:
    """Parse an ISO-8601 string, epoch number, or datetime into aware UTC.

    Raises:
        pydantic.ValidationError: If the value is not a recognizable timestamp.
    """
    return to_utc(_DATETIME_ADAPTER.validate_python(value))


class ToolCallRecord(BaseModel):
    """Immutable record of a single completed tool invocation."""

    model_config = ConfigDict(frozen=True)

    tool_name: str = Field(min_length=1)
    timestamp: datetime = Field(
        default_factory=_utc_now,
        description="When the call completed (ISO-8601 string or epoch accepted)",
    )
    duration_ms: int = Field(default=0, ge=0)
    arguments: Any = Field(default_factory=dict, description="Serialized input")
    output: Any = Field(default=None, description="Serialized result, None on failure")
    success: bool = True
    error: str | None = None

    @field_validator("timestamp")
    @classmethod
    def _normalize_timestamp(cls, value: datetime) -> datetime:
        return to_utc(value)
