"""Introspection tools — query tool call history and usage statistics."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, ValidationError

from toolscope.core.errors import InvalidFilterError
from toolscope.fleet.aggregator import FleetAggregator, FleetHistoryReport, FleetUsageReport
from toolscope.schemas.fleet import ServerStatus
from toolscope.schemas.query import InspectToolCallsOutput, ToolCallQuery
from toolscope.schemas.usage import InspectUsageOutput
from toolscope.tools.base import BaseTool, SideEffect

INSPECT_TOOL_CALLS = "inspect_tool_calls"
INSPECT_USAGE_STATS = "inspect_usage_stats"


# ── Schemas ────────────────────────────────────────────────────────


class InspectToolCallsInput(ToolCallQuery):
    """Query parameters plus the connection the request arrived on."""

    connection_id: str | None = Field(
        default=None, description="Connection used to reach the backend fleet"
    )

    def to_query(self) -> ToolCallQuery:
        return ToolCallQuery(
            max_results=self.max_results,
            offset=self.offset,
            tool_name=self.tool_name,
            since=self.since,
        )


class InspectToolCallsResponse(BaseModel):
    summary: str
    output: InspectToolCallsOutput
    servers: list[ServerStatus] = Field(default_factory=list)

    @classmethod
    def from_report(cls, report: FleetHistoryReport) -> InspectToolCallsResponse:
        return cls(
            summary=report.summary,
            output=report.output,
            servers=report.snapshot.statuses(),
        )


class InspectUsageStatsInput(BaseModel):
    connection_id: str | None = None


class InspectUsageStatsResponse(BaseModel):
    summary: str
    output: InspectUsageOutput
    servers: list[ServerStatus] = Field(default_factory=list)

    @classmethod
    def from_report(cls, report: FleetUsageReport) -> InspectUsageStatsResponse:
        return cls(
            summary=report.summary,
            output=report.output,
            servers=report.snapshot.statuses(),
        )


# ── Tools ──────────────────────────────────────────────────────────


class _IntrospectionTool(BaseTool):
    """Read-only tool over the fleet aggregator that does not record itself."""

    def __init__(self, aggregator: FleetAggregator) -> None:
        self._aggregator = aggregator

    @property
    def version(self) -> str:
        return "1.0.0"

    @property
    def side_effect(self) -> SideEffect:
        return SideEffect.READ

    @property
    def tracked(self) -> bool:
        return False

    def validate_input(self, raw: dict[str, Any]) -> BaseModel:
        try:
            return super().validate_input(raw)
        except ValidationError as exc:
            raise InvalidFilterError(f"Invalid {self.name} arguments: {exc}") from exc


class InspectToolCallsTool(_IntrospectionTool):
    """Recent tool call history with arguments and outputs.

    Supports pagination via ``offset`` (negative for the most recent calls),
    exact ``tool_name`` filtering and an inclusive ``since`` bound.
    """

    @property
    def name(self) -> str:
        return INSPECT_TOOL_CALLS

    @property
    def input_schema(self) -> type[BaseModel]:
        return InspectToolCallsInput

    @property
    def output_schema(self) -> type[BaseModel]:
        return InspectToolCallsResponse

    def execute(self, input_data: BaseModel) -> BaseModel:
        assert isinstance(input_data, InspectToolCallsInput)
        report = self._aggregator.inspect_tool_calls(
            input_data.connection_id, input_data.to_query()
        )
        return InspectToolCallsResponse.from_report(report)


class InspectUsageStatsTool(_IntrospectionTool):
    """Usage statistics aggregated across all backend processes."""

    @property
    def name(self) -> str:
        return INSPECT_USAGE_STATS

    @property
    def input_schema(self) -> type[BaseModel]:
        return InspectUsageStatsInput

    @property
    def output_schema(self) -> type[BaseModel]:
        return InspectUsageStatsResponse

    def execute(self, input_data: BaseModel) -> BaseModel:
        assert isinstance(input_data, InspectUsageStatsInput)
        report = self._aggregator.inspect_usage(input_data.connection_id)
        return InspectUsageStatsResponse.from_report(report)
