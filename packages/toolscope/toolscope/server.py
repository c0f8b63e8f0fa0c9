"""FastAPI server exposing this process's history, usage, and fleet inspection."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, HTTPException

from toolscope.core.errors import InvalidFilterError, NotInitializedError, ToolscopeError
from toolscope.runtime.context import IntrospectionRuntime
from toolscope.schemas.history import HistorySnapshot
from toolscope.schemas.query import parse_query
from toolscope.schemas.usage import UsageStats
from toolscope.settings import SettingsManager
from toolscope.tools.introspection import (
    InspectToolCallsResponse,
    InspectUsageStatsResponse,
)
from toolscope.tools.registry import ToolDescriptor

logger = logging.getLogger(__name__)


def _http_error(exc: ToolscopeError) -> HTTPException:
    if isinstance(exc, NotInitializedError):
        logger.warning("Rejecting request: %s", exc)
        return HTTPException(status_code=503, detail=str(exc))
    if isinstance(exc, InvalidFilterError):
        return HTTPException(status_code=422, detail=str(exc))
    return HTTPException(status_code=400, detail=str(exc))


def create_app(
    *,
    runtime: IntrospectionRuntime | None = None,
    settings_manager: SettingsManager | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        runtime: Pre-built runtime. Used as given; callers own its
            initialization. When omitted, one is built from settings and
            initialized.
        settings_manager: Settings source when no runtime is supplied.
    """
    app = FastAPI(title="toolscope", version="0.1.0")

    if runtime is None:
        sm = settings_manager or SettingsManager()
        runtime = IntrospectionRuntime.from_settings(sm.load())
        runtime.initialize()

    app.state.runtime = runtime

    @app.get("/api/health")
    def health() -> dict[str, Any]:
        rt: IntrospectionRuntime = app.state.runtime
        return {
            "status": "ok",
            "instance_id": rt.instance_id,
            "history_state": rt.history.state.value,
            "usage_state": rt.usage.state.value,
        }

    @app.get("/api/tools", response_model=list[ToolDescriptor])
    def list_tools() -> list[ToolDescriptor]:
        """Tools this process executes, with their side-effect class."""
        return app.state.runtime.registry.describe()

    # ── Snapshot Endpoints (read by sibling aggregators) ──────────────

    @app.get("/api/history", response_model=HistorySnapshot)
    def get_history(connection_id: str | None = None) -> HistorySnapshot:
        """Return this process's in-memory history in insertion order."""
        try:
            return app.state.runtime.history.history_snapshot()
        except ToolscopeError as exc:
            raise _http_error(exc) from exc

    @app.get("/api/usage", response_model=UsageStats)
    def get_usage(connection_id: str | None = None) -> UsageStats:
        """Return this process's usage counters."""
        try:
            return app.state.runtime.usage.stats()
        except ToolscopeError as exc:
            raise _http_error(exc) from exc

    # ── Inspection Endpoints ──────────────────────────────────────────

    @app.get("/api/inspect/tool-calls", response_model=InspectToolCallsResponse)
    def inspect_tool_calls(
        connection_id: str | None = None,
        max_results: int | None = None,
        offset: int | None = None,
        tool_name: str | None = None,
        since: str | None = None,
    ) -> InspectToolCallsResponse:
        """Query the combined tool call history of the fleet."""
        raw = {
            "max_results": max_results,
            "offset": offset,
            "tool_name": tool_name,
            "since": since,
        }
        try:
            query = parse_query({k: v for k, v in raw.items() if v is not None})
            report = app.state.runtime.aggregator.inspect_tool_calls(connection_id, query)
        except ToolscopeError as exc:
            raise _http_error(exc) from exc
        return InspectToolCallsResponse.from_report(report)

    @app.get("/api/inspect/usage", response_model=InspectUsageStatsResponse)
    def inspect_usage(connection_id: str | None = None) -> InspectUsageStatsResponse:
        """Usage statistics aggregated over every available backend."""
        try:
            report = app.state.runtime.aggregator.inspect_usage(connection_id)
        except ToolscopeError as exc:
            raise _http_error(exc) from exc
        return InspectUsageStatsResponse.from_report(report)

    return app
