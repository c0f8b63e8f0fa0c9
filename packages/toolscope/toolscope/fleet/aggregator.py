"""Fleet aggregator — scatter-gather history and usage across backend processes."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from concurrent.futures import Future, ThreadPoolExecutor, wait
from typing import TypeVar

from pydantic import BaseModel

from toolscope.core.errors import ToolscopeError
from toolscope.fleet.backends import BackendClient
from toolscope.formatting import (
    format_history_summary,
    format_usage_summary,
    tool_calls_output,
    usage_output,
)
from toolscope.history.query import run_query
from toolscope.schemas.fleet import (
    FleetHistorySnapshot,
    FleetUsageSnapshot,
    ServerHistory,
    ServerUsage,
)
from toolscope.schemas.query import InspectToolCallsOutput, ToolCallQuery
from toolscope.schemas.usage import InspectUsageOutput, UsageStats

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_TIMEOUT_SECONDS = 5.0


class FleetUsageReport(BaseModel):
    """Aggregated usage across the fleet plus per-backend availability."""

    summary: str
    output: InspectUsageOutput
    snapshot: FleetUsageSnapshot


class FleetHistoryReport(BaseModel):
    """Query result over the combined fleet history plus per-backend availability."""

    summary: str
    output: InspectToolCallsOutput
    snapshot: FleetHistorySnapshot


def fold_usage(snapshot: FleetUsageSnapshot) -> tuple[UsageStats, int]:
    """Sum counters over available backends.

    Returns the combined counters and the fleet session duration, which is
    the longest per-backend duration rather than a sum.
    """
    combined = UsageStats()
    session_duration_ms = 0
    for server in snapshot.available:
        stats = server.stats
        if stats is None:
            continue
        combined.total_calls += stats.total_calls
        combined.successful_calls += stats.successful_calls
        combined.failed_calls += stats.failed_calls
        for tool_name, count in stats.tool_counts.items():
            combined.tool_counts[tool_name] = combined.tool_counts.get(tool_name, 0) + count
        for tool_name, ms in stats.tool_durations_ms.items():
            combined.tool_durations_ms[tool_name] = (
                combined.tool_durations_ms.get(tool_name, 0) + ms
            )
        if stats.first_used is not None and (
            combined.first_used is None or stats.first_used < combined.first_used
        ):
            combined.first_used = stats.first_used
        if stats.last_used is not None and (
            combined.last_used is None or stats.last_used > combined.last_used
        ):
            combined.last_used = stats.last_used
        session_duration_ms = max(session_duration_ms, stats.session_duration_ms)
    return combined, session_duration_ms


class FleetAggregator:
    """Combines snapshots from every configured backend.

    Each backend gets one attempt with its own timeout, run concurrently so
    a slow or failing backend never delays or fails its siblings. Backends
    that fail are reported as unavailable and excluded from totals.
    """

    def __init__(
        self,
        backends: Sequence[BackendClient],
        *,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        if timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be > 0")
        names = [b.name for b in backends]
        if len(set(names)) != len(names):
            raise ValueError(f"Backend names must be unique: {names}")
        self._backends = list(backends)
        self._timeout = timeout_seconds

    @property
    def backends(self) -> list[BackendClient]:
        return list(self._backends)

    @property
    def timeout_seconds(self) -> float:
        return self._timeout

    def _gather(
        self,
        connection_id: str | None,
        fetch: Callable[[BackendClient, str], T],
    ) -> list[tuple[BackendClient, T | None, str | None]]:
        if not connection_id:
            raise ToolscopeError(
                "No connection ID available - fleet queries require connection context"
            )
        if not self._backends:
            return []
        # Local state errors fail the whole query; only remote failures fold
        for backend in self._backends:
            backend.check_ready()

        pool = ThreadPoolExecutor(
            max_workers=len(self._backends), thread_name_prefix="toolscope-fleet"
        )
        try:
            futures: list[Future[T]] = [
                pool.submit(fetch, backend, connection_id) for backend in self._backends
            ]
            # All targets start together, so one wait bounds each of them
            done, _ = wait(futures, timeout=self._timeout)
        finally:
            pool.shutdown(wait=False, cancel_futures=True)

        results: list[tuple[BackendClient, T | None, str | None]] = []
        for backend, future in zip(self._backends, futures):
            if future not in done:
                error = f"timed out after {self._timeout}s"
            elif future.exception() is not None:
                error = str(future.exception()) or type(future.exception()).__name__
            else:
                results.append((backend, future.result(), None))
                continue
            logger.warning("Backend '%s' unavailable: %s", backend.name, error)
            results.append((backend, None, error))
        return results

    def collect_usage(self, connection_id: str | None) -> FleetUsageSnapshot:
        """Fetch usage counters from every backend."""
        results = self._gather(connection_id, lambda b, cid: b.fetch_usage(cid))
        return FleetUsageSnapshot(
            servers=[
                ServerUsage(
                    server=backend.name,
                    available=error is None,
                    stats=stats,
                    error=error,
                )
                for backend, stats, error in results
            ]
        )

    def collect_history(self, connection_id: str | None) -> FleetHistorySnapshot:
        """Fetch history snapshots from every backend."""
        results = self._gather(connection_id, lambda b, cid: b.fetch_history(cid))
        return FleetHistorySnapshot(
            servers=[
                ServerHistory(
                    server=backend.name,
                    available=error is None,
                    history=history,
                    error=error,
                )
                for backend, history, error in results
            ]
        )

    def inspect_usage(self, connection_id: str | None) -> FleetUsageReport:
        """Fleet-wide usage statistics with success rate and summary line."""
        snapshot = self.collect_usage(connection_id)
        combined, session_duration_ms = fold_usage(snapshot)
        output = usage_output(combined, session_duration_ms=session_duration_ms)
        return FleetUsageReport(
            summary=format_usage_summary(output),
            output=output,
            snapshot=snapshot,
        )

    def inspect_tool_calls(
        self,
        connection_id: str | None,
        query: ToolCallQuery | None = None,
    ) -> FleetHistoryReport:
        """Query the combined history of every available backend."""
        query = query or ToolCallQuery()
        snapshot = self.collect_history(connection_id)
        calls = []
        total_entries = 0
        for server in snapshot.available:
            if server.history is None:
                continue
            calls.extend(server.history.calls)
            total_entries += server.history.total_entries
        result = run_query(calls, query, total_entries=total_entries)
        return FleetHistoryReport(
            summary=format_history_summary(result.calls),
            output=tool_calls_output(result, query),
            snapshot=snapshot,
        )
