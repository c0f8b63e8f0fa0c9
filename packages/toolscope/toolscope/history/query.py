"""Query engine — stateless filtering and pagination over tool call records."""

from __future__ import annotations

from collections.abc import Sequence

from toolscope.schemas.query import QueryResult, ToolCallQuery
from toolscope.schemas.tool_call import ToolCallRecord


def order_most_recent_first(records: Sequence[ToolCallRecord]) -> list[ToolCallRecord]:
    """Sort by timestamp descending; equal timestamps keep reverse insertion order."""
    indexed = sorted(
        enumerate(records),
        key=lambda pair: (pair[1].timestamp, pair[0]),
        reverse=True,
    )
    return [record for _, record in indexed]


def select_calls(
    records: Sequence[ToolCallRecord], query: ToolCallQuery
) -> list[ToolCallRecord]:
    """Apply filters, ordering, and pagination.

    ``records`` must be in insertion order. The result is always ordered
    most-recent-first. A non-negative offset skips that many calls from the
    most recent end. A negative offset ``-K`` starts the window ``K`` calls
    before the end of the chronological sequence, so ``offset=-K`` with
    ``max_results >= K`` yields the K most recent calls.
    """
    matching = [
        r
        for r in records
        if (query.tool_name is None or r.tool_name == query.tool_name)
        and (query.since is None or r.timestamp >= query.since)
    ]
    ordered = order_most_recent_first(matching)

    if query.max_results == 0:
        return []

    if query.offset >= 0:
        return ordered[query.offset : query.offset + query.max_results]

    # Tail window, expressed as a slice of the most-recent-first list
    tail = min(len(ordered), -query.offset)
    return ordered[max(0, tail - query.max_results) : tail]


def run_query(
    records: Sequence[ToolCallRecord],
    query: ToolCallQuery,
    *,
    total_entries: int | None = None,
) -> QueryResult:
    """Select calls and attach ``count`` and ``total_entries_in_memory``."""
    calls = select_calls(records, query)
    return QueryResult(
        calls=calls,
        count=len(calls),
        total_entries_in_memory=len(records) if total_entries is None else total_entries,
    )
