"""History store — bounded in-memory log of tool calls with journal backing."""

from __future__ import annotations

import logging
import threading
from collections import deque
from pathlib import Path

from toolscope.core.identifiers import InstanceId
from toolscope.core.lifecycle import Lifecycle, LifecycleState
from toolscope.history.journal import DEFAULT_QUEUE_SIZE, JournalWriter, JsonlJournal
from toolscope.history.query import run_query
from toolscope.schemas.history import HistorySnapshot, HistoryStats
from toolscope.schemas.query import QueryResult, ToolCallQuery
from toolscope.schemas.tool_call import ToolCallRecord

logger = logging.getLogger(__name__)

MAX_ENTRIES = 1000


class ToolHistory:
    """Process-wide bounded history of completed tool calls.

    Holds at most ``max_entries`` records; appending at capacity evicts the
    oldest. Every accepted record is also queued for the append-only
    journal, which is written by a background thread so disk latency stays
    off the append path. The journal is advisory: write failures are logged
    and never fail ``append``.

    Must be initialized once with ``initialize(instance_id)`` before use;
    all reads and writes raise NotInitializedError until then.
    """

    def __init__(
        self,
        journal_path: str | Path | None = None,
        *,
        max_entries: int = MAX_ENTRIES,
        replay: bool = True,
        journal_queue_size: int = DEFAULT_QUEUE_SIZE,
    ) -> None:
        if max_entries < 1:
            raise ValueError("max_entries must be >= 1")
        self._max_entries = max_entries
        self._entries: deque[ToolCallRecord] = deque(maxlen=max_entries)
        self._lock = threading.Lock()
        self._lifecycle = Lifecycle("Tool history")
        self._replay = replay
        self._writer: JournalWriter | None = None
        if journal_path is not None:
            self._writer = JournalWriter(
                JsonlJournal(journal_path), max_queue_size=journal_queue_size
            )

    @property
    def max_entries(self) -> int:
        return self._max_entries

    @property
    def state(self) -> LifecycleState:
        return self._lifecycle.state

    @property
    def instance_id(self) -> InstanceId | None:
        return self._lifecycle.instance_id

    @property
    def journal_path(self) -> Path | None:
        return self._writer.journal.path if self._writer is not None else None

    def initialize(self, instance_id: InstanceId) -> None:
        """Set up the store once. Later calls are no-ops, never a reset.

        The state change and journal replay happen under the store lock, so
        an append that sees the store initialized lands after the replayed
        records.
        """
        recovered: list[ToolCallRecord] = []
        with self._lock:
            if not self._lifecycle.initialize(instance_id):
                return
            if self._writer is not None and self._replay:
                recovered = self._writer.journal.read_records(limit=self._max_entries)
                self._entries.extend(recovered)
        if self._writer is None:
            return
        if recovered:
            logger.info(
                "Recovered %d tool calls from %s",
                len(recovered),
                self._writer.journal.path,
            )
        self._writer.start()

    def require_initialized(self) -> None:
        self._lifecycle.require_initialized()

    def append(self, record: ToolCallRecord) -> None:
        """Add a record, evicting the oldest at capacity, and queue it for disk."""
        self._lifecycle.require_initialized()
        with self._lock:
            self._entries.append(record)
            # Non-blocking; keeps journal order equal to memory order
            if self._writer is not None:
                self._writer.submit(record)
        self._lifecycle.mark_active()

    def snapshot(self) -> list[ToolCallRecord]:
        """Point-in-time copy of the records in insertion order."""
        self._lifecycle.require_initialized()
        with self._lock:
            return list(self._entries)

    def stats(self) -> HistoryStats:
        """Current in-memory entry count."""
        self._lifecycle.require_initialized()
        with self._lock:
            return HistoryStats(total_entries=len(self._entries))

    def history_snapshot(self) -> HistorySnapshot:
        """Snapshot in the shape returned to fleet aggregators."""
        calls = self.snapshot()
        return HistorySnapshot(
            instance_id=self.instance_id or "",
            total_entries=len(calls),
            calls=calls,
        )

    def get_recent_calls(self, query: ToolCallQuery | None = None) -> QueryResult:
        """Run a filtered, paginated query against a snapshot."""
        calls = self.snapshot()
        return run_query(calls, query or ToolCallQuery())

    def flush(self, timeout: float | None = 5.0) -> bool:
        """Block until queued records reach the journal."""
        if self._writer is None:
            return True
        return self._writer.flush(timeout)

    def close(self, timeout: float | None = 5.0) -> None:
        """Drain pending journal writes and stop the writer thread."""
        if self._writer is not None:
            self._writer.close(timeout)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
