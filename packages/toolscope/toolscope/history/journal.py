"""Journal — append-only JSONL persistence for tool call records.

Each accepted record is written as one JSON line. The journal is never
rewritten in place; in-memory eviction does not touch it. Readers skip lines
that cannot be decoded, which covers a final line truncated by a crash.
"""

from __future__ import annotations

import logging
import queue
import threading
from collections import deque
from pathlib import Path
from typing import IO

from pydantic import ValidationError
from pydantic_core import PydanticSerializationError

from toolscope.core.errors import JournalError
from toolscope.schemas.tool_call import ToolCallRecord

logger = logging.getLogger(__name__)

DEFAULT_QUEUE_SIZE = 10_000

_STOP = object()


class JsonlJournal:
    """Append-only JSONL file of ToolCallRecords. Not thread-safe on its own."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._handle: IO[str] | None = None

    @property
    def path(self) -> Path:
        return self._path

    def _open(self) -> IO[str]:
        if self._handle is None:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            needs_newline = False
            if self._path.exists() and self._path.stat().st_size > 0:
                with open(self._path, "rb") as f:
                    f.seek(-1, 2)
                    needs_newline = f.read(1) != b"\n"
            self._handle = open(self._path, "a", encoding="utf-8")
            if needs_newline:
                # Terminate a partial line left by an interrupted write
                self._handle.write("\n")
        return self._handle

    def append(self, record: ToolCallRecord) -> None:
        """Write one record as a JSON line and flush it.

        Raises:
            JournalError: If the record cannot be serialized or written.
        """
        try:
            line = record.model_dump_json()
        except (PydanticSerializationError, TypeError, ValueError) as exc:
            raise JournalError(
                f"Cannot serialize call to '{record.tool_name}': {exc}"
            ) from exc
        try:
            handle = self._open()
            handle.write(line + "\n")
            handle.flush()
        except OSError as exc:
            raise JournalError(f"Cannot write to journal {self._path}: {exc}") from exc

    def read_records(self, limit: int | None = None) -> list[ToolCallRecord]:
        """Return records in file order, keeping only the last ``limit`` if given."""
        if not self._path.exists():
            return []

        records: deque[ToolCallRecord] = deque(maxlen=limit)
        with open(self._path, encoding="utf-8", errors="replace") as f:
            for lineno, line in enumerate(f, start=1):
                line = line.strip()
                if not line:
                    continue
                try:
                    records.append(ToolCallRecord.model_validate_json(line))
                except ValidationError as exc:
                    logger.warning(
                        "Skipping unreadable journal line %s:%d: %s",
                        self._path,
                        lineno,
                        exc.errors()[0]["msg"] if exc.errors() else exc,
                    )
        return list(records)

    def close(self) -> None:
        if self._handle is not None:
            self._handle.close()
            self._handle = None


class JournalWriter:
    """Single-consumer background writer draining a bounded queue.

    ``submit`` never blocks: when the queue is full the record is dropped
    from the journal (it is still held in memory) and a warning is logged.
    """

    def __init__(
        self,
        journal: JsonlJournal,
        *,
        max_queue_size: int = DEFAULT_QUEUE_SIZE,
    ) -> None:
        if max_queue_size < 1:
            raise ValueError("max_queue_size must be >= 1")
        self._journal = journal
        self._queue: queue.Queue[object] = queue.Queue(maxsize=max_queue_size)
        self._thread: threading.Thread | None = None
        self._dropped = 0
        self._failed = 0

    @property
    def journal(self) -> JsonlJournal:
        return self._journal

    @property
    def dropped(self) -> int:
        """Records never queued because the queue was full."""
        return self._dropped

    @property
    def failed(self) -> int:
        """Records dequeued but not written."""
        return self._failed

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.running:
            return
        self._thread = threading.Thread(
            target=self._run, name="toolscope-journal", daemon=True
        )
        self._thread.start()

    def submit(self, record: ToolCallRecord) -> bool:
        """Queue a record for writing. Returns False if it was dropped."""
        try:
            self._queue.put_nowait(record)
        except queue.Full:
            self._dropped += 1
            logger.warning(
                "Journal queue full; call to '%s' not persisted (%d dropped)",
                record.tool_name,
                self._dropped,
            )
            return False
        return True

    def flush(self, timeout: float | None = 5.0) -> bool:
        """Wait until everything queued before this call is written."""
        if not self.running:
            return self._queue.empty()
        marker = threading.Event()
        try:
            self._queue.put(marker, timeout=timeout)
        except queue.Full:
            return False
        return marker.wait(timeout)

    def close(self, timeout: float | None = 5.0) -> None:
        """Drain the queue, stop the thread, and close the journal file."""
        if self._thread is not None:
            self._queue.put(_STOP)
            self._thread.join(timeout)
            if self._thread.is_alive():
                logger.warning("Journal writer did not stop within %ss", timeout)
                return
            self._thread = None
        self._journal.close()

    def _run(self) -> None:
        while True:
            item = self._queue.get()
            try:
                if item is _STOP:
                    return
                if isinstance(item, threading.Event):
                    item.set()
                    continue
                assert isinstance(item, ToolCallRecord)
                try:
                    self._journal.append(item)
                except JournalError as exc:
                    self._failed += 1
                    logger.warning("Journal write failed: %s", exc)
                except Exception:
                    self._failed += 1
                    logger.exception("Unexpected journal writer error")
            finally:
                self._queue.task_done()
