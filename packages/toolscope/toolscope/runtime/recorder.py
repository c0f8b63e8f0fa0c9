"""Tool call recorder — executes tools and feeds history and usage counters."""

from __future__ import annotations

import logging
import time
from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel

from toolscope.history.store import ToolHistory
from toolscope.schemas.tool_call import ToolCallRecord
from toolscope.tools.registry import ToolRegistry
from toolscope.usage.tracker import UsageTracker

logger = logging.getLogger(__name__)


class ToolCallRecorder:
    """Runs registered tools and records every completed call.

    Each call of a tracked tool, successful or not, produces one
    ToolCallRecord in the history store and one usage counter update.
    Untracked tools (the introspection tools) run without being recorded.

    History and usage each take their own lock, so a concurrent reader can
    briefly see a call in history that the counters have not counted yet.
    """

    def __init__(
        self,
        registry: ToolRegistry,
        history: ToolHistory,
        usage: UsageTracker,
    ) -> None:
        self._registry = registry
        self._history = history
        self._usage = usage

    def call(self, tool_name: str, raw_input: dict[str, Any] | None = None) -> BaseModel:
        """Validate input, execute the tool, validate its output, and record the outcome.

        Exceptions raised by validation or execution are recorded as a
        failed call and re-raised.
        """
        tool = self._registry.lookup(tool_name)
        arguments = dict(raw_input or {})
        if not tool.tracked:
            return tool.validate_output(tool.execute(tool.validate_input(arguments)))

        start = time.monotonic()
        try:
            output = tool.validate_output(tool.execute(tool.validate_input(arguments)))
        except Exception as exc:
            self._record(
                tool_name,
                arguments,
                start,
                success=False,
                error=f"{type(exc).__name__}: {exc}",
            )
            raise
        self._record(
            tool_name,
            arguments,
            start,
            success=True,
            output=output.model_dump(mode="json"),
        )
        return output

    def _record(
        self,
        tool_name: str,
        arguments: dict[str, Any],
        start: float,
        *,
        success: bool,
        output: Any = None,
        error: str | None = None,
    ) -> None:
        record = ToolCallRecord(
            tool_name=tool_name,
            timestamp=datetime.now(UTC),
            duration_ms=int((time.monotonic() - start) * 1000),
            arguments=arguments,
            output=output,
            success=success,
            error=error,
        )
        self._history.append(record)
        self._usage.record_call(record)
        logger.debug(
            "Recorded %s call to '%s' (%d ms)",
            "successful" if success else "failed",
            tool_name,
            record.duration_ms,
        )
