"""Introspection runtime — the single per-process owner of history and usage state."""

from __future__ import annotations

import logging

from toolscope.core.identifiers import InstanceId, generate_instance_id
from toolscope.fleet.aggregator import FleetAggregator
from toolscope.fleet.backends import BackendClient, HttpBackend, LocalBackend
from toolscope.history.store import ToolHistory
from toolscope.runtime.recorder import ToolCallRecorder
from toolscope.settings import ToolscopeSettings
from toolscope.tools.base import BaseTool
from toolscope.tools.introspection import InspectToolCallsTool, InspectUsageStatsTool
from toolscope.tools.registry import ToolRegistry
from toolscope.usage.tracker import UsageTracker

logger = logging.getLogger(__name__)


class IntrospectionRuntime:
    """Explicitly constructed process state, passed to whatever needs it.

    Owns the history store, usage tracker, fleet aggregator, tool registry
    and recorder. ``initialize`` is the one top-level setup call per
    process; repeating it is a no-op.
    """

    def __init__(
        self,
        history: ToolHistory,
        usage: UsageTracker,
        *,
        instance_id: InstanceId | None = None,
        remote_backends: list[BackendClient] | None = None,
        remote_timeout_seconds: float = 5.0,
        tools: list[BaseTool] | None = None,
    ) -> None:
        self.instance_id = instance_id or generate_instance_id()
        self.history = history
        self.usage = usage
        local = LocalBackend(history, usage)
        self.aggregator = FleetAggregator(
            [local, *(remote_backends or [])],
            timeout_seconds=remote_timeout_seconds,
        )
        self.registry = ToolRegistry(tools)
        self.registry.register(InspectToolCallsTool(self.aggregator))
        self.registry.register(InspectUsageStatsTool(self.aggregator))
        self.recorder = ToolCallRecorder(self.registry, history, usage)

    @classmethod
    def from_settings(
        cls,
        settings: ToolscopeSettings,
        *,
        tools: list[BaseTool] | None = None,
    ) -> IntrospectionRuntime:
        """Build a runtime from settings (not yet initialized)."""
        history = ToolHistory(
            settings.history_path,
            replay=settings.replay_history,
            journal_queue_size=settings.journal_queue_size,
        )
        remote = [
            HttpBackend(b.name, b.base_url, timeout=settings.remote_timeout_seconds)
            for b in settings.backends
        ]
        return cls(
            history,
            UsageTracker(),
            instance_id=InstanceId(settings.instance_id) if settings.instance_id else None,
            remote_backends=remote,
            remote_timeout_seconds=settings.remote_timeout_seconds,
            tools=tools,
        )

    def initialize(self) -> None:
        self.history.initialize(self.instance_id)
        self.usage.initialize(self.instance_id)
        logger.info(
            "toolscope runtime %s ready (%d backends)",
            self.instance_id,
            len(self.aggregator.backends),
        )

    def close(self) -> None:
        self.history.close()
