"""Lifecycle guard for process-wide state that must be initialized once."""

from __future__ import annotations

import logging
import threading
from enum import StrEnum

from toolscope.core.errors import NotInitializedError
from toolscope.core.identifiers import InstanceId

logger = logging.getLogger(__name__)


class LifecycleState(StrEnum):
    """Lifecycle states of a process-wide component."""

    UNINITIALIZED = "UNINITIALIZED"
    INITIALIZED = "INITIALIZED"
    ACTIVE = "ACTIVE"


class Lifecycle:
    """Tracks ``UNINITIALIZED -> INITIALIZED -> ACTIVE`` for one component.

    ``initialize`` is idempotent: only the first call takes effect, later
    calls are logged and ignored rather than resetting state.
    """

    def __init__(self, component: str) -> None:
        self._component = component
        self._state = LifecycleState.UNINITIALIZED
        self._instance_id: InstanceId | None = None
        self._lock = threading.Lock()

    @property
    def state(self) -> LifecycleState:
        return self._state

    @property
    def instance_id(self) -> InstanceId | None:
        return self._instance_id

    @property
    def is_initialized(self) -> bool:
        return self._state != LifecycleState.UNINITIALIZED

    def initialize(self, instance_id: InstanceId) -> bool:
        """Move to INITIALIZED. Returns True only for the call that did so."""
        with self._lock:
            if self._state != LifecycleState.UNINITIALIZED:
                if instance_id != self._instance_id:
                    logger.warning(
                        "%s already initialized as %s; ignoring %s",
                        self._component,
                        self._instance_id,
                        instance_id,
                    )
                else:
                    logger.debug("%s already initialized", self._component)
                return False
            self._instance_id = instance_id
            self._state = LifecycleState.INITIALIZED
        logger.debug("%s initialized as %s", self._component, instance_id)
        return True

    def require_initialized(self) -> None:
        """Raise NotInitializedError unless ``initialize`` has been called."""
        if self._state == LifecycleState.UNINITIALIZED:
            raise NotInitializedError(f"{self._component} not initialized")

    def mark_active(self) -> None:
        if self._state == LifecycleState.INITIALIZED:
            self._state = LifecycleState.ACTIVE
