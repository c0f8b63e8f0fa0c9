"""Backend clients — how the aggregator reaches each process's snapshots."""

from __future__ import annotations

import json
import urllib.error
import urllib.parse
import urllib.request
from abc import ABC, abstractmethod
from typing import Any

from pydantic import ValidationError

from toolscope.core.errors import RemoteUnavailableError
from toolscope.history.store import ToolHistory
from toolscope.schemas.history import HistorySnapshot
from toolscope.schemas.usage import UsageStats
from toolscope.usage.tracker import UsageTracker


class BackendClient(ABC):
    """One process that can answer history and usage snapshot requests."""

    def check_ready(self) -> None:
        """Raise if this backend can never answer, before any fan-out starts."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Name reported for this backend in fleet snapshots."""

    @abstractmethod
    def fetch_history(self, connection_id: str) -> HistorySnapshot:
        """Return the backend's history snapshot. Raises on failure."""

    @abstractmethod
    def fetch_usage(self, connection_id: str) -> UsageStats:
        """Return the backend's usage counters. Raises on failure."""


class LocalBackend(BackendClient):
    """This process's own history and usage counters."""

    def __init__(
        self, history: ToolHistory, usage: UsageTracker, *, name: str = "local"
    ) -> None:
        self._history = history
        self._usage = usage
        self._name = name

    @property
    def name(self) -> str:
        return self._name

    def check_ready(self) -> None:
        """Raise NotInitializedError if this process has not been set up."""
        self._history.require_initialized()
        self._usage.require_initialized()

    def fetch_history(self, connection_id: str) -> HistorySnapshot:
        return self._history.history_snapshot()

    def fetch_usage(self, connection_id: str) -> UsageStats:
        return self._usage.stats()


class HttpBackend(BackendClient):
    """A sibling process reached over its toolscope HTTP endpoints."""

    def __init__(self, name: str, base_url: str, *, timeout: float = 5.0) -> None:
        self._name = name
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout

    @property
    def name(self) -> str:
        return self._name

    @property
    def base_url(self) -> str:
        return self._base_url

    def fetch_history(self, connection_id: str) -> HistorySnapshot:
        data = self._get_json("/api/history", connection_id)
        try:
            return HistorySnapshot.model_validate(data)
        except ValidationError as exc:
            raise RemoteUnavailableError(
                f"Backend '{self._name}' returned a malformed history snapshot: {exc}"
            ) from exc

    def fetch_usage(self, connection_id: str) -> UsageStats:
        data = self._get_json("/api/usage", connection_id)
        try:
            return UsageStats.model_validate(data)
        except ValidationError as exc:
            raise RemoteUnavailableError(
                f"Backend '{self._name}' returned malformed usage stats: {exc}"
            ) from exc

    def _get_json(self, path: str, connection_id: str) -> Any:
        query = urllib.parse.urlencode({"connection_id": connection_id})
        url = f"{self._base_url}{path}?{query}"
        req = urllib.request.Request(url, headers={"Accept": "application/json"})
        try:
            with urllib.request.urlopen(req, timeout=self._timeout) as resp:
                body = resp.read()
        except urllib.error.HTTPError as exc:
            raise RemoteUnavailableError(
                f"Backend '{self._name}' answered HTTP {exc.code} for {path}"
            ) from exc
        except (urllib.error.URLError, TimeoutError, OSError) as exc:
            raise RemoteUnavailableError(
                f"Backend '{self._name}' unreachable at {self._base_url}: {exc}"
            ) from exc
        try:
            return json.loads(body)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise RemoteUnavailableError(
                f"Backend '{self._name}' returned invalid JSON for {path}: {exc}"
            ) from exc
