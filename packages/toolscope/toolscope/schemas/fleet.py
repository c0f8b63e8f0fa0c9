"""Fleet snapshot schemas — per-backend results with availability."""

from __future__ import annotations

from pydantic import BaseModel, Field

from toolscope.schemas.history import HistorySnapshot
from toolscope.schemas.usage import UsageStats


class ServerStatus(BaseModel):
    """Whether one backend answered, and why not if it did not."""

    server: str
    available: bool
    error: str | None = None


class ServerUsage(BaseModel):
    """Usage counters from one backend, or the reason they are missing."""

    server: str
    available: bool
    stats: UsageStats | None = None
    error: str | None = None


class ServerHistory(BaseModel):
    """History snapshot from one backend, or the reason it is missing."""

    server: str
    available: bool
    history: HistorySnapshot | None = None
    error: str | None = None


class FleetUsageSnapshot(BaseModel):
    """Usage results for every configured backend, in backend order."""

    servers: list[ServerUsage] = Field(default_factory=list)

    @property
    def available(self) -> list[ServerUsage]:
        return [s for s in self.servers if s.available]

    @property
    def unavailable(self) -> list[ServerUsage]:
        return [s for s in self.servers if not s.available]

    def statuses(self) -> list[ServerStatus]:
        return [
            ServerStatus(server=s.server, available=s.available, error=s.error)
            for s in self.servers
        ]


class FleetHistorySnapshot(BaseModel):
    """History results for every configured backend, in backend order."""

    servers: list[ServerHistory] = Field(default_factory=list)

    @property
    def available(self) -> list[ServerHistory]:
        return [s for s in self.servers if s.available]

    @property
    def unavailable(self) -> list[ServerHistory]:
        return [s for s in self.servers if not s.available]

    def statuses(self) -> list[ServerStatus]:
        return [
            ServerStatus(server=s.server, available=s.available, error=s.error)
            for s in self.servers
        ]
