"""toolscope settings — local configuration persistence."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

_DEFAULT_DIR = os.path.expanduser("~/.toolscope")
_SETTINGS_FILE = "settings.json"


class BackendConfig(BaseModel):
    """A sibling process reachable over HTTP."""

    name: str = Field(min_length=1)
    base_url: str


class ToolscopeSettings(BaseModel):
    """User-configurable settings, persisted to the local filesystem."""

    # Identifier for this process; generated at startup when unset
    instance_id: str | None = None

    # History journal
    history_path: str = Field(
        default_factory=lambda: os.path.expanduser("~/.toolscope/tool-history.jsonl")
    )
    replay_history: bool = True
    journal_queue_size: int = Field(default=10_000, ge=1)

    # Fleet aggregation
    remote_timeout_seconds: float = Field(default=5.0, gt=0)
    backends: list[BackendConfig] = Field(default_factory=list)

    # HTTP server
    host: str = "127.0.0.1"
    port: int = Field(default=8430, ge=1, le=65535)


class SettingsManager:
    """Loads and saves toolscope settings from the local filesystem."""

    def __init__(self, config_dir: str | None = None) -> None:
        self._config_dir = Path(config_dir or _DEFAULT_DIR)

    @property
    def settings_path(self) -> Path:
        return self._config_dir / _SETTINGS_FILE

    def load(self) -> ToolscopeSettings:
        """Load settings from disk. Returns defaults if the file is missing or bad."""
        if not self.settings_path.exists():
            return ToolscopeSettings()
        try:
            data = json.loads(self.settings_path.read_text())
            return ToolscopeSettings.model_validate(data)
        except Exception as exc:
            logger.warning("Failed to load settings from %s: %s", self.settings_path, exc)
            return ToolscopeSettings()

    def save(self, settings: ToolscopeSettings) -> None:
        self._config_dir.mkdir(parents=True, exist_ok=True)
        self.settings_path.write_text(settings.model_dump_json(indent=2) + "\n")
