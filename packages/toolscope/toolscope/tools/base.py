"""Tool interface — typed tools whose calls are recorded in history."""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import StrEnum
from typing import Any

from pydantic import BaseModel


class SideEffect(StrEnum):
    """Classification of a tool's side effects."""

    PURE = "PURE"
    READ = "READ"
    WRITE = "WRITE"
    DESTRUCTIVE = "DESTRUCTIVE"


class BaseTool(ABC):
    """Abstract base class for tools executed through a ToolCallRecorder.

    Each tool declares typed input/output schemas, a side-effect class, and
    an execute method. Tools that report on history themselves set
    ``tracked`` to False so their own calls are not recorded.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique name identifying this tool."""

    @property
    @abstractmethod
    def version(self) -> str:
        """Semantic version of this tool."""

    @property
    @abstractmethod
    def input_schema(self) -> type[BaseModel]:
        """Pydantic model class for validating input."""

    @property
    @abstractmethod
    def output_schema(self) -> type[BaseModel]:
        """Pydantic model class for validating output."""

    @property
    @abstractmethod
    def side_effect(self) -> SideEffect:
        """Side-effect classification of this tool."""

    @property
    def tracked(self) -> bool:
        """Whether calls to this tool are recorded in history and usage."""
        return True

    @abstractmethod
    def execute(self, input_data: BaseModel) -> BaseModel:
        """Execute the tool with validated input. Returns validated output."""

    def validate_input(self, raw: dict[str, Any]) -> BaseModel:
        """Validate raw input dict against the input schema."""
        return self.input_schema.model_validate(raw)

    def validate_output(self, raw: BaseModel | dict[str, Any]) -> BaseModel:
        """Validate an execute result or raw dict against the output schema."""
        return self.output_schema.model_validate(raw)
