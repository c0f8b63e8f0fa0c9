"""Tool registry — the set of tools a process can execute and record."""

from __future__ import annotations

from pydantic import BaseModel

from toolscope.core.errors import ToolValidationError
from toolscope.tools.base import BaseTool, SideEffect


class ToolDescriptor(BaseModel):
    """Public description of a registered tool."""

    name: str
    version: str
    side_effect: SideEffect
    tracked: bool


class ToolRegistry:
    """Registry of executable tools keyed by unique name."""

    def __init__(self, tools: list[BaseTool] | None = None) -> None:
        self._tools: dict[str, BaseTool] = {}
        for tool in tools or []:
            self.register(tool)

    def register(self, tool: BaseTool) -> None:
        """Register a tool. Raises ToolValidationError if the name is taken."""
        if tool.name in self._tools:
            raise ToolValidationError(f"Tool '{tool.name}' is already registered")
        self._tools[tool.name] = tool

    def lookup(self, name: str) -> BaseTool:
        """Look up a tool by name. Raises ToolValidationError if not found."""
        try:
            return self._tools[name]
        except KeyError:
            raise ToolValidationError(f"Tool '{name}' is not registered") from None

    def list_tools(self) -> list[BaseTool]:
        return list(self._tools.values())

    def describe(self) -> list[ToolDescriptor]:
        """Descriptors for every registered tool, sorted by name."""
        return [
            ToolDescriptor(
                name=tool.name,
                version=tool.version,
                side_effect=tool.side_effect,
                tracked=tool.tracked,
            )
            for _, tool in sorted(self._tools.items())
        ]

    def tracked_names(self) -> list[str]:
        """Names of tools whose calls are recorded, sorted."""
        return sorted(name for name, tool in self._tools.items() if tool.tracked)

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)
