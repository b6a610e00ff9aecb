"""Tool registry.

Maps tool names to their definition and handler. The registry is populated
once at startup and frozen; request handling only ever reads it.
"""

import logging
from dataclasses import dataclass

from ..context import ToolHandler
from .models import ToolDefinition

logger = logging.getLogger(__name__)


class ToolNotFoundError(KeyError):
    """Raised when looking up a tool name that was never registered."""

    def __init__(self, name: str):
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"Unknown tool: {self.name}"


@dataclass(frozen=True)
class RegisteredTool:
    definition: ToolDefinition
    handler: ToolHandler


class ToolRegistry:
    """Ordered, name-keyed set of tools.

    Listing order is registration order. Names are unique and
    case-sensitive.
    """

    def __init__(self) -> None:
        self._tools: dict[str, RegisteredTool] = {}
        self._frozen = False

    def register(self, definition: ToolDefinition, handler: ToolHandler) -> None:
        if self._frozen:
            raise RuntimeError("Tool registry is frozen; register tools at startup")
        if definition.name in self._tools:
            raise ValueError(f"Tool already registered: {definition.name}")
        self._tools[definition.name] = RegisteredTool(definition, handler)
        logger.debug(f"Registered tool {definition.name}")

    def freeze(self) -> "ToolRegistry":
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    def list(self) -> list[ToolDefinition]:
        return [tool.definition for tool in self._tools.values()]

    def lookup(self, name: str) -> ToolHandler:
        """Return the handler for ``name``.

        Raises:
            ToolNotFoundError: if no tool with that name is registered
        """
        try:
            return self._tools[name].handler
        except KeyError:
            raise ToolNotFoundError(name) from None

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)
