"""Tool contract, tool registry and the built-in debugging tools."""

from __future__ import annotations

import copy
from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping
from typing import Any

from .errors import BadRequest


class Tool(ABC):
    """A callable tool that a model can request by name."""

    name: str = ""
    description: str = ""
    parameters: Mapping[str, Any] = {"type": "object", "properties": {}}

    def spec(self) -> dict[str, Any]:
        """Return the tool's function-calling description."""
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": copy.deepcopy(dict(self.parameters)),
            },
        }

    @abstractmethod
    async def invoke(self, args: Any) -> str:
        """Run the tool with decoded JSON arguments and return its text output."""


class Echo(Tool):
    """Returns its ``text`` argument unchanged."""

    name = "echo"
    description = "Return the input string as-is. Useful for verifying tool calling plumbing."
    parameters = {
        "type": "object",
        "properties": {
            "text": {"type": "string", "description": "Text to echo back."},
        },
        "required": ["text"],
        "additionalProperties": False,
    }

    async def invoke(self, args: Any) -> str:
        text = args.get("text") if isinstance(args, Mapping) else None
        if not isinstance(text, str):
            raise BadRequest("missing required field `text`")
        return text


class ToolNotFound(BadRequest):
    code = "TOOL_NOT_FOUND"
    default_message = "tool not found"


class ToolRegistry:
    """Tools looked up by name."""

    def __init__(self) -> None:
        self._tools: dict[str, Tool] = {}

    def register(self, tool: Tool) -> None:
        """Add ``tool``, replacing any tool registered under the same name."""
        self._tools[tool.name] = tool

    def get(self, name: str) -> Tool | None:
        return self._tools.get(name)

    async def invoke(self, name: str, args: Any) -> str:
        """Invoke the named tool; raise ToolNotFound if there is none."""
        tool = self._tools.get(name)
        if tool is None:
            raise ToolNotFound(f"tool `{name}` not found")
        return await tool.invoke(args)

    def specs_for(self, names: Iterable[str]) -> list[dict[str, Any]]:
        """Specs of the registered tools among ``names``, in the given order."""
        return [self._tools[name].spec() for name in names if name in self._tools]


def build_default_registry() -> ToolRegistry:
    """Registry holding the tools available for local debugging."""
    registry = ToolRegistry()
    registry.register(Echo())
    return registry


def known_tool_names() -> tuple[str, ...]:
    """Names of the tools that build_default_registry() registers."""
    return ("echo",)