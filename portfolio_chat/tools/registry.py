"""Tool registry — the set of capabilities exposed to the model for one generator."""

from __future__ import annotations

import json
import logging
import time
from typing import Any

from pydantic import ValidationError

from portfolio_chat.tools.base import BaseTool, ToolResult

logger = logging.getLogger(__name__)


class ToolRegistry:
    """Catalog of tool instances keyed by name.

    ``execute`` never raises: unknown tools, undecodable or invalid arguments,
    and handler exceptions all come back as error results so one bad call
    cannot abort a conversation.
    """

    def __init__(self, tools: list[BaseTool] | None = None) -> None:
        self._tools: dict[str, BaseTool] = {}
        for tool in tools or []:
            self.register(tool)

    def register(self, tool: BaseTool) -> None:
        if not tool.name:
            msg = f"{type(tool).__name__} has no name"
            raise ValueError(msg)
        self._tools[tool.name] = tool

    def get(self, name: str) -> BaseTool | None:
        """Look up a tool by name."""
        return self._tools.get(name)

    @property
    def tool_names(self) -> list[str]:
        return list(self._tools.keys())

    def get_schemas(self) -> list[dict[str, Any]]:
        """Anthropic-compatible tool schemas for every registered tool."""
        return [self._tool_schema(t) for t in self._tools.values()]

    async def execute(self, name: str, arguments: dict[str, Any] | str | None) -> ToolResult:
        """Run a tool by name.

        *arguments* is normally the already-decoded ``input`` dict of a
        ``tool_use`` block; a JSON string is decoded first.
        """
        tool = self._tools.get(name)
        if tool is None:
            return ToolResult(error=f"Unknown tool: {name}")

        try:
            parsed = _decode_arguments(arguments)
        except ValueError as exc:
            logger.warning("Tool '%s' received malformed arguments: %s", name, exc)
            return ToolResult(error=f"Invalid arguments for '{name}': {exc}")

        logger.info("Tool '%s' called with %s", name, parsed)
        t0 = time.monotonic()

        try:
            if tool.params_model is not None:
                kwargs = tool.params_model(**parsed).model_dump()
            else:
                kwargs = parsed
            result = await tool.execute(**kwargs)
        except ValidationError as exc:
            logger.warning("Tool '%s' argument validation failed: %s", name, exc)
            return ToolResult(error=f"Invalid arguments for '{name}'.")
        except Exception:
            elapsed = time.monotonic() - t0
            logger.exception("Tool '%s' failed in %.2fs", name, elapsed)
            return ToolResult(error=f"Tool '{name}' failed.")

        elapsed = time.monotonic() - t0
        if result.success:
            logger.info("Tool '%s' succeeded in %.2fs", name, elapsed)
        else:
            logger.warning("Tool '%s' returned error in %.2fs: %s", name, elapsed, result.error)
        return result

    @staticmethod
    def _tool_schema(tool: BaseTool) -> dict[str, Any]:
        if tool.params_model is not None:
            input_schema = tool.params_model.model_json_schema()
        else:
            input_schema = {"type": "object", "properties": {}}

        return {
            "name": tool.name,
            "description": tool.description,
            "input_schema": input_schema,
        }


def _decode_arguments(arguments: dict[str, Any] | str | None) -> dict[str, Any]:
    if arguments is None:
        return {}
    if isinstance(arguments, str):
        try:
            arguments = json.loads(arguments) if arguments.strip() else {}
        except json.JSONDecodeError as exc:
            msg = f"not valid JSON ({exc.msg})"
            raise ValueError(msg) from exc
    if not isinstance(arguments, dict):
        msg = f"expected an object, got {type(arguments).__name__}"
        raise ValueError(msg)
    return arguments
