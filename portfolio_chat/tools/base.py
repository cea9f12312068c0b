"""Base types for the tool-calling framework."""

import json
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel


@dataclass
class ToolResult:
    """Result of a tool execution.

    A tool returns either plain ``text`` (e.g. a formatted search summary),
    structured ``data``, or an ``error``. The generator serializes it into a
    ``tool_result`` content block for the model.
    """

    text: str | None = None
    data: dict[str, Any] | None = None
    error: str | None = None

    @property
    def success(self) -> bool:
        return self.error is None

    def to_content(self) -> str:
        """Serialize for the ``tool_result`` content field."""
        if self.error:
            return json.dumps({"error": self.error})
        if self.text is not None:
            return self.text
        return json.dumps(self.data or {})


class ToolParams(BaseModel):
    """Base class for tool parameter models.

    Subclass with Field() definitions. The JSON schema is auto-generated
    via model_json_schema() for the model's tool definitions.
    """


class BaseTool(ABC):
    """Abstract base for tools that the response generator can expose.

    Tools carry their collaborators (HTTP clients, adapters) as instance
    state, so a registry is assembled per generator rather than globally.

    Example::

        class EchoTool(BaseTool):
            name = "echo"
            description = "Echo the input back"
            params_model = EchoParams

            async def execute(self, **kwargs) -> ToolResult:
                return ToolResult(text=kwargs["value"])
    """

    name: str = ""
    description: str = ""
    params_model: type[ToolParams] | None = None

    @abstractmethod
    async def execute(self, **kwargs: Any) -> ToolResult:
        """Execute the tool with validated parameters."""
        ...
