"""Tests for the tool registry."""

import pytest
from pydantic import Field

from portfolio_chat.tools.base import BaseTool, ToolParams, ToolResult
from portfolio_chat.tools.registry import ToolRegistry


class EchoParams(ToolParams):
    value: str = Field(description="Text to echo")
    repeat: int = Field(default=1, ge=1, le=3)


class EchoTool(BaseTool):
    name = "echo"
    description = "Echo the input"
    params_model = EchoParams

    async def execute(self, **kwargs) -> ToolResult:
        return ToolResult(text=kwargs["value"] * kwargs["repeat"])


class BrokenTool(BaseTool):
    name = "broken"
    description = "Always raises"

    async def execute(self, **kwargs) -> ToolResult:
        raise RuntimeError("kaboom")


@pytest.fixture
def reg() -> ToolRegistry:
    return ToolRegistry([EchoTool(), BrokenTool()])


# -- Registration --------------------------------------------------------------


def test_register_and_lookup(reg: ToolRegistry) -> None:
    assert reg.tool_names == ["echo", "broken"]
    assert isinstance(reg.get("echo"), EchoTool)
    assert reg.get("missing") is None


def test_register_requires_name() -> None:
    class Nameless(BaseTool):
        async def execute(self, **kwargs) -> ToolResult:
            return ToolResult()

    with pytest.raises(ValueError, match="has no name"):
        ToolRegistry().register(Nameless())


# -- Schema generation ---------------------------------------------------------


def test_schema_from_params_model(reg: ToolRegistry) -> None:
    schema = next(s for s in reg.get_schemas() if s["name"] == "echo")
    assert schema["description"] == "Echo the input"
    assert schema["input_schema"]["properties"]["value"]["type"] == "string"
    assert schema["input_schema"]["required"] == ["value"]


def test_schema_without_params(reg: ToolRegistry) -> None:
    schema = next(s for s in reg.get_schemas() if s["name"] == "broken")
    assert schema["input_schema"] == {"type": "object", "properties": {}}


# -- Execution -----------------------------------------------------------------


async def test_execute_dict_arguments(reg: ToolRegistry) -> None:
    result = await reg.execute("echo", {"value": "hi", "repeat": 2})
    assert result.success
    assert result.to_content() == "hihi"


async def test_execute_json_string_arguments(reg: ToolRegistry) -> None:
    result = await reg.execute("echo", '{"value": "yo"}')
    assert result.to_content() == "yo"


async def test_malformed_json_becomes_error_result(reg: ToolRegistry) -> None:
    result = await reg.execute("echo", '{"value": ')
    assert not result.success
    assert "Invalid arguments" in result.error


async def test_non_object_arguments(reg: ToolRegistry) -> None:
    result = await reg.execute("echo", "[1, 2]")
    assert not result.success


async def test_validation_failure(reg: ToolRegistry) -> None:
    result = await reg.execute("echo", {"repeat": 9})
    assert not result.success
    assert "Invalid arguments" in result.error


async def test_unknown_tool(reg: ToolRegistry) -> None:
    result = await reg.execute("nope", {})
    assert result.error == "Unknown tool: nope"


async def test_handler_exception_is_contained(reg: ToolRegistry) -> None:
    result = await reg.execute("broken", None)
    assert not result.success
    assert "kaboom" not in result.error


# -- ToolResult ----------------------------------------------------------------


def test_tool_result_serialization() -> None:
    assert ToolResult(text="plain").to_content() == "plain"
    assert ToolResult(data={"a": 1}).to_content() == '{"a": 1}'
    assert ToolResult(error="bad").to_content() == '{"error": "bad"}'
    assert ToolResult().to_content() == "{}"
