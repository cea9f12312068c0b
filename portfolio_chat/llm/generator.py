"""Answer generation with a bounded tool-calling loop."""

from __future__ import annotations

import asyncio
import enum
import logging
from typing import TYPE_CHECKING, Any

from portfolio_chat.llm.client import text_of
from portfolio_chat.llm.prompt import build_system_prompt

if TYPE_CHECKING:
    from collections.abc import Sequence

    from portfolio_chat.content.models import ChatContext, ChatTurn
    from portfolio_chat.llm.client import LLMClient
    from portfolio_chat.llm.persona import Persona
    from portfolio_chat.tools.registry import ToolRegistry

logger = logging.getLogger(__name__)

FALLBACK_MESSAGE = "I'm sorry, I couldn't generate a response."


class LoopState(enum.Enum):
    AWAIT_MODEL = "await_model"
    EXECUTE_TOOLS = "execute_tools"
    DONE = "done"


def _serialize_content(content: list[Any]) -> list[dict[str, Any]]:
    """Convert SDK content blocks to plain dicts for the message history."""
    result: list[dict[str, Any]] = []
    for block in content:
        if block.type == "text":
            result.append({"type": "text", "text": block.text})
        elif block.type == "tool_use":
            result.append({
                "type": "tool_use",
                "id": block.id,
                "name": block.name,
                "input": block.input,
            })
    return result


def last_assistant_text(messages: Sequence[dict[str, Any]]) -> str | None:
    """Newest assistant message that carries any text, scanning backward."""
    for message in reversed(messages):
        if message.get("role") != "assistant":
            continue
        text = text_of(message.get("content"))
        if text.strip():
            return text
    return None


class ResponseGenerator:
    """Drives the model until it answers in plain text or the round budget runs out.

    Each model call is one round.  Rounds that request tools execute every
    requested call (concurrently; they share no state), append the results as
    ``tool_result`` blocks tied to the originating ``tool_use`` id, and go back
    to the model.  After ``max_rounds`` calls the newest assistant text seen so
    far is returned, or ``FALLBACK_MESSAGE``.
    """

    def __init__(
        self,
        llm: LLMClient,
        registry: ToolRegistry,
        *,
        persona: Persona | None = None,
        max_rounds: int = 5,
        temperature: float = 0.7,
        max_tokens: int = 500,
    ) -> None:
        self._llm = llm
        self._registry = registry
        self._persona = persona
        self.max_rounds = max_rounds
        self._temperature = temperature
        self._max_tokens = max_tokens

    async def generate(
        self,
        query: str,
        context: ChatContext,
        history: Sequence[ChatTurn] = (),
    ) -> str:
        system_prompt = build_system_prompt(context, self._persona)
        tool_schemas = self._registry.get_schemas()

        messages: list[dict[str, Any]] = [
            {"role": turn.role, "content": turn.content} for turn in history
        ]
        messages.append({"role": "user", "content": query})

        state = LoopState.AWAIT_MODEL
        rounds = 0
        pending: list[Any] = []
        answer = ""

        while state is not LoopState.DONE:
            if state is LoopState.AWAIT_MODEL:
                if rounds >= self.max_rounds:
                    logger.warning("Hit max tool rounds (%d)", self.max_rounds)
                    answer = last_assistant_text(messages) or FALLBACK_MESSAGE
                    state = LoopState.DONE
                    continue

                rounds += 1
                response = await self._llm.create_message(
                    **self._request_kwargs(system_prompt, messages, tool_schemas)
                )
                pending = [b for b in response.content if b.type == "tool_use"]

                if pending:
                    messages.append({
                        "role": "assistant",
                        "content": _serialize_content(response.content),
                    })
                    state = LoopState.EXECUTE_TOOLS
                else:
                    answer = text_of(response.content).strip() or FALLBACK_MESSAGE
                    state = LoopState.DONE

            elif state is LoopState.EXECUTE_TOOLS:
                logger.info(
                    "Round %d: %d tool call(s): %s",
                    rounds,
                    len(pending),
                    ", ".join(b.name for b in pending),
                )
                results = await asyncio.gather(
                    *(self._registry.execute(b.name, b.input) for b in pending)
                )
                messages.append({
                    "role": "user",
                    "content": [
                        {
                            "type": "tool_result",
                            "tool_use_id": block.id,
                            "content": result.to_content(),
                            "is_error": not result.success,
                        }
                        for block, result in zip(pending, results, strict=True)
                    ],
                })
                pending = []
                state = LoopState.AWAIT_MODEL

        return answer

    def _request_kwargs(
        self,
        system_prompt: str,
        messages: list[dict[str, Any]],
        tool_schemas: list[dict[str, Any]],
    ) -> dict[str, Any]:
        kwargs: dict[str, Any] = {
            "max_tokens": self._max_tokens,
            "temperature": self._temperature,
            "system": system_prompt,
            # Copy: the list keeps growing after the call returns.
            "messages": list(messages),
        }
        if tool_schemas:
            kwargs["tools"] = tool_schemas
            kwargs["tool_choice"] = {"type": "auto"}
        return kwargs
