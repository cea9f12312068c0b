"""Async Claude API client, constructed once and passed to its collaborators."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import anthropic

if TYPE_CHECKING:
    from portfolio_chat.config import Settings

logger = logging.getLogger(__name__)


class LLMClient:
    """Thin wrapper around ``anthropic.AsyncAnthropic``.

    Carries the API key, model names and per-call timeout so the classifier
    and generator never reach for process-wide state.  Tests substitute a fake
    by passing ``client=``.
    """

    def __init__(
        self,
        api_key: str,
        *,
        model: str,
        classifier_model: str | None = None,
        timeout: float = 30.0,
        max_retries: int = 2,
        client: anthropic.AsyncAnthropic | None = None,
    ) -> None:
        self.model = model
        self.classifier_model = classifier_model or model
        self._client = client or anthropic.AsyncAnthropic(
            api_key=api_key,
            timeout=timeout,
            max_retries=max_retries,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> LLMClient:
        return cls(
            settings.anthropic_api_key,
            model=settings.chat_model,
            classifier_model=settings.classifier_model,
            timeout=settings.llm_timeout_seconds,
        )

    async def create_message(self, **kwargs: Any) -> Any:
        """Raw ``messages.create`` call; ``model`` defaults to the chat model."""
        kwargs.setdefault("model", self.model)
        return await self._client.messages.create(**kwargs)

    async def complete_text(
        self,
        messages: list[dict[str, Any]],
        *,
        system: str | None = None,
        model: str | None = None,
        max_tokens: int = 1024,
        temperature: float | None = None,
    ) -> str:
        """Single-shot call with no tools; returns the concatenated text blocks."""
        kwargs: dict[str, Any] = {
            "model": model or self.model,
            "max_tokens": max_tokens,
            "messages": messages,
        }
        if system is not None:
            kwargs["system"] = system
        if temperature is not None:
            kwargs["temperature"] = temperature
        response = await self._client.messages.create(**kwargs)
        return text_of(response.content)


def text_of(content: Any) -> str:
    """Join the text blocks of a message's content (SDK objects or dicts)."""
    if isinstance(content, str):
        return content
    parts: list[str] = []
    for block in content or []:
        block_type = block.get("type") if isinstance(block, dict) else getattr(block, "type", None)
        if block_type != "text":
            continue
        text = block.get("text") if isinstance(block, dict) else getattr(block, "text", "")
        if text:
            parts.append(text)
    return "".join(parts)
