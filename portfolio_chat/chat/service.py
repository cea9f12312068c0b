"""ChatService — classify, retrieve, generate."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from portfolio_chat.chat.context import ContextAssembler
from portfolio_chat.content.store import ContentStore
from portfolio_chat.llm.classifier import QueryClassifier
from portfolio_chat.llm.client import LLMClient
from portfolio_chat.llm.generator import ResponseGenerator
from portfolio_chat.llm.persona import Persona
from portfolio_chat.tools.registry import ToolRegistry
from portfolio_chat.tools.web_search import WebSearch, WebSearchTool

if TYPE_CHECKING:
    from collections.abc import Sequence

    from portfolio_chat.config import Settings
    from portfolio_chat.content.models import ChatTurn
    from portfolio_chat.content.store import ContentSource

logger = logging.getLogger(__name__)


class ChatError(Exception):
    """An unrecoverable failure while answering a chat message."""


@dataclass
class ChatResponse:
    message: str
    context_used: dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {"message": self.message, "contextUsed": self.context_used}


class ChatService:
    """Answers one visitor message given the prior turns the caller kept.

    Holds no per-conversation state; every call builds a fresh context.
    """

    def __init__(
        self,
        classifier: QueryClassifier,
        assembler: ContextAssembler,
        generator: ResponseGenerator,
        *,
        request_timeout: float | None = 90.0,
    ) -> None:
        self._classifier = classifier
        self._assembler = assembler
        self._generator = generator
        self._request_timeout = request_timeout

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        *,
        source: ContentSource | None = None,
        llm: LLMClient | None = None,
    ) -> ChatService:
        """Wire the production collaborators from *settings*."""
        llm = llm or LLMClient.from_settings(settings)
        registry = ToolRegistry([WebSearchTool(WebSearch.from_settings(settings))])
        return cls(
            QueryClassifier(
                llm,
                temperature=settings.temperature,
                max_tokens=settings.classifier_max_tokens,
            ),
            ContextAssembler(
                source or ContentStore.get(),
                max_activities=settings.max_activities,
                recent_limit=settings.recent_activities_limit,
            ),
            ResponseGenerator(
                llm,
                registry,
                persona=Persona.from_settings(settings),
                max_rounds=settings.max_tool_rounds,
                temperature=settings.temperature,
                max_tokens=settings.response_max_tokens,
            ),
            request_timeout=settings.request_timeout_seconds,
        )

    async def chat(self, message: str, history: Sequence[ChatTurn] = ()) -> ChatResponse:
        try:
            async with asyncio.timeout(self._request_timeout):
                tags = await self._classifier.infer_tags(message)
                context = await self._assembler.build_context(message, tags)
                answer = await self._generator.generate(message, context, history)
        except Exception as exc:
            logger.exception("Chat pipeline failed")
            msg = "Failed to generate chat response"
            raise ChatError(msg) from exc

        return ChatResponse(message=answer, context_used=context.counts())
