"""Lightweight async HTTP server exposing the chat endpoint.

Uses aiohttp's AppRunner/TCPSite for non-blocking start/stop.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING

from aiohttp import web
from pydantic import BaseModel, Field, ValidationError

from portfolio_chat.chat.service import ChatError
from portfolio_chat.config import settings
from portfolio_chat.content.models import ChatTurn

if TYPE_CHECKING:
    from portfolio_chat.chat.service import ChatService

logger = logging.getLogger(__name__)

SERVICE_KEY: web.AppKey[ChatService] = web.AppKey("chat_service")


class ChatRequest(BaseModel):
    """Body of ``POST /api/chat``."""

    message: str = Field(min_length=1, max_length=1000)
    conversation_history: list[ChatTurn] = Field(
        default_factory=list, alias="conversationHistory"
    )


async def _handle_chat(request: web.Request) -> web.Response:
    """POST /api/chat — answer one message given the caller's prior turns."""
    try:
        payload = await request.json()
    except json.JSONDecodeError:
        return web.json_response({"error": "invalid JSON"}, status=400)

    try:
        body = ChatRequest.model_validate(payload)
    except ValidationError as exc:
        errors = [
            {"field": ".".join(str(p) for p in e["loc"]), "message": e["msg"]}
            for e in exc.errors()
        ]
        return web.json_response({"error": "Validation failed", "details": errors}, status=400)

    service = request.app[SERVICE_KEY]
    try:
        response = await service.chat(body.message, body.conversation_history)
    except ChatError as exc:
        cause = exc.__cause__
        return web.json_response(
            {
                "error": str(exc),
                "details": (str(cause) if cause else "") or "Unknown error",
            },
            status=500,
        )

    return web.json_response(response.to_dict())


async def _health(request: web.Request) -> web.Response:
    """GET /health — basic liveness check."""
    return web.json_response({"status": "ok"})


def create_web_app(service: ChatService) -> web.Application:
    """Build the aiohttp Application with routes."""
    app = web.Application()
    app[SERVICE_KEY] = service
    app.router.add_get("/health", _health)
    app.router.add_post("/api/chat", _handle_chat)
    return app


class ChatServer:
    """Manages the aiohttp server lifecycle."""

    def __init__(
        self,
        service: ChatService,
        host: str | None = None,
        port: int | None = None,
    ) -> None:
        self.service = service
        self.host = settings.http_host if host is None else host
        self.port = settings.http_port if port is None else port
        self._runner: web.AppRunner | None = None

    async def start(self) -> None:
        app = create_web_app(self.service)
        self._runner = web.AppRunner(app)
        await self._runner.setup()
        site = web.TCPSite(self._runner, self.host, self.port)
        await site.start()
        logger.info("Chat server listening on %s:%d", self.host, self.port)

    async def stop(self) -> None:
        """Shut down the server gracefully."""
        if self._runner is not None:
            await self._runner.cleanup()
            self._runner = None
            logger.info("Chat server stopped")
