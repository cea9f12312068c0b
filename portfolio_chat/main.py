"""Portfolio chat entry point."""

import asyncio
import contextlib
import logging

from portfolio_chat.config import settings

logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    level=getattr(logging, settings.log_level),
)
logger = logging.getLogger(__name__)


async def serve() -> None:
    """Run the chat server until cancelled."""
    from portfolio_chat.chat.service import ChatService
    from portfolio_chat.server import ChatServer

    if not settings.anthropic_api_key:
        logger.warning("ANTHROPIC_API_KEY is empty, chat requests will fail")
    if not settings.tavily_api_key:
        logger.info("TAVILY_API_KEY not set, web search uses DuckDuckGo only")

    server = ChatServer(ChatService.from_settings(settings))
    await server.start()
    try:
        await asyncio.Event().wait()
    finally:
        await server.stop()


def main() -> None:
    logger.info("Starting portfolio chat with model %s...", settings.chat_model)
    with contextlib.suppress(KeyboardInterrupt):
        asyncio.run(serve())


if __name__ == "__main__":
    main()
