"""
Faculty Publications MCP Server

Exposes the publication reconciliation engine as Model Context Protocol
tools.

Architecture:
- tools.py: Tool implementations
- container: DI container (dependency-injector) for service lifecycle
"""

from __future__ import annotations

import logging
import os
import sys
from contextlib import AbstractAsyncContextManager, asynccontextmanager
from typing import TYPE_CHECKING, Any, cast

from mcp.server.fastmcp import FastMCP

from faculty_pubs.container import ApplicationContainer
from faculty_pubs.shared.settings import AppSettings

from .tools import register_publication_tools

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Callable

    from faculty_pubs.application.search.engine import PublicationEngine

logger = logging.getLogger(__name__)

SERVER_INSTRUCTIONS = """Faculty publication reconciliation.

Use resolve_publications with comma-separated author names (and optional
YYYY-MM-DD date bounds) to collect publications from PubMed, Scopus and
Web of Science, merged into one deduplicated list with an impact index and
a relative citation ratio total. Use compare_impact_benchmark to compare an
impact index against a faculty track and rank."""

# ── Module-level DI container ──────────────────────────────────────────────
_container: ApplicationContainer | None = None


def get_container() -> ApplicationContainer:
    """Get the application DI container.

    Raises:
        RuntimeError: If ``create_server()`` has not been called yet.
    """
    if _container is None:
        msg = "Container not initialized. Call create_server() first."
        raise RuntimeError(msg)
    return _container


def _make_lifespan(
    engine: PublicationEngine,
    classifier: object | None = None,
) -> Callable[[FastMCP[Any]], AbstractAsyncContextManager[None]]:
    """Create a FastMCP lifespan handler that closes the engine's and classifier's clients on shutdown."""

    @asynccontextmanager
    async def _lifespan(server: FastMCP[Any]) -> AsyncIterator[None]:
        logger.info("Lifecycle: startup")
        try:
            yield
        finally:
            await engine.close()
            close_classifier = getattr(classifier, "close", None)
            if close_classifier is not None:
                await close_classifier()
            logger.info("Lifecycle: shutdown, HTTP clients closed")

    return _lifespan


def create_server(settings: AppSettings | None = None, name: str = "faculty-pubs") -> FastMCP:
    """
    Create and configure the Faculty Publications MCP server.

    Args:
        settings: Provider and classifier settings. Defaults to empty settings,
            in which case only PubMed is usable.
        name: Server name.

    Returns:
        Configured FastMCP server instance.
    """
    global _container
    logger.info("Initializing Faculty Publications MCP Server...")

    settings = settings or AppSettings()
    _container = ApplicationContainer()
    _container.config.from_dict(settings.to_dict())

    if not settings.scopus.is_configured:
        logger.warning("Scopus is not configured (SCOPUS_API_KEY / SCOPUS_BASE_URL)")
    if not settings.web_of_science.is_configured:
        logger.warning("Web of Science is not configured (WOS_API_KEY / WOS_BASE_URL)")

    engine = cast("PublicationEngine", _container.engine())

    mcp = FastMCP(name, instructions=SERVER_INSTRUCTIONS, lifespan=_make_lifespan(engine, _container.classifier()))
    tools = register_publication_tools(mcp, engine)
    logger.info(f"Registered tools: {', '.join(tools)}")

    return mcp


def main() -> None:
    """Run the MCP server over stdio."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    settings = AppSettings.from_env(os.environ)
    server = create_server(settings=settings)
    server.run()


if __name__ == "__main__":
    main()
