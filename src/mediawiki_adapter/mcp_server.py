"""
Stdio MCP server.

Registers every tool from ``tools/definitions.py`` on a FastMCP server and
exposes page content as the ``mediawiki://page/{title}`` resource. The title
is percent-decoded, so ``mediawiki://page/Main%20Page`` reads "Main Page" and
a subpage is addressed as ``mediawiki://page/User:Bob%2Fsandbox``. All calls
go through ``dispatch_tool_call``, so validation, logging and error behavior
match the HTTP surface.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, Optional
from urllib.parse import unquote

from mcp.server.fastmcp import FastMCP

from .config import settings
from .core.log_config import configure_logging
from .runtime import AdapterRuntime, runtime as default_runtime
from .tools import definitions as d
from .tools.base import dispatch_tool_call

logger = logging.getLogger("mcp.stdio")

SERVER_NAME = "mediawikiadapter"


def _describe(name: str) -> str:
    return d.get_tool_definition(name)["function"]["description"]


def runtime_lifespan(rt: AdapterRuntime):
    """Server lifespan that configures ``rt`` (once) before serving."""

    @asynccontextmanager
    async def _lifespan(server: FastMCP) -> AsyncIterator[Dict[str, Any]]:
        if not rt.configured:
            await rt.configure()
        yield {}

    return _lifespan


def create_mcp_server(runtime: Optional[AdapterRuntime] = None) -> FastMCP:
    """
    Build the FastMCP server bound to ``runtime``.

    Configuration (and the bot login, if credentials are set) runs in the
    server lifespan, before any tool call is accepted.
    """
    rt = runtime or default_runtime

    server = FastMCP(SERVER_NAME, lifespan=runtime_lifespan(rt))

    async def _call(name: str, args: Dict[str, Any]) -> Dict[str, Any]:
        result = await dispatch_tool_call(name, args, rt)
        return result.model_dump()

    # ------------------------------------------------------------------
    # Resources
    # ------------------------------------------------------------------

    @server.resource(
        "mediawiki://page/{title}",
        name=d.TOOL_GET_PAGE_CONTENT,
        description=_describe(d.TOOL_GET_PAGE_CONTENT),
        mime_type="text/plain",
    )
    async def get_page_content(title: str) -> str:
        # The segment arrives percent-encoded; subpage slashes must be sent
        # as %2F to stay inside the single {title} segment.
        result = await _call(d.TOOL_GET_PAGE_CONTENT, {"title": unquote(title)})
        return result["content"]

    # ------------------------------------------------------------------
    # Page tools
    # ------------------------------------------------------------------

    @server.tool(name=d.TOOL_EDIT_PAGE, description=_describe(d.TOOL_EDIT_PAGE))
    async def edit_page(title: str, content: str, summary: Optional[str] = None) -> Dict[str, Any]:
        return await _call(d.TOOL_EDIT_PAGE, {"title": title, "content": content, "summary": summary})

    @server.tool(name=d.TOOL_CREATE_PAGE, description=_describe(d.TOOL_CREATE_PAGE))
    async def create_page(title: str, content: str, summary: Optional[str] = None) -> Dict[str, Any]:
        return await _call(d.TOOL_CREATE_PAGE, {"title": title, "content": content, "summary": summary})

    @server.tool(name=d.TOOL_DELETE_PAGE, description=_describe(d.TOOL_DELETE_PAGE))
    async def delete_page(title: str, reason: Optional[str] = None) -> Dict[str, Any]:
        return await _call(d.TOOL_DELETE_PAGE, {"title": title, "reason": reason})

    @server.tool(name=d.TOOL_SEARCH_PAGES, description=_describe(d.TOOL_SEARCH_PAGES))
    async def search_pages(query: str, limit: int = 10) -> Dict[str, Any]:
        return await _call(d.TOOL_SEARCH_PAGES, {"query": query, "limit": limit})

    @server.tool(name=d.TOOL_GET_PAGE_METADATA, description=_describe(d.TOOL_GET_PAGE_METADATA))
    async def get_page_metadata(title: str) -> Dict[str, Any]:
        return await _call(d.TOOL_GET_PAGE_METADATA, {"title": title})

    # ------------------------------------------------------------------
    # Entity tools
    # ------------------------------------------------------------------

    @server.tool(name=d.TOOL_GET_ENTITY, description=_describe(d.TOOL_GET_ENTITY))
    async def get_entity(id: str) -> Dict[str, Any]:
        return await _call(d.TOOL_GET_ENTITY, {"id": id})

    @server.tool(name=d.TOOL_SEARCH_ENTITIES, description=_describe(d.TOOL_SEARCH_ENTITIES))
    async def search_entities(query: str, type: str = "item", limit: int = 10) -> Dict[str, Any]:
        return await _call(d.TOOL_SEARCH_ENTITIES, {"query": query, "type": type, "limit": limit})

    @server.tool(name=d.TOOL_EDIT_ENTITY, description=_describe(d.TOOL_EDIT_ENTITY))
    async def edit_entity(
        data: Dict[str, Any],
        id: Optional[str] = None,
        summary: Optional[str] = None,
    ) -> Dict[str, Any]:
        return await _call(d.TOOL_EDIT_ENTITY, {"data": data, "id": id, "summary": summary})

    @server.tool(name=d.TOOL_ADD_STATEMENT, description=_describe(d.TOOL_ADD_STATEMENT))
    async def add_statement(entity: str, property: str, value: Any) -> Dict[str, Any]:
        return await _call(
            d.TOOL_ADD_STATEMENT,
            {"entity": entity, "property": property, "value": value},
        )

    return server


def run_stdio_mcp_server() -> None:
    """Run the MCP server over stdin/stdout."""
    configure_logging(settings.log_level)
    logger.info("Starting MCP server with stdio transport")

    mcp_server = create_mcp_server()
    try:
        mcp_server.run()
    except KeyboardInterrupt:
        logger.info("Received shutdown signal")
    finally:
        logger.info("MCP server shutdown complete")


if __name__ == "__main__":
    run_stdio_mcp_server()
