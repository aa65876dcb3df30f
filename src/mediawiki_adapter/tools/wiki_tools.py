"""
Wiki Tool Layer

Agent-callable operations on wiki pages. Each tool takes a validated input
model, calls ``MediaWikiClient`` once, and returns its output model.

Errors from the client (transport, token, upstream, not-found) propagate
unchanged; they already name the phase that failed.
"""

from __future__ import annotations

from ..api.models import (
    PageContentOutput,
    PageDeleteInput,
    PageMetadataOutput,
    PageSearchInput,
    PageSearchOutput,
    PageTitleInput,
    PageWriteInput,
    WriteResult,
)
from ..wiki.api_client import MediaWikiClient


# ---------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------

async def tool_get_page_content(
    req: PageTitleInput,
    client: MediaWikiClient,
) -> PageContentOutput:
    """
    Fetch raw wikitext for a page.

    Raises
    ------
    PageNotFound
        If the page does not exist or has no revision content.
    """
    text = await client.get_page_wikitext(req.title)
    return PageContentOutput(content=text)


async def tool_get_page_metadata(
    req: PageTitleInput,
    client: MediaWikiClient,
) -> PageMetadataOutput:
    meta = await client.get_page_metadata(req.title)
    return PageMetadataOutput(**meta)


async def tool_search_pages(
    req: PageSearchInput,
    client: MediaWikiClient,
) -> PageSearchOutput:
    titles = await client.search_pages(req.query, limit=req.limit)
    return PageSearchOutput(titles=titles)


# ---------------------------------------------------------------------
# Writes
# ---------------------------------------------------------------------

async def tool_edit_page(
    req: PageWriteInput,
    client: MediaWikiClient,
) -> WriteResult:
    ok = await client.edit_page(req.title, req.content, req.summary)
    return WriteResult(success=ok)


async def tool_create_page(
    req: PageWriteInput,
    client: MediaWikiClient,
) -> WriteResult:
    ok = await client.create_page(req.title, req.content, req.summary)
    return WriteResult(success=ok)


async def tool_delete_page(
    req: PageDeleteInput,
    client: MediaWikiClient,
) -> WriteResult:
    ok = await client.delete_page(req.title, req.reason)
    return WriteResult(success=ok)
