"""
MediaWiki Action API Client

Read and write operations against a MediaWiki ``api.php`` endpoint.

Design Goals
------------
- Every request goes through the ``AuthenticatedTransport`` so a bot session,
  once established, is replayed automatically
- Every write fetches a fresh CSRF token immediately before posting
- Explicit presence checks on the loosely-typed upstream JSON, mapped to
  named errors instead of chained lookups
- A write is successful only when the upstream discriminator equals the
  exact expected literal; anything else is reported as unsuccessful
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional

import httpx

from ..core.errors import PageNotFound, UpstreamRequestFailed
from .tokens import fetch_token, response_reason
from .transport import AuthenticatedTransport

logger = logging.getLogger("mcp.wiki")


def dig(payload: Any, *path: str) -> Any:
    """
    Walk nested dicts, returning None as soon as a level is absent or not a
    dict. ``dig(data, "edit", "result")`` reads ``data["edit"]["result"]``.
    """
    current = payload
    for key in path:
        if not isinstance(current, dict):
            return None
        current = current.get(key)
    return current


def first_page(payload: Any) -> Optional[Dict[str, Any]]:
    """
    Return the first entry of ``query.pages``.

    With ``formatversion=1`` pages are keyed by page id (negative ids for
    missing titles), so only the first value matters for single-title lookups.
    """
    pages = dig(payload, "query", "pages")
    if isinstance(pages, dict):
        page = next(iter(pages.values()), None)
    elif isinstance(pages, list) and pages:
        page = pages[0]
    else:
        page = None
    return page if isinstance(page, dict) else None


class ActionAPIClient:
    """
    Shared request plumbing for clients of a MediaWiki-style ``api.php``.
    """

    def __init__(self, transport: AuthenticatedTransport, api_base: str) -> None:
        """
        Parameters
        ----------
        transport : AuthenticatedTransport
            Session-aware transport shared by all clients.

        api_base : str
            Full ``api.php`` URL of the backend.
        """
        self._transport = transport
        self.api_base = api_base

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _decode(response: httpx.Response, failure: str) -> Any:
        if not response.is_success:
            logger.error("%s: upstream returned HTTP %s", failure, response.status_code)
            raise UpstreamRequestFailed(
                f"{failure}: {response_reason(response)}",
                status_code=response.status_code,
            )
        try:
            return response.json()
        except ValueError as exc:
            raise UpstreamRequestFailed(
                f"{failure}: response was not valid JSON",
                status_code=response.status_code,
            ) from exc

    async def _get(self, params: Mapping[str, Any], failure: str) -> Any:
        """Issue a read request and return the decoded JSON body."""
        response = await self._transport.get(
            self.api_base,
            params={**params, "format": "json"},
        )
        return self._decode(response, failure)

    async def _post_with_token(
        self,
        action: str,
        form: Mapping[str, Any],
        *,
        purpose: str,
        failure: str,
    ) -> Any:
        """
        Fetch a fresh CSRF token, then POST ``form`` plus the token.

        Parameters
        ----------
        action : str
            API action (edit, delete, wbeditentity, ...).

        form : Mapping[str, Any]
            Form fields, excluding the token.

        purpose : str
            Label for token errors, e.g. ``"edit"`` → "Failed to fetch edit token".

        failure : str
            Message prefix for a failed write, e.g. ``"Failed to edit page"``.
        """
        token = await fetch_token(
            self._transport,
            self.api_base,
            purpose=purpose,
        )

        response = await self._transport.post_form(
            self.api_base,
            params={"action": action, "format": "json"},
            form={**form, "token": token},
        )
        return self._decode(response, failure)


class MediaWikiClient(ActionAPIClient):
    """
    Page-level operations on the content wiki.
    """

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def get_page_wikitext(self, title: str) -> str:
        """
        Return the raw wikitext of the latest revision of ``title``.

        Raises
        ------
        PageNotFound
            The page is missing, has no revisions, or no content field.
        """
        data = await self._get(
            {
                "action": "query",
                "prop": "revisions",
                "rvprop": "content",
                "titles": title,
            },
            failure="Failed to fetch page content",
        )

        page = first_page(data)
        revisions = page.get("revisions") if page else None
        if not revisions or not isinstance(revisions, list):
            raise PageNotFound(f'Page "{title}" not found or has no content.')

        content = revisions[0].get("*") if isinstance(revisions[0], dict) else None
        if not isinstance(content, str):
            raise PageNotFound(f'Page "{title}" not found or has no content.')

        return content

    async def get_page_metadata(self, title: str) -> Dict[str, Any]:
        """
        Return ``{"pageid", "touched", "contributors"}`` for ``title``.

        ``contributors`` lists registered contributor names in upstream order.
        """
        data = await self._get(
            {
                "action": "query",
                "prop": "info|contributors",
                "titles": title,
            },
            failure="Failed to fetch page metadata",
        )

        page = first_page(data)
        if page is None or "missing" in page or page.get("pageid") is None:
            raise PageNotFound(f'Page "{title}" not found.')

        contributors = page.get("contributors") or []
        return {
            "pageid": page["pageid"],
            "touched": page.get("touched"),
            "contributors": [
                c["name"] for c in contributors if isinstance(c, dict) and "name" in c
            ],
        }

    async def search_pages(self, query: str, limit: int = 10) -> List[str]:
        """Full-text search; returns matching titles in upstream order."""
        data = await self._get(
            {
                "action": "query",
                "list": "search",
                "srsearch": query,
                "srlimit": limit,
            },
            failure="Failed to search pages",
        )

        hits = dig(data, "query", "search")
        if not isinstance(hits, list):
            return []
        return [hit["title"] for hit in hits if isinstance(hit, dict) and "title" in hit]

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def edit_page(self, title: str, text: str, summary: Optional[str] = None) -> bool:
        """Replace the content of ``title``; True iff ``edit.result == "Success"``."""
        data = await self._post_with_token(
            "edit",
            {
                "title": title,
                "text": text,
                "summary": summary or "",
            },
            purpose="edit",
            failure="Failed to edit page",
        )
        return dig(data, "edit", "result") == "Success"

    async def create_page(self, title: str, text: str, summary: Optional[str] = None) -> bool:
        """
        Create ``title``. An existing page is left untouched and reported as
        unsuccessful (``createonly``).
        """
        data = await self._post_with_token(
            "edit",
            {
                "title": title,
                "text": text,
                "summary": summary or "",
                "createonly": "1",
            },
            purpose="edit",
            failure="Failed to create page",
        )
        return dig(data, "edit", "result") == "Success"

    async def delete_page(self, title: str, reason: Optional[str] = None) -> bool:
        data = await self._post_with_token(
            "delete",
            {
                "title": title,
                "reason": reason or "",
            },
            purpose="delete",
            failure="Failed to delete page",
        )
        return dig(data, "delete", "result") == "Success"
