"""
Authenticated Transport

Thin wrapper over ``httpx.AsyncClient`` that stamps every outbound request
with the adapter's User-Agent and, when a bot session exists, its cookie.

The transport does not interpret status codes; callers decide what a
non-success response means for their operation.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional

import httpx

from ..config import USER_AGENT
from ..core.errors import TransportError
from ..sessions.store import SessionManager

logger = logging.getLogger("mcp.wiki.transport")


def extract_session_cookie(response: httpx.Response) -> Optional[str]:
    """
    Build a ``Cookie`` header value from a response's ``Set-Cookie`` headers.

    Only the leading ``name=value`` pair of each header is kept; attributes
    such as Path or HttpOnly are dropped. Returns None when the response sets
    no cookies.
    """
    pairs: List[str] = []
    for raw in response.headers.get_list("set-cookie"):
        pair = raw.split(";", 1)[0].strip()
        if "=" in pair:
            pairs.append(pair)

    if not pairs:
        return None
    return "; ".join(pairs)


class AuthenticatedTransport:
    """
    Issues HTTP requests against the upstream APIs with session replay.
    """

    def __init__(
        self,
        session: SessionManager,
        *,
        user_agent: str = USER_AGENT,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """
        Parameters
        ----------
        session : SessionManager
            Source of the current session credential.

        user_agent : str
            Identifying header sent with every request.

        timeout : float
            Per-request timeout in seconds.

        transport : Optional[httpx.AsyncBaseTransport]
            Optional testing override (e.g. ``httpx.MockTransport``).
        """
        self._session = session
        self._user_agent = user_agent
        self._timeout = timeout
        self._transport = transport

    @property
    def session(self) -> SessionManager:
        return self._session

    def _build_headers(self, headers: Optional[Mapping[str, str]]) -> Dict[str, str]:
        merged: Dict[str, str] = {"User-Agent": self._user_agent}
        if headers:
            merged.update(headers)

        # Never overwrite a cookie the caller set explicitly.
        credential = self._session.get()
        if credential and not any(name.lower() == "cookie" for name in merged):
            merged["Cookie"] = credential

        return merged

    async def request(
        self,
        method: str,
        url: str,
        *,
        params: Optional[Mapping[str, Any]] = None,
        data: Optional[Mapping[str, Any]] = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> httpx.Response:
        """
        Send a request and return the raw response.

        Raises
        ------
        TransportError
            If no response was received (connection failure, timeout).
        """
        request_headers = self._build_headers(headers)

        # A fresh client per request keeps httpx's own cookie jar from
        # carrying state between calls; only the session manager does that.
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout,
                transport=self._transport,
            ) as client:
                response = await client.request(
                    method,
                    url,
                    params=params,
                    data=data,
                    headers=request_headers,
                )
        except httpx.TimeoutException as exc:
            logger.error("Upstream request timed out: %s %s", method, url)
            raise TransportError(
                f"Request to {url} timed out after {self._timeout}s"
            ) from exc
        except httpx.TransportError as exc:
            logger.error(
                "Upstream request failed before a response: %s %s (%s)",
                method,
                url,
                type(exc).__name__,
            )
            raise TransportError(
                f"Request to {url} failed: {type(exc).__name__}"
            ) from exc

        logger.debug("%s %s -> %s", method, response.request.url, response.status_code)
        return response

    async def get(self, url: str, params: Mapping[str, Any]) -> httpx.Response:
        return await self.request("GET", url, params=params)

    async def post_form(
        self,
        url: str,
        params: Mapping[str, Any],
        form: Mapping[str, Any],
        headers: Optional[Mapping[str, str]] = None,
    ) -> httpx.Response:
        # httpx form-encodes ``data`` as application/x-www-form-urlencoded.
        return await self.request("POST", url, params=params, data=form, headers=headers)
