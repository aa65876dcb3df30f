"""
Anti-forgery Token Acquisition

Every mutating MediaWiki/Wikibase call must carry a token fetched through
``action=query&meta=tokens`` immediately beforehand. Tokens are never cached:
each write fetches its own, even when the same operation runs twice in a row.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Final, Optional, Type

import httpx

from ..core.errors import TokenFetchFailed, TokenMissing
from .transport import AuthenticatedTransport, extract_session_cookie

logger = logging.getLogger("mcp.wiki.tokens")

TOKEN_FIELDS: Final[Dict[str, str]] = {
    "login": "logintoken",
    "csrf": "csrftoken",
}


@dataclass(frozen=True)
class TokenGrant:
    """A freshly fetched token plus any cookies the token response set."""

    value: str
    cookies: Optional[str] = None


def _read_token(payload: Any, field: str) -> Optional[str]:
    if not isinstance(payload, dict):
        return None
    query = payload.get("query")
    if not isinstance(query, dict):
        return None
    tokens = query.get("tokens")
    if not isinstance(tokens, dict):
        return None
    token = tokens.get(field)
    if not isinstance(token, str) or not token:
        return None
    return token


async def acquire_token(
    transport: AuthenticatedTransport,
    api_base: str,
    *,
    token_type: str = "csrf",
    purpose: str = "edit",
    fetch_error: Type[TokenFetchFailed] = TokenFetchFailed,
    missing_error: Type[TokenMissing] = TokenMissing,
) -> TokenGrant:
    """
    Fetch a fresh token of the given type.

    Parameters
    ----------
    transport : AuthenticatedTransport
        Transport used for the request (replays the session if present).

    api_base : str
        ``api.php`` URL of the backend that will receive the write.

    token_type : str
        ``"login"`` or ``"csrf"``.

    purpose : str
        Human label used in error messages (edit, delete, claim, ...).

    fetch_error, missing_error
        Exception classes raised for a failed request or an absent token.

    Returns
    -------
    TokenGrant

    Raises
    ------
    TokenFetchFailed
        Non-success HTTP status or undecodable body.

    TokenMissing
        The response did not contain ``query.tokens.<type>token``.
    """
    field = TOKEN_FIELDS.get(token_type)
    if field is None:
        raise ValueError(f"Unsupported token type: {token_type!r}")

    response = await transport.get(
        api_base,
        params={
            "action": "query",
            "meta": "tokens",
            "type": token_type,
            "format": "json",
        },
    )

    if not response.is_success:
        logger.error(
            "Token request for %s returned HTTP %s", purpose, response.status_code
        )
        raise fetch_error(
            f"Failed to fetch {purpose} token: {response_reason(response)}",
            status_code=response.status_code,
        )

    try:
        payload = response.json()
    except ValueError as exc:
        raise fetch_error(
            f"Failed to fetch {purpose} token: response was not valid JSON",
            status_code=response.status_code,
        ) from exc

    token = _read_token(payload, field)
    if token is None:
        logger.error("Token response for %s lacked %s", purpose, field)
        raise missing_error(f"Failed to retrieve {purpose} token.")

    return TokenGrant(value=token, cookies=extract_session_cookie(response))


async def fetch_token(
    transport: AuthenticatedTransport,
    api_base: str,
    *,
    purpose: str,
    token_type: str = "csrf",
) -> str:
    """Fetch a fresh token and return only its value."""
    grant = await acquire_token(
        transport,
        api_base,
        token_type=token_type,
        purpose=purpose,
    )
    return grant.value


def response_reason(response: httpx.Response) -> str:
    return f"{response.status_code} {response.reason_phrase}".strip()
