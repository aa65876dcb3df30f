"""
Bot Login

Two-step handshake against ``action=login``:

1. fetch a login-scoped token;
2. POST the credentials together with that token.

On a reported ``Success`` the session cookie from the login response is
installed in the ``SessionManager``, after which every request made through
the authenticated transport carries it.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict

from ..core.errors import (
    LoginRejected,
    LoginRequestFailed,
    LoginTokenMissing,
    LoginTokenUnavailable,
    TransportError,
)
from ..sessions.store import SessionManager
from .tokens import acquire_token, response_reason
from .transport import AuthenticatedTransport, extract_session_cookie

logger = logging.getLogger("mcp.wiki.login")


class LoginResult(BaseModel):
    """
    Outcome of a successful login handshake.

    ``authenticated`` is False when the upstream reported success but set no
    session cookie; later requests then run without a session.
    """

    username: str
    authenticated: bool

    model_config = ConfigDict(frozen=True)


def _rejection_reason(payload: Any) -> str:
    login = payload.get("login") if isinstance(payload, dict) else None
    if not isinstance(login, dict):
        return "Unknown reason"

    reason = login.get("reason")
    if isinstance(reason, str) and reason:
        return reason
    # Newer MediaWiki versions send the reason as a message object.
    if isinstance(reason, dict):
        for key in ("text", "info", "code"):
            value = reason.get(key)
            if isinstance(value, str) and value:
                return value
    return "Unknown reason"


def _merge_cookies(*values: Optional[str]) -> Optional[str]:
    cookies = {}
    for value in values:
        if not value:
            continue
        for pair in value.split(";"):
            name, sep, cookie = pair.strip().partition("=")
            if sep:
                cookies[name] = cookie
    if not cookies:
        return None
    return "; ".join(f"{name}={cookie}" for name, cookie in cookies.items())


async def login_as_bot(
    transport: AuthenticatedTransport,
    session: SessionManager,
    api_base: str,
    username: str,
    password: str,
) -> LoginResult:
    """
    Log in as a bot and install the resulting session credential.

    Parameters
    ----------
    transport : AuthenticatedTransport
        Transport used for both steps.

    session : SessionManager
        Receives the session cookie on success.

    api_base : str
        MediaWiki ``api.php`` URL.

    username, password : str
        Bot credentials (Special:BotPasswords style ``User@Bot`` names work).

    Returns
    -------
    LoginResult

    Raises
    ------
    LoginTokenUnavailable
        Token endpoint unreachable or returned a non-success status.

    LoginTokenMissing
        Token response lacked ``logintoken``.

    LoginRequestFailed
        The login POST returned a non-success status.

    LoginRejected
        The upstream answered but ``login.result`` was not ``Success``.
    """
    logger.info("Logging in to %s as %s", api_base, username)

    try:
        grant = await acquire_token(
            transport,
            api_base,
            token_type="login",
            purpose="login",
            fetch_error=LoginTokenUnavailable,
            missing_error=LoginTokenMissing,
        )
    except TransportError as exc:
        raise LoginTokenUnavailable(f"Failed to fetch login token: {exc}") from exc

    # The login token is bound to the anonymous session that issued it, so
    # that session's cookies go along with the credentials.
    headers = {"Cookie": grant.cookies} if grant.cookies else None

    response = await transport.post_form(
        api_base,
        params={"action": "login", "format": "json"},
        form={
            "lgname": username,
            "lgpassword": password,
            "lgtoken": grant.value,
        },
        headers=headers,
    )

    if not response.is_success:
        logger.error("Login request returned HTTP %s", response.status_code)
        raise LoginRequestFailed(
            f"Failed to log in: {response_reason(response)}",
            status_code=response.status_code,
        )

    try:
        payload = response.json()
    except ValueError as exc:
        raise LoginRequestFailed(
            "Failed to log in: response was not valid JSON",
            status_code=response.status_code,
        ) from exc

    login = payload.get("login") if isinstance(payload, dict) else None
    result = login.get("result") if isinstance(login, dict) else None
    if result != "Success":
        reason = _rejection_reason(payload)
        logger.error("Login rejected for %s: %s", username, reason)
        raise LoginRejected(reason)

    login_cookies = extract_session_cookie(response)
    if login_cookies is None:
        logger.warning(
            "Login for %s succeeded but no session cookie was returned; "
            "requests will continue unauthenticated",
            username,
        )
        return LoginResult(username=username, authenticated=False)

    session.set(_merge_cookies(grant.cookies, login_cookies))
    logger.info("Bot logged in successfully as %s", username)
    return LoginResult(username=username, authenticated=True)
