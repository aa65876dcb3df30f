"""
Error Taxonomy and Global Error Handling

This module defines every failure the adapter can raise and the FastAPI
exception handlers that turn them into HTTP responses.

Design Goals
------------
- One named exception per failing phase (config, transport, token, login,
  upstream request, missing payload field)
- Messages name the phase that failed and carry the upstream reason if any
- Never leak internal exception details for unexpected failures
- Log full stack traces internally for debugging
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import Request
from fastapi.responses import JSONResponse

logger = logging.getLogger("mcp.errors")


# ---------------------------------------------------------------------
# Exception Hierarchy
# ---------------------------------------------------------------------

class AdapterError(RuntimeError):
    """Base exception for all adapter failures surfaced to callers."""

    code: str = "adapter_error"
    http_status: int = 500


class ConfigurationError(AdapterError):
    """Malformed, partial, or repeated adapter configuration."""

    code = "configuration_error"
    http_status = 400


class ToolInputError(AdapterError, ValueError):
    """Tool arguments failed validation."""

    code = "invalid_arguments"
    http_status = 400


class UnknownToolError(AdapterError):
    """A tool name that is not in the registry was requested."""

    code = "unknown_tool"
    http_status = 404


class TransportError(AdapterError):
    """Network-level failure before any response was received."""

    code = "transport_error"
    http_status = 502


class UpstreamRequestFailed(AdapterError):
    """The upstream API answered with a non-success status or bad body."""

    code = "upstream_request_failed"
    http_status = 502

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class TokenFetchFailed(UpstreamRequestFailed):
    """The anti-forgery token request did not succeed."""

    code = "token_fetch_failed"


class TokenMissing(AdapterError):
    """A token response succeeded but did not contain the expected token."""

    code = "token_missing"
    http_status = 502


class LoginTokenUnavailable(TokenFetchFailed):
    """The login token endpoint could not be reached or returned an error."""

    code = "login_token_unavailable"


class LoginTokenMissing(TokenMissing):
    code = "login_token_missing"


class LoginRequestFailed(UpstreamRequestFailed):
    """The login POST returned a non-success status."""

    code = "login_request_failed"


class LoginRejected(AdapterError):
    """The upstream processed the login but did not report success."""

    code = "login_rejected"
    http_status = 502

    def __init__(self, reason: str) -> None:
        super().__init__(f"Login failed: {reason}")
        self.reason = reason


class NotFound(AdapterError):
    """An expected field (page, entity, content) was absent upstream."""

    code = "not_found"
    http_status = 404


class PageNotFound(NotFound):
    code = "page_not_found"


class EntityNotFound(NotFound):
    code = "entity_not_found"


# ---------------------------------------------------------------------
# Public Exception Handlers
# ---------------------------------------------------------------------

async def adapter_error_handler(
    request: Request,
    exc: AdapterError,
) -> JSONResponse:
    """
    Convert a known adapter failure into a deterministic JSON response.

    Adapter errors carry messages written for callers (phase name plus the
    upstream reason), so the message is returned as the detail.
    """
    logger.warning(
        "Adapter error during request %s %s: %s (%s)",
        request.method,
        request.url.path,
        exc,
        exc.code,
    )

    payload: Dict[str, Any] = {
        "error": exc.code,
        "detail": str(exc),
    }

    return JSONResponse(
        status_code=exc.http_status,
        content=payload,
    )


async def unhandled_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """
    Catch-all handler for uncaught exceptions.

    Behavior
    --------
    - Logs the full exception stack trace for internal diagnostics.
    - Returns a generic 500 error to the client with no internal details.

    Parameters
    ----------
    request : Request
        The incoming HTTP request that triggered the exception.

    exc : Exception
        The uncaught exception instance.

    Returns
    -------
    JSONResponse
        A JSON 500 response with a minimal error payload.
    """

    # Log full traceback internally (never returned to client)
    logger.exception(
        "Unhandled adapter exception during request: %s %s",
        request.method,
        request.url.path,
        exc_info=exc,
    )

    payload: Dict[str, Any] = {
        "error": "internal_server_error",
        "detail": "Internal server error",
    }

    return JSONResponse(
        status_code=500,
        content=payload,
    )
