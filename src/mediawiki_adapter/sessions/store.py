"""
Session Credential Store

Holds the single upstream session credential (the cookie header value
returned by a successful bot login) for the lifetime of the process.

Design choices
--------------
- In-memory only (never persisted).
- At most one credential at a time; ``set`` replaces, nothing merges.
- Writes are serialized with a re-entrant lock and published with a single
  reference assignment, so concurrent readers observe either no credential
  or the complete value.
- Handlers never touch the value directly; they read it through the
  authenticated transport.
"""

from __future__ import annotations

import logging
from threading import RLock
from typing import Optional

logger = logging.getLogger("mcp.session")


class SessionManager:
    """
    Single-writer cell for the upstream session credential.
    """

    def __init__(self) -> None:
        self._credential: Optional[str] = None
        self._lock = RLock()

    def get(self) -> Optional[str]:
        """
        Return the current session credential, or None if not logged in.
        """
        return self._credential

    def set(self, credential: str) -> None:
        """
        Install a session credential, replacing any previous one.

        Parameters
        ----------
        credential : str
            Cookie header value to replay on every outbound request.
        """
        if not credential:
            raise ValueError("Session credential must be a non-empty string.")

        with self._lock:
            replaced = self._credential is not None
            self._credential = credential

        if replaced:
            logger.info("Replaced existing upstream session credential")
        else:
            logger.info("Installed upstream session credential")

    def clear(self) -> None:
        """Drop the credential. Used by tests; no handler logs out."""
        with self._lock:
            self._credential = None

    @property
    def authenticated(self) -> bool:
        return self._credential is not None
