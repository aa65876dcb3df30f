"""
Adapter Runtime

Owns the process-wide pieces every operation shares: effective settings, the
session credential, the authenticated transport, and the two API clients.

Startup applies configuration exactly once via ``configure()``. If bot
credentials are present, the bot login runs before ``configure()`` returns,
so no operation is dispatched during the login window.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Mapping, Optional, Tuple, Union

import httpx
from pydantic import ValidationError

from .config import ConfigOverrides, Settings, settings as default_settings
from .core.errors import ConfigurationError
from .sessions.store import SessionManager
from .wiki.api_client import MediaWikiClient
from .wiki.login import LoginResult, login_as_bot
from .wiki.transport import AuthenticatedTransport
from .wiki.wikibase_client import WikibaseClient

logger = logging.getLogger("mcp.runtime")


class AdapterRuntime:
    """
    Container for the shared session, transport and clients.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        *,
        http_transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """
        Parameters
        ----------
        settings : Optional[Settings]
            Base settings; defaults to the environment-loaded settings.

        http_transport : Optional[httpx.AsyncBaseTransport]
            Testing override passed through to every httpx client.
        """
        self.settings = settings or default_settings
        self.session = SessionManager()
        self._http_transport = http_transport
        self._configured = False
        self._configure_lock = asyncio.Lock()
        self.transport, self.mediawiki, self.wikibase = self._build_clients(self.settings)

    def _build_clients(
        self, settings: Settings
    ) -> Tuple[AuthenticatedTransport, MediaWikiClient, WikibaseClient]:
        transport = AuthenticatedTransport(
            self.session,
            user_agent=settings.user_agent,
            timeout=settings.http_timeout,
            transport=self._http_transport,
        )
        return (
            transport,
            MediaWikiClient(transport, str(settings.mediawiki_api_base)),
            WikibaseClient(transport, str(settings.wikibase_api_base)),
        )

    @property
    def configured(self) -> bool:
        return self._configured

    async def configure(
        self,
        overrides: Union[ConfigOverrides, Mapping[str, Any], None] = None,
    ) -> Optional[LoginResult]:
        """
        Apply startup configuration and log in if credentials are present.

        Parameters
        ----------
        overrides : ConfigOverrides | Mapping | None
            Endpoint and credential overrides. Absent values keep the base
            settings.

        Returns
        -------
        Optional[LoginResult]
            The login outcome, or None when no credentials were configured.

        Raises
        ------
        ConfigurationError
            Invalid overrides, a partial credential pair, or a second call.
        """
        async with self._configure_lock:
            if self._configured:
                raise ConfigurationError("Adapter configuration can only be applied once.")

            if overrides is not None and not isinstance(overrides, ConfigOverrides):
                try:
                    overrides = ConfigOverrides.model_validate(overrides)
                except ValidationError as exc:
                    raise ConfigurationError(f"Invalid configuration: {exc}") from exc

            effective = self.settings.with_overrides(overrides) if overrides else self.settings

            # Raises before any network call if only one credential is set.
            credentials = effective.bot_credentials()

            transport, mediawiki, wikibase = self._build_clients(effective)

            result: Optional[LoginResult] = None
            if credentials is not None:
                username, password = credentials
                result = await login_as_bot(
                    transport,
                    self.session,
                    mediawiki.api_base,
                    username,
                    password,
                )

            # Committed only after a successful login, so a failed attempt
            # leaves the base settings in place for a retry.
            self.settings = effective
            self.transport, self.mediawiki, self.wikibase = transport, mediawiki, wikibase
            self._configured = True

            logger.info(
                "Configured endpoints: mediawiki=%s wikibase=%s",
                self.mediawiki.api_base,
                self.wikibase.api_base,
            )
            return result


# Default process-wide runtime used by the HTTP app and the MCP server.
runtime = AdapterRuntime()
