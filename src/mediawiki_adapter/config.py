"""
Adapter Configuration

Settings are loaded once from the environment (prefix ``MW_ADAPTER_``) or a
local ``.env`` file. A client may supply a single set of overrides at startup
through ``ConfigOverrides``; the merged result is immutable afterwards.
"""

from __future__ import annotations

from typing import Optional, Tuple

from pydantic import AnyHttpUrl, BaseModel, ConfigDict, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from .core.errors import ConfigurationError

DEFAULT_MEDIAWIKI_API_BASE = "https://en.wikipedia.org/w/api.php"
DEFAULT_WIKIBASE_API_BASE = "https://www.wikidata.org/w/api.php"
USER_AGENT = "mediawikiadapter-app/1.0"


class ConfigOverrides(BaseModel):
    """
    One-shot configuration supplied by the client at startup.

    Field aliases match the keys MCP clients already send, e.g.::

        {"mediaWikiAPIBase": "https://my.wiki/api.php", "botUsername": "Bot"}
    """

    mediawiki_api_base: Optional[AnyHttpUrl] = Field(default=None, alias="mediaWikiAPIBase")
    wikibase_api_base: Optional[AnyHttpUrl] = Field(default=None, alias="wikiBaseAPIBase")
    bot_username: Optional[str] = Field(default=None, alias="botUsername")
    bot_password: Optional[SecretStr] = Field(default=None, alias="botPassword")

    model_config = ConfigDict(populate_by_name=True, extra="forbid", frozen=True)


class Settings(BaseSettings):
    mediawiki_api_base: AnyHttpUrl = DEFAULT_MEDIAWIKI_API_BASE
    wikibase_api_base: AnyHttpUrl = DEFAULT_WIKIBASE_API_BASE

    bot_username: Optional[str] = None
    bot_password: Optional[SecretStr] = None

    user_agent: str = USER_AGENT
    http_timeout: float = Field(default=30.0, gt=0)
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="MW_ADAPTER_",
        env_file=".env",
        extra="ignore",
        frozen=True,
    )

    def with_overrides(self, overrides: ConfigOverrides) -> "Settings":
        """Return a copy with every explicitly supplied override applied."""
        return self.model_copy(update=overrides.model_dump(exclude_none=True))

    def bot_credentials(self) -> Optional[Tuple[str, str]]:
        """
        Return the bot credential pair, or None if no login is configured.

        Raises
        ------
        ConfigurationError
            If only one of username/password is present.
        """
        password = self.bot_password.get_secret_value() if self.bot_password else None
        username = self.bot_username or None
        if username is None and not password:
            return None
        if username is None or not password:
            raise ConfigurationError(
                "Bot login requires both a username and a password; "
                "only one was provided."
            )
        return username, password


settings = Settings()
