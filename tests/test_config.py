import httpx
import pytest
from pydantic import SecretStr

from mediawiki_adapter.config import (
    DEFAULT_MEDIAWIKI_API_BASE,
    DEFAULT_WIKIBASE_API_BASE,
    ConfigOverrides,
    Settings,
)
from mediawiki_adapter.core.errors import ConfigurationError, LoginRejected
from mediawiki_adapter.runtime import AdapterRuntime

from conftest import MW_API, WB_API


def test_defaults():
    s = Settings(_env_file=None)
    assert str(s.mediawiki_api_base) == DEFAULT_MEDIAWIKI_API_BASE
    assert str(s.wikibase_api_base) == DEFAULT_WIKIBASE_API_BASE
    assert s.user_agent == "mediawikiadapter-app/1.0"


def test_settings_read_from_environment(monkeypatch):
    monkeypatch.setenv("MW_ADAPTER_MEDIAWIKI_API_BASE", "https://env.wiki/api.php")
    monkeypatch.setenv("MW_ADAPTER_BOT_USERNAME", "EnvBot")
    monkeypatch.setenv("MW_ADAPTER_BOT_PASSWORD", "secret")

    s = Settings(_env_file=None)

    assert str(s.mediawiki_api_base) == "https://env.wiki/api.php"
    assert s.bot_credentials() == ("EnvBot", "secret")


def test_bot_credentials_absent():
    assert Settings(_env_file=None, bot_username=None, bot_password=None).bot_credentials() is None


@pytest.mark.parametrize(
    "username,password",
    [("Bot", None), (None, "pw"), ("Bot", ""), ("", "pw")],
)
def test_partial_credentials_rejected(username, password):
    s = Settings(
        _env_file=None,
        bot_username=username,
        bot_password=SecretStr(password) if password is not None else None,
    )
    with pytest.raises(ConfigurationError):
        s.bot_credentials()


def test_overrides_accept_client_aliases():
    overrides = ConfigOverrides.model_validate({
        "mediaWikiAPIBase": "https://my.wiki/w/api.php",
        "wikiBaseAPIBase": "https://my.wikibase/w/api.php",
    })
    s = Settings(_env_file=None).with_overrides(overrides)

    assert str(s.mediawiki_api_base) == "https://my.wiki/w/api.php"
    assert str(s.wikibase_api_base) == "https://my.wikibase/w/api.php"


def test_absent_overrides_keep_defaults():
    s = Settings(_env_file=None).with_overrides(
        ConfigOverrides(mediawiki_api_base="https://my.wiki/w/api.php")
    )
    assert str(s.wikibase_api_base) == DEFAULT_WIKIBASE_API_BASE


async def test_configure_applies_endpoints(runtime, fake_wiki):
    result = await runtime.configure({
        "mediaWikiAPIBase": "https://other.wiki/w/api.php",
        "wikiBaseAPIBase": "https://other.data/w/api.php",
    })

    assert result is None
    assert runtime.configured is True
    assert runtime.mediawiki.api_base == "https://other.wiki/w/api.php"
    assert runtime.wikibase.api_base == "https://other.data/w/api.php"
    assert fake_wiki.requests == []


async def test_configure_only_once(runtime):
    await runtime.configure()

    with pytest.raises(ConfigurationError, match="only be applied once"):
        await runtime.configure({"mediaWikiAPIBase": "https://late.wiki/w/api.php"})

    assert runtime.mediawiki.api_base == MW_API


async def test_configure_rejects_invalid_overrides(runtime):
    with pytest.raises(ConfigurationError, match="Invalid configuration"):
        await runtime.configure({"mediaWikiAPIBase": "not a url"})

    with pytest.raises(ConfigurationError):
        await runtime.configure({"unknownKey": 1})


async def test_configure_logs_in_with_credentials(runtime, fake_wiki):
    fake_wiki.on("tokens:login", {"query": {"tokens": {"logintoken": "lt"}}})
    fake_wiki.on(
        "login",
        httpx.Response(
            200,
            json={"login": {"result": "Success"}},
            headers=[("set-cookie", "wiki_session=z9; path=/")],
        ),
    )

    result = await runtime.configure({"botUsername": "Bot", "botPassword": "pw"})

    assert result.authenticated is True
    assert runtime.session.get() == "wiki_session=z9"
    assert all(str(r.url).startswith(MW_API) for r in fake_wiki.requests)


async def test_failed_login_leaves_runtime_unconfigured(runtime, fake_wiki):
    fake_wiki.on("tokens:login", {"query": {"tokens": {"logintoken": "lt"}}})
    fake_wiki.on("login", {"login": {"result": "Failed", "reason": "nope"}})

    with pytest.raises(LoginRejected):
        await runtime.configure({"botUsername": "Bot", "botPassword": "pw"})

    assert runtime.configured is False
    assert runtime.session.get() is None


async def test_failed_login_keeps_base_settings_for_retry(runtime, fake_wiki):
    fake_wiki.on("tokens:login", {"query": {"tokens": {"logintoken": "lt"}}})
    fake_wiki.on("login", {"login": {"result": "Failed", "reason": "nope"}})

    with pytest.raises(LoginRejected):
        await runtime.configure({
            "mediaWikiAPIBase": "https://other.wiki/w/api.php",
            "botUsername": "Bot",
            "botPassword": "pw",
        })

    assert str(fake_wiki.last("login").url).startswith("https://other.wiki/w/api.php")
    assert runtime.settings.bot_username is None
    assert runtime.mediawiki.api_base == MW_API

    # Retrying without overrides runs anonymously against the base endpoint.
    assert await runtime.configure() is None
    assert runtime.configured is True
    assert runtime.mediawiki.api_base == MW_API


async def test_configure_uses_base_settings_credentials(fake_wiki):
    settings = Settings(
        _env_file=None,
        mediawiki_api_base=MW_API,
        wikibase_api_base=WB_API,
        bot_username="Bot",
        bot_password=None,
    )
    rt = AdapterRuntime(settings, http_transport=httpx.MockTransport(fake_wiki.handler))

    with pytest.raises(ConfigurationError):
        await rt.configure()

    assert fake_wiki.requests == []
