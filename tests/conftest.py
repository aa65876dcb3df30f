from typing import Any, Callable, Dict, List, Union
from urllib.parse import parse_qsl

import httpx
import pytest

from mediawiki_adapter.config import Settings
from mediawiki_adapter.runtime import AdapterRuntime

MW_API = "https://wiki.test/w/api.php"
WB_API = "https://data.test/w/api.php"

Responder = Union[Dict[str, Any], httpx.Response, Callable[[httpx.Request], httpx.Response]]


def route_key(request: httpx.Request) -> str:
    """
    Map a request onto a short key:
      tokens:csrf, tokens:login, list:search, prop:revisions, edit, login, ...
    """
    params = request.url.params
    action = params.get("action")
    if action == "query":
        if params.get("meta") == "tokens":
            return f"tokens:{params.get('type')}"
        if params.get("list"):
            return f"list:{params['list']}"
        return f"prop:{params.get('prop')}"
    return action


def form(request: httpx.Request) -> Dict[str, str]:
    return dict(parse_qsl(request.content.decode(), keep_blank_values=True))


class FakeWiki:
    """
    Fake upstream API. Register responders per route key; every request is
    recorded in ``requests`` in order.
    """

    def __init__(self) -> None:
        self.requests: List[httpx.Request] = []
        self.routes: Dict[str, Responder] = {}

    def on(self, key: str, responder: Responder) -> None:
        self.routes[key] = responder

    def keys(self) -> List[str]:
        return [route_key(r) for r in self.requests]

    def last(self, key: str) -> httpx.Request:
        for request in reversed(self.requests):
            if route_key(request) == key:
                return request
        raise AssertionError(f"No request for {key}; saw {self.keys()}")

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        key = route_key(request)
        responder = self.routes.get(key)
        if responder is None:
            return httpx.Response(404, json={"error": {"code": "unrouted", "info": key}})
        if isinstance(responder, httpx.Response):
            return responder
        if callable(responder):
            return responder(request)
        return httpx.Response(200, json=responder)


@pytest.fixture
def fake_wiki() -> FakeWiki:
    return FakeWiki()


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        mediawiki_api_base=MW_API,
        wikibase_api_base=WB_API,
        bot_username=None,
        bot_password=None,
        _env_file=None,
    )


@pytest.fixture
def runtime(fake_wiki, test_settings) -> AdapterRuntime:
    return AdapterRuntime(test_settings, http_transport=httpx.MockTransport(fake_wiki.handler))


@pytest.fixture
def csrf(fake_wiki):
    """Serve a fixed CSRF token on both backends."""
    fake_wiki.on("tokens:csrf", {"query": {"tokens": {"csrftoken": "abc123+\\"}}})
    return "abc123+\\"
