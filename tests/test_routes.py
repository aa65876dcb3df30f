import httpx
import pytest
from fastapi.testclient import TestClient

from mediawiki_adapter.api.dependencies import get_runtime
from mediawiki_adapter.main import create_app

from conftest import MW_API, WB_API


@pytest.fixture
def client(runtime):
    app = create_app(runtime)
    app.dependency_overrides[get_runtime] = lambda: runtime
    # Not used as a context manager: startup (configure + login) is not run.
    return TestClient(app)


def test_health(client):
    resp = client.get("/health")

    assert resp.status_code == 200
    assert resp.json() == {
        "status": "ok",
        "mediawiki_api": MW_API,
        "wikibase_api": WB_API,
        "configured": False,
        "authenticated": False,
    }


def test_list_tools(client):
    resp = client.get("/tools")

    assert resp.status_code == 200
    names = [tool["function"]["name"] for tool in resp.json()]
    assert "editPage" in names
    assert "addStatement" in names


def test_call_tool(client, fake_wiki, csrf):
    fake_wiki.on("delete", {"delete": {"result": "Success"}})

    resp = client.post("/tools/deletePage", json={"title": "Old page", "reason": "cleanup"})

    assert resp.status_code == 200
    assert resp.json() == {"success": True}
    assert fake_wiki.keys() == ["tokens:csrf", "delete"]


def test_call_tool_unsuccessful_write_is_200(client, fake_wiki, csrf):
    fake_wiki.on("edit", {"edit": {"result": "Failure"}})

    resp = client.post("/tools/editPage", json={"title": "A", "content": "b"})

    assert resp.status_code == 200
    assert resp.json() == {"success": False}


def test_unknown_tool_is_404(client):
    resp = client.post("/tools/nope", json={})

    assert resp.status_code == 404
    assert resp.json()["error"] == "unknown_tool"


def test_invalid_arguments_are_400(client):
    resp = client.post("/tools/editPage", json={"title": "A"})

    assert resp.status_code == 400
    assert resp.json()["error"] == "invalid_arguments"
    assert "content" in resp.json()["detail"]


def test_token_missing_is_502_with_phase_message(client, fake_wiki):
    fake_wiki.on("tokens:csrf", {"query": {"tokens": {}}})

    resp = client.post("/tools/createPage", json={"title": "A", "content": "b"})

    assert resp.status_code == 502
    assert resp.json() == {
        "error": "token_missing",
        "detail": "Failed to retrieve edit token.",
    }


def test_upstream_failure_is_502(client, fake_wiki):
    fake_wiki.on("list:search", httpx.Response(500))

    resp = client.post("/tools/searchPages", json={"query": "x"})

    assert resp.status_code == 502
    assert resp.json()["error"] == "upstream_request_failed"


def test_page_content_resource(client, fake_wiki):
    fake_wiki.on(
        "prop:revisions",
        {"query": {"pages": {"9": {"pageid": 9, "revisions": [{"*": "''hello''"}]}}}},
    )

    resp = client.get("/resources/page-content", params={"title": "Greeting"})

    assert resp.status_code == 200
    assert resp.json() == {"content": "''hello''"}


def test_page_content_resource_not_found(client, fake_wiki):
    fake_wiki.on("prop:revisions", {"query": {"pages": {"-1": {"missing": ""}}}})

    resp = client.get("/resources/page-content", params={"title": "Missing"})

    assert resp.status_code == 404
    assert resp.json()["error"] == "page_not_found"


def test_startup_configures_runtime(runtime, fake_wiki):
    app = create_app(runtime)
    app.dependency_overrides[get_runtime] = lambda: runtime

    with TestClient(app) as c:
        resp = c.get("/health")

    assert resp.json()["configured"] is True
    assert fake_wiki.requests == []
