import json

import httpx
import pytest

from mediawiki_adapter.core.errors import EntityNotFound, TokenMissing, UpstreamRequestFailed

from conftest import WB_API, form


class FakeEntityStore:
    """Minimal stateful wbeditentity/wbgetentities backend."""

    def __init__(self):
        self.entities = {}
        self.next_id = 100

    def edit(self, request):
        body = form(request)
        data = json.loads(body["data"])
        entity_id = body.get("id")
        if entity_id is None:
            entity_id = f"Q{self.next_id}"
            self.next_id += 1
        entity = {"id": entity_id, "type": "item", **self.entities.get(entity_id, {}), **data}
        self.entities[entity_id] = entity
        return httpx.Response(200, json={"success": 1, "entity": entity})

    def get(self, request):
        ids = request.url.params["ids"]
        entity = self.entities.get(ids, {"id": ids, "missing": ""})
        return httpx.Response(200, json={"entities": {ids: entity}, "success": 1})


async def test_edit_entity_without_id_then_fetch_round_trip(runtime, fake_wiki, csrf):
    store = FakeEntityStore()
    fake_wiki.on("wbeditentity", store.edit)
    fake_wiki.on("wbgetentities", store.get)
    data = {
        "labels": {"en": {"language": "en", "value": "Test item"}},
        "descriptions": {"en": {"language": "en", "value": "created by a test"}},
    }

    result = await runtime.wikibase.edit_entity(data)

    assert result == {"success": True, "id": "Q100"}
    body = form(fake_wiki.last("wbeditentity"))
    assert "id" not in body
    assert body["new"] == "item"
    assert body["token"] == csrf

    entity = await runtime.wikibase.get_entity(result["id"])
    assert entity["labels"] == data["labels"]
    assert entity["descriptions"] == data["descriptions"]


async def test_edit_entity_token_comes_from_wikibase_host(runtime, fake_wiki, csrf):
    fake_wiki.on("wbeditentity", {"success": 1, "entity": {"id": "Q5"}})

    await runtime.wikibase.edit_entity({"labels": {}}, entity_id="Q5", summary="fix")

    assert fake_wiki.keys() == ["tokens:csrf", "wbeditentity"]
    for request in fake_wiki.requests:
        assert str(request.url).startswith(WB_API)
    body = form(fake_wiki.last("wbeditentity"))
    assert body["id"] == "Q5"
    assert body["summary"] == "fix"
    assert json.loads(body["data"]) == {"labels": {}}


@pytest.mark.parametrize("payload", [{"success": 0}, {"success": True}, {"success": "1"}, {}])
async def test_edit_entity_requires_exact_success_literal(runtime, fake_wiki, csrf, payload):
    fake_wiki.on("wbeditentity", payload)

    result = await runtime.wikibase.edit_entity({"labels": {}}, entity_id="Q5")

    assert result["success"] is False


async def test_edit_entity_token_missing(runtime, fake_wiki):
    fake_wiki.on("tokens:csrf", {"query": {}})

    with pytest.raises(TokenMissing, match="entity-edit"):
        await runtime.wikibase.edit_entity({"labels": {}})

    assert "wbeditentity" not in fake_wiki.keys()


async def test_add_statement(runtime, fake_wiki, csrf):
    fake_wiki.on("wbcreateclaim", {"success": 1, "claim": {"id": "Q42$abc"}})
    value = {"entity-type": "item", "numeric-id": 5}

    ok = await runtime.wikibase.add_statement("Q42", "P31", value)

    assert ok is True
    assert fake_wiki.keys() == ["tokens:csrf", "wbcreateclaim"]
    body = form(fake_wiki.last("wbcreateclaim"))
    assert body["entity"] == "Q42"
    assert body["property"] == "P31"
    assert body["snaktype"] == "value"
    assert json.loads(body["value"]) == value
    assert body["token"] == csrf


async def test_add_statement_http_error(runtime, fake_wiki, csrf):
    fake_wiki.on("wbcreateclaim", httpx.Response(500))

    with pytest.raises(UpstreamRequestFailed, match="Failed to add statement"):
        await runtime.wikibase.add_statement("Q42", "P31", "text")


async def test_add_statement_unsuccessful(runtime, fake_wiki, csrf):
    fake_wiki.on("wbcreateclaim", {"error": {"code": "invalid-snak"}})

    assert await runtime.wikibase.add_statement("Q42", "P31", "text") is False


async def test_get_entity_missing(runtime, fake_wiki):
    fake_wiki.on("wbgetentities", {"entities": {"Q999999999": {"id": "Q999999999", "missing": ""}}})

    with pytest.raises(EntityNotFound, match="Q999999999"):
        await runtime.wikibase.get_entity("Q999999999")


async def test_get_entity_error_payload(runtime, fake_wiki):
    fake_wiki.on("wbgetentities", {"error": {"code": "no-such-entity", "info": "Could not find entity"}})

    with pytest.raises(EntityNotFound, match="Could not find entity"):
        await runtime.wikibase.get_entity("Q0")


async def test_search_entities(runtime, fake_wiki):
    fake_wiki.on(
        "wbsearchentities",
        {"search": [
            {"id": "P31", "label": "instance of"},
            {"id": "P279", "label": "subclass of"},
            {"id": "P9999"},
        ]},
    )

    hits = await runtime.wikibase.search_entities("instance", entity_type="property")

    assert hits == [
        {"id": "P31", "label": "instance of"},
        {"id": "P279", "label": "subclass of"},
        {"id": "P9999", "label": None},
    ]
    params = fake_wiki.last("wbsearchentities").url.params
    assert params["type"] == "property"
    assert params["limit"] == "10"
    assert params["search"] == "instance"


async def test_search_entities_rejects_unknown_type(runtime):
    with pytest.raises(ValueError):
        await runtime.wikibase.search_entities("x", entity_type="lexeme")


async def test_get_entity_with_normalized_id(runtime, fake_wiki):
    fake_wiki.on("wbgetentities", {"entities": {"Q42": {"id": "Q42", "type": "item"}}, "success": 1})

    entity = await runtime.wikibase.get_entity("q42")

    assert entity["id"] == "Q42"
    assert fake_wiki.last("wbgetentities").url.params["ids"] == "q42"
