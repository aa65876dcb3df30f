"""
Wikibase Tool Layer

Agent-callable operations on knowledge-base entities, backed by
``WikibaseClient``.
"""

from __future__ import annotations

from ..api.models import (
    EntityEditInput,
    EntityEditOutput,
    EntityIdInput,
    EntityOutput,
    EntitySearchHit,
    EntitySearchInput,
    EntitySearchOutput,
    StatementAddInput,
    WriteResult,
)
from ..wiki.wikibase_client import WikibaseClient


async def tool_get_entity(
    req: EntityIdInput,
    client: WikibaseClient,
) -> EntityOutput:
    entity = await client.get_entity(req.id)
    return EntityOutput(entity=entity)


async def tool_search_entities(
    req: EntitySearchInput,
    client: WikibaseClient,
) -> EntitySearchOutput:
    hits = await client.search_entities(req.query, entity_type=req.type, limit=req.limit)
    return EntitySearchOutput(results=[EntitySearchHit(**hit) for hit in hits])


async def tool_edit_entity(
    req: EntityEditInput,
    client: WikibaseClient,
) -> EntityEditOutput:
    """
    Create (no ``id``) or update an entity.

    The returned ``id`` can be passed straight to getEntity.
    """
    result = await client.edit_entity(req.data, entity_id=req.id, summary=req.summary)
    return EntityEditOutput(**result)


async def tool_add_statement(
    req: StatementAddInput,
    client: WikibaseClient,
) -> WriteResult:
    ok = await client.add_statement(req.entity, req.property, req.value)
    return WriteResult(success=ok)
