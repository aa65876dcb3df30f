"""
Wikibase API Client

Entity read/write operations against a Wikibase ``api.php`` (Wikidata by
default).

Design Goals
------------
- Same session and token discipline as ``MediaWikiClient``: the shared
  authenticated transport, and a fresh CSRF token from the Wikibase host
  before every write
- JSON-valued inputs (entity data, statement values) are serialized here,
  so callers pass plain Python structures
- Writes succeed only on ``success == 1``
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Optional

from ..core.errors import EntityNotFound
from .api_client import ActionAPIClient, dig

logger = logging.getLogger("mcp.wikibase")

ENTITY_TYPES = ("item", "property")


def _is_success_flag(value: Any) -> bool:
    # JSON ``true`` decodes to True, which equals 1 in Python; only the
    # integer literal counts.
    return type(value) is int and value == 1


class WikibaseClient(ActionAPIClient):
    """
    Wikibase entity client.
    """

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def get_entity(self, entity_id: str) -> Dict[str, Any]:
        """
        Fetch the full JSON document of a single entity.

        Raises
        ------
        EntityNotFound
            The entity is absent from ``entities`` or marked missing.
        """
        data = await self._get(
            {
                "action": "wbgetentities",
                "ids": entity_id,
            },
            failure="Failed to fetch entity",
        )

        entity = dig(data, "entities", entity_id)
        if entity is None:
            # The upstream keys by the normalized id ("q42" comes back as "Q42").
            entities = dig(data, "entities")
            if isinstance(entities, dict) and len(entities) == 1:
                entity = next(iter(entities.values()))
        if not isinstance(entity, dict) or "missing" in entity:
            upstream = dig(data, "error", "info")
            detail = f" ({upstream})" if isinstance(upstream, str) else ""
            raise EntityNotFound(f'Entity "{entity_id}" not found.{detail}')

        return entity

    async def search_entities(
        self,
        query: str,
        entity_type: str = "item",
        limit: int = 10,
        language: str = "en",
    ) -> List[Dict[str, Optional[str]]]:
        """
        Search entities by label or alias.

        Returns
        -------
        List[Dict[str, Optional[str]]]
            ``{"id", "label"}`` pairs in upstream order. ``label`` is None
            when the entity has no label in ``language``.
        """
        if entity_type not in ENTITY_TYPES:
            raise ValueError(f"entity_type must be one of {ENTITY_TYPES}; got {entity_type!r}")

        data = await self._get(
            {
                "action": "wbsearchentities",
                "search": query,
                "type": entity_type,
                "language": language,
                "limit": limit,
            },
            failure="Failed to search entities",
        )

        hits = data.get("search") if isinstance(data, dict) else None
        if not isinstance(hits, list):
            return []
        return [
            {"id": hit["id"], "label": hit.get("label")}
            for hit in hits
            if isinstance(hit, dict) and "id" in hit
        ]

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def edit_entity(
        self,
        data: Dict[str, Any],
        entity_id: Optional[str] = None,
        summary: Optional[str] = None,
        new_type: str = "item",
    ) -> Dict[str, Any]:
        """
        Create or update an entity with ``wbeditentity``.

        When ``entity_id`` is omitted a new entity of ``new_type`` is created.

        Returns
        -------
        Dict[str, Any]
            ``{"success": bool, "id": Optional[str]}`` where ``id`` is the
            edited (or newly created) entity id.
        """
        form: Dict[str, Any] = {"data": json.dumps(data)}
        if entity_id:
            form["id"] = entity_id
        else:
            if new_type not in ENTITY_TYPES:
                raise ValueError(f"new_type must be one of {ENTITY_TYPES}; got {new_type!r}")
            form["new"] = new_type
        if summary:
            form["summary"] = summary

        result = await self._post_with_token(
            "wbeditentity",
            form,
            purpose="entity-edit",
            failure="Failed to edit entity",
        )

        success = _is_success_flag(dig(result, "success"))
        new_id = dig(result, "entity", "id")
        if success:
            logger.info("Edited entity %s", new_id)
        return {
            "success": success,
            "id": new_id if isinstance(new_id, str) else None,
        }

    async def add_statement(self, entity_id: str, property_id: str, value: Any) -> bool:
        """
        Add a ``value``-type claim to ``entity_id`` via ``wbcreateclaim``.

        ``value`` is the datavalue in Wikibase JSON form, e.g. ``"some text"``
        or ``{"entity-type": "item", "numeric-id": 42}``.
        """
        result = await self._post_with_token(
            "wbcreateclaim",
            {
                "entity": entity_id,
                "property": property_id,
                "snaktype": "value",
                "value": json.dumps(value),
            },
            purpose="claim",
            failure="Failed to add statement",
        )
        return _is_success_flag(dig(result, "success"))
