"""
Tool Definitions

This module defines the authoritative tool schemas exposed to calling agents.
These definitions must remain strictly synchronized with:

- tools/base.py (TOOL_REGISTRY)
- api/models.py (input models, which perform the actual validation)

Only tools defined here can be invoked.
"""

from __future__ import annotations

from typing import Any, Dict, Final, List


# ---------------------------------------------------------------------
# Tool Name Constants (Single Source of Truth)
# ---------------------------------------------------------------------

TOOL_GET_PAGE_CONTENT: Final[str] = "getPageContent"
TOOL_EDIT_PAGE: Final[str] = "editPage"
TOOL_CREATE_PAGE: Final[str] = "createPage"
TOOL_DELETE_PAGE: Final[str] = "deletePage"
TOOL_SEARCH_PAGES: Final[str] = "searchPages"
TOOL_GET_PAGE_METADATA: Final[str] = "getPageMetadata"
TOOL_GET_ENTITY: Final[str] = "getEntity"
TOOL_SEARCH_ENTITIES: Final[str] = "searchEntities"
TOOL_EDIT_ENTITY: Final[str] = "editEntity"
TOOL_ADD_STATEMENT: Final[str] = "addStatement"

# Exposed as a resource rather than a tool on the MCP surface.
RESOURCE_NAMES: Final[frozenset] = frozenset({TOOL_GET_PAGE_CONTENT})


_TITLE_PROPERTY: Dict[str, Any] = {
    "type": "string",
    "description": (
        "Exact title of the page. "
        "Include namespace prefixes if applicable (e.g., 'Category:Physics')."
    ),
    "minLength": 1,
}


def _tool(name: str, description: str, properties: Dict[str, Any], required: List[str]) -> Dict[str, Any]:
    return {
        "type": "function",
        "function": {
            "name": name,
            "description": description,
            "parameters": {
                "type": "object",
                "properties": properties,
                "required": required,
                "additionalProperties": False,
            },
        },
    }


# ---------------------------------------------------------------------
# Tool Definitions
# ---------------------------------------------------------------------

TOOL_DEFINITIONS: List[Dict[str, Any]] = [
    _tool(
        TOOL_GET_PAGE_CONTENT,
        "Fetches the raw wikitext content of a MediaWiki page by its title.",
        {"title": _TITLE_PROPERTY},
        ["title"],
    ),
    _tool(
        TOOL_EDIT_PAGE,
        "Replaces the content of a MediaWiki page. Returns whether the edit succeeded.",
        {
            "title": _TITLE_PROPERTY,
            "content": {
                "type": "string",
                "description": "The new wikitext for the page.",
            },
            "summary": {
                "type": "string",
                "description": "Edit summary. Defaults to empty.",
            },
        },
        ["title", "content"],
    ),
    _tool(
        TOOL_CREATE_PAGE,
        (
            "Creates a new MediaWiki page. Fails (success=false) if a page with "
            "that title already exists."
        ),
        {
            "title": _TITLE_PROPERTY,
            "content": {
                "type": "string",
                "description": "Wikitext of the new page.",
            },
            "summary": {
                "type": "string",
                "description": "Edit summary. Defaults to empty.",
            },
        },
        ["title", "content"],
    ),
    _tool(
        TOOL_DELETE_PAGE,
        "Deletes a MediaWiki page. Requires a bot account with delete rights.",
        {
            "title": _TITLE_PROPERTY,
            "reason": {
                "type": "string",
                "description": "Deletion reason. Defaults to empty.",
            },
        },
        ["title"],
    ),
    _tool(
        TOOL_SEARCH_PAGES,
        "Performs a standard MediaWiki full-text search and returns matching page titles.",
        {
            "query": {
                "type": "string",
                "description": "Search query.",
                "minLength": 1,
            },
            "limit": {
                "type": "integer",
                "description": "Maximum number of results to return.",
                "minimum": 1,
                "maximum": 500,
                "default": 10,
            },
        },
        ["query"],
    ),
    _tool(
        TOOL_GET_PAGE_METADATA,
        "Returns the page id, last-touched timestamp and contributor names of a page.",
        {"title": _TITLE_PROPERTY},
        ["title"],
    ),
    _tool(
        TOOL_GET_ENTITY,
        "Fetches the full JSON document of a Wikibase entity (item or property).",
        {
            "id": {
                "type": "string",
                "description": "Entity id, e.g. 'Q42' or 'P31'.",
                "minLength": 1,
            },
        },
        ["id"],
    ),
    _tool(
        TOOL_SEARCH_ENTITIES,
        "Searches Wikibase entities by label or alias and returns id/label pairs.",
        {
            "query": {
                "type": "string",
                "description": "Label or alias to search for.",
                "minLength": 1,
            },
            "type": {
                "type": "string",
                "enum": ["item", "property"],
                "default": "item",
                "description": "Kind of entity to search.",
            },
            "limit": {
                "type": "integer",
                "minimum": 1,
                "maximum": 50,
                "default": 10,
                "description": "Maximum number of results to return.",
            },
        },
        ["query"],
    ),
    _tool(
        TOOL_EDIT_ENTITY,
        (
            "Creates or edits a Wikibase entity. Omit 'id' to create a new item; "
            "the response contains the id of the edited or created entity."
        ),
        {
            "id": {
                "type": "string",
                "description": "Id of the entity to edit. Omit to create a new item.",
                "minLength": 1,
            },
            "data": {
                "type": "object",
                "description": (
                    "Entity data in Wikibase JSON form, e.g. "
                    "{'labels': {'en': {'language': 'en', 'value': 'Example'}}}."
                ),
            },
            "summary": {
                "type": "string",
                "description": "Edit summary.",
            },
        },
        ["data"],
    ),
    _tool(
        TOOL_ADD_STATEMENT,
        "Adds a statement (claim) with a value to a Wikibase entity.",
        {
            "entity": {
                "type": "string",
                "description": "Id of the entity receiving the statement, e.g. 'Q42'.",
                "minLength": 1,
            },
            "property": {
                "type": "string",
                "description": "Property id, e.g. 'P31'.",
                "minLength": 1,
            },
            "value": {
                "description": (
                    "Datavalue in Wikibase JSON form, e.g. a string or "
                    "{'entity-type': 'item', 'numeric-id': 5}."
                ),
            },
        },
        ["entity", "property", "value"],
    ),
]


def get_tool_definition(name: str) -> Dict[str, Any]:
    for definition in TOOL_DEFINITIONS:
        if definition["function"]["name"] == name:
            return definition
    raise KeyError(name)
