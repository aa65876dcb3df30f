"""
Tool Dispatch Layer

This module defines the central dispatch mechanism for all tool and resource
calls, whichever surface (HTTP or MCP stdio) they arrive on. It enforces:

- Explicit tool allow-listing
- Argument validation against the pydantic input models
- Dependency injection of the runtime for testability
- Logging of every failure at the adapter boundary before it is re-raised

No tool should be callable unless it is explicitly registered here.
"""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Dict, Type

from pydantic import BaseModel, ValidationError

from ..api.models import (
    EntityEditInput,
    EntityIdInput,
    EntitySearchInput,
    PageDeleteInput,
    PageSearchInput,
    PageTitleInput,
    PageWriteInput,
    StatementAddInput,
)
from ..core.errors import AdapterError, ToolInputError, UnknownToolError
from ..runtime import AdapterRuntime
from . import definitions as d
from .wiki_tools import (
    tool_create_page,
    tool_delete_page,
    tool_edit_page,
    tool_get_page_content,
    tool_get_page_metadata,
    tool_search_pages,
)
from .wikibase_tools import (
    tool_add_statement,
    tool_edit_entity,
    tool_get_entity,
    tool_search_entities,
)

logger = logging.getLogger("mcp.tools")


# ---------------------------------------------------------------------
# Tool Type Definitions
# ---------------------------------------------------------------------

ToolHandler = Callable[[Any, AdapterRuntime], Awaitable[BaseModel]]


class ToolSpec:
    """Input model plus handler for one registered tool."""

    __slots__ = ("input_model", "handler")

    def __init__(self, input_model: Type[BaseModel], handler: ToolHandler) -> None:
        self.input_model = input_model
        self.handler = handler


# ---------------------------------------------------------------------
# Tool Registry (AUTHORITATIVE)
# ---------------------------------------------------------------------

TOOL_REGISTRY: Dict[str, ToolSpec] = {
    d.TOOL_GET_PAGE_CONTENT: ToolSpec(
        PageTitleInput, lambda req, rt: tool_get_page_content(req, rt.mediawiki)
    ),
    d.TOOL_EDIT_PAGE: ToolSpec(
        PageWriteInput, lambda req, rt: tool_edit_page(req, rt.mediawiki)
    ),
    d.TOOL_CREATE_PAGE: ToolSpec(
        PageWriteInput, lambda req, rt: tool_create_page(req, rt.mediawiki)
    ),
    d.TOOL_DELETE_PAGE: ToolSpec(
        PageDeleteInput, lambda req, rt: tool_delete_page(req, rt.mediawiki)
    ),
    d.TOOL_SEARCH_PAGES: ToolSpec(
        PageSearchInput, lambda req, rt: tool_search_pages(req, rt.mediawiki)
    ),
    d.TOOL_GET_PAGE_METADATA: ToolSpec(
        PageTitleInput, lambda req, rt: tool_get_page_metadata(req, rt.mediawiki)
    ),
    d.TOOL_GET_ENTITY: ToolSpec(
        EntityIdInput, lambda req, rt: tool_get_entity(req, rt.wikibase)
    ),
    d.TOOL_SEARCH_ENTITIES: ToolSpec(
        EntitySearchInput, lambda req, rt: tool_search_entities(req, rt.wikibase)
    ),
    d.TOOL_EDIT_ENTITY: ToolSpec(
        EntityEditInput, lambda req, rt: tool_edit_entity(req, rt.wikibase)
    ),
    d.TOOL_ADD_STATEMENT: ToolSpec(
        StatementAddInput, lambda req, rt: tool_add_statement(req, rt.wikibase)
    ),
}


# ---------------------------------------------------------------------
# Public Dispatch API
# ---------------------------------------------------------------------

def validate_tool_args(tool_name: str, args: Dict[str, Any]) -> BaseModel:
    """
    Validate raw arguments for ``tool_name`` against its input model.

    Raises
    ------
    UnknownToolError
        If the tool is not registered.

    ToolInputError
        If the arguments do not match the input model.
    """
    spec = TOOL_REGISTRY.get(tool_name)
    if spec is None:
        raise UnknownToolError(f"Unknown tool requested: {tool_name}")

    try:
        return spec.input_model.model_validate(args or {})
    except ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or '<root>'}: {err['msg']}"
            for err in exc.errors()
        )
        raise ToolInputError(f"Invalid arguments for {tool_name}: {problems}") from exc


async def dispatch_tool_call(
    tool_name: str,
    args: Dict[str, Any],
    runtime: AdapterRuntime,
) -> BaseModel:
    """
    Validate arguments, run the tool, and return its output model.

    Parameters
    ----------
    tool_name : str
        Registered tool name, e.g. ``"editPage"``.

    args : Dict[str, Any]
        Raw JSON arguments.

    runtime : AdapterRuntime
        Provides the configured clients (injected).

    Returns
    -------
    BaseModel
        The tool's output model.

    Raises
    ------
    AdapterError
        Any adapter failure, after it has been logged.
    """
    try:
        request = validate_tool_args(tool_name, args)
        result = await TOOL_REGISTRY[tool_name].handler(request, runtime)
    except AdapterError as exc:
        logger.warning("Tool %s failed: %s: %s", tool_name, type(exc).__name__, exc)
        raise

    logger.debug("Tool %s completed", tool_name)
    return result
