"""
Tool Routes

HTTP surface for listing and invoking the registered tools.

- ``GET /tools`` returns the tool definitions.
- ``POST /tools/{tool_name}`` validates the JSON body against the tool's input
  model and returns the tool's output model.

Failures are raised as ``AdapterError`` subclasses; the global handlers in
``core/errors.py`` turn them into JSON error responses.
"""

from typing import Annotated, Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, status

from .dependencies import get_runtime
from ..runtime import AdapterRuntime
from ..tools.base import dispatch_tool_call
from ..tools.definitions import TOOL_DEFINITIONS

# ---------------------------------------------------------------------
# Router Configuration
# ---------------------------------------------------------------------

router = APIRouter(
    prefix="/tools",
    tags=["tools"],
)

# ---------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------

@router.get(
    "",
    summary="List available tools",
)
async def list_tools() -> List[Dict[str, Any]]:
    return TOOL_DEFINITIONS


@router.post(
    "/{tool_name}",
    status_code=status.HTTP_200_OK,
    summary="Invoke a tool",
    description=(
        "Runs the named tool with the JSON body as its arguments. Mutating "
        "tools fetch a fresh anti-forgery token before each write."
    ),
)
async def call_tool(
    tool_name: str,
    rt: Annotated[AdapterRuntime, Depends(get_runtime)],
    args: Annotated[Optional[Dict[str, Any]], Body()] = None,
) -> Dict[str, Any]:
    """
    Invoke a registered tool.

    Parameters
    ----------
    tool_name : str
        Registered tool name, e.g. ``editPage``.

    args : Dict[str, Any]
        Tool arguments.

    Returns
    -------
    Dict[str, Any]
        The tool's output model, serialized.
    """
    result = await dispatch_tool_call(tool_name, args or {}, rt)
    return result.model_dump()
