"""
Resource Routes

Read-only resources. Currently one: the raw wikitext of a page.
"""

from fastapi import APIRouter, Depends, Query, status
from typing import Annotated

from .dependencies import get_runtime
from .models import PageContentOutput
from ..runtime import AdapterRuntime
from ..tools.base import dispatch_tool_call
from ..tools.definitions import TOOL_GET_PAGE_CONTENT

router = APIRouter(prefix="/resources", tags=["resources"])


@router.get(
    "/page-content",
    response_model=PageContentOutput,
    summary="Fetch the raw wikitext of a MediaWiki page",
    status_code=status.HTTP_200_OK,
)
async def page_content(
    title: Annotated[str, Query(min_length=1)],
    rt: Annotated[AdapterRuntime, Depends(get_runtime)],
) -> PageContentOutput:
    """
    Fetch page content.

    Raises
    ------
    PageNotFound
        Mapped to 404 by the global handler.
    """
    return await dispatch_tool_call(TOOL_GET_PAGE_CONTENT, {"title": title}, rt)
