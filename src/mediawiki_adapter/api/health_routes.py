from typing import Annotated

from fastapi import APIRouter, Depends

from .dependencies import get_runtime
from .models import HealthResponse
from ..runtime import AdapterRuntime

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
def health(rt: Annotated[AdapterRuntime, Depends(get_runtime)]) -> HealthResponse:
    return HealthResponse(
        mediawiki_api=rt.mediawiki.api_base,
        wikibase_api=rt.wikibase.api_base,
        configured=rt.configured,
        authenticated=rt.session.authenticated,
    )
