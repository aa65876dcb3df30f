"""
Operation Models

Pydantic models for the input and output of every exposed tool and resource.

Design Goals
------------
- Strong typing
- Unknown fields rejected on input
- Output models list exactly the fields a caller can rely on after success
"""

from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------
# Page Inputs
# ---------------------------------------------------------------------

class PageTitleInput(BaseModel):
    """
    A single page title, namespace prefix included (e.g. 'Category:Physics').
    """
    title: str = Field(..., min_length=1)

    model_config = ConfigDict(extra="forbid")


class PageWriteInput(BaseModel):
    """
    Input for editPage and createPage.
    """
    title: str = Field(..., min_length=1)
    content: str
    summary: Optional[str] = None

    model_config = ConfigDict(extra="forbid")


class PageDeleteInput(BaseModel):
    title: str = Field(..., min_length=1)
    reason: Optional[str] = None

    model_config = ConfigDict(extra="forbid")


class PageSearchInput(BaseModel):
    query: str = Field(..., min_length=1)
    limit: int = Field(default=10, ge=1, le=500)

    model_config = ConfigDict(extra="forbid")


# ---------------------------------------------------------------------
# Entity Inputs
# ---------------------------------------------------------------------

class EntityIdInput(BaseModel):
    id: str = Field(..., min_length=1, description="Entity id, e.g. 'Q42' or 'P31'.")

    model_config = ConfigDict(extra="forbid")


class EntitySearchInput(BaseModel):
    query: str = Field(..., min_length=1)
    type: Literal["item", "property"] = "item"
    limit: int = Field(default=10, ge=1, le=50)

    model_config = ConfigDict(extra="forbid")


class EntityEditInput(BaseModel):
    """
    Input for editEntity. Omitting ``id`` creates a new item.
    """
    id: Optional[str] = Field(default=None, min_length=1)
    data: Dict[str, Any]
    summary: Optional[str] = None

    model_config = ConfigDict(extra="forbid")


class StatementAddInput(BaseModel):
    entity: str = Field(..., min_length=1)
    property: str = Field(..., min_length=1)
    value: Any

    model_config = ConfigDict(extra="forbid")


# ---------------------------------------------------------------------
# Outputs (Authoritative)
# ---------------------------------------------------------------------

class PageContentOutput(BaseModel):
    content: str

    model_config = ConfigDict(extra="forbid")


class WriteResult(BaseModel):
    """
    Result of editPage, createPage, deletePage and addStatement.

    ``success`` is False when the upstream answered but did not report the
    exact success value; transport and token failures raise instead.
    """
    success: bool

    model_config = ConfigDict(extra="forbid")


class PageSearchOutput(BaseModel):
    titles: List[str] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")


class PageMetadataOutput(BaseModel):
    pageid: int
    touched: Optional[str] = None
    contributors: List[str] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")


class EntityOutput(BaseModel):
    entity: Dict[str, Any]

    model_config = ConfigDict(extra="forbid")


class EntitySearchHit(BaseModel):
    id: str
    label: Optional[str] = None

    model_config = ConfigDict(extra="forbid")


class EntitySearchOutput(BaseModel):
    results: List[EntitySearchHit] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")


class EntityEditOutput(BaseModel):
    success: bool
    id: Optional[str] = None

    model_config = ConfigDict(extra="forbid")


# ---------------------------------------------------------------------
# Service Models
# ---------------------------------------------------------------------

class HealthResponse(BaseModel):
    status: Literal["ok"] = "ok"
    mediawiki_api: str
    wikibase_api: str
    configured: bool
    authenticated: bool

    model_config = ConfigDict(extra="forbid")
