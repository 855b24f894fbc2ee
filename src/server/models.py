"""Pydantic models for the conversion API."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, field_validator

from pagecraft.schemas import Breakpoint, PageDocument
from pagecraft.schemas.tree import ROOT_ID
from server.server_config import MAX_INPUT_CHARS


class ParseRequest(BaseModel):
    """Request model for the /api/parse endpoint.

    Attributes
    ----------
    text : str
        Raw AI response text, with or without page markers.

    """

    text: str = Field(..., max_length=MAX_INPUT_CHARS, description="AI response text")


class ParseResponse(BaseModel):
    """Response model for the /api/parse endpoint.

    Attributes
    ----------
    pages : list[PageDocument]
        Pages found in the response; empty when it holds no markup.

    """

    pages: list[PageDocument] = Field(default_factory=list, description="Extracted pages")


class TreeRequest(BaseModel):
    """Request model for the /api/tree endpoint.

    Attributes
    ----------
    html : str
        Document or fragment to classify.
    detect_layout : bool
        Classify flex/grid containers and lists as layout kinds.
    detect_blocks : bool
        Classify navbars, footers, heroes and cards as block kinds.

    """

    html: str = Field(..., max_length=MAX_INPUT_CHARS, description="HTML to classify")
    detect_layout: bool = Field(default=True, description="Detect Row/Column/Grid layouts")
    detect_blocks: bool = Field(default=True, description="Detect Navbar/Footer/Hero/Card blocks")


class TreeResponse(BaseModel):
    """Response model for the /api/tree endpoint.

    Attributes
    ----------
    root_id : str
        Id of the root container.
    nodes : dict[str, dict]
        Editor node map keyed by id.

    """

    root_id: str = Field(..., description="Root node id")
    nodes: dict[str, dict[str, Any]] = Field(..., description="Editor node map")


class RenderRequest(BaseModel):
    """Request model for the /api/render endpoint.

    Attributes
    ----------
    nodes : dict[str, dict]
        Editor node map, as returned by /api/tree.
    root_id : str
        Id of the tree's root container.
    start_id : str | None
        Serialize only this node's subtree.
    breakpoint : Breakpoint
        Breakpoint whose effective style is rendered.
    document : bool
        Wrap the markup in a full HTML document.
    title : str | None
        Document title when ``document`` is set.

    """

    nodes: dict[str, dict[str, Any]] = Field(..., description="Editor node map")
    root_id: str = Field(default=ROOT_ID, description="Root node id")
    start_id: str | None = Field(default=None, description="Subtree to serialize")
    breakpoint: Breakpoint = Field(default="desktop", description="Breakpoint to render")
    document: bool = Field(default=False, description="Return a full HTML document")
    title: str | None = Field(default=None, description="Document title")

    @field_validator("nodes")
    @classmethod
    def validate_nodes(cls, v: dict[str, dict[str, Any]]) -> dict[str, dict[str, Any]]:
        """Validate that ``nodes`` is not empty."""
        if not v:
            err = "nodes cannot be empty"
            raise ValueError(err)
        return v


class RenderResponse(BaseModel):
    """Response model for the /api/render endpoint.

    Attributes
    ----------
    html : str
        Serialized markup.

    """

    html: str = Field(..., description="Serialized markup")


class ResolveRequest(BaseModel):
    """Request model for the /api/resolve endpoint.

    Attributes
    ----------
    class_name : str
        Class attribute to resolve.
    inline_style : str | None
        Optional inline style applied on top of the classes.

    """

    class_name: str = Field(default="", max_length=MAX_INPUT_CHARS, description="Class attribute")
    inline_style: str | None = Field(default=None, description="Inline style attribute")


class ErrorResponse(BaseModel):
    """Error response model.

    Attributes
    ----------
    detail : str
        Error message describing what went wrong.

    """

    detail: str = Field(..., description="Error message")
