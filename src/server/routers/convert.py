"""Conversion endpoints for the API."""

from fastapi import APIRouter, HTTPException, status
from pydantic import ValidationError

from pagecraft.classifier import ClassifyOptions, html_to_tree
from pagecraft.exceptions import EmptyDocumentError, TreeEditError, TreeIntegrityError
from pagecraft.pipeline import extract_pages, render_document
from pagecraft.schemas import ComponentTree, StyleResolution
from pagecraft.serializer import serialize
from pagecraft.style_resolver import resolve_classes
from pagecraft.utils.logging_config import get_logger
from server.models import (
    ErrorResponse,
    ParseRequest,
    ParseResponse,
    RenderRequest,
    RenderResponse,
    ResolveRequest,
    TreeRequest,
    TreeResponse,
)

logger = get_logger(__name__)

router = APIRouter()

COMMON_RESPONSES = {
    status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
    422: {"model": ErrorResponse},
}


@router.post("/api/parse", response_model=ParseResponse, responses=COMMON_RESPONSES)
async def api_parse(parse_request: ParseRequest) -> ParseResponse:
    """Split an AI response into page documents.

    **Returns**

    - **ParseResponse**: Pages from ``<!-- page: name -->`` markers, or a single
      ``index.html`` page when the response holds one unmarked document

    **Raises**

    - **HTTPException**: **400** - the response text is empty

    """
    try:
        pages = extract_pages(parse_request.text)
    except EmptyDocumentError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    logger.info("Parsed response", extra={"pages": [page.path for page in pages]})
    return ParseResponse(pages=pages)


@router.post("/api/tree", response_model=TreeResponse, responses=COMMON_RESPONSES)
async def api_tree(tree_request: TreeRequest) -> TreeResponse:
    """Classify HTML into the editor's component tree.

    **Raises**

    - **HTTPException**: **400** - the HTML is empty

    """
    options = ClassifyOptions(
        detect_layout=tree_request.detect_layout,
        detect_blocks=tree_request.detect_blocks,
    )
    try:
        tree = html_to_tree(tree_request.html, options=options)
    except EmptyDocumentError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    logger.info("Classified HTML", extra={"nodes": len(tree)})
    return TreeResponse(root_id=tree.root_id, nodes=tree.to_editor_dict())


@router.post("/api/render", response_model=RenderResponse, responses=COMMON_RESPONSES)
async def api_render(render_request: RenderRequest) -> RenderResponse:
    """Serialize an editor tree back to HTML.

    **Raises**

    - **HTTPException**: **422** - a node is malformed, a child id dangles, or
      the tree has a cycle; nothing is rendered

    """
    try:
        tree = ComponentTree.from_editor_dict(render_request.nodes, root_id=render_request.root_id)
        if render_request.document:
            markup = render_document(
                tree, title=render_request.title, breakpoint=render_request.breakpoint
            )
        else:
            markup = serialize(
                tree,
                render_request.start_id or tree.root_id,
                breakpoint=render_request.breakpoint,
            )
    except (ValidationError, TreeIntegrityError, TreeEditError) as exc:
        logger.warning("Rejected tree", extra={"error": str(exc)})
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return RenderResponse(html=markup)


@router.post("/api/resolve", response_model=StyleResolution)
async def api_resolve(resolve_request: ResolveRequest) -> StyleResolution:
    """Resolve a class attribute into structured, responsive style."""
    return resolve_classes(resolve_request.class_name, inline_style=resolve_request.inline_style)
