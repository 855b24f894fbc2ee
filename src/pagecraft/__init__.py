"""pagecraft: convert between HTML and editable component trees."""

from pagecraft.classifier import ClassifyOptions, classify, html_to_tree
from pagecraft.exceptions import (
    EmptyDocumentError,
    PagecraftError,
    TreeEditError,
    TreeIntegrityError,
)
from pagecraft.pipeline import (
    extract_pages,
    ingest_response,
    page_to_tree,
    render_document,
    tree_to_page,
)
from pagecraft.schemas import ComponentKind, ComponentNode, ComponentTree, PageDocument, StructuredStyle
from pagecraft.segmenter import extract_document, segment, strip_code_fences
from pagecraft.serializer import resolve_effective_style, serialize
from pagecraft.style_resolver import resolve_classes

__all__ = [
    "ClassifyOptions",
    "ComponentKind",
    "ComponentNode",
    "ComponentTree",
    "EmptyDocumentError",
    "PageDocument",
    "PagecraftError",
    "StructuredStyle",
    "TreeEditError",
    "TreeIntegrityError",
    "classify",
    "extract_document",
    "extract_pages",
    "html_to_tree",
    "ingest_response",
    "page_to_tree",
    "render_document",
    "resolve_classes",
    "resolve_effective_style",
    "segment",
    "serialize",
    "strip_code_fences",
    "tree_to_page",
]
