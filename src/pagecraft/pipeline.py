"""Editing and generation pipelines built from the four transforms."""

from __future__ import annotations

import logging
import re

from pagecraft.classifier import ClassifyOptions, html_to_tree
from pagecraft.config import PAGECRAFT_DEFAULT_PAGE_PATH
from pagecraft.schemas.pages import PageDocument
from pagecraft.schemas.tree import ComponentTree
from pagecraft.segmenter import document_shell, extract_document, segment
from pagecraft.serializer import format_attributes, root_attributes, serialize

logger = logging.getLogger(__name__)

_BODY_RE = re.compile(r"<body\b[^>]*>.*?</body>", re.IGNORECASE | re.DOTALL)


def page_to_tree(page: PageDocument, *, options: ClassifyOptions | None = None) -> ComponentTree:
    """Classify a page's HTML into a component tree."""
    return html_to_tree(page.content, options=options)


def render_document(
    tree: ComponentTree, *, title: str | None = None, breakpoint: str = "desktop"
) -> str:
    """Serialize ``tree`` into a standalone HTML document."""
    return document_shell(
        serialize(tree, breakpoint=breakpoint),
        title=title,
        body_attributes=_body_attributes(tree, breakpoint),
    )


def tree_to_page(
    tree: ComponentTree,
    *,
    path: str = PAGECRAFT_DEFAULT_PAGE_PATH,
    previous: str | None = None,
    breakpoint: str = "desktop",
) -> PageDocument:
    """Re-serialize an edited tree into a page document.

    When ``previous`` holds the page's earlier HTML and it has a ``<body>``,
    only the body is replaced so the head (scripts, fonts, meta) survives the
    edit. Otherwise a fresh document shell is built.

    Raises:
        TreeIntegrityError: If the tree references missing nodes or has a
            cycle; the page is left untouched.
    """
    body = serialize(tree, breakpoint=breakpoint)
    attributes = _body_attributes(tree, breakpoint)
    if previous and _BODY_RE.search(previous):
        body_open = f"<body {attributes}>" if attributes else "<body>"
        content = _BODY_RE.sub(lambda _: f"{body_open}\n{body}\n</body>", previous, count=1)
    else:
        content = document_shell(body, body_attributes=attributes)
    return PageDocument(path=path, content=content)


def extract_pages(response_text: str | None) -> list[PageDocument]:
    """Turn an AI response into page documents.

    Marked multi-page responses are segmented; otherwise a single document is
    extracted and stored under the default page path. Text with no markup
    yields ``[]``.

    Raises:
        EmptyDocumentError: If ``response_text`` is empty.
    """
    pages = segment(response_text)
    if pages:
        logger.debug("Segmented response into %d page(s)", len(pages))
        return pages
    document = extract_document(response_text)
    if document is None:
        return []
    return [PageDocument(path=PAGECRAFT_DEFAULT_PAGE_PATH, content=document)]


def ingest_response(
    response_text: str | None, *, options: ClassifyOptions | None = None
) -> dict[str, ComponentTree]:
    """Run the generation pipeline: response text -> pages -> component trees."""
    return {page.path: page_to_tree(page, options=options) for page in extract_pages(response_text)}


def _body_attributes(tree: ComponentTree, breakpoint: str) -> str:
    return format_attributes(root_attributes(tree, breakpoint=breakpoint)).strip()
