"""Split AI responses into named page documents."""

from __future__ import annotations

import html
import logging
import re

from pagecraft.config import PAGECRAFT_TAILWIND_CDN_URL
from pagecraft.exceptions import EmptyDocumentError
from pagecraft.schemas.pages import PageDocument, normalize_page_path

logger = logging.getLogger(__name__)

PAGE_MARKER_RE = re.compile(r"<!--\s*page:\s*(.*?)\s*-->", re.IGNORECASE)

_FENCED_BLOCK_RE = re.compile(r"```[ \t]*(?:html)?[ \t]*\r?\n?(.*?)```", re.IGNORECASE | re.DOTALL)
_OPENING_FENCE_RE = re.compile(r"^```[ \t]*(?:html)?[ \t]*\r?\n?", re.IGNORECASE)
_CLOSING_FENCE_RE = re.compile(r"\r?\n?```[ \t]*$")
_FULL_DOCUMENT_RE = re.compile(r"<!DOCTYPE html.*?</html>|<html.*?</html>", re.IGNORECASE | re.DOTALL)
_BODY_RE = re.compile(r"<body([^>]*)>(.*?)</body>", re.IGNORECASE | re.DOTALL)
_BLOCK_ELEMENT_RE = re.compile(
    r"<(div|main|section|header|nav|footer|article)\b.*</\1>", re.IGNORECASE | re.DOTALL
)


def segment(response_text: str | None) -> list[PageDocument]:
    """Split ``response_text`` on ``<!-- page: name -->`` markers.

    Each marker opens a page that runs until the next marker or the end of
    the text. Names get a ``.html`` suffix when missing and bodies are
    stripped of wrapping code fences. Pages with an empty name or body are
    dropped. Returns ``[]`` when there are no markers, in which case callers
    fall back to :func:`extract_document`.
    """
    if not response_text:
        return []
    markers = list(PAGE_MARKER_RE.finditer(response_text))
    if not markers:
        return []

    pages: list[PageDocument] = []
    for index, marker in enumerate(markers):
        end = markers[index + 1].start() if index + 1 < len(markers) else len(response_text)
        name = marker.group(1).strip()
        content = strip_code_fences(response_text[marker.end() : end])
        if not name or not content:
            logger.debug("Skipping page marker %r with empty name or body", marker.group(0))
            continue
        pages.append(PageDocument(path=normalize_page_path(name), content=content))
    return pages


def strip_code_fences(text: str) -> str:
    """Remove ```` ``` ```` / ```` ```html ```` fences around ``text``.

    A complete fenced block inside the text wins over the surrounding prose;
    otherwise a leading opening fence (possibly unterminated when the
    response is still streaming) and a trailing closing fence are removed.
    """
    text = text.strip()
    match = _FENCED_BLOCK_RE.search(text)
    if match:
        return match.group(1).strip()
    text = _OPENING_FENCE_RE.sub("", text)
    text = _CLOSING_FENCE_RE.sub("", text)
    return text.strip()


def extract_document(text: str | None) -> str | None:
    """Pull a single HTML document out of a response with no page markers.

    Looks for, in order: a fenced code block, a complete ``<html>`` document,
    a ``<body>`` block, raw markup (text starting with ``<``) and an embedded
    block-level element. Anything short of a full document is wrapped in
    :func:`document_shell`.

    Raises:
        EmptyDocumentError: If ``text`` is empty or whitespace only.

    Returns:
        The document, or ``None`` when the text holds no markup.
    """
    if text is None or not text.strip():
        raise EmptyDocumentError("Response text is empty")

    fenced = _FENCED_BLOCK_RE.search(text)
    candidate = fenced.group(1).strip() if fenced else text.strip()

    document = _FULL_DOCUMENT_RE.search(candidate)
    if document:
        return document.group(0)

    body = _BODY_RE.search(candidate)
    if body:
        return document_shell(body.group(2).strip(), body_attributes=body.group(1).strip())

    if candidate.startswith("<") and ">" in candidate:
        return document_shell(candidate)

    block = _BLOCK_ELEMENT_RE.search(candidate)
    if block:
        return document_shell(block.group(0))

    logger.debug("No markup found in %d characters of response text", len(text))
    return None


def document_shell(body: str, *, title: str | None = None, body_attributes: str = "") -> str:
    """Wrap body markup in a minimal document with the Tailwind CDN script."""
    head = [
        '<meta charset="UTF-8">',
        '<meta name="viewport" content="width=device-width, initial-scale=1.0">',
    ]
    if title:
        head.append(f"<title>{html.escape(title, quote=False)}</title>")
    head.append(f'<script src="{html.escape(PAGECRAFT_TAILWIND_CDN_URL)}"></script>')
    body_open = f"<body {body_attributes}>" if body_attributes else "<body>"
    return (
        "<!DOCTYPE html>\n<html>\n<head>\n"
        + "\n".join(head)
        + f"\n</head>\n{body_open}\n{body}\n</body>\n</html>"
    )
