"""Page document model."""

from __future__ import annotations

from pydantic import BaseModel, field_validator

from pagecraft.config import PAGECRAFT_DEFAULT_PAGE_PATH

PAGE_SUFFIX = ".html"


def normalize_page_path(name: str) -> str:
    """Return the canonical ``.html``-suffixed path for a page name."""
    path = name.strip()
    if not path:
        raise ValueError("Page path cannot be empty")
    return path if path.endswith(PAGE_SUFFIX) else f"{path}{PAGE_SUFFIX}"


class PageDocument(BaseModel):
    """A named HTML document within a multi-page project."""

    path: str
    content: str = ""

    @field_validator("path")
    @classmethod
    def validate_path(cls, v: str) -> str:
        """Normalize ``path`` to a ``.html`` filename."""
        return normalize_page_path(v)

    @classmethod
    def blank(cls, path: str = PAGECRAFT_DEFAULT_PAGE_PATH) -> PageDocument:
        """Create the empty page a new project starts with."""
        return cls(path=path, content="")
