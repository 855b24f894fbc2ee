"""Shared schemas for pagecraft."""

from pagecraft.schemas.pages import PageDocument, normalize_page_path
from pagecraft.schemas.style import (
    Animation,
    Breakpoint,
    ResponsiveStyles,
    Spacing,
    StructuredStyle,
    StyleOverride,
    StyleResolution,
)
from pagecraft.schemas.tree import (
    ROOT_ID,
    ComponentKind,
    ComponentNode,
    ComponentTree,
)

__all__ = [
    "ROOT_ID",
    "Animation",
    "Breakpoint",
    "ComponentKind",
    "ComponentNode",
    "ComponentTree",
    "PageDocument",
    "ResponsiveStyles",
    "Spacing",
    "StructuredStyle",
    "StyleOverride",
    "StyleResolution",
    "normalize_page_path",
]
