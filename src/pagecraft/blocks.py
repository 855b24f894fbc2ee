"""Bind block properties (Hero, Card, Navbar) to the nodes they describe.

The classifier derives a block's ``title``, ``description`` and similar
fields from descendant elements. Serialization goes the other way: each set
property is written back into the descendant it was derived from, found by
the same rule. A block with no children has nothing to bind to, so its
content is generated from the properties instead.
"""

from __future__ import annotations

import html
import logging
import re
from dataclasses import dataclass
from typing import Any, Callable

from pagecraft.schemas.tree import ComponentKind, ComponentNode, ComponentTree

logger = logging.getLogger(__name__)

_LOGO_CLASS_RE = re.compile(r"logo|brand")


@dataclass(frozen=True)
class _Stage:
    """One lookup step: a node predicate plus the same test for raw markup."""

    matches: Callable[[ComponentNode], bool]
    raw_pattern: re.Pattern[str]


def _tag_stage(*tags: str) -> _Stage:
    alternatives = "|".join(tags)
    return _Stage(
        matches=lambda node: getattr(node.properties, "tag", None) in tags,
        raw_pattern=re.compile(rf"<(?:{alternatives})\b", re.IGNORECASE),
    )


_HEADING = (_tag_stage("h1"), _tag_stage("h2"))
_PARAGRAPH = (_tag_stage("p"),)
_CARD_TITLE = (_tag_stage("h3", "h4", "strong"),)
_LOGO = (
    _Stage(
        matches=lambda node: any(_LOGO_CLASS_RE.search(token) for token in node.class_name.split()),
        raw_pattern=re.compile(r"""class\s*=\s*["']?[^"'>]*(?:logo|brand)"""),
    ),
    _tag_stage("h1"),
)
_BUTTON = (
    _Stage(
        matches=lambda node: node.kind is ComponentKind.BUTTON and node.properties.href is None,
        raw_pattern=re.compile(r"<button\b", re.IGNORECASE),
    ),
    _Stage(
        matches=lambda node: node.kind is ComponentKind.BUTTON,
        raw_pattern=re.compile(
            r"""<a\b[^>]*class\s*=\s*["']?[^"'>]*(?:btn|button)""", re.IGNORECASE
        ),
    ),
)
_IMAGE = (
    _Stage(
        matches=lambda node: node.kind is ComponentKind.IMAGE,
        raw_pattern=re.compile(r"<img\b", re.IGNORECASE),
    ),
)

# Property name -> lookup stages, per block kind.
_BINDINGS: dict[ComponentKind, dict[str, tuple[_Stage, ...]]] = {
    ComponentKind.HERO: {"title": _HEADING, "description": _PARAGRAPH},
    ComponentKind.CARD: {
        "title": _CARD_TITLE,
        "description": _PARAGRAPH,
        "button_text": _BUTTON,
        "image_src": _IMAGE,
    },
    ComponentKind.NAVBAR: {"logo_text": _LOGO},
}

# Sentinel: the element the classifier bound to lives inside raw markup.
_UNREACHABLE = object()


def property_overrides(tree: ComponentTree, start_id: str) -> dict[str, dict[str, Any]]:
    """Return per-node property updates implied by the blocks under ``start_id``.

    Blocks are visited in document order, so a nested block's binding replaces
    an enclosing block's binding of the same node.
    """
    overrides: dict[str, dict[str, Any]] = {}
    for block in tree.walk(start_id):
        rules = _BINDINGS.get(block.kind)
        if not rules or not block.children:
            continue
        for name, stages in rules.items():
            value = getattr(block.properties, name)
            if value is None:
                continue
            target = _bind(tree, block, stages)
            if target is None:
                logger.debug("No node for %s.%s in block %r", block.kind.value, name, block.id)
                continue
            node_id, field = target
            overrides.setdefault(node_id, {})[field] = value
    return overrides


def block_content(node: ComponentNode) -> str:
    """Markup for a childless block, generated from its properties."""
    props = node.properties
    kind = node.kind
    parts: list[str] = []
    if kind is ComponentKind.NAVBAR and props.logo_text is not None:
        parts.append(f'<span class="logo">{_text(props.logo_text)}</span>')
    elif kind is ComponentKind.HERO:
        if props.title is not None:
            parts.append(f"<h1>{_text(props.title)}</h1>")
        if props.description is not None:
            parts.append(f"<p>{_text(props.description)}</p>")
    elif kind is ComponentKind.CARD:
        if props.image_src is not None:
            parts.append(f'<img src="{html.escape(props.image_src, quote=True)}" alt="" />')
        if props.title is not None:
            parts.append(f"<h3>{_text(props.title)}</h3>")
        if props.description is not None:
            parts.append(f"<p>{_text(props.description)}</p>")
        if props.button_text is not None:
            parts.append(f"<button>{_text(props.button_text)}</button>")
    return "".join(parts)


def _bind(
    tree: ComponentTree, block: ComponentNode, stages: tuple[_Stage, ...]
) -> tuple[str, str] | None:
    """Find the ``(node id, property field)`` a block property writes to."""
    for stage in stages:
        found = _find(tree, block, stage)
        if found is _UNREACHABLE:
            return None
        if found is not None:
            return _writable_field(tree, found)
    return None


def _find(tree: ComponentTree, block: ComponentNode, stage: _Stage):
    descendants = tree.walk(block.id)
    next(descendants)
    for node in descendants:
        if node.kind is ComponentKind.RAW_MARKUP:
            if stage.raw_pattern.search(node.properties.markup):
                return _UNREACHABLE
        elif stage.matches(node):
            return node
    return None


def _writable_field(tree: ComponentTree, node: ComponentNode) -> tuple[str, str] | None:
    if node.kind is ComponentKind.IMAGE:
        return node.id, "src"
    if node.kind in (ComponentKind.TEXT, ComponentKind.BUTTON):
        return node.id, "text"
    # Elements with mixed content (a heading holding several inline parts)
    # stay as they are.
    if len(node.children) == 1:
        child = tree.nodes[node.children[0]]
        if child.kind is ComponentKind.TEXT:
            return child.id, "text"
    return None


def _text(value: str) -> str:
    return html.escape(value, quote=False)
