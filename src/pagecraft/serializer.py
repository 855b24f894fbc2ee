"""Serialize a component tree back to HTML markup."""

from __future__ import annotations

import html
import logging
from typing import Any, Callable

from pagecraft.blocks import block_content, property_overrides
from pagecraft.css import animation_attributes, format_declarations, parse_declarations, style_declarations
from pagecraft.schemas.style import BREAKPOINTS, SHADOW_ELEVATIONS, StructuredStyle, StyleFields
from pagecraft.schemas.tree import ROOT_ID, ComponentKind, ComponentNode, ComponentTree

logger = logging.getLogger(__name__)

VOID_TAGS = frozenset(
    {
        "area", "base", "br", "col", "embed", "hr", "img", "input",
        "link", "meta", "source", "track", "wbr",
    }
)  # fmt: skip

Attribute = tuple[str, "str | None"]


def resolve_effective_style(
    node_or_style: ComponentNode | StructuredStyle, breakpoint: str = "desktop"
) -> StructuredStyle:
    """Return the style a node renders with at ``breakpoint``.

    Starts from the desktop style. Tablet and mobile apply the tablet
    override, and mobile then applies the mobile override on top. Each
    override replaces whole fields; spacing records are never merged side by
    side.

    Raises:
        ValueError: If ``breakpoint`` is not desktop, tablet or mobile.
    """
    if breakpoint not in BREAKPOINTS:
        raise ValueError(f"Unknown breakpoint: {breakpoint!r}")
    style = node_or_style.style if isinstance(node_or_style, ComponentNode) else node_or_style
    fields = style.defined_fields()
    responsive = style.responsive_styles
    if responsive is not None and breakpoint in ("tablet", "mobile") and responsive.tablet:
        fields.update(responsive.tablet.defined_fields())
    if responsive is not None and breakpoint == "mobile" and responsive.mobile:
        fields.update(responsive.mobile.defined_fields())
    return StructuredStyle(**fields)


def serialize(tree: ComponentTree, root_id: str = ROOT_ID, *, breakpoint: str = "desktop") -> str:
    """Serialize the subtree under ``root_id`` to HTML.

    The tree's own root stands in for the document body, so only its children
    are emitted; any other node is emitted as its element. Use
    :func:`root_attributes` for the body's attributes. Hero, Card and Navbar
    properties are written into the descendants they describe (see
    :mod:`pagecraft.blocks`).

    Raises:
        TreeIntegrityError: If the subtree has a dangling child reference or a
            cycle. Nothing is emitted in that case.
        ValueError: On an unknown breakpoint.
    """
    if breakpoint not in BREAKPOINTS:
        raise ValueError(f"Unknown breakpoint: {breakpoint!r}")
    tree.check_subtree(root_id)
    render = _Render(tree, breakpoint, property_overrides(tree, root_id))
    if root_id == tree.root_id:
        for child_id in tree.nodes[root_id].children:
            render.emit(child_id)
    else:
        render.emit(root_id)
    return "".join(render.parts)


def root_attributes(tree: ComponentTree, *, breakpoint: str = "desktop") -> list[Attribute]:
    """Attributes for the element that hosts the serialized root (``<body>``)."""
    return _common_attributes(tree.root, breakpoint)


def format_attributes(attributes: list[Attribute]) -> str:
    """Render ``(name, value)`` pairs; a ``None`` value renders a bare attribute."""
    rendered = []
    for name, value in attributes:
        if value is None:
            rendered.append(f" {name}")
        else:
            rendered.append(f' {name}="{html.escape(value, quote=True)}"')
    return "".join(rendered)


class _Render:
    def __init__(
        self, tree: ComponentTree, breakpoint: str, overrides: dict[str, dict[str, Any]]
    ) -> None:
        self.tree = tree
        self.breakpoint = breakpoint
        self.overrides = overrides
        self.parts: list[str] = []

    def emit(self, node_id: str) -> None:
        node = self.tree.nodes[node_id]
        update = self.overrides.get(node_id)
        if update:
            node = node.model_copy(update={"properties": node.properties.model_copy(update=update)})
        _EMITTERS[node.properties.kind](self, node)

    def emit_children(self, node: ComponentNode) -> None:
        for child_id in node.children:
            self.emit(child_id)

    def attributes(self, node: ComponentNode, leading: list[Attribute] | None = None) -> str:
        return format_attributes([*(leading or []), *_common_attributes(node, self.breakpoint)])


def _emit_block(render: _Render, node: ComponentNode) -> None:
    tag = node.properties.tag
    attrs = render.attributes(node)
    if tag in VOID_TAGS:
        render.parts.append(f"<{tag}{attrs} />")
        return
    render.parts.append(f"<{tag}{attrs}>")
    if node.children:
        render.emit_children(node)
    elif node.kind in _BLOCK_KINDS:
        render.parts.append(block_content(node))
    render.parts.append(f"</{tag}>")


def _emit_text(render: _Render, node: ComponentNode) -> None:
    tag = node.properties.tag
    text = html.escape(node.properties.text, quote=False)
    render.parts.append(f"<{tag}{render.attributes(node)}>{text}</{tag}>")


def _emit_button(render: _Render, node: ComponentNode) -> None:
    props = node.properties
    text = html.escape(props.text, quote=False)
    if props.href is not None:
        render.parts.append(f"<a{render.attributes(node, [('href', props.href)])}>{text}</a>")
    else:
        render.parts.append(f"<button{render.attributes(node)}>{text}</button>")


def _emit_image(render: _Render, node: ComponentNode) -> None:
    props = node.properties
    render.parts.append(f"<img{render.attributes(node, [('src', props.src), ('alt', props.alt)])} />")


def _emit_link(render: _Render, node: ComponentNode) -> None:
    props = node.properties
    leading: list[Attribute] = [("href", props.href)]
    if props.target:
        leading.append(("target", props.target))
        if props.target == "_blank" and "rel" not in node.attributes:
            leading.append(("rel", "noopener noreferrer"))
    render.parts.append(f"<a{render.attributes(node, leading)}>")
    render.emit_children(node)
    render.parts.append("</a>")


def _emit_video(render: _Render, node: ComponentNode) -> None:
    props = node.properties
    leading: list[Attribute] = [("src", props.src)]
    if props.poster:
        leading.append(("poster", props.poster))
    leading.extend((flag, None) for flag in ("controls", "autoplay", "loop", "muted") if getattr(props, flag))
    render.parts.append(f"<video{render.attributes(node, leading)}></video>")


def _emit_divider(render: _Render, node: ComponentNode) -> None:
    render.parts.append(f"<hr{render.attributes(node)} />")


def _emit_raw(render: _Render, node: ComponentNode) -> None:
    render.parts.append(node.properties.markup)


_BLOCK_KINDS = frozenset({ComponentKind.HERO, ComponentKind.CARD, ComponentKind.NAVBAR})

_EMITTERS: dict[str, Callable[[_Render, ComponentNode], None]] = {
    "Container": _emit_block,
    "Row": _emit_block,
    "Column": _emit_block,
    "Grid": _emit_block,
    "Hero": _emit_block,
    "Card": _emit_block,
    "Navbar": _emit_block,
    "Footer": _emit_block,
    "Text": _emit_text,
    "Button": _emit_button,
    "Image": _emit_image,
    "Link": _emit_link,
    "Video": _emit_video,
    "Divider": _emit_divider,
    "RawMarkup": _emit_raw,
}


def _common_attributes(node: ComponentNode, breakpoint: str) -> list[Attribute]:
    """Passthrough, class, style and animation attributes shared by every emitter."""
    style = resolve_effective_style(node, breakpoint)
    attrs: list[Attribute] = list(node.attributes.items())
    class_list = class_tokens(node.class_name, style)
    if class_list:
        attrs.append(("class", " ".join(class_list)))
    declarations = style_declarations(style) + parse_declarations(node.inline_style)
    if declarations:
        attrs.append(("style", format_declarations(declarations)))
    attrs.extend(animation_attributes(style.animation))
    return attrs


def class_tokens(class_name: str, style: StyleFields) -> list[str]:
    """Build the class list: unrecognized tokens plus class-valued fields.

    A structured ``box_shadow`` takes precedence over unprefixed shadow
    utilities carried in ``class_name``; those are dropped.
    """
    tokens = class_name.split()
    if style.box_shadow is not None:
        kept = [token for token in tokens if not _is_shadow_token(token)]
        if len(kept) != len(tokens):
            logger.debug("Dropping shadow classes superseded by box_shadow=%s", style.box_shadow)
        tokens = kept + [style.box_shadow]
    return tokens


def _is_shadow_token(token: str) -> bool:
    return token in SHADOW_ELEVATIONS or token.startswith("shadow-[")
