"""Classify parsed HTML into an editable component tree."""

from __future__ import annotations

import logging
import re
import uuid
from dataclasses import dataclass

from pydantic import ValidationError

from pagecraft.config import PAGECRAFT_HTML_PARSER
from pagecraft.css import ANIMATION_ATTRIBUTES, parse_animation_attributes
from pagecraft.exceptions import EmptyDocumentError
from pagecraft.schemas.style import SHADOW_ELEVATIONS, StructuredStyle
from pagecraft.schemas.tree import (
    ROOT_ID,
    ButtonProperties,
    CardProperties,
    ColumnProperties,
    ComponentNode,
    ComponentTree,
    ContainerProperties,
    DividerProperties,
    FooterProperties,
    GridProperties,
    HeroProperties,
    ImageProperties,
    LinkProperties,
    NavbarProperties,
    RawMarkupProperties,
    RowProperties,
    TextProperties,
    VideoProperties,
)
from pagecraft.style_resolver import resolve_classes

try:
    from bs4 import BeautifulSoup
    from bs4.element import NavigableString, PreformattedString, Tag
except ImportError as exc:  # pragma: no cover - runtime dependency check
    raise RuntimeError(
        "BeautifulSoup4 is required for HTML parsing (pip install beautifulsoup4)."
    ) from exc

logger = logging.getLogger(__name__)

# Kept verbatim: form controls and anything that cannot be safely decomposed.
_RAW_TAGS = frozenset(
    {
        "input", "select", "textarea", "form", "label",
        "script", "style", "audio", "canvas", "svg", "iframe", "table",
        "pre", "picture", "object", "embed", "noscript", "template", "math",
    }
)  # fmt: skip
_TEXT_TAGS = frozenset(
    {
        "h1", "h2", "h3", "h4", "h5", "h6", "p", "span", "li", "blockquote",
        "strong", "b", "em", "i", "small", "u", "s", "mark", "code", "sub",
        "sup", "cite", "q", "abbr", "time", "figcaption", "dt", "dd",
    }
)  # fmt: skip
_LAYOUT_TAGS = frozenset({"div", "section", "main", "header"})
_LIST_TAGS = frozenset({"ul", "ol"})
_BUTTON_CLASS_FRAGMENTS = ("btn", "button")
_CARD_TITLE_TAGS = ["h3", "h4", "strong"]

_TAG_NAME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9-]*$")
_WHITESPACE_RE = re.compile(r"\s+")
_LOGO_CLASS_RE = re.compile(r"logo|brand")

# Attributes a kind turns into properties; everything else is passed through.
_CONSUMED_ATTRIBUTES: dict[str, frozenset[str]] = {
    "Image": frozenset({"src", "alt"}),
    "Button": frozenset({"href"}),
    "Link": frozenset({"href", "target"}),
    "Video": frozenset({"src", "poster", "controls", "autoplay", "loop", "muted"}),
}
_STYLE_ATTRIBUTES = frozenset({"class", "style", *ANIMATION_ATTRIBUTES})


@dataclass
class ClassifyOptions:
    """Options for markup classification.

    Attributes:
        detect_layout: Map flex/grid containers and lists to Row, Column and
            Grid, and ``<hr>`` to Divider.
        detect_blocks: Recognize navigation bars, footers, hero sections and
            cards as their dedicated block kinds.
    """

    detect_layout: bool = True
    detect_blocks: bool = True


def html_to_tree(html: str | None, *, options: ClassifyOptions | None = None) -> ComponentTree:
    """Parse an HTML string and classify its body into a component tree.

    Raises:
        EmptyDocumentError: If ``html`` is empty or whitespace only.
    """
    if html is None or not html.strip():
        raise EmptyDocumentError("No HTML content to parse")
    soup = BeautifulSoup(html, PAGECRAFT_HTML_PARSER)
    return classify(soup.body or soup, options=options)


def classify(root: Tag, *, options: ClassifyOptions | None = None) -> ComponentTree:
    """Walk ``root``'s children depth-first and build a component tree.

    The root element itself becomes the reserved ``ROOT`` container; its
    class and style attributes are resolved like any other element's.
    Unknown or unsafe markup degrades to ``RawMarkup`` leaves instead of
    raising.
    """
    classifier = _Classifier(options or ClassifyOptions())
    root_node = ComponentNode(
        id=ROOT_ID,
        properties=ContainerProperties(),
        **classifier.style_fields(root),
        attributes=_passthrough_attributes(root, "Container"),
    )
    tree = ComponentTree.with_root(root_node)
    classifier.classify_children(tree, root, ROOT_ID)
    logger.debug("Classified %d component(s)", len(tree))
    return tree


class _Classifier:
    def __init__(self, options: ClassifyOptions) -> None:
        self.options = options

    def classify_children(self, tree: ComponentTree, element: Tag, parent_id: str) -> None:
        for child in element.children:
            if isinstance(child, Tag):
                self.classify_element(tree, child, parent_id)
            elif isinstance(child, NavigableString) and not isinstance(child, PreformattedString):
                text = _normalize_text(str(child))
                if text:
                    tree.add_node(
                        ComponentNode(id=_new_id(), properties=TextProperties(text=text)),
                        parent_id,
                    )

    def classify_element(self, tree: ComponentTree, element: Tag, parent_id: str) -> None:
        try:
            node, recurse = self._build_node(element)
        except ValidationError as exc:
            logger.debug("Keeping <%s> as raw markup: %s", element.name, exc)
            node, recurse = _raw_node(element), False
        tree.add_node(node, parent_id)
        if recurse:
            self.classify_children(tree, element, node.id)

    def style_fields(self, element: Tag) -> dict[str, object]:
        resolution = resolve_classes(_class_string(element), inline_style=element.get("style"))
        style: StructuredStyle = resolution.style
        style.animation = parse_animation_attributes(element.attrs)
        return {
            "style": style,
            "class_name": resolution.unrecognized_classes,
            "inline_style": resolution.unmodeled_inline,
        }

    def _build_node(self, element: Tag) -> tuple[ComponentNode, bool]:
        """Return the node for ``element`` and whether to classify its children."""
        name = (element.name or "").lower()
        if name in _RAW_TAGS or not _TAG_NAME_RE.match(name):
            return _raw_node(element), False

        if name == "img":
            properties = ImageProperties(src=element.get("src", ""), alt=element.get("alt", ""))
            return self._node(element, properties), False

        if name == "video":
            src = element.get("src") or _first_source(element)
            if not src:
                return _raw_node(element), False
            properties = VideoProperties(
                src=src,
                poster=element.get("poster"),
                controls=element.has_attr("controls"),
                autoplay=element.has_attr("autoplay"),
                loop=element.has_attr("loop"),
                muted=element.has_attr("muted"),
            )
            return self._node(element, properties), False

        if name == "button" or (name == "a" and _is_button_link(element)):
            properties = ButtonProperties(
                text=_normalize_text(element.get_text(" ")), href=element.get("href")
            )
            return self._node(element, properties), False

        if name == "a":
            properties = LinkProperties(
                href=element.get("href") or "#", target=element.get("target")
            )
            return self._node(element, properties), True

        if name in _TEXT_TAGS and _has_only_text(element):
            properties = TextProperties(tag=name, text=_text_content(element))
            return self._node(element, properties), False

        if self.options.detect_blocks:
            block = _block_properties(element, name)
            if block is not None:
                return self._node(element, block), True

        if self.options.detect_layout:
            if name == "hr":
                return self._node(element, DividerProperties()), False
            layout = _layout_properties(element, name)
            if layout is not None:
                return self._node(element, layout), True

        return self._node(element, ContainerProperties(tag=name)), True

    def _node(self, element: Tag, properties) -> ComponentNode:
        return ComponentNode(
            id=_new_id(),
            properties=properties,
            **self.style_fields(element),
            attributes=_passthrough_attributes(element, properties.kind),
        )


def _raw_node(element: Tag) -> ComponentNode:
    return ComponentNode(id=_new_id(), properties=RawMarkupProperties(markup=str(element)))


def _block_properties(element: Tag, name: str):
    classes = _class_string(element).lower()
    if name == "nav":
        logo = element.find(class_=_LOGO_CLASS_RE) or element.find("h1")
        return NavbarProperties(logo_text=_optional_text(logo))
    if name == "footer":
        return FooterProperties()
    if name == "section" and ("hero" in classes or "hero" in str(element.get("id", "")).lower()):
        return HeroProperties(
            title=_optional_text(element.find("h1") or element.find("h2")),
            description=_optional_text(element.find("p")),
        )
    if _looks_like_card(element, classes):
        button = element.find("button") or element.find("a", class_=_is_button_class)
        image = element.find("img")
        return CardProperties(
            tag=name,
            title=_optional_text(element.find(_CARD_TITLE_TAGS)),
            description=_optional_text(element.find("p")),
            image_src=image.get("src") if image is not None else None,
            button_text=_optional_text(button),
        )
    return None


def _looks_like_card(element: Tag, classes: str) -> bool:
    tokens = classes.split()
    marked = any("card" in token for token in tokens) or any(
        token in SHADOW_ELEVATIONS and token != "shadow-none" for token in tokens
    )
    return marked and element.find("img") is not None and element.find(_CARD_TITLE_TAGS) is not None


def _layout_properties(element: Tag, name: str):
    if name in _LIST_TAGS:
        return ColumnProperties(tag=name)
    if name not in _LAYOUT_TAGS:
        return None
    tokens = set(_class_string(element).split())
    if "grid" in tokens:
        return GridProperties(tag=name)
    if "flex" in tokens or "inline-flex" in tokens:
        if "flex-col" in tokens:
            return ColumnProperties(tag=name)
        return RowProperties(tag=name)
    return None


def _is_button_link(element: Tag) -> bool:
    return _is_button_class(_class_string(element))


def _is_button_class(value) -> bool:
    if not value:
        return False
    if isinstance(value, list):
        value = " ".join(value)
    value = value.lower()
    return any(fragment in value for fragment in _BUTTON_CLASS_FRAGMENTS)


def _first_source(element: Tag) -> str | None:
    source = element.find("source", src=True)
    return source.get("src") if source is not None else None


def _has_only_text(element: Tag) -> bool:
    return all(isinstance(child, NavigableString) for child in element.children)


def _text_content(element: Tag) -> str:
    parts = [
        str(child) for child in element.children if not isinstance(child, PreformattedString)
    ]
    return _normalize_text("".join(parts))


def _optional_text(element: Tag | None) -> str | None:
    if element is None:
        return None
    return _normalize_text(element.get_text(" ")) or None


def _normalize_text(text: str) -> str:
    return _WHITESPACE_RE.sub(" ", text).strip()


def _class_string(element: Tag) -> str:
    value = element.get("class")
    if isinstance(value, list):
        return " ".join(value)
    return value or ""


def _passthrough_attributes(element: Tag, kind: str) -> dict[str, str]:
    consumed = _CONSUMED_ATTRIBUTES.get(kind, frozenset())
    attributes: dict[str, str] = {}
    for name, value in element.attrs.items():
        if name in _STYLE_ATTRIBUTES or name in consumed:
            continue
        attributes[name] = " ".join(value) if isinstance(value, list) else str(value)
    return attributes


def _new_id() -> str:
    return uuid.uuid4().hex
