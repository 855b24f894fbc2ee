"""Convert structured style to inline CSS declarations and back."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Mapping, get_args

from pydantic import ValidationError

from pagecraft.schemas.style import (
    Animation,
    AnimationType,
    StyleFields,
    TextAlign,
    TextDecoration,
)

SIDES: tuple[str, ...] = ("top", "right", "bottom", "left")
BOX_FIELDS: tuple[str, ...] = ("padding", "margin")

# Structured fields emitted as one declaration with the value unchanged.
_SCALAR_PROPERTIES: dict[str, str] = {
    "width": "width",
    "height": "height",
    "min_height": "min-height",
    "background_color": "background-color",
    "color": "color",
    "border_radius": "border-radius",
    "border_width": "border-width",
    "border_style": "border-style",
    "border_color": "border-color",
    "text_align": "text-align",
    "font_size": "font-size",
    "font_weight": "font-weight",
    "line_height": "line-height",
    "text_decoration": "text-decoration",
    "gap": "gap",
}
_PROPERTY_FIELDS: dict[str, str] = {prop: name for name, prop in _SCALAR_PROPERTIES.items()}

_LITERAL_CHOICES: dict[str, frozenset[str]] = {
    "text_align": frozenset(get_args(TextAlign)),
    "text_decoration": frozenset(get_args(TextDecoration)),
}
_ANIMATION_TYPES = frozenset(get_args(AnimationType))
_IMAGE_KEYWORDS = frozenset({"none", "initial", "inherit", "unset"})

_URL_RE = re.compile(r"""^url\(\s*(['"]?)(.*?)\1\s*\)$""", re.IGNORECASE | re.DOTALL)
_GRID_COLUMNS_RE = re.compile(
    r"^repeat\(\s*(\d+)\s*,\s*minmax\(\s*0(?:px)?\s*,\s*1fr\s*\)\s*\)$", re.IGNORECASE
)

ANIMATION_ATTRIBUTES: tuple[str, ...] = (
    "data-animation",
    "data-animation-duration",
    "data-animation-delay",
    "data-animation-infinite",
)


@dataclass
class InlineStyle:
    """A parsed ``style`` attribute.

    Attributes:
        scalars: Structured field name -> value for single-valued fields.
        sides: ``padding``/``margin`` -> the sides the declarations set.
        unmodeled: Declarations with no structured counterpart, verbatim.
    """

    scalars: dict[str, Any] = field(default_factory=dict)
    sides: dict[str, dict[str, str]] = field(default_factory=dict)
    unmodeled: list[tuple[str, str]] = field(default_factory=list)


def style_declarations(style: StyleFields) -> list[tuple[str, str]]:
    """Return inline declarations for every inline-emitted structured field.

    ``box_shadow`` (a class token) and ``animation`` (data attributes) are
    not part of the inline style.
    """
    declarations: list[tuple[str, str]] = []
    for box in BOX_FIELDS:
        spacing = getattr(style, box)
        if spacing is not None:
            declarations.extend((f"{box}-{side}", getattr(spacing, side)) for side in SIDES)
    for name, prop in _SCALAR_PROPERTIES.items():
        value = getattr(style, name)
        if value is not None:
            declarations.append((prop, str(value)))
    if style.background_image is not None:
        declarations.append(("background-image", _format_image(style.background_image)))
    if style.columns is not None:
        declarations.append(
            ("grid-template-columns", f"repeat({style.columns}, minmax(0, 1fr))")
        )
    return declarations


def format_declarations(declarations: list[tuple[str, str]]) -> str:
    return "; ".join(f"{prop}: {value}" for prop, value in declarations)


def parse_declarations(text: str | None) -> list[tuple[str, str]]:
    """Split a ``style`` attribute into ``(property, value)`` pairs."""
    declarations: list[tuple[str, str]] = []
    for chunk in _split_top_level(text or "", ";"):
        name, sep, value = chunk.partition(":")
        name = name.strip()
        value = value.strip()
        if sep and name and value:
            declarations.append((name, value))
    return declarations


def parse_inline_style(text: str | None) -> InlineStyle:
    """Parse an inline ``style`` attribute into structured fields."""
    result = InlineStyle()
    for name, value in parse_declarations(text):
        prop = name.lower()
        if "!important" in value.lower() or not _apply_declaration(result, prop, value):
            result.unmodeled.append((name, value))
    return result


def _apply_declaration(result: InlineStyle, prop: str, value: str) -> bool:
    if prop in BOX_FIELDS:
        sides = _expand_box_shorthand(value)
        if sides is None:
            return False
        result.sides.setdefault(prop, {}).update(sides)
        return True

    box, _, side = prop.partition("-")
    if box in BOX_FIELDS and side:
        if side not in SIDES:
            return False
        result.sides.setdefault(box, {})[side] = value
        return True

    if prop == "background-image":
        image = _parse_image(value)
        if image is None:
            return False
        result.scalars["background_image"] = image
        return True

    if prop == "grid-template-columns":
        match = _GRID_COLUMNS_RE.match(value)
        if not match or int(match.group(1)) < 1:
            return False
        result.scalars["columns"] = int(match.group(1))
        return True

    field_name = _PROPERTY_FIELDS.get(prop)
    if field_name is None:
        return False
    choices = _LITERAL_CHOICES.get(field_name)
    if choices is not None and value not in choices:
        return False
    result.scalars[field_name] = value
    return True


def _expand_box_shorthand(value: str) -> dict[str, str] | None:
    parts = [part for part in _split_top_level(value, " ") if part.strip()]
    if len(parts) == 1:
        top = right = bottom = left = parts[0]
    elif len(parts) == 2:
        top, right = parts
        bottom, left = top, right
    elif len(parts) == 3:
        top, right, bottom = parts
        left = right
    elif len(parts) == 4:
        top, right, bottom, left = parts
    else:
        return None
    return {"top": top, "right": right, "bottom": bottom, "left": left}


def _format_image(value: str) -> str:
    if value in _IMAGE_KEYWORDS:
        return value
    return "url('{}')".format(value.replace("'", "%27"))


def _parse_image(value: str) -> str | None:
    if value.lower() in _IMAGE_KEYWORDS:
        return value.lower()
    match = _URL_RE.match(value)
    if not match or not match.group(2).strip():
        return None
    return match.group(2).strip()


def _split_top_level(text: str, delimiter: str) -> list[str]:
    """Split on ``delimiter`` outside of parentheses and quotes."""
    parts: list[str] = []
    current: list[str] = []
    depth = 0
    quote: str | None = None
    for char in text:
        if quote:
            if char == quote:
                quote = None
        elif char in "'\"":
            quote = char
        elif char == "(":
            depth += 1
        elif char == ")" and depth:
            depth -= 1
        elif char == delimiter and depth == 0:
            parts.append("".join(current))
            current = []
            continue
        current.append(char)
    parts.append("".join(current))
    return parts


def animation_attributes(animation: Animation | None) -> list[tuple[str, str]]:
    """Encode an animation descriptor as ``data-animation*`` attributes."""
    if animation is None:
        return []
    attrs = [
        ("data-animation", animation.type),
        ("data-animation-duration", f"{animation.duration:g}"),
        ("data-animation-delay", f"{animation.delay:g}"),
    ]
    if animation.infinite:
        attrs.append(("data-animation-infinite", "true"))
    return attrs


def parse_animation_attributes(attrs: Mapping[str, Any]) -> Animation | None:
    """Decode ``data-animation*`` attributes; ``None`` when absent or unknown."""
    animation_type = attrs.get("data-animation")
    if animation_type not in _ANIMATION_TYPES:
        return None
    infinite = str(attrs.get("data-animation-infinite", "")).lower() == "true"
    try:
        return Animation(
            type=animation_type,
            duration=float(attrs.get("data-animation-duration", 0.5)),
            delay=float(attrs.get("data-animation-delay", 0.0)),
            infinite=infinite,
        )
    except (TypeError, ValueError, ValidationError):
        return Animation(type=animation_type, infinite=infinite)
