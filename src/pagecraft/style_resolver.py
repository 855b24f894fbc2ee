"""Resolve utility-class attributes into structured, responsive style."""

from __future__ import annotations

import logging
import re
from typing import Any

from pagecraft.css import BOX_FIELDS, SIDES, InlineStyle, format_declarations, parse_inline_style
from pagecraft.schemas.style import (
    SHADOW_ELEVATIONS,
    ResponsiveStyles,
    Spacing,
    StructuredStyle,
    StyleOverride,
    StyleResolution,
)

SPACING_SCALE: dict[str, str] = {
    "0": "0px", "px": "1px", "0.5": "2px", "1": "4px", "1.5": "6px",
    "2": "8px", "2.5": "10px", "3": "12px", "3.5": "14px", "4": "16px",
    "5": "20px", "6": "24px", "7": "28px", "8": "32px", "9": "36px",
    "10": "40px", "11": "44px", "12": "48px", "14": "56px", "16": "64px",
    "20": "80px", "24": "96px", "28": "112px", "32": "128px", "36": "144px",
    "40": "160px", "44": "176px", "48": "192px", "52": "208px", "56": "224px",
    "60": "240px", "64": "256px", "72": "288px", "80": "320px", "96": "384px",
    "auto": "auto",
}  # fmt: skip

SIZING_SCALE: dict[str, str] = {
    **SPACING_SCALE,
    "full": "100%", "screen": "100vh", "min": "min-content",
    "max": "max-content", "fit": "fit-content",
    "1/2": "50%", "1/3": "33.333333%", "2/3": "66.666667%",
    "1/4": "25%", "2/4": "50%", "3/4": "75%",
    "1/5": "20%", "2/5": "40%", "3/5": "60%", "4/5": "80%",
    "1/6": "16.666667%", "5/6": "83.333333%",
    "1/12": "8.333333%", "11/12": "91.666667%",
}  # fmt: skip

FONT_SIZE_SCALE: dict[str, str] = {
    "xs": "12px", "sm": "14px", "base": "16px", "lg": "18px",
    "xl": "20px", "2xl": "24px", "3xl": "30px", "4xl": "36px",
    "5xl": "48px", "6xl": "60px", "7xl": "72px", "8xl": "96px", "9xl": "128px",
}  # fmt: skip

FONT_WEIGHT_SCALE: dict[str, str] = {
    "thin": "100", "extralight": "200", "light": "300", "normal": "400",
    "medium": "500", "semibold": "600", "bold": "700", "extrabold": "800", "black": "900",
}  # fmt: skip

LINE_HEIGHT_SCALE: dict[str, str] = {
    "none": "1", "tight": "1.25", "snug": "1.375",
    "normal": "1.5", "relaxed": "1.625", "loose": "2",
}  # fmt: skip

RADIUS_SCALE: dict[str, str] = {
    "none": "0px", "sm": "2px", "DEFAULT": "4px", "md": "6px",
    "lg": "8px", "xl": "12px", "2xl": "16px", "3xl": "24px", "full": "9999px",
}  # fmt: skip

NAMED_COLORS: dict[str, str] = {
    "white": "#ffffff",
    "black": "#000000",
    "transparent": "transparent",
}

TEXT_ALIGNMENTS = frozenset({"left", "center", "right", "justify"})
TEXT_DECORATIONS: dict[str, str] = {
    "underline": "underline",
    "line-through": "line-through",
    "overline": "overline",
    "no-underline": "none",
}
BORDER_STYLES = frozenset({"solid", "dashed", "dotted", "double", "none"})

# Variant prefix -> breakpoint layer. "sm" is treated as the mobile base.
BREAKPOINT_PREFIXES: dict[str, str] = {"sm": "mobile", "md": "tablet", "lg": "desktop"}

# Per-side specificity: all sides < one axis < one side.
_DIRECTION_SIDES: dict[str, tuple[tuple[str, ...], int]] = {
    "": (SIDES, 1),
    "x": (("left", "right"), 2),
    "y": (("top", "bottom"), 2),
    "t": (("top",), 3),
    "r": (("right",), 3),
    "b": (("bottom",), 3),
    "l": (("left",), 3),
}

# Value a smaller breakpoint gets for a field only a larger one defines.
_RESET_VALUES: dict[str, Any] = {
    "padding": Spacing(),
    "margin": Spacing(),
    "width": "auto",
    "height": "auto",
    "min_height": "0px",
    "background_color": "transparent",
    "background_image": "none",
    "color": "inherit",
    "border_radius": "0px",
    "border_width": "0px",
    "border_style": "solid",
    "border_color": "currentColor",
    "box_shadow": "shadow-none",
    "text_align": "inherit",
    "font_size": "inherit",
    "font_weight": "inherit",
    "line_height": "inherit",
    "text_decoration": "none",
    "gap": "0px",
    "columns": 1,
}

logger = logging.getLogger(__name__)

_SPACING_RE = re.compile(r"^(-?)([pm])([xytrbl]?)-(.+)$")
_SIZING_RE = re.compile(r"^(w|h|min-h)-(.+)$")
_BRACKET_RE = re.compile(r"^\[(.+)\]$")
_BG_IMAGE_RE = re.compile(r"""^bg-\[url\((['"]?)(.+?)\1\)\]$""")
_BORDER_WIDTH_RE = re.compile(r"^(\d+|px)$")
_GRID_COLUMNS_RE = re.compile(r"^grid-cols-(\d+)$")


class _Layer:
    """Style values collected for one breakpoint.

    Spacing sides remember the specificity rank of the token that set them,
    so a single-side token beats an all-sides token regardless of order.
    """

    __slots__ = ("scalars", "sides", "ranks")

    def __init__(self) -> None:
        self.scalars: dict[str, Any] = {}
        self.sides: dict[str, dict[str, str]] = {box: {} for box in BOX_FIELDS}
        self.ranks: dict[str, dict[str, int]] = {box: {} for box in BOX_FIELDS}

    def set_sides(self, box: str, sides: tuple[str, ...], value: str, rank: int) -> None:
        for side in sides:
            if self.ranks[box].get(side, 0) <= rank:
                self.sides[box][side] = value
                self.ranks[box][side] = rank


class _Resolved:
    """Cascaded values for one breakpoint."""

    __slots__ = ("scalars", "sides")

    def __init__(
        self,
        scalars: dict[str, Any] | None = None,
        sides: dict[str, dict[str, str]] | None = None,
    ) -> None:
        self.scalars = dict(scalars or {})
        self.sides = {box: dict((sides or {}).get(box, {})) for box in BOX_FIELDS}

    def overridden_by(self, scalars: dict[str, Any], sides: dict[str, dict[str, str]]) -> _Resolved:
        resolved = _Resolved(self.scalars, self.sides)
        resolved.scalars.update(scalars)
        for box, values in sides.items():
            resolved.sides[box].update(values)
        return resolved

    def to_fields(self) -> dict[str, Any]:
        fields = dict(self.scalars)
        for box in BOX_FIELDS:
            if self.sides[box]:
                fields[box] = Spacing(**self.sides[box])
        return fields


def resolve_classes(class_attr: str | None, *, inline_style: str | None = None) -> StyleResolution:
    """Resolve a class attribute into structured, breakpoint-aware style.

    Tokens are parsed mobile-first (unprefixed and ``sm:`` tokens form the
    base, ``md:`` overrides it for tablet, ``lg:`` overrides tablet for
    desktop) but stored desktop-first: ``style`` holds the desktop values and
    ``responsive_styles`` holds fully resolved tablet/mobile values, each one
    only when it differs from the next larger breakpoint.

    Args:
        class_attr: Raw ``class`` attribute value.
        inline_style: Raw ``style`` attribute value. Inline declarations win
            over class tokens at every breakpoint.

    Returns:
        The structured style, the class tokens that were not understood (in
        order, prefixes kept) and the inline declarations with no structured
        counterpart.
    """
    layers = {breakpoint: _Layer() for breakpoint in ("mobile", "tablet", "desktop")}
    unrecognized: list[str] = []

    for token in (class_attr or "").split():
        breakpoint, bare = _route_token(token)
        if breakpoint is None or not parse_class_token(bare, layers[breakpoint]):
            unrecognized.append(token)
    if unrecognized:
        logger.debug("Keeping %d unrecognized class token(s): %s", len(unrecognized), unrecognized)

    mobile = _Resolved().overridden_by(layers["mobile"].scalars, layers["mobile"].sides)
    tablet = mobile.overridden_by(layers["tablet"].scalars, layers["tablet"].sides)
    desktop = tablet.overridden_by(layers["desktop"].scalars, layers["desktop"].sides)

    inline = parse_inline_style(inline_style) if inline_style else InlineStyle()
    mobile_fields = mobile.overridden_by(inline.scalars, inline.sides).to_fields()
    tablet_fields = tablet.overridden_by(inline.scalars, inline.sides).to_fields()
    desktop_fields = desktop.overridden_by(inline.scalars, inline.sides).to_fields()

    responsive = ResponsiveStyles()
    if tablet_fields != desktop_fields:
        responsive.tablet = StyleOverride(**_with_resets(tablet_fields, desktop_fields))
    if mobile_fields != tablet_fields:
        responsive.mobile = StyleOverride(**_with_resets(mobile_fields, desktop_fields))

    style = StructuredStyle(**desktop_fields)
    if responsive.tablet is not None or responsive.mobile is not None:
        style.responsive_styles = responsive

    return StyleResolution(
        style=style,
        unrecognized_classes=" ".join(unrecognized),
        unmodeled_inline=format_declarations(inline.unmodeled),
    )


def _route_token(token: str) -> tuple[str | None, str]:
    """Return ``(breakpoint, bare token)``; breakpoint is None for other variants."""
    parts = _split_variants(token)
    if len(parts) == 1:
        return "mobile", token
    breakpoint = BREAKPOINT_PREFIXES.get(parts[0])
    if breakpoint is None or len(parts) > 2 or not parts[1]:
        return None, token
    return breakpoint, parts[1]


def _split_variants(token: str) -> list[str]:
    """Split on ``:`` variant separators; colons inside ``[...]`` literals are kept."""
    parts: list[str] = []
    start = 0
    depth = 0
    for index, char in enumerate(token):
        if char == "[":
            depth += 1
        elif char == "]" and depth:
            depth -= 1
        elif char == ":" and depth == 0:
            parts.append(token[start:index])
            start = index + 1
    parts.append(token[start:])
    return parts


def _with_resets(fields: dict[str, Any], larger: dict[str, Any]) -> dict[str, Any]:
    """Fill fields only a larger breakpoint defines with their reset values."""
    resolved = dict(fields)
    for name in larger:
        if name not in resolved and name in _RESET_VALUES:
            resolved[name] = _RESET_VALUES[name]
    return resolved


def parse_class_token(token: str, layer: _Layer) -> bool:
    """Apply one unprefixed utility class to ``layer``. Returns False if unknown."""
    match = _SPACING_RE.match(token)
    if match:
        negative, box_letter, direction, key = match.groups()
        box = "padding" if box_letter == "p" else "margin"
        value = _scale_value(key, SPACING_SCALE)
        if value is None or (negative and box == "padding"):
            return False
        if negative and value not in ("0px", "auto") and not value.startswith("-"):
            value = f"-{value}"
        sides, rank = _DIRECTION_SIDES[direction]
        layer.set_sides(box, sides, value, rank)
        return True

    match = _SIZING_RE.match(token)
    if match:
        dimension, key = match.groups()
        if dimension == "w" and key == "screen":
            value: str | None = "100vw"
        else:
            value = _scale_value(key, SIZING_SCALE)
        if value is None:
            return False
        field_name = {"w": "width", "h": "height", "min-h": "min_height"}[dimension]
        layer.scalars[field_name] = value
        return True

    if token.startswith("text-"):
        suffix = token[len("text-"):]
        if suffix in TEXT_ALIGNMENTS:
            layer.scalars["text_align"] = suffix
        elif suffix in FONT_SIZE_SCALE:
            layer.scalars["font_size"] = FONT_SIZE_SCALE[suffix]
        elif suffix in NAMED_COLORS:
            layer.scalars["color"] = NAMED_COLORS[suffix]
        else:
            return False
        return True

    if token.startswith("font-"):
        weight = FONT_WEIGHT_SCALE.get(token[len("font-"):])
        if weight is None:
            return False
        layer.scalars["font_weight"] = weight
        return True

    if token.startswith("leading-"):
        value = _scale_value(token[len("leading-"):], LINE_HEIGHT_SCALE)
        if value is None:
            return False
        layer.scalars["line_height"] = value
        return True

    if token in TEXT_DECORATIONS:
        layer.scalars["text_decoration"] = TEXT_DECORATIONS[token]
        return True

    match = _BG_IMAGE_RE.match(token)
    if match:
        layer.scalars["background_image"] = match.group(2)
        return True

    if token.startswith("bg-"):
        color = NAMED_COLORS.get(token[len("bg-"):])
        if color is None:
            return False
        layer.scalars["background_color"] = color
        return True

    if token in SHADOW_ELEVATIONS:
        layer.scalars["box_shadow"] = token
        return True

    if token == "border":
        layer.scalars["border_width"] = "1px"
        return True

    if token.startswith("border-"):
        return _parse_border(token[len("border-"):], layer)

    if token == "rounded" or token.startswith("rounded-"):
        key = "DEFAULT" if token == "rounded" else token[len("rounded-"):]
        radius = RADIUS_SCALE.get(key)
        if radius is None:
            return False
        layer.scalars["border_radius"] = radius
        return True

    if token.startswith("gap-"):
        value = _scale_value(token[len("gap-"):], SPACING_SCALE)
        if value is None or value == "auto":
            return False
        layer.scalars["gap"] = value
        return True

    match = _GRID_COLUMNS_RE.match(token)
    if match and int(match.group(1)) >= 1:
        layer.scalars["columns"] = int(match.group(1))
        return True

    return False


def _parse_border(suffix: str, layer: _Layer) -> bool:
    if _BORDER_WIDTH_RE.match(suffix):
        layer.scalars["border_width"] = "1px" if suffix == "px" else f"{suffix}px"
    elif suffix in BORDER_STYLES:
        layer.scalars["border_style"] = suffix
    elif suffix in NAMED_COLORS:
        layer.scalars["border_color"] = NAMED_COLORS[suffix]
    else:
        return False
    return True


def _scale_value(key: str, scale: dict[str, str]) -> str | None:
    """Look ``key`` up in ``scale``, accepting bracketed literals like ``[300px]``."""
    if key in scale:
        return scale[key]
    match = _BRACKET_RE.match(key)
    if match:
        return match.group(1).replace("_", " ")
    return None
