"""Structured style models."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

Breakpoint = Literal["desktop", "tablet", "mobile"]
BREAKPOINTS: tuple[str, ...] = ("desktop", "tablet", "mobile")

TextAlign = Literal["left", "center", "right", "justify", "inherit"]
TextDecoration = Literal["none", "underline", "line-through", "overline"]
AnimationType = Literal[
    "none",
    "fadeIn",
    "fadeInUp",
    "fadeInDown",
    "fadeInLeft",
    "fadeInRight",
    "zoomIn",
    "bounce",
    "pulse",
]

# Shadow elevations are always carried as class tokens, never inline.
SHADOW_ELEVATIONS: frozenset[str] = frozenset(
    {
        "shadow",
        "shadow-sm",
        "shadow-md",
        "shadow-lg",
        "shadow-xl",
        "shadow-2xl",
        "shadow-inner",
        "shadow-none",
    }
)


class CamelModel(BaseModel):
    """Base model exchanged with the editor using camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Spacing(CamelModel):
    """Four-sided spacing record (padding or margin)."""

    top: str = "0px"
    right: str = "0px"
    bottom: str = "0px"
    left: str = "0px"

    @classmethod
    def uniform(cls, value: str) -> Spacing:
        return cls(top=value, right=value, bottom=value, left=value)


class Animation(CamelModel):
    """Entrance/loop animation descriptor."""

    type: AnimationType = "none"
    duration: float = Field(default=0.5, ge=0)
    delay: float = Field(default=0.0, ge=0)
    infinite: bool = False


class StyleFields(CamelModel):
    """The set of structured style properties shared by every breakpoint."""

    padding: Spacing | None = None
    margin: Spacing | None = None
    width: str | None = None
    height: str | None = None
    min_height: str | None = None
    background_color: str | None = None
    background_image: str | None = None
    color: str | None = None
    border_radius: str | None = None
    border_width: str | None = None
    border_style: str | None = None
    border_color: str | None = None
    box_shadow: str | None = None
    text_align: TextAlign | None = None
    font_size: str | None = None
    font_weight: str | None = None
    line_height: str | None = None
    text_decoration: TextDecoration | None = None
    gap: str | None = None
    columns: int | None = Field(default=None, ge=1)
    animation: Animation | None = None

    def defined_fields(self) -> dict[str, Any]:
        """Return the style fields that carry a value, keyed by attribute name."""
        return {
            name: value
            for name in STYLE_FIELD_NAMES
            if (value := getattr(self, name)) is not None
        }


STYLE_FIELD_NAMES: tuple[str, ...] = tuple(StyleFields.model_fields)


class StyleOverride(StyleFields):
    """Fully resolved style for a breakpoint smaller than desktop."""


class ResponsiveStyles(CamelModel):
    """Per-breakpoint overrides applied by wholesale field replacement."""

    tablet: StyleOverride | None = None
    mobile: StyleOverride | None = None


class StructuredStyle(StyleFields):
    """Desktop-resolved style with optional tablet/mobile overrides."""

    responsive_styles: ResponsiveStyles | None = None


class StyleResolution(CamelModel):
    """Result of resolving a class attribute (and inline style) for one element.

    Attributes:
        style: Structured style, desktop-resolved, with responsive overrides.
        unrecognized_classes: Class tokens the resolver could not model, in
            their original order and with their variant prefixes.
        unmodeled_inline: Inline declarations with no structured counterpart.
    """

    style: StructuredStyle = Field(default_factory=StructuredStyle)
    unrecognized_classes: str = ""
    unmodeled_inline: str = ""
