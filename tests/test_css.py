"""Tests for the inline-CSS codec."""

from __future__ import annotations

from pagecraft.css import (
    animation_attributes,
    format_declarations,
    parse_animation_attributes,
    parse_declarations,
    parse_inline_style,
    style_declarations,
)
from pagecraft.schemas import Animation, Spacing, StructuredStyle


class TestParseDeclarations:
    def test_semicolons_inside_urls_do_not_split(self) -> None:
        text = "background-image: url('data:image/png;base64,AAA'); color: red;"

        assert parse_declarations(text) == [
            ("background-image", "url('data:image/png;base64,AAA')"),
            ("color", "red"),
        ]

    def test_ignores_empty_and_malformed_chunks(self) -> None:
        assert parse_declarations(" ; nonsense ; width: ; height: 2px") == [("height", "2px")]


class TestParseInlineStyle:
    def test_box_shorthand_expansion(self) -> None:
        parsed = parse_inline_style("padding: 1px 2px 3px; margin: 0 auto")

        assert parsed.sides["padding"] == {
            "top": "1px",
            "right": "2px",
            "bottom": "3px",
            "left": "2px",
        }
        assert parsed.sides["margin"] == {"top": "0", "right": "auto", "bottom": "0", "left": "auto"}

    def test_longhand_after_shorthand_wins(self) -> None:
        parsed = parse_inline_style("margin: 4px; margin-left: 9px")

        assert parsed.sides["margin"]["left"] == "9px"
        assert parsed.sides["margin"]["top"] == "4px"

    def test_logical_properties_are_unmodeled(self) -> None:
        parsed = parse_inline_style("margin-inline-start: 4px")

        assert parsed.sides == {}
        assert parsed.unmodeled == [("margin-inline-start", "4px")]

    def test_background_image_and_grid_columns(self) -> None:
        parsed = parse_inline_style(
            'background-image: url("/a.png"); grid-template-columns: repeat(4, minmax(0, 1fr))'
        )

        assert parsed.scalars == {"background_image": "/a.png", "columns": 4}

    def test_invalid_literal_is_unmodeled(self) -> None:
        parsed = parse_inline_style("text-align: start")

        assert parsed.scalars == {}
        assert parsed.unmodeled == [("text-align", "start")]


class TestStyleDeclarations:
    def test_structured_fields_become_declarations(self) -> None:
        style = StructuredStyle(
            padding=Spacing.uniform("8px"),
            background_image="/bg.jpg",
            columns=2,
            box_shadow="shadow-md",
            color="#000000",
        )

        assert format_declarations(style_declarations(style)) == (
            "padding-top: 8px; padding-right: 8px; padding-bottom: 8px; padding-left: 8px; "
            "color: #000000; "
            "background-image: url('/bg.jpg'); "
            "grid-template-columns: repeat(2, minmax(0, 1fr))"
        )

    def test_declarations_parse_back_to_the_same_fields(self) -> None:
        style = StructuredStyle(
            margin=Spacing(top="-4px", right="auto", bottom="0px", left="auto"),
            width="50%",
            font_weight="700",
            text_align="center",
            background_image="none",
        )
        parsed = parse_inline_style(format_declarations(style_declarations(style)))

        assert parsed.unmodeled == []
        assert parsed.sides["margin"] == style.margin.model_dump()
        assert parsed.scalars == {
            "width": "50%",
            "font_weight": "700",
            "text_align": "center",
            "background_image": "none",
        }


class TestAnimationAttributes:
    def test_encode_decode(self) -> None:
        animation = Animation(type="fadeInUp", duration=1.5, delay=0.25, infinite=True)
        attrs = dict(animation_attributes(animation))

        assert attrs == {
            "data-animation": "fadeInUp",
            "data-animation-duration": "1.5",
            "data-animation-delay": "0.25",
            "data-animation-infinite": "true",
        }
        assert parse_animation_attributes(attrs) == animation

    def test_unknown_type_is_ignored(self) -> None:
        assert parse_animation_attributes({"data-animation": "wobble"}) is None

    def test_bad_numbers_fall_back_to_defaults(self) -> None:
        animation = parse_animation_attributes(
            {"data-animation": "zoomIn", "data-animation-duration": "fast"}
        )

        assert animation == Animation(type="zoomIn")
