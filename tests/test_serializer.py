"""Tests for tree serialization and effective-style lookup."""

from __future__ import annotations

import pytest

from pagecraft.classifier import html_to_tree
from pagecraft.exceptions import TreeIntegrityError
from pagecraft.schemas import ROOT_ID, ComponentNode, ComponentTree, Spacing, StructuredStyle
from pagecraft.schemas.style import Animation, ResponsiveStyles, StyleOverride
from pagecraft.schemas.tree import (
    ButtonProperties,
    CardProperties,
    ContainerProperties,
    DividerProperties,
    HeroProperties,
    ImageProperties,
    LinkProperties,
    NavbarProperties,
    RawMarkupProperties,
    TextProperties,
    VideoProperties,
)
from pagecraft.serializer import class_tokens, resolve_effective_style, root_attributes, serialize
from pagecraft.style_resolver import resolve_classes


def _tree(*nodes: ComponentNode) -> ComponentTree:
    """Root holding ``nodes`` in order; nested children must be listed too."""
    nested = {child_id for node in nodes for child_id in node.children}
    root = ComponentNode(
        id=ROOT_ID,
        properties=ContainerProperties(),
        children=[node.id for node in nodes if node.id not in nested],
    )
    return ComponentTree(nodes={ROOT_ID: root, **{node.id: node for node in nodes}})


class TestEmitters:
    def test_text_is_escaped(self) -> None:
        node = ComponentNode(id="t", properties=TextProperties(tag="h1", text="Fish & <Chips>"))

        assert serialize(_tree(node)) == "<h1>Fish &amp; &lt;Chips&gt;</h1>"

    def test_button_with_and_without_href(self) -> None:
        link = ComponentNode(id="a", properties=ButtonProperties(text="Go", href="/go"), class_name="btn")
        plain = ComponentNode(id="b", properties=ButtonProperties(text="Send"), attributes={"type": "submit"})

        assert serialize(_tree(link, plain)) == (
            '<a href="/go" class="btn">Go</a><button type="submit">Send</button>'
        )

    def test_image_is_self_closing(self) -> None:
        node = ComponentNode(
            id="i",
            properties=ImageProperties(src="/a.png", alt='say "hi"'),
            style=StructuredStyle(width="100%"),
        )

        assert serialize(_tree(node)) == '<img src="/a.png" alt="say &quot;hi&quot;" style="width: 100%" />'

    def test_link_wraps_children_and_adds_rel(self) -> None:
        child = ComponentNode(id="t", properties=TextProperties(text="Docs"))
        link = ComponentNode(
            id="l", properties=LinkProperties(href="/docs", target="_blank"), children=["t"]
        )

        assert serialize(_tree(link, child)) == (
            '<a href="/docs" target="_blank" rel="noopener noreferrer"><span>Docs</span></a>'
        )

    def test_video_flags(self) -> None:
        node = ComponentNode(
            id="v", properties=VideoProperties(src="/v.mp4", controls=True, muted=True)
        )

        assert serialize(_tree(node)) == '<video src="/v.mp4" controls muted></video>'

    def test_divider_and_void_container(self) -> None:
        divider = ComponentNode(id="d", properties=DividerProperties(), class_name="my-8")
        br = ComponentNode(id="b", properties=ContainerProperties(tag="br"))

        assert serialize(_tree(divider, br)) == '<hr class="my-8" /><br />'

    def test_raw_markup_is_verbatim(self) -> None:
        markup = '<input type="email" required=""/>'
        node = ComponentNode(id="r", properties=RawMarkupProperties(markup=markup))

        assert serialize(_tree(node)) == markup

    def test_container_style_class_and_animation(self) -> None:
        node = ComponentNode(
            id="c",
            properties=ContainerProperties(tag="section"),
            style=StructuredStyle(
                padding=Spacing.uniform("4px"),
                box_shadow="shadow-lg",
                animation=Animation(type="fadeIn"),
            ),
            class_name="flex",
            inline_style="filter: blur(1px)",
            attributes={"id": "main"},
        )

        assert serialize(_tree(node)) == (
            '<section id="main" class="flex shadow-lg" '
            'style="padding-top: 4px; padding-right: 4px; padding-bottom: 4px; padding-left: 4px; '
            'filter: blur(1px)" '
            'data-animation="fadeIn" data-animation-duration="0.5" data-animation-delay="0">'
            "</section>"
        )

    def test_children_in_order(self) -> None:
        first = ComponentNode(id="1", properties=TextProperties(text="a"))
        second = ComponentNode(id="2", properties=TextProperties(text="b"))
        box = ComponentNode(id="box", properties=ContainerProperties(), children=["2", "1"])

        assert serialize(_tree(box, first, second)) == "<div><span>b</span><span>a</span></div>"

    def test_subtree(self) -> None:
        child = ComponentNode(id="t", properties=TextProperties(text="x"))
        box = ComponentNode(id="box", properties=ContainerProperties(tag="main"), children=["t"])

        assert serialize(_tree(box, child), "box") == "<main><span>x</span></main>"

    def test_root_attributes(self) -> None:
        tree = _tree()
        tree.root.class_name = "antialiased"
        tree.root.style.background_color = "#ffffff"

        assert root_attributes(tree) == [
            ("class", "antialiased"),
            ("style", "background-color: #ffffff"),
        ]


class TestShadowPrecedence:
    def test_structured_shadow_replaces_shadow_classes(self) -> None:
        style = StructuredStyle(box_shadow="shadow-md")

        assert class_tokens("shadow-[0_0_4px_red] flex shadow-sm md:shadow-xl", style) == [
            "flex",
            "md:shadow-xl",
            "shadow-md",
        ]

    def test_shadow_classes_kept_without_structured_shadow(self) -> None:
        assert class_tokens("shadow-[0_0_4px_red]", StructuredStyle()) == ["shadow-[0_0_4px_red]"]


class TestBlockProperties:
    """Hero, Card and Navbar properties reach the serialized markup."""

    @staticmethod
    def _block(tree: ComponentTree) -> ComponentNode:
        return tree.nodes[tree.root.children[0]]

    def test_hero_title_edit(self) -> None:
        tree = html_to_tree('<section class="hero"><h1>Old</h1><p>d</p></section>')
        self._block(tree).properties.title = "New title"

        assert serialize(tree) == '<section class="hero"><h1>New title</h1><p>d</p></section>'

    def test_card_edits(self) -> None:
        tree = html_to_tree(
            '<div class="card"><img src="/a.png" alt=""><h3>T</h3><p>D</p><button>Go</button></div>'
        )
        card = self._block(tree)
        card.properties.image_src = "/b.png"
        card.properties.description = "New"
        card.properties.button_text = "Buy"

        assert serialize(tree) == (
            '<div class="card"><img src="/b.png" alt="" /><h3>T</h3><p>New</p><button>Buy</button></div>'
        )

    def test_navbar_logo_inside_link(self) -> None:
        tree = html_to_tree('<nav><a class="logo" href="/">Acme</a></nav>')
        self._block(tree).properties.logo_text = "Globex"

        html = serialize(tree)

        assert "Globex" in html
        assert "Acme" not in html

    def test_edit_survives_reclassification(self) -> None:
        tree = html_to_tree('<section id="hero"><h2>Old</h2><p>d</p></section>')
        self._block(tree).properties.description = "Fresh"

        reparsed = html_to_tree(serialize(tree))

        assert self._block(reparsed).properties.description == "Fresh"

    def test_mixed_content_heading_is_left_alone(self) -> None:
        tree = html_to_tree('<section class="hero"><h1>Hi <em>there</em></h1></section>')
        hero = self._block(tree)
        assert hero.properties.title == "Hi there"
        hero.properties.title = "X"

        assert "X" not in serialize(tree)

    def test_heading_inside_raw_markup_is_not_rebound(self) -> None:
        tree = html_to_tree('<section class="hero"><form><h1>In form</h1></form><h1>Out</h1></section>')
        hero = self._block(tree)
        assert hero.properties.title == "In form"
        hero.properties.title = "Z"

        html = serialize(tree)

        assert "<h1>Out</h1>" in html
        assert "Z" not in html

    def test_childless_blocks_render_from_properties(self) -> None:
        hero = ComponentNode(id="h", properties=HeroProperties(title="Hi & bye", description="D"))
        card = ComponentNode(
            id="c",
            properties=CardProperties(tag="div", title="T", image_src="/i.png", button_text="Go"),
        )
        nav = ComponentNode(id="n", properties=NavbarProperties(logo_text="Acme"))

        assert serialize(_tree(nav, hero, card)) == (
            '<nav><span class="logo">Acme</span></nav>'
            "<section><h1>Hi &amp; bye</h1><p>D</p></section>"
            '<div><img src="/i.png" alt="" /><h3>T</h3><button>Go</button></div>'
        )


class TestIntegrity:
    def test_dangling_child_stops_serialization(self) -> None:
        box = ComponentNode(id="box", properties=ContainerProperties(), children=["ghost"])

        with pytest.raises(TreeIntegrityError):
            serialize(_tree(box))

    def test_cycle_stops_serialization(self) -> None:
        a = ComponentNode(id="a", properties=ContainerProperties(), children=["b"])
        b = ComponentNode(id="b", properties=ContainerProperties(), children=["a"])
        tree = _tree(a, b)
        tree.root.children = ["a"]

        with pytest.raises(TreeIntegrityError):
            serialize(tree)

    def test_missing_start_node(self) -> None:
        with pytest.raises(TreeIntegrityError):
            serialize(_tree(), "nope")


class TestEffectiveStyle:
    @pytest.fixture
    def style(self) -> StructuredStyle:
        return StructuredStyle(
            padding=Spacing.uniform("8px"),
            color="#000000",
            responsive_styles=ResponsiveStyles(
                tablet=StyleOverride(padding=Spacing(top="16px")),
                mobile=StyleOverride(color="#ffffff"),
            ),
        )

    def test_desktop_ignores_overrides(self, style: StructuredStyle) -> None:
        effective = resolve_effective_style(style, "desktop")

        assert effective.padding == Spacing.uniform("8px")
        assert effective.responsive_styles is None

    def test_tablet_replaces_whole_fields(self, style: StructuredStyle) -> None:
        effective = resolve_effective_style(style, "tablet")

        assert effective.padding == Spacing(top="16px")
        assert effective.color == "#000000"

    def test_mobile_applies_tablet_then_mobile(self, style: StructuredStyle) -> None:
        effective = resolve_effective_style(style, "mobile")

        assert effective.padding == Spacing(top="16px")
        assert effective.color == "#ffffff"

    def test_unknown_breakpoint(self, style: StructuredStyle) -> None:
        with pytest.raises(ValueError, match="Unknown breakpoint"):
            resolve_effective_style(style, "watch")

    def test_serializer_renders_the_requested_breakpoint(self) -> None:
        node = ComponentNode(
            id="t",
            properties=TextProperties(text="x"),
            style=resolve_classes("text-left lg:text-center").style,
        )

        assert serialize(_tree(node), breakpoint="tablet") == '<span style="text-align: left">x</span>'
        assert serialize(_tree(node)) == '<span style="text-align: center">x</span>'


class TestCascadeAgreement:
    """The resolver's cascade and the override application must mirror each other."""

    @pytest.mark.parametrize(
        ("classes", "expected"),
        [
            (
                "p-8 md:p-4 lg:p-2",
                {"mobile": "32px", "tablet": "16px", "desktop": "8px"},
            ),
            ("p-8", {"mobile": "32px", "tablet": "32px", "desktop": "32px"}),
            ("p-2 md:p-8", {"mobile": "8px", "tablet": "32px", "desktop": "32px"}),
            ("p-2 lg:p-8", {"mobile": "8px", "tablet": "8px", "desktop": "32px"}),
            ("md:p-4", {"mobile": "0px", "tablet": "16px", "desktop": "16px"}),
            ("lg:p-4 md:pt-1", {"mobile": "0px", "tablet": "0px", "desktop": "16px"}),
        ],
    )
    def test_padding_left_per_breakpoint(self, classes: str, expected: dict[str, str]) -> None:
        style = resolve_classes(classes).style

        for breakpoint, value in expected.items():
            effective = resolve_effective_style(style, breakpoint)
            assert effective.padding.left == value, breakpoint

    @pytest.mark.parametrize(
        "classes",
        [
            "p-8 md:p-4 lg:p-2",
            "text-center md:text-left lg:text-right font-bold",
            "w-full md:w-1/2 lg:w-1/3 shadow md:shadow-lg",
            "px-2 md:py-4 lg:pt-8 lg:border-2",
            "sm:bg-black md:bg-white text-white lg:rounded-xl",
            "lg:gap-4 grid-cols-1 md:grid-cols-2 lg:grid-cols-4",
        ],
    )
    def test_each_breakpoint_matches_its_own_cascade(self, classes: str) -> None:
        """Effective values equal resolving only the tokens visible at that width."""
        style = resolve_classes(classes).style
        tokens = classes.split()
        visible = {
            "mobile": [token for token in tokens if ":" not in token or token.startswith("sm:")],
        }
        visible["tablet"] = visible["mobile"] + [t for t in tokens if t.startswith("md:")]
        visible["desktop"] = visible["tablet"] + [t for t in tokens if t.startswith("lg:")]

        for breakpoint, subset in visible.items():
            alone = resolve_classes(" ".join(t.split(":", 1)[-1] for t in subset)).style
            effective = resolve_effective_style(style, breakpoint)
            for name, value in alone.defined_fields().items():
                assert getattr(effective, name) == value, (breakpoint, name)
