"""Component tree models."""

from __future__ import annotations

import re
from enum import Enum
from typing import Annotated, Any, Iterator, Literal, Union

from pydantic import Field, PrivateAttr, computed_field, field_validator

from pagecraft.exceptions import TreeEditError, TreeIntegrityError
from pagecraft.schemas.style import CamelModel, StructuredStyle

ROOT_ID = "ROOT"

_TAG_NAME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9-]*$")


class ComponentKind(str, Enum):
    """Closed set of editable component kinds."""

    CONTAINER = "Container"
    TEXT = "Text"
    BUTTON = "Button"
    IMAGE = "Image"
    LINK = "Link"
    VIDEO = "Video"
    ROW = "Row"
    COLUMN = "Column"
    GRID = "Grid"
    HERO = "Hero"
    CARD = "Card"
    NAVBAR = "Navbar"
    FOOTER = "Footer"
    DIVIDER = "Divider"
    RAW_MARKUP = "RawMarkup"


# Kinds the editor may drop new children into.
CONTAINER_KINDS: frozenset[ComponentKind] = frozenset(
    {
        ComponentKind.CONTAINER,
        ComponentKind.LINK,
        ComponentKind.ROW,
        ComponentKind.COLUMN,
        ComponentKind.GRID,
        ComponentKind.HERO,
        ComponentKind.CARD,
        ComponentKind.NAVBAR,
        ComponentKind.FOOTER,
    }
)


class _TaggedProperties(CamelModel):
    tag: str = "div"

    @field_validator("tag")
    @classmethod
    def validate_tag(cls, v: str) -> str:
        """Only plain element names may be emitted as tags."""
        if not _TAG_NAME_RE.match(v):
            raise ValueError(f"Invalid tag name: {v!r}")
        return v.lower()


class ContainerProperties(_TaggedProperties):
    kind: Literal["Container"] = "Container"


class RowProperties(_TaggedProperties):
    kind: Literal["Row"] = "Row"


class ColumnProperties(_TaggedProperties):
    kind: Literal["Column"] = "Column"


class GridProperties(_TaggedProperties):
    kind: Literal["Grid"] = "Grid"


class HeroProperties(_TaggedProperties):
    kind: Literal["Hero"] = "Hero"
    tag: str = "section"
    title: str | None = None
    description: str | None = None


class CardProperties(_TaggedProperties):
    kind: Literal["Card"] = "Card"
    title: str | None = None
    description: str | None = None
    image_src: str | None = None
    button_text: str | None = None


class NavbarProperties(_TaggedProperties):
    kind: Literal["Navbar"] = "Navbar"
    tag: str = "nav"
    logo_text: str | None = None


class FooterProperties(_TaggedProperties):
    kind: Literal["Footer"] = "Footer"
    tag: str = "footer"


class TextProperties(_TaggedProperties):
    kind: Literal["Text"] = "Text"
    tag: str = "span"
    text: str = ""


class ButtonProperties(CamelModel):
    kind: Literal["Button"] = "Button"
    text: str = ""
    href: str | None = None


class ImageProperties(CamelModel):
    kind: Literal["Image"] = "Image"
    src: str = ""
    alt: str = ""


class LinkProperties(CamelModel):
    kind: Literal["Link"] = "Link"
    href: str = "#"
    target: str | None = None


class VideoProperties(CamelModel):
    kind: Literal["Video"] = "Video"
    src: str
    poster: str | None = None
    controls: bool = False
    autoplay: bool = False
    loop: bool = False
    muted: bool = False


class DividerProperties(CamelModel):
    kind: Literal["Divider"] = "Divider"


class RawMarkupProperties(CamelModel):
    kind: Literal["RawMarkup"] = "RawMarkup"
    markup: str = ""


NodeProperties = Annotated[
    Union[
        ContainerProperties,
        TextProperties,
        ButtonProperties,
        ImageProperties,
        LinkProperties,
        VideoProperties,
        RowProperties,
        ColumnProperties,
        GridProperties,
        HeroProperties,
        CardProperties,
        NavbarProperties,
        FooterProperties,
        DividerProperties,
        RawMarkupProperties,
    ],
    Field(discriminator="kind"),
]


class ComponentNode(CamelModel):
    """A single editable component.

    The node owns its children through ``children``; the parent is looked up
    through the tree's parent index and never stored here.
    """

    id: str
    properties: NodeProperties
    style: StructuredStyle = Field(default_factory=StructuredStyle)
    class_name: str = ""
    inline_style: str = ""
    # Source attributes with no structured home (id, aria-*, data-*, ...).
    attributes: dict[str, str] = Field(default_factory=dict)
    children: list[str] = Field(default_factory=list)

    @computed_field
    @property
    def kind(self) -> ComponentKind:
        return ComponentKind(self.properties.kind)

    @computed_field(alias="isContainer")
    @property
    def is_container(self) -> bool:
        return self.kind in CONTAINER_KINDS


class ComponentTree(CamelModel):
    """Flat map of component nodes rooted at ``root_id``."""

    root_id: str = ROOT_ID
    nodes: dict[str, ComponentNode] = Field(default_factory=dict)

    _parents: dict[str, str] = PrivateAttr(default_factory=dict)

    def model_post_init(self, __context: Any) -> None:
        self.rebuild_parent_index()

    @classmethod
    def with_root(cls, root: ComponentNode) -> ComponentTree:
        """Create a tree holding only ``root``."""
        if root.kind is not ComponentKind.CONTAINER:
            raise TreeIntegrityError("The root node must be a Container")
        return cls(root_id=root.id, nodes={root.id: root})

    @property
    def root(self) -> ComponentNode:
        try:
            return self.nodes[self.root_id]
        except KeyError as exc:
            raise TreeIntegrityError(f"Root node {self.root_id!r} is missing") from exc

    def __contains__(self, node_id: object) -> bool:
        return node_id in self.nodes

    def __len__(self) -> int:
        return len(self.nodes)

    def get(self, node_id: str) -> ComponentNode:
        try:
            return self.nodes[node_id]
        except KeyError as exc:
            raise TreeEditError(f"Unknown node id: {node_id!r}") from exc

    def parent_of(self, node_id: str) -> str | None:
        return self._parents.get(node_id)

    def rebuild_parent_index(self) -> None:
        """Recompute the id -> parent id lookup from the ``children`` lists."""
        self._parents = {
            child_id: node.id for node in self.nodes.values() for child_id in node.children
        }

    def walk(self, start: str | None = None) -> Iterator[ComponentNode]:
        """Yield nodes depth-first, pre-order, from ``start`` (default: root)."""
        stack = [start or self.root_id]
        while stack:
            node = self.nodes[stack.pop()]
            yield node
            stack.extend(reversed(node.children))

    def subtree_ids(self, node_id: str) -> list[str]:
        return [node.id for node in self.walk(node_id)]

    def add_node(
        self, node: ComponentNode, parent_id: str, *, index: int | None = None
    ) -> ComponentNode:
        """Insert ``node`` under ``parent_id`` (appended unless ``index`` is given)."""
        if node.id in self.nodes:
            raise TreeEditError(f"Duplicate node id: {node.id!r}")
        parent = self.get(parent_id)
        if not parent.is_container:
            raise TreeEditError(f"{parent.kind.value} node {parent_id!r} cannot hold children")
        self.nodes[node.id] = node
        _insert(parent.children, node.id, index)
        self._parents[node.id] = parent_id
        return node

    def remove_node(self, node_id: str) -> list[str]:
        """Remove a node and its whole subtree. Returns the removed ids."""
        if node_id == self.root_id:
            raise TreeEditError("The root node cannot be removed")
        self.get(node_id)
        removed = self.subtree_ids(node_id)
        parent_id = self._parents.get(node_id)
        if parent_id is not None:
            self.nodes[parent_id].children.remove(node_id)
        for removed_id in removed:
            del self.nodes[removed_id]
            self._parents.pop(removed_id, None)
        return removed

    def move_node(self, node_id: str, new_parent_id: str, *, index: int | None = None) -> None:
        """Detach ``node_id`` and re-insert it under ``new_parent_id``."""
        if node_id == self.root_id:
            raise TreeEditError("The root node cannot be moved")
        self.get(node_id)
        new_parent = self.get(new_parent_id)
        if not new_parent.is_container:
            raise TreeEditError(
                f"{new_parent.kind.value} node {new_parent_id!r} cannot hold children"
            )
        if new_parent_id in self.subtree_ids(node_id):
            raise TreeEditError("A node cannot be moved into its own subtree")
        old_parent_id = self._parents.get(node_id)
        if old_parent_id is not None:
            self.nodes[old_parent_id].children.remove(node_id)
        _insert(new_parent.children, node_id, index)
        self._parents[node_id] = new_parent_id

    def check_subtree(self, start: str | None = None) -> None:
        """Verify the subtree under ``start`` is a proper tree.

        Raises:
            TreeIntegrityError: On a missing start node, a dangling child
                reference, or a node reachable twice (shared ownership/cycle).
        """
        start_id = start or self.root_id
        if start_id not in self.nodes:
            raise TreeIntegrityError(f"Node {start_id!r} is missing")
        seen: set[str] = {start_id}
        stack = [start_id]
        while stack:
            node_id = stack.pop()
            for child_id in self.nodes[node_id].children:
                if child_id not in self.nodes:
                    raise TreeIntegrityError(
                        f"Node {node_id!r} references missing child {child_id!r}"
                    )
                if child_id in seen:
                    raise TreeIntegrityError(
                        f"Node {child_id!r} is reachable more than once (cycle or shared child)"
                    )
                seen.add(child_id)
                stack.append(child_id)

    def check_root(self) -> None:
        """Verify the root exists and is a Container."""
        if self.root.kind is not ComponentKind.CONTAINER:
            raise TreeIntegrityError("The root node must be a Container")

    def validate_integrity(self) -> None:
        """Verify the whole tree: root shape, reachability, single ownership."""
        self.check_root()
        self.check_subtree(self.root_id)
        orphans = set(self.nodes) - set(self.subtree_ids(self.root_id))
        if orphans:
            raise TreeIntegrityError(f"Unreachable nodes: {sorted(orphans)}")

    def to_editor_dict(self) -> dict[str, dict[str, Any]]:
        """Serialize to the editor's node map (camelCase keys, parent ids added)."""
        payload: dict[str, dict[str, Any]] = {}
        for node_id, node in self.nodes.items():
            data = node.model_dump(mode="json", by_alias=True, exclude_none=True)
            data["parent"] = self._parents.get(node_id)
            payload[node_id] = data
        return payload

    @classmethod
    def from_editor_dict(
        cls, nodes: dict[str, dict[str, Any]], *, root_id: str = ROOT_ID
    ) -> ComponentTree:
        """Rebuild a tree from the editor's node map; ``parent`` keys are ignored.

        Raises:
            TreeIntegrityError: If a map key differs from its node's ``id``, or
                the root is missing or not a Container.
        """
        built: dict[str, ComponentNode] = {}
        for node_id, data in nodes.items():
            node = ComponentNode.model_validate(data)
            if node.id != node_id:
                raise TreeIntegrityError(f"Node keyed {node_id!r} has id {node.id!r}")
            built[node_id] = node
        tree = cls(root_id=root_id, nodes=built)
        tree.check_root()
        return tree


def _insert(children: list[str], node_id: str, index: int | None) -> None:
    if index is None:
        children.append(node_id)
    else:
        children.insert(index, node_id)
