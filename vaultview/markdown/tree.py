# vaultview/markdown/tree.py
"""
Document tree used between Pandoc's reader and writer.

Pandoc hands us its JSON AST. The constructs the vault extensions look at
(text runs, links, images, headings, paragraphs, block quotes, divs and
spans) are lifted into explicit node classes; every other construct is kept
as an ``Element`` whose nested block/inline lists become ``Group`` children,
so the extensions still reach text inside emphasis, lists, tables or
footnotes.

Nodes live in an arena keyed by integer id. Parents hold ordered lists of
child ids, which lets a pass splice a run of new nodes in place of one text
node, or rebuild a block quote while keeping its identity.

Adjacent ``Str``/``Space``/``SoftBreak`` inlines are merged into a single
``Text`` node on the way in ("\\n" marks a soft break) and split back apart
on the way out.
"""

from __future__ import annotations

import copy
import itertools
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Iterator

DEFAULT_API_VERSION = [1, 23, 1]

BLOCK_TYPES = frozenset(
    {
        "Plain",
        "Para",
        "LineBlock",
        "CodeBlock",
        "RawBlock",
        "BlockQuote",
        "OrderedList",
        "BulletList",
        "DefinitionList",
        "Header",
        "HorizontalRule",
        "Table",
        "Figure",
        "Div",
    }
)

INLINE_TYPES = frozenset(
    {
        "Str",
        "Emph",
        "Underline",
        "Strong",
        "Strikeout",
        "Superscript",
        "Subscript",
        "SmallCaps",
        "Quoted",
        "Cite",
        "Code",
        "Space",
        "SoftBreak",
        "LineBreak",
        "Math",
        "RawInline",
        "Link",
        "Image",
        "Note",
        "Span",
    }
)

_TEXT_TYPES = {"Str", "Space", "SoftBreak"}
_WHITESPACE_RUN_RE = re.compile(r"([ \n]+)")


@dataclass
class Attr:
    id: str = ""
    classes: list[str] = field(default_factory=list)
    attributes: list[tuple[str, str]] = field(default_factory=list)

    @classmethod
    def from_json(cls, value: list) -> "Attr":
        identifier, classes, pairs = value
        return cls(identifier, list(classes), [(k, v) for k, v in pairs])

    def to_json(self) -> list:
        return [self.id, list(self.classes), [[k, v] for k, v in self.attributes]]

    def get(self, key: str, default: str | None = None) -> str | None:
        for name, value in self.attributes:
            if name == key:
                return value
        return default

    def set(self, key: str, value: str) -> None:
        self.attributes = [(k, v) for k, v in self.attributes if k != key]
        self.attributes.append((key, value))


@dataclass(kw_only=True)
class Node:
    children: list[int] = field(default_factory=list)


@dataclass
class Root(Node):
    pass


@dataclass
class Group(Node):
    """One nested block or inline list of an ``Element``."""


@dataclass
class Text(Node):
    value: str = ""


@dataclass
class Paragraph(Node):
    plain: bool = False


@dataclass
class Heading(Node):
    level: int = 1
    attr: Attr = field(default_factory=Attr)


@dataclass
class BlockQuote(Node):
    pass


@dataclass
class Container(Node):
    attr: Attr = field(default_factory=Attr)


@dataclass
class Span(Node):
    attr: Attr = field(default_factory=Attr)


@dataclass
class Link(Node):
    url: str = ""
    title: str = ""
    attr: Attr = field(default_factory=Attr)


@dataclass
class Image(Node):
    url: str = ""
    title: str = ""
    attr: Attr = field(default_factory=Attr)


@dataclass
class Mark(Node):
    classes: list[str] = field(default_factory=list)


@dataclass
class Raw(Node):
    text: str = ""
    format: str = "html"
    inline: bool = True


@dataclass
class Element(Node):
    """
    Any Pandoc construct without a dedicated node class.

    ``template`` is the construct's "c" payload with every nested node list
    replaced by a ``Slot`` pointing at the matching entry in ``children``.
    """

    type: str = ""
    template: Any = None


@dataclass(frozen=True)
class Slot:
    index: int


class Tree:
    def __init__(self, api_version: list[int] | None = None, meta: dict | None = None):
        self._nodes: dict[int, Node] = {}
        self._ids = itertools.count()
        self.api_version = list(api_version or DEFAULT_API_VERSION)
        self.meta = meta if meta is not None else {}
        self.root = self.add(Root())

    def __getitem__(self, node_id: int) -> Node:
        return self._nodes[node_id]

    def __len__(self) -> int:
        return len(self._nodes)

    def add(self, node: Node, children: list[int] | None = None) -> int:
        if children is not None:
            node.children = list(children)
        node_id = next(self._ids)
        self._nodes[node_id] = node
        return node_id

    def replace(self, node_id: int, node: Node) -> None:
        """Put a different node in place of ``node_id``, keeping its position."""
        self._nodes[node_id] = node

    def splice(self, parent_id: int, child_id: int, replacement: list[int]) -> None:
        """Replace one child of ``parent_id`` with a run of nodes."""
        children = self._nodes[parent_id].children
        index = children.index(child_id)
        children[index : index + 1] = replacement
        if child_id not in replacement:
            del self._nodes[child_id]

    def walk(
        self,
        start: int | None = None,
        skip: tuple[type, ...] = (),
        prune: Callable[[Node], bool] | None = None,
    ) -> Iterator[tuple[int, int | None]]:
        """
        Yield ``(node_id, parent_id)`` pairs in document order.

        Nodes whose class is in ``skip``, or for which ``prune`` returns true,
        are yielded but not descended into.
        """
        start = self.root if start is None else start
        stack: list[tuple[int, int | None]] = [(start, None)]
        while stack:
            node_id, parent_id = stack.pop()
            yield node_id, parent_id
            node = self._nodes[node_id]
            if skip and isinstance(node, skip):
                continue
            if prune is not None and prune(node):
                continue
            for child_id in reversed(node.children):
                stack.append((child_id, node_id))

    def find(self, node_type: type, start: int | None = None) -> list[int]:
        return [
            node_id
            for node_id, _ in self.walk(start)
            if isinstance(self._nodes[node_id], node_type)
        ]

    def plain_text(self, node_id: int) -> str:
        """Concatenated text of a subtree, inline code included."""
        parts = []
        for child_id, _ in self.walk(node_id):
            node = self._nodes[child_id]
            if isinstance(node, Text):
                parts.append(node.value)
            elif isinstance(node, Element) and node.type == "Code":
                parts.append(node.template[1])
        return "".join(parts)


def _is_node(value: Any) -> bool:
    return isinstance(value, dict) and (
        value.get("t") in BLOCK_TYPES or value.get("t") in INLINE_TYPES
    )


def _is_node_list(value: Any) -> bool:
    return isinstance(value, list) and bool(value) and all(_is_node(item) for item in value)


class _Reader:
    def __init__(self, tree: Tree):
        self.tree = tree

    def read_list(self, items: list[dict]) -> list[int]:
        ids: list[int] = []
        buffer: list[str] = []
        for item in items:
            kind = item["t"]
            if kind in _TEXT_TYPES:
                if kind == "Str":
                    buffer.append(item["c"])
                elif kind == "Space":
                    buffer.append(" ")
                else:
                    buffer.append("\n")
                continue
            if buffer:
                ids.append(self.tree.add(Text("".join(buffer))))
                buffer = []
            ids.append(self.read(item))
        if buffer:
            ids.append(self.tree.add(Text("".join(buffer))))
        return ids

    def read(self, item: dict) -> int:
        kind = item["t"]
        content = item.get("c")
        tree = self.tree

        if kind in ("Para", "Plain"):
            return tree.add(Paragraph(plain=kind == "Plain"), self.read_list(content))
        if kind == "Header":
            level, attr, inlines = content
            return tree.add(Heading(level, Attr.from_json(attr)), self.read_list(inlines))
        if kind == "BlockQuote":
            return tree.add(BlockQuote(), self.read_list(content))
        if kind == "Div":
            attr, blocks = content
            return tree.add(Container(Attr.from_json(attr)), self.read_list(blocks))
        if kind == "Span":
            attr, inlines = content
            return tree.add(Span(Attr.from_json(attr)), self.read_list(inlines))
        if kind in ("Link", "Image"):
            attr, inlines, (url, title) = content
            node_class = Link if kind == "Link" else Image
            return tree.add(
                node_class(url=url, title=title, attr=Attr.from_json(attr)),
                self.read_list(inlines),
            )
        if kind in ("RawInline", "RawBlock"):
            fmt, text = content
            return tree.add(Raw(text=text, format=fmt, inline=kind == "RawInline"))

        slots: list[int] = []
        template = self._carve(content, slots)
        return tree.add(Element(type=kind, template=template), slots)

    def _carve(self, value: Any, slots: list[int]) -> Any:
        if _is_node_list(value):
            slots.append(self.tree.add(Group(), self.read_list(value)))
            return Slot(len(slots) - 1)
        if isinstance(value, list):
            return [self._carve(item, slots) for item in value]
        if isinstance(value, dict):
            return {key: self._carve(item, slots) for key, item in value.items()}
        return value


class _Writer:
    def __init__(self, tree: Tree, soft_breaks_as_line_breaks: bool = False):
        self.tree = tree
        self.soft_breaks_as_line_breaks = soft_breaks_as_line_breaks

    def write_children(self, node_id: int) -> list[dict]:
        items: list[dict] = []
        for child_id in self.tree[node_id].children:
            items.extend(self.write(child_id))
        return items

    def write_text(self, value: str) -> list[dict]:
        items: list[dict] = []
        for position, part in enumerate(_WHITESPACE_RUN_RE.split(value)):
            if not part:
                continue
            if position % 2 == 0:
                items.append({"t": "Str", "c": part})
            elif "\n" not in part:
                items.append({"t": "Space"})
            elif self.soft_breaks_as_line_breaks:
                items.append({"t": "LineBreak"})
            else:
                items.append({"t": "SoftBreak"})
        return items

    def write(self, node_id: int) -> list[dict]:
        node = self.tree[node_id]

        if isinstance(node, Text):
            return self.write_text(node.value)
        if isinstance(node, Group):
            return self.write_children(node_id)
        if isinstance(node, Paragraph):
            return [{"t": "Plain" if node.plain else "Para", "c": self.write_children(node_id)}]
        if isinstance(node, Heading):
            return [
                {
                    "t": "Header",
                    "c": [node.level, node.attr.to_json(), self.write_children(node_id)],
                }
            ]
        if isinstance(node, BlockQuote):
            return [{"t": "BlockQuote", "c": self.write_children(node_id)}]
        if isinstance(node, Container):
            return [{"t": "Div", "c": [node.attr.to_json(), self.write_children(node_id)]}]
        if isinstance(node, Span):
            return [{"t": "Span", "c": [node.attr.to_json(), self.write_children(node_id)]}]
        if isinstance(node, (Link, Image)):
            kind = "Link" if isinstance(node, Link) else "Image"
            return [
                {
                    "t": kind,
                    "c": [node.attr.to_json(), self.write_children(node_id), [node.url, node.title]],
                }
            ]
        if isinstance(node, Mark):
            opening = '<mark class="{}">'.format(" ".join(node.classes)) if node.classes else "<mark>"
            return [
                {"t": "RawInline", "c": ["html", opening]},
                *self.write_children(node_id),
                {"t": "RawInline", "c": ["html", "</mark>"]},
            ]
        if isinstance(node, Raw):
            return [{"t": "RawInline" if node.inline else "RawBlock", "c": [node.format, node.text]}]
        if isinstance(node, Element):
            if node.template is None:
                return [{"t": node.type}]
            return [{"t": node.type, "c": self._fill(node.template, node.children)}]
        raise TypeError(f"Cannot serialise {type(node).__name__} node")

    def _fill(self, value: Any, slots: list[int]) -> Any:
        if isinstance(value, Slot):
            return self.write_children(slots[value.index])
        if isinstance(value, list):
            return [self._fill(item, slots) for item in value]
        if isinstance(value, dict):
            return {key: self._fill(item, slots) for key, item in value.items()}
        return value


def from_pandoc(document: dict) -> Tree:
    """Build a tree from a decoded Pandoc JSON document."""
    tree = Tree(
        api_version=document.get("pandoc-api-version"),
        meta=copy.deepcopy(document.get("meta", {})),
    )
    reader = _Reader(tree)
    tree[tree.root].children = reader.read_list(document.get("blocks", []))
    return tree


def to_pandoc(tree: Tree, soft_breaks_as_line_breaks: bool = False) -> dict:
    """Serialise a tree back into a Pandoc JSON document."""
    writer = _Writer(tree, soft_breaks_as_line_breaks)
    return {
        "pandoc-api-version": list(tree.api_version),
        "meta": tree.meta,
        "blocks": writer.write_children(tree.root),
    }
