# vaultview/markdown/extensions/callouts.py
"""
Turn Obsidian callout block quotes into callout containers.

Markdown:
    > [!tip]- Packing list
    > Bring water.
    >
    > - map
    > - headlamp

Output:
    <div class="callout callout-tip" data-callout="tip" data-callout-fold="-">
        <div class="callout-title">Packing list</div>
        <div class="callout-content">
            <p>Bring water.</p>
            <ul>...</ul>
        </div>
    </div>

The block quote keeps its node id; only its variant and children change.
"""

from __future__ import annotations

import logging
import re

from ..tree import Attr, BlockQuote, Container, Element, Paragraph, Text, Tree

logger = logging.getLogger(__name__)

CALLOUT_RE = re.compile(r"^\[!([\w-]+)\]([+-]?)[ \t]*", re.IGNORECASE)


def _is_break(node) -> bool:
    return isinstance(node, Element) and node.type == "LineBreak"


def _split_first_line(tree: Tree, inline_ids: list[int]) -> tuple[list[int], list[int]]:
    """Split inline nodes at the first line break into (title, rest)."""
    for position, node_id in enumerate(inline_ids):
        node = tree[node_id]
        if _is_break(node):
            return inline_ids[:position], inline_ids[position + 1 :]
        if isinstance(node, Text) and "\n" in node.value:
            head, tail = node.value.split("\n", 1)
            title = inline_ids[:position]
            rest = inline_ids[position + 1 :]
            if head:
                title = title + [tree.add(Text(head))]
            if tail:
                rest = [tree.add(Text(tail))] + rest
            return title, rest
    return list(inline_ids), []


def _trim(tree: Tree, inline_ids: list[int]) -> list[int]:
    """Strip whitespace at both ends of an inline run, dropping emptied text."""
    ids = list(inline_ids)
    if ids and isinstance(tree[ids[0]], Text):
        tree[ids[0]].value = tree[ids[0]].value.lstrip()
    if ids and isinstance(tree[ids[-1]], Text):
        tree[ids[-1]].value = tree[ids[-1]].value.rstrip()
    return [i for i in ids if not (isinstance(tree[i], Text) and not tree[i].value)]


def _default_title(callout_type: str) -> str:
    return callout_type[:1].upper() + callout_type[1:]


def convert_callout(tree: Tree, quote_id: int) -> bool:
    """Rebuild one block quote as a callout if it opens with ``[!type]``."""
    quote = tree[quote_id]
    if not quote.children:
        return False
    first_id = quote.children[0]
    first = tree[first_id]
    if not isinstance(first, Paragraph) or not first.children:
        return False
    marker = tree[first.children[0]]
    if not isinstance(marker, Text):
        return False
    match = CALLOUT_RE.match(marker.value)
    if not match:
        return False

    callout_type = match.group(1).lower()
    fold = match.group(2)

    marker.value = marker.value[match.end() :]
    title_ids, rest_ids = _split_first_line(tree, first.children)
    title_ids = _trim(tree, title_ids)
    rest_ids = _trim(tree, rest_ids)
    if not title_ids:
        title_ids = [tree.add(Text(_default_title(callout_type)))]

    title = tree.add(
        Container(Attr(classes=["callout-title"])),
        [tree.add(Paragraph(plain=True), title_ids)],
    )

    content_children = list(quote.children[1:])
    if rest_ids:
        first.children = rest_ids
        content_children.insert(0, first_id)
    content = tree.add(Container(Attr(classes=["callout-content"])), content_children)

    attr = Attr(
        classes=["callout", f"callout-{callout_type}"],
        attributes=[("data-callout", callout_type)],
    )
    if fold:
        attr.set("data-callout-fold", fold)
    tree.replace(quote_id, Container(attr, children=[title, content]))
    return True


def transform_callouts(tree: Tree) -> int:
    """Convert every callout block quote in the tree; returns the count."""
    count = 0
    for quote_id in tree.find(BlockQuote):
        if convert_callout(tree, quote_id):
            count += 1
    if count:
        logger.debug(f"Converted {count} callouts")
    return count
