"""Helpers shared by the tree passes that rewrite inline text."""

from __future__ import annotations

import re
from typing import Callable

from ..tree import Image, Link, Node, Span, Text, Tree

# Builds the replacement nodes for one match, or returns None to keep the text
NodeBuilder = Callable[[re.Match], "list[int] | None"]


def split_text_node(
    tree: Tree, node_id: int, pattern: re.Pattern, build: NodeBuilder
) -> tuple[list[int], int] | None:
    value = tree[node_id].value
    pieces: list[int] = []
    last = 0
    replaced = 0
    for match in pattern.finditer(value):
        replacement = build(match)
        if replacement is None:
            continue
        if match.start() > last:
            pieces.append(tree.add(Text(value[last : match.start()])))
        pieces.extend(replacement)
        last = match.end()
        replaced += 1
    if not replaced:
        return None
    if last < len(value):
        pieces.append(tree.add(Text(value[last:])))
    return pieces, replaced


def rewrite_text(
    tree: Tree,
    pattern: re.Pattern,
    build: NodeBuilder,
    skip: tuple[type, ...] = (Link, Image),
    prune: Callable[[Node], bool] | None = None,
) -> int:
    """
    Replace every match of ``pattern`` in the tree's text nodes.

    Text below nodes listed in ``skip``, or for which ``prune`` returns
    true, is left alone. Targets are collected before any splicing, so
    nodes created by ``build`` are not revisited.

    Returns:
        Number of matches replaced
    """
    targets = [
        (node_id, parent_id)
        for node_id, parent_id in tree.walk(skip=skip, prune=prune)
        if isinstance(tree[node_id], Text)
    ]
    total = 0
    for node_id, parent_id in targets:
        result = split_text_node(tree, node_id, pattern, build)
        if result is None:
            continue
        pieces, replaced = result
        tree.splice(parent_id, node_id, pieces)
        total += replaced
    return total


def is_wikilink_span(node: Node) -> bool:
    """Span left by the link pass for an unresolved link or a note embed."""
    if not isinstance(node, Span):
        return False
    return "internal-link" in node.attr.classes or "internal-embed" in node.attr.classes
