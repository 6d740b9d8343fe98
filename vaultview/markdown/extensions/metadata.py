from __future__ import annotations

from typing import Iterable

from ..models import DocumentMetadata, HeadingRecord, LinkRecord, TocEntry
from ..tree import Heading, Link, Tree
from .heading_ids import heading_text


def collect_metadata(tree: Tree) -> DocumentMetadata:
    """
    Read headings, links and tags off a transformed tree.

    Run this on the same tree that gets serialised, after heading ids are
    assigned, so the ids here match the ids in the HTML.
    """
    metadata = DocumentMetadata()
    seen_tags: dict[str, None] = {}

    for node_id, _ in tree.walk():
        node = tree[node_id]
        if isinstance(node, Heading):
            metadata.headings.append(
                HeadingRecord(level=node.level, text=heading_text(tree, node_id), id=node.attr.id)
            )
        elif isinstance(node, Link):
            metadata.links.append(LinkRecord(target=node.url, text=tree.plain_text(node_id)))
            if "tag" in node.attr.classes and node.attr.get("data-tag"):
                seen_tags.setdefault(node.attr.get("data-tag"), None)

    metadata.tags = list(seen_tags)
    return metadata


def nest_headings(headings: Iterable[HeadingRecord]) -> list[TocEntry]:
    """
    Given flat heading records, return a hierarchical list for a TOC.

    Each entry contains:
        - level: Heading level (1-6)
        - id: HTML id of the heading
        - title: Plain-text version of the heading
        - children: Nested list of child headings
    """
    toc: list[TocEntry] = []
    stack: list[TocEntry] = []
    for heading in headings:
        node: TocEntry = {
            "level": heading.level,
            "id": heading.id,
            "title": heading.text,
            "children": [],
        }

        while stack and stack[-1]["level"] >= heading.level:
            stack.pop()

        if stack:
            stack[-1]["children"].append(node)
        else:
            toc.append(node)

        stack.append(node)

    return toc
