from __future__ import annotations

import logging
import re

from ..tree import Element, Heading, Text, Tree

logger = logging.getLogger(__name__)

_WHITESPACE_RE = re.compile(r"\s+")
# \w is Unicode-aware, so letters of every script (CJK ideographs included)
# survive; everything else but "-" is dropped.
_SLUG_STRIP_RE = re.compile(r"[^\w-]")


def slugify_heading(text: str) -> str:
    """Convert heading text to an id slug; may return an empty string."""
    slug = _WHITESPACE_RE.sub("-", text.lower())
    slug = _SLUG_STRIP_RE.sub("", slug)
    return slug.strip("-")


def heading_text(tree: Tree, heading_id: int) -> str:
    """Text of the heading's direct text and inline-code children."""
    parts = []
    for child_id in tree[heading_id].children:
        child = tree[child_id]
        if isinstance(child, Text):
            parts.append(child.value)
        elif isinstance(child, Element) and child.type == "Code":
            parts.append(child.template[1])
    return "".join(parts).strip()


def assign_heading_ids(tree: Tree) -> list[str]:
    """
    Give every heading a document-unique id.

    Repeats of a slug get "-1", "-2", ... appended. Headings whose slug comes
    out empty are named "heading-<n>", n counting all headings so far.

    Returns:
        The assigned ids in document order
    """
    used_ids: set[str] = set()
    assigned: list[str] = []

    def unique_slug(base: str) -> str:
        slug = base
        counter = 1
        while slug in used_ids:
            slug = f"{base}-{counter}"
            counter += 1
        used_ids.add(slug)
        return slug

    for index, heading_id in enumerate(tree.find(Heading)):
        base = slugify_heading(heading_text(tree, heading_id)) or f"heading-{index}"
        slug = unique_slug(base)
        tree[heading_id].attr.id = slug
        assigned.append(slug)

    if assigned:
        logger.debug(f"Assigned {len(assigned)} heading ids")
    return assigned
