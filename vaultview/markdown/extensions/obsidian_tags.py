from __future__ import annotations

import logging
import re
from urllib.parse import quote

from ..config import RenderOptions
from ..tree import Attr, Link, Text, Tree
from .utils import is_wikilink_span, rewrite_text

logger = logging.getLogger(__name__)

# A tag starts the text or follows whitespace or punctuation (ASCII and
# full-width). Word characters, "$", "/", "&" and the like do not qualify, so
# "C#", "$5#x", "page#anchor" and "&#123;" stay text.
TAG_BOUNDARY = r"\s(\[{,;:!?，。、；：！？（【「『"
TAG_RE = re.compile(rf"(?<![^{TAG_BOUNDARY}])#([\w/-]+)")


def tag_link(tree: Tree, name: str, options: RenderOptions) -> int:
    attr = Attr(classes=["tag"], attributes=[("data-tag", name)])
    url = options.tag_prefix + quote(name, safe="/")
    return tree.add(Link(url=url, attr=attr), [tree.add(Text(f"#{name}"))])


def transform_tags(tree: Tree, options: RenderOptions | None = None) -> list[str]:
    """
    Turn ``#tag`` text into tag links.

    Purely numeric names ("#1", "#2024") are not tags. Text inside links and
    wiki link spans is not scanned.

    Returns:
        Distinct tag names in order of first appearance
    """
    options = options or RenderOptions()
    tags: dict[str, None] = {}

    def build(match: re.Match) -> list[int] | None:
        name = match.group(1)
        if name.isdigit():
            return None
        tags.setdefault(name, None)
        return [tag_link(tree, name, options)]

    count = rewrite_text(tree, TAG_RE, build, prune=is_wikilink_span)
    if count:
        logger.debug(f"Linked {count} tags ({len(tags)} distinct)")
    return list(tags)
