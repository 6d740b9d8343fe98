import logging
import re

from ..tree import Mark, Text, Tree
from .utils import rewrite_text

logger = logging.getLogger(__name__)

HIGHLIGHT_RE = re.compile(r"==([^=]+)==")


def transform_highlights(tree: Tree, css_class: str = "cm-highlight") -> int:
    """Wrap ``==text==`` in a mark node; returns the number of highlights."""

    def build(match: re.Match) -> list[int]:
        return [tree.add(Mark(classes=[css_class]), [tree.add(Text(match.group(1)))])]

    count = rewrite_text(tree, HIGHLIGHT_RE, build, skip=())
    if count:
        logger.debug(f"Marked {count} highlights")
    return count
