"""
Preprocessor that removes a leading YAML front matter block.

The parsed mapping is stored in ``context["front_matter"]`` so later stages
(and callers) can use it; the markdown that follows is rendered as usual.
"""

import logging

import frontmatter
import yaml

logger = logging.getLogger(__name__)


def split_front_matter(text: str) -> tuple[dict, str]:
    """
    Split YAML front matter from the body of a note.

    Args:
        text: Raw note text

    Returns:
        (metadata, body). Text without front matter, or whose front matter is
        not valid YAML, comes back unchanged with empty metadata.
    """
    if not text.startswith("---"):
        return {}, text

    try:
        post = frontmatter.loads(text)
    except yaml.YAMLError as exc:
        logger.warning(f"Ignoring invalid front matter: {exc}")
        return {}, text

    if not post.metadata:
        return {}, text
    return dict(post.metadata), post.content


def front_matter_default(text: str, context: dict) -> str:
    metadata, body = split_front_matter(text)
    context["front_matter"] = metadata
    return body
