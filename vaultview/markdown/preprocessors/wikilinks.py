# vaultview/markdown/preprocessors/wikilinks.py
"""
Preprocessor that hides wiki links from the markdown reader.

Pandoc reads ``[[...]]`` bodies as ordinary markdown: bare URLs become links
and ``_`` or ``*`` start emphasis, so the target is gone before the link pass
sees it. Each wiki link is replaced by one private-use character standing for
its index in ``RenderState.wikilinks``; the link pass turns those characters
into links and puts the source text back wherever no link is made (code,
math, raw HTML, link text).

Converts:
    ![[https://example.com/a.png]]   →  "\\U000f0000"
    [[_draft_ notes]]                 →  "\\U000f0001"
"""

from __future__ import annotations

import logging
import re

from ..models import RenderState

logger = logging.getLogger(__name__)

WIKILINK_SOURCE_RE = re.compile(r"!?\[\[[^\[\]\n]+\]\]")

# Supplementary Private Use Area-A, one character per wiki link
TOKEN_BASE = 0xF0000
TOKEN_LIMIT = 0xFFFFD - TOKEN_BASE
TOKEN_RE = re.compile("[\U000f0000-\U000ffffd]")


def wikilink_token(index: int) -> str:
    return chr(TOKEN_BASE + index)


def token_source(char: str, sources: list[str]) -> str | None:
    index = ord(char) - TOKEN_BASE
    return sources[index] if 0 <= index < len(sources) else None


def protect_wikilinks(text: str, state: RenderState) -> str:
    """Swap every ``[[...]]`` / ``![[...]]`` in ``text`` for its token."""
    sources = state.wikilinks

    def replace(match: re.Match) -> str:
        if len(sources) >= TOKEN_LIMIT:
            return match.group(0)
        sources.append(match.group(0))
        return wikilink_token(len(sources) - 1)

    text = WIKILINK_SOURCE_RE.sub(replace, text)
    if sources:
        logger.debug(f"Protected {len(sources)} wiki links")
    return text


def restore_tokens(value: str, sources: list[str]) -> str:
    """Put the source text back for every token in ``value``."""
    if not sources:
        return value
    return TOKEN_RE.sub(lambda match: token_source(match.group(0), sources) or match.group(0), value)


def wikilinks_default(text: str, context: dict) -> str:
    """
    Default configuration for wiki link protection.

    This is the function that should be registered in PREPROCESSORS.
    """
    options = context.get("options")
    if options is not None and not options.enable_obsidian_links:
        return text
    state = context.setdefault("state", RenderState())
    return protect_wikilinks(text, state)
