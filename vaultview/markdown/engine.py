# vaultview/markdown/engine.py
"""
Thin wrapper around pypandoc.

Pandoc is the only collaborator that can abort a render, so every call made
here converts pypandoc's failures into MarkdownEngineError.
"""

import json
import logging

import pypandoc

from .config import RenderOptions, get_pandoc_config
from .exceptions import MarkdownEngineError

logger = logging.getLogger(__name__)


def _convert(source: str, stage: str, **kwargs) -> str:
    try:
        return pypandoc.convert_text(source, **kwargs)
    except (RuntimeError, OSError) as exc:
        logger.error(f"Pandoc failed during {stage}: {exc}")
        raise MarkdownEngineError(f"Pandoc failed during {stage}: {exc}", stage=stage) from exc


def parse_markdown(text: str, options: RenderOptions | None = None) -> dict:
    """
    Read markdown into Pandoc's JSON document form.

    Returns:
        The decoded document: {"pandoc-api-version", "meta", "blocks"}
    """
    pandoc_config = get_pandoc_config(options)
    output = _convert(
        text,
        "parse",
        to="json",
        format=pandoc_config["reader_format"],
    )
    try:
        return json.loads(output)
    except ValueError as exc:
        raise MarkdownEngineError(f"Pandoc returned invalid JSON: {exc}", stage="parse") from exc


def write_html(document: dict, options: RenderOptions | None = None) -> str:
    """Write a Pandoc JSON document out as an HTML5 fragment."""
    pandoc_config = get_pandoc_config(options)
    return _convert(
        json.dumps(document, ensure_ascii=False),
        "serialize",
        to=pandoc_config["writer_format"],
        format="json",
        extra_args=pandoc_config["extra_args"],
    )


def markdown_to_html(text: str, options: RenderOptions | None = None) -> str:
    """Straight markdown to HTML conversion with no vault extensions."""
    pandoc_config = get_pandoc_config(options)
    return _convert(
        text,
        "convert",
        to=pandoc_config["writer_format"],
        format=pandoc_config["reader_format"],
        extra_args=pandoc_config["extra_args"],
    )
