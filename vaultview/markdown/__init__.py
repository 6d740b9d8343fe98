from .config import RenderOptions, get_pandoc_config
from .exceptions import MarkdownEngineError, RenderError
from .models import (
    DocumentMetadata,
    HeadingRecord,
    LinkKind,
    LinkRecord,
    LinkTarget,
    PlaceholderKind,
    PlaceholderRecord,
    RenderResult,
    TrackFileKind,
)
from .paths import FileIndex, resolve_link_path
from .renderer import MarkdownRenderer, fallback_html, render_document, render_markdown

__all__ = [
    "DocumentMetadata",
    "FileIndex",
    "HeadingRecord",
    "LinkKind",
    "LinkRecord",
    "LinkTarget",
    "MarkdownEngineError",
    "MarkdownRenderer",
    "PlaceholderKind",
    "PlaceholderRecord",
    "RenderError",
    "RenderOptions",
    "RenderResult",
    "TrackFileKind",
    "fallback_html",
    "get_pandoc_config",
    "render_document",
    "render_markdown",
    "resolve_link_path",
]
