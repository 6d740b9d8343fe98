# vaultview/markdown/renderer.py

import html
import logging
from typing import Callable, Optional

from .config import RenderOptions
from .engine import parse_markdown, write_html
from .extensions import apply_extensions, collect_metadata
from .models import DocumentMetadata, RenderResult, RenderState
from .paths import FileIndex
from .postprocessors import apply_postprocessors, reconcile_embeds
from .postprocessors.utils import clear_shared_soup
from .preprocessors import apply_preprocessors
from .tree import from_pandoc, to_pandoc

logger = logging.getLogger(__name__)


def render_markdown(text, context=None):
    """
    Main rendering function with pre/post processing pipeline using pypandoc

    Args:
        text: Raw markdown text
        context: Optional dict for processors that need additional data.
            Recognised keys: "options" (RenderOptions), "state" (RenderState).
            On return it also holds "front_matter", "metadata" and
            "placeholders" for the rendered document.

    Raises:
        MarkdownEngineError: Pandoc is missing or failed
    """
    context = context if context is not None else {}
    options = context.setdefault("options", RenderOptions())
    state = context.setdefault("state", RenderState())
    context.setdefault("front_matter", {})
    context.setdefault("placeholders", [])

    # Pre-processing: front matter and embedded blocks, before Pandoc sees the text
    text = apply_preprocessors(text, context)

    # Markdown to tree, vault extensions, tree back to HTML
    tree = from_pandoc(parse_markdown(text, options))
    apply_extensions(tree, context)
    context["metadata"] = collect_metadata(tree)
    html_output = write_html(to_pandoc(tree, options.soft_breaks_as_line_breaks), options)

    # Post-processing: After markdown conversion
    html_output = apply_postprocessors(html_output, context)
    clear_shared_soup(context)

    html_output, embedded = reconcile_embeds(html_output, state, options.base_url)
    context["placeholders"].extend(embedded)

    logger.debug(
        f"Rendered {state.current_file_path or '<document>'}: "
        f"{len(context['metadata'].headings)} headings, "
        f"{len(context['placeholders'])} placeholders"
    )
    return html_output


class MarkdownRenderer:
    """
    Renders vault notes. One instance can serve any number of documents,
    concurrently or not: all per-document counters live in a fresh
    RenderState.

    Args:
        options: Pipeline switches and URL prefixes
        index_provider: Optional callable returning the vault file index
            (a FileIndex, a mapping or a list of vault paths). It is called
            once per document; if it fails, links resolve syntactically.
    """

    def __init__(
        self,
        options: Optional[RenderOptions] = None,
        index_provider: Optional[Callable[[], object]] = None,
    ):
        self.options = options or RenderOptions()
        self.index_provider = index_provider

    def _load_index(self, file_index) -> Optional[FileIndex]:
        if file_index is None and self.index_provider is not None:
            try:
                file_index = self.index_provider()
            except Exception as exc:
                logger.warning(f"File index unavailable, using path-based resolution: {exc}")
                return None
        return FileIndex.coerce(file_index)

    def render(self, text: str, current_file_path: Optional[str] = None, file_index=None) -> RenderResult:
        state = RenderState(
            current_file_path=current_file_path,
            file_index=self._load_index(file_index),
        )
        context = {"options": self.options, "state": state}
        html_output = render_markdown(text, context)
        return RenderResult(
            html=html_output,
            metadata=context.get("metadata") or DocumentMetadata(),
            placeholders=list(context["placeholders"]),
            front_matter=context["front_matter"],
        )


def render_document(
    text: str,
    current_file_path: Optional[str] = None,
    file_index=None,
    options: Optional[RenderOptions] = None,
) -> RenderResult:
    """Render one note with a throwaway MarkdownRenderer."""
    return MarkdownRenderer(options).render(text, current_file_path, file_index)


def fallback_html(text: str) -> str:
    """Escaped raw text, for callers that show something when rendering fails."""
    return f'<pre class="markdown-fallback">{html.escape(text)}</pre>'
