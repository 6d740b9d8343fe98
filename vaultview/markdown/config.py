import os
from dataclasses import dataclass, field

DEFAULT_BASE_URL = "/vault"

# Reader extensions layered on top of Pandoc's own markdown dialect.
# auto_identifiers is off because heading ids are assigned by the pipeline.
_READER_EXTENSIONS = [
    "-smart",
    "-auto_identifiers",
    "-citations",
    "+autolink_bare_uris",
    "+strikeout",
    "+task_lists",
    "+pipe_tables",
    "+footnotes",
    "+fenced_code_attributes",
    "+raw_html",
]


@dataclass(frozen=True)
class RenderOptions:
    """
    Switches and naming used by the rendering pipeline.

    The options object is read-only and may be shared by any number of
    concurrent renders.
    """

    enable_mermaid: bool = True
    enable_tracks: bool = True
    enable_obsidian_links: bool = True
    enable_tags: bool = True
    enable_highlights: bool = True
    enable_callouts: bool = True
    enable_math: bool = True
    enable_code_highlight: bool = True
    wrap_tables: bool = True
    mark_external_links: bool = True
    frontmatter_tags: bool = True
    soft_breaks_as_line_breaks: bool = False

    # Vault files (images, tracks, media) are served below this prefix
    base_url: str = DEFAULT_BASE_URL
    # Hash-routed note links: "#/Folder/Note"
    link_prefix: str = "#"
    tag_prefix: str = "#tag:"
    highlight_class: str = "cm-highlight"
    site_hosts: tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def from_env(cls, **overrides) -> "RenderOptions":
        """Build options, taking the vault base URL from VAULTVIEW_BASE_URL."""
        base_url = os.environ.get("VAULTVIEW_BASE_URL")
        if base_url and "base_url" not in overrides:
            overrides["base_url"] = base_url
        return cls(**overrides)


def get_pandoc_config(options: RenderOptions | None = None) -> dict:
    """
    Configuration for pypandoc/Pandoc markdown reading and HTML writing.

    Documents are read into Pandoc's JSON AST, rewritten by the vault
    extensions and written back out as HTML5, so reader and writer
    arguments are kept apart.

    Returns:
        Dictionary with keys: reader_format, writer_format, extra_args
    """
    options = options or RenderOptions()

    extensions = list(_READER_EXTENSIONS)
    extensions.append("+tex_math_dollars" if options.enable_math else "-tex_math_dollars")

    extra_args = ["--wrap=preserve"]
    if options.enable_math:
        # Math rendering with MathJax
        extra_args.append("--mathjax")
    if not options.enable_code_highlight:
        extra_args.append("--no-highlight")

    return {
        "reader_format": "markdown" + "".join(extensions),
        "writer_format": "html5",
        "extra_args": extra_args,
    }
