# vaultview/markdown/postprocessors/__init__.py

from .embed_reconciler import reconcile_embeds
from .frontmatter_tags import frontmatter_tags_default
from .modify_external_links import modify_external_links
from .table_enhancer import table_enhancer_default

POSTPROCESSORS = [
    table_enhancer_default,  # Wrap tables in a scrollable .table-container
    modify_external_links,  # target="_blank" and .external-link on off-site links
    frontmatter_tags_default,  # Tag badges from the front matter, prepended
    # Order matters - they run sequentially
]


def apply_postprocessors(html, context):
    """Apply all postprocessors in order"""
    for processor in POSTPROCESSORS:
        html = processor(html, context)
    return html


__all__ = ["POSTPROCESSORS", "apply_postprocessors", "reconcile_embeds"]
