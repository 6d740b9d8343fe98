# vaultview/markdown/preprocessors/__init__.py

from .embedded_content import embedded_content_default, extract_embedded_content
from .front_matter import front_matter_default, split_front_matter
from .wikilinks import protect_wikilinks, wikilinks_default

PREPROCESSORS = [
    front_matter_default,  # Must be first: later stages never see the YAML block
    embedded_content_default,  # Mermaid first, then tracks
    wikilinks_default,  # After extraction so fence bodies keep their [[...]] text
    # Order matters - they run sequentially
]


def apply_preprocessors(text, context):
    """Apply all preprocessors in order"""
    for processor in PREPROCESSORS:
        text = processor(text, context)
    return text


__all__ = [
    "PREPROCESSORS",
    "apply_preprocessors",
    "extract_embedded_content",
    "protect_wikilinks",
    "split_front_matter",
]
