# vaultview/markdown/extensions/__init__.py

from .callouts import transform_callouts
from .heading_ids import assign_heading_ids, slugify_heading
from .highlights import transform_highlights
from .metadata import collect_metadata, nest_headings
from .obsidian_links import parse_link_target, resolve_obsidian_links
from .obsidian_tags import transform_tags


def obsidian_links_default(tree, context):
    return resolve_obsidian_links(tree, context["state"], context["options"])


def obsidian_tags_default(tree, context):
    return transform_tags(tree, context["options"])


def highlights_default(tree, context):
    return transform_highlights(tree, context["options"].highlight_class)


def callouts_default(tree, context):
    return transform_callouts(tree)


# (option flag, pass) - links must run before tags so "#" inside [[a#b]] is
# consumed as an anchor, never as a tag
EXTENSIONS = [
    ("enable_obsidian_links", obsidian_links_default),
    ("enable_tags", obsidian_tags_default),
    ("enable_highlights", highlights_default),
    ("enable_callouts", callouts_default),
]


def apply_extensions(tree, context):
    """Apply the enabled tree passes in order, then assign heading ids"""
    options = context["options"]
    for flag, extension in EXTENSIONS:
        if getattr(options, flag):
            extension(tree, context)
    assign_heading_ids(tree)
    return tree


__all__ = [
    "EXTENSIONS",
    "apply_extensions",
    "assign_heading_ids",
    "collect_metadata",
    "nest_headings",
    "parse_link_target",
    "resolve_obsidian_links",
    "slugify_heading",
    "transform_callouts",
    "transform_highlights",
    "transform_tags",
]
