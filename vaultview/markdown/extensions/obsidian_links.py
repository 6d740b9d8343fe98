# vaultview/markdown/extensions/obsidian_links.py
"""
Resolve Obsidian wiki links in the document tree.

Handles:
    [[Note]]                   → link to #/Folder/Note
    [[Folder/Note|Label]]      → link with custom text
    [[Note#Heading]]           → link carrying data-anchor
    [[Missing]]                → inert span.is-unresolved
    ![[photo.png|300]]         → image, 300px wide
    ![[ride.gpx]]              → track-embed marker (see embed_reconciler)
    ![[talk.mp4]]              → inline <video>
    ![[Other Note]]            → span.internal-embed
"""

from __future__ import annotations

import html
import logging
import re

from ..config import RenderOptions
from ..models import LinkKind, LinkTarget, RenderState
from ..paths import build_link_path, is_absolute_url, resolve_link_path
from ..preprocessors.wikilinks import TOKEN_RE, restore_tokens, token_source
from ..tree import Attr, Element, Image, Link, Raw, Span, Text, Tree
from .utils import rewrite_text

logger = logging.getLogger(__name__)

WIKILINK_RE = re.compile(r"(!?)\[\[([^\[\]]+)\]\]")
# Literal wiki links, or the tokens left for them by the wiki link preprocessor
_LINK_OR_TOKEN_RE = re.compile(rf"{WIKILINK_RE.pattern}|({TOKEN_RE.pattern})")
_SIZE_RE = re.compile(r"^(\d+)(?:x(\d+))?$")

IMAGE_EXTENSIONS = {"png", "jpg", "jpeg", "gif", "webp", "svg", "bmp", "avif"}
TRACK_EXTENSIONS = {"gpx", "kml"}
VIDEO_TYPES = {"mp4": "video/mp4", "webm": "video/webm", "ogv": "video/ogg", "mov": "video/quicktime"}
AUDIO_TYPES = {"mp3": "audio/mpeg", "wav": "audio/wav", "ogg": "audio/ogg", "m4a": "audio/mp4", "flac": "audio/flac"}


def parse_link_target(body: str, embed: bool = False) -> LinkTarget | None:
    """
    Parse the inside of ``[[...]]``.

    The first "|" separates the target from the display text (written "\\|"
    inside tables). Without display text the last path segment is shown,
    minus a ``.md`` suffix.
    """
    target, bar, display = body.replace("\\|", "|").partition("|")
    target = target.strip()
    display = display.strip()
    if not target:
        return None

    explicit = bool(bar and display)
    if not explicit:
        name = target.partition("#")[0].rstrip("/").rsplit("/", 1)[-1] or target
        display = name[:-3] if name.lower().endswith(".md") else name

    link = LinkTarget(raw_target=target, display_text=display, kind=LinkKind.FILE, explicit_display=explicit)
    if not embed:
        return link
    kind = LinkKind.IMAGE if link.extension in IMAGE_EXTENSIONS else LinkKind.EMBED
    return LinkTarget(target, display, kind, explicit)


def _strip_note_extension(path: str) -> str:
    return path[:-3] if path.endswith(".md") else path


class ObsidianLinkResolver:
    """Turns parsed link targets into tree nodes for one document."""

    def __init__(self, tree: Tree, state: RenderState, options: RenderOptions):
        self.tree = tree
        self.state = state
        self.options = options

    def resolve(self, link: LinkTarget) -> str | None:
        if not link.path:
            # [[#Heading]] points into the current document
            return self.state.current_file_path if link.anchor else None
        return resolve_link_path(link.path, self.state.current_file_path, self.state.file_index)

    def asset_url(self, link: LinkTarget) -> str:
        if is_absolute_url(link.path):
            return link.path
        path = self.resolve(link) or build_link_path(link.path, self.state.current_file_path)
        if path is None:
            path = "/" + link.path.lstrip("/")
        return self.options.base_url.rstrip("/") + path

    def build(self, link: LinkTarget) -> list[int]:
        if link.kind is LinkKind.IMAGE:
            return [self.image(link)]
        if link.kind is LinkKind.EMBED:
            return [self.embed(link)]
        return [self.file_link(link)]

    def _with_text(self, node, text: str) -> int:
        return self.tree.add(node, [self.tree.add(Text(text))])

    def file_link(self, link: LinkTarget) -> int:
        resolved = self.resolve(link)
        if resolved is None:
            attr = Attr(classes=["internal-link", "is-unresolved"], attributes=[("data-target", link.raw_target)])
            return self._with_text(Span(attr), link.display_text)

        attr = Attr(classes=["internal-link"], attributes=[("data-file-path", resolved)])
        if link.anchor:
            attr.set("data-anchor", link.anchor)
        url = self.options.link_prefix + _strip_note_extension(resolved)
        return self._with_text(Link(url=url, attr=attr), link.display_text)

    def image(self, link: LinkTarget) -> int:
        attr = Attr(classes=["obsidian-image"], attributes=[("data-vault-image", link.path)])
        alt = link.display_text
        size = _SIZE_RE.match(link.display_text) if link.explicit_display else None
        if size:
            attr.set("width", size.group(1))
            if size.group(2):
                attr.set("height", size.group(2))
            alt = link.path.rsplit("/", 1)[-1]
        return self._with_text(Image(url=self.asset_url(link), attr=attr), alt)

    def embed(self, link: LinkTarget) -> int:
        extension = link.extension
        if extension in TRACK_EXTENSIONS:
            return self.track_marker(link)
        if extension == "pdf":
            markup = '<iframe class="pdf-embed" src="{}" title="{}" loading="lazy"></iframe>'.format(
                html.escape(self.asset_url(link)), html.escape(link.display_text)
            )
            return self.tree.add(Raw(markup))
        if extension in VIDEO_TYPES:
            markup = '<video class="video-embed" controls preload="metadata"><source src="{}" type="{}"></video>'.format(
                html.escape(self.asset_url(link)), VIDEO_TYPES[extension]
            )
            return self.tree.add(Raw(markup))
        if extension in AUDIO_TYPES:
            markup = '<audio class="audio-embed" controls preload="metadata"><source src="{}" type="{}"></audio>'.format(
                html.escape(self.asset_url(link)), AUDIO_TYPES[extension]
            )
            return self.tree.add(Raw(markup))

        resolved = self.resolve(link)
        attr = Attr(classes=["internal-embed"])
        if resolved is None:
            attr.classes.append("is-unresolved")
            attr.set("data-target", link.raw_target)
        else:
            attr.set("data-file-path", resolved)
        return self._with_text(Span(attr), link.display_text)

    def track_marker(self, link: LinkTarget) -> int:
        """Empty element picked up by the embed reconciler after serialisation."""
        markup = '<span class="track-embed" data-track-type="{}" data-track-url="{}" data-track-id="{}"></span>'.format(
            html.escape(link.extension),
            html.escape(self.asset_url(link)),
            html.escape(self.state.next_embed_marker()),
        )
        return self.tree.add(Raw(markup))


def restore_protected_text(tree: Tree, sources: list[str]) -> None:
    """Write the source text back for tokens the link pass did not consume."""

    def restore(value):
        if isinstance(value, str):
            return restore_tokens(value, sources)
        if isinstance(value, list):
            return [restore(item) for item in value]
        if isinstance(value, dict):
            return {key: restore(item) for key, item in value.items()}
        return value

    for node_id, _ in tree.walk():
        node = tree[node_id]
        if isinstance(node, Text):
            node.value = restore(node.value)
        elif isinstance(node, Raw):
            node.text = restore(node.text)
        elif isinstance(node, Element):
            node.template = restore(node.template)
        elif isinstance(node, (Link, Image)):
            node.url = restore(node.url)
            node.title = restore(node.title)
        attr = getattr(node, "attr", None)
        if attr is not None:
            attr.id = restore(attr.id)
            attr.classes = restore(attr.classes)
            attr.attributes = [(key, restore(value)) for key, value in attr.attributes]


def resolve_obsidian_links(
    tree: Tree,
    state: RenderState | None = None,
    options: RenderOptions | None = None,
) -> int:
    """
    Replace ``[[...]]`` and ``![[...]]`` in text nodes with link, image,
    embed or unresolved nodes. Text inside existing links is not touched.

    Wiki links hidden by the preprocessor are read from ``state.wikilinks``;
    any that end up in code, math, raw HTML or link text get their source
    text back.

    Returns:
        Number of wiki links replaced
    """
    state = state or RenderState()
    resolver = ObsidianLinkResolver(tree, state, options or RenderOptions())

    def build(match: re.Match) -> list[int] | None:
        if match.group(3):
            source = token_source(match.group(3), state.wikilinks)
            literal = WIKILINK_RE.fullmatch(source) if source else None
            if literal is None:
                return None
            link = parse_link_target(literal.group(2), embed=bool(literal.group(1)))
            if link is None:
                return [tree.add(Text(source))]
            return resolver.build(link)

        link = parse_link_target(match.group(2), embed=bool(match.group(1)))
        if link is None:
            return None
        return resolver.build(link)

    count = rewrite_text(tree, _LINK_OR_TOKEN_RE, build)
    if state.wikilinks:
        restore_protected_text(tree, state.wikilinks)
    if count:
        logger.debug(f"Resolved {count} wiki links")
    return count
