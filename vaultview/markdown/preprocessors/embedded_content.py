# vaultview/markdown/preprocessors/embedded_content.py
"""
Preprocessor that pulls diagram and track blocks out of the markdown.

Pandoc would render these as plain code blocks, so they are swapped for
placeholder tokens before parsing and described by PlaceholderRecords that a
viewer uses to mount the real widgets.

Converts:
    ```mermaid              →  MERMAID_PLACEHOLDER_mermaid_0
    graph TD; A-->B
    ```

    ```gpx                  →  TRACK_PLACEHOLDER_track_0
    <gpx>...</gpx>
    ```

    ```gpx:Attachments/ride.gpx```   →  TRACK_PLACEHOLDER_track_1

    ```leaflet              →  TRACK_PLACEHOLDER_track_2
    gpx: [Attachments/a.gpx]
    ```

Each token is written as a paragraph of its own, so text directly above or
below a fence keeps its block structure.
"""

from __future__ import annotations

import logging
import re

import yaml

from ..models import PlaceholderKind, PlaceholderRecord, RenderState, TrackFileKind

logger = logging.getLogger(__name__)

MERMAID_FENCE_RE = re.compile(
    r"^(?P<indent>[ \t]*)```mermaid[ \t]*\r?\n"
    r"(?:(?P<body>.*?)\r?\n)?"
    r"[ \t]*```[ \t]*$",
    re.MULTILINE | re.DOTALL,
)

# One sweep for every shape keeps track numbering in document order.
TRACK_FENCE_RE = re.compile(
    r"^(?P<indent>[ \t]*)```(?P<kind>gpx|kml|leaflet|footprints)"
    r"(?:"
    r"[ \t]*:[ \t]*(?P<path>[^\n`]+?)[ \t]*(?:\r?\n[ \t]*)?```"
    r"|"
    r"[ \t]*\r?\n(?P<body>.*?)\r?\n[ \t]*```"
    r")[ \t]*$",
    re.MULTILINE | re.DOTALL,
)

CONFIG_KINDS = {TrackFileKind.LEAFLET, TrackFileKind.FOOTPRINTS}

# Opening or closing line of a fenced code block
FENCE_LINE_RE = re.compile(r"^[ \t]*(?P<fence>`{3,}|~{3,})(?P<info>.*)$")

_BLANK_BEFORE_RE = re.compile(r"(?:^|\n)[ \t]*\r?\n\Z")
_BLANK_AFTER_RE = re.compile(r"\A\r?\n[ \t]*(?:\r?\n|\Z)")


def fenced_block_spans(text: str) -> list[tuple[int, int]]:
    """
    Character spans of the fenced code blocks in ``text``.

    A fence closes on a line of the same character at least as long as the
    opening run, with nothing after it; an unclosed fence runs to the end of
    the text. Lines inside a block are never read as new fences.
    """
    spans: list[tuple[int, int]] = []
    opening: tuple[str, int, int] | None = None
    offset = 0
    for line in text.splitlines(keepends=True):
        match = FENCE_LINE_RE.match(line.rstrip("\r\n"))
        if opening is None:
            if match and not (match.group("fence")[0] == "`" and "`" in match.group("info")):
                fence = match.group("fence")
                opening = (fence[0], len(fence), offset)
        elif match and not match.group("info").strip():
            fence = match.group("fence")
            if fence[0] == opening[0] and len(fence) >= opening[1]:
                spans.append((opening[2], offset + len(line)))
                opening = None
        offset += len(line)
    if opening is not None:
        spans.append((opening[2], len(text)))
    return spans


def _nested(match: re.Match, spans: list[tuple[int, int]]) -> bool:
    """True when the match sits inside another fenced block."""
    return any(start < match.start() < end for start, end in spans)


def _as_block(match: re.Match, token: str) -> str:
    before = match.string[: match.start()]
    after = match.string[match.end() :]
    lead = "" if not before or _BLANK_BEFORE_RE.search(before) else "\n"
    trail = "" if not after or _BLANK_AFTER_RE.match(after) else "\n"
    return lead + match.group("indent") + token + trail


def extract_mermaid(text: str, state: RenderState) -> tuple[str, list[PlaceholderRecord]]:
    records: list[PlaceholderRecord] = []
    spans = fenced_block_spans(text)

    def replace(match: re.Match) -> str:
        if _nested(match, spans):
            return match.group(0)
        record = PlaceholderRecord(
            id=state.next_mermaid_id(),
            kind=PlaceholderKind.MERMAID,
            code=(match.group("body") or "").strip(),
        )
        records.append(record)
        return _as_block(match, record.token)

    return MERMAID_FENCE_RE.sub(replace, text), records


def parse_map_config(body: str, kind: TrackFileKind) -> dict | None:
    """
    Read the YAML body of a ```leaflet or ```footprints block.

    An empty body is an empty configuration. Returns None when the body is
    not a YAML mapping.
    """
    try:
        config = yaml.safe_load(body)
    except yaml.YAMLError as exc:
        logger.warning(f"Ignoring invalid {kind.value} configuration: {exc}")
        return None
    if config is None:
        return {}
    if not isinstance(config, dict):
        logger.warning(f"Ignoring {kind.value} configuration that is not a mapping")
        return None
    return config


def extract_tracks(text: str, state: RenderState) -> tuple[str, list[PlaceholderRecord]]:
    records: list[PlaceholderRecord] = []
    spans = fenced_block_spans(text)

    def replace(match: re.Match) -> str:
        if _nested(match, spans):
            return match.group(0)
        kind = TrackFileKind(match.group("kind"))
        path = match.group("path")
        body = match.group("body")

        config = None
        if kind in CONFIG_KINDS:
            if path is not None:
                return match.group(0)
            config = parse_map_config(body, kind)
            if config is None:
                return match.group(0)
        elif path is None and not (body or "").strip():
            # Empty literal block, nothing to map
            return match.group(0)

        record = PlaceholderRecord(
            id=state.next_track_id(),
            kind=PlaceholderKind.TRACK,
            code=path.strip() if path is not None else body.strip(),
            is_file_reference=path is not None,
            file_kind=kind,
            config=config,
        )
        records.append(record)
        return _as_block(match, record.token)

    return TRACK_FENCE_RE.sub(replace, text), records


def extract_embedded_content(
    text: str,
    state: RenderState | None = None,
    mermaid: bool = True,
    tracks: bool = True,
) -> tuple[str, list[PlaceholderRecord]]:
    """
    Replace mermaid and track fences with placeholder tokens.

    Mermaid blocks are taken first; the track sweep runs on the result.
    Unterminated fences, and fences shown inside another fenced block, do not
    match and stay in the text untouched.

    Args:
        text: Markdown with the front matter already removed
        state: Per-render counters; a fresh one is used when omitted
        mermaid: Extract ```mermaid blocks
        tracks: Extract ```gpx / ```kml blocks and file references, and
            ```leaflet / ```footprints map configurations

    Returns:
        (rewritten text, placeholder records in extraction order)
    """
    state = state or RenderState()
    records: list[PlaceholderRecord] = []

    if mermaid:
        text, found = extract_mermaid(text, state)
        records.extend(found)
    if tracks:
        text, found = extract_tracks(text, state)
        records.extend(found)

    if records:
        logger.debug(f"Extracted {len(records)} embedded blocks")
    return text, records


def embedded_content_default(text: str, context: dict) -> str:
    """
    Default configuration for embedded content extraction.

    This is the function that should be registered in PREPROCESSORS.
    """
    options = context.get("options")
    state = context.setdefault("state", RenderState())
    text, records = extract_embedded_content(
        text,
        state,
        mermaid=options.enable_mermaid if options else True,
        tracks=options.enable_tracks if options else True,
    )
    context.setdefault("placeholders", []).extend(records)
    return text
