# vaultview/markdown/postprocessors/embed_reconciler.py
"""
Swap track-embed markers left by ``![[ride.gpx]]`` links for placeholders.

The link pass only knows where a track embed sits once the tree is built, so
its markers are collected here, after serialisation, and recorded the same
way as tracks taken from fenced blocks.

Converts:
    <span class="track-embed" data-track-type="gpx"
          data-track-url="/vault/Trips/ride.gpx" data-track-id="track-embed-0"></span>
    →  TRACK_PLACEHOLDER_track_2
"""

from __future__ import annotations

import itertools
import logging

from bs4 import BeautifulSoup

from ..config import DEFAULT_BASE_URL
from ..models import PlaceholderKind, PlaceholderRecord, RenderState, TrackFileKind

logger = logging.getLogger(__name__)


def _vault_path(url: str, base_url: str) -> str:
    prefix = base_url.rstrip("/")
    if prefix and url.startswith(prefix + "/"):
        return url[len(prefix) :]
    return url


def reconcile_embeds(
    html: str,
    state: RenderState | None = None,
    base_url: str = DEFAULT_BASE_URL,
) -> tuple[str, list[PlaceholderRecord]]:
    """
    Replace track-embed markers with placeholder tokens.

    Ids continue after the tracks the extractor already numbered, so one
    document never carries the same track id twice.

    Args:
        html: Serialised document
        state: Render state of the same document
        base_url: Prefix stripped from marker URLs to recover vault paths

    Returns:
        (html, records for the markers found, in document order)
    """
    if "track-embed" not in html:
        return html, []

    state = state or RenderState()
    soup = BeautifulSoup(html, "html.parser")
    markers = [
        marker
        for marker in soup.find_all(class_="track-embed")
        if marker.get("data-track-type") and marker.get("data-track-url")
    ]
    if not markers:
        return html, []

    ids = itertools.count(state.tracks_extracted)
    records: list[PlaceholderRecord] = []
    for marker in markers:
        track_type = marker["data-track-type"].lower()
        try:
            file_kind = TrackFileKind(track_type)
        except ValueError:
            logger.warning(f"Skipping track embed of unknown type {track_type!r}")
            continue

        record = PlaceholderRecord(
            id=f"track_{next(ids)}",
            kind=PlaceholderKind.TRACK,
            code=_vault_path(marker["data-track-url"], base_url),
            is_file_reference=True,
            file_kind=file_kind,
        )
        marker.replace_with(record.token)
        records.append(record)

    logger.debug(f"Reconciled {len(records)} track embeds")
    return str(soup), records
