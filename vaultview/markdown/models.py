from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, TypedDict


class PlaceholderKind(str, Enum):
    MERMAID = "mermaid"
    TRACK = "track"


class TrackFileKind(str, Enum):
    GPX = "gpx"
    KML = "kml"
    # YAML map configurations rather than track data
    LEAFLET = "leaflet"
    FOOTPRINTS = "footprints"


class LinkKind(str, Enum):
    FILE = "file"
    IMAGE = "image"
    EMBED = "embed"


@dataclass(frozen=True)
class PlaceholderRecord:
    """
    Content pulled out of a document for an external renderer.

    The token returned by ``token`` is what stands in the rendered HTML; a
    consumer swaps it for a diagram or map widget built from ``code``.
    """

    id: str
    kind: PlaceholderKind
    code: str
    is_file_reference: bool = False
    file_kind: TrackFileKind | None = None
    config: dict[str, Any] | None = field(default=None, compare=False)

    @property
    def token(self) -> str:
        return f"{self.kind.value.upper()}_PLACEHOLDER_{self.id}"

    def as_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "kind": self.kind.value,
            "code": self.code,
            "isFileReference": self.is_file_reference,
            "fileKind": self.file_kind.value if self.file_kind else None,
            "config": self.config,
            "placeholder": self.token,
        }


@dataclass(frozen=True)
class LinkTarget:
    raw_target: str
    display_text: str
    kind: LinkKind
    explicit_display: bool = False

    @property
    def path(self) -> str:
        """Target with any ``#heading`` fragment removed."""
        return self.raw_target.partition("#")[0].strip()

    @property
    def anchor(self) -> str:
        return self.raw_target.partition("#")[2].strip()

    @property
    def extension(self) -> str:
        name = self.path.rsplit("/", 1)[-1]
        if "." not in name:
            return ""
        return name.rsplit(".", 1)[-1].lower()


@dataclass(frozen=True)
class HeadingRecord:
    level: int
    text: str
    id: str


@dataclass(frozen=True)
class LinkRecord:
    target: str
    text: str


class TocEntry(TypedDict):
    level: int
    id: str
    title: str
    children: list["TocEntry"]


@dataclass
class DocumentMetadata:
    headings: list[HeadingRecord] = field(default_factory=list)
    links: list[LinkRecord] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)

    def toc(self) -> list[TocEntry]:
        from .extensions.metadata import nest_headings

        return nest_headings(self.headings)

    def as_dict(self) -> dict[str, Any]:
        return {
            "headings": [
                {"level": h.level, "text": h.text, "id": h.id} for h in self.headings
            ],
            "links": [{"target": link.target, "text": link.text} for link in self.links],
            "tags": list(self.tags),
        }


@dataclass
class RenderResult:
    html: str
    metadata: DocumentMetadata
    placeholders: list[PlaceholderRecord] = field(default_factory=list)
    front_matter: dict[str, Any] = field(default_factory=dict)

    def as_dict(self) -> dict[str, Any]:
        return {
            "html": self.html,
            "metadata": self.metadata.as_dict(),
            "placeholders": [record.as_dict() for record in self.placeholders],
            "frontMatter": dict(self.front_matter),
        }


@dataclass
class RenderState:
    """Counters and lookups that live for exactly one render call."""

    current_file_path: str | None = None
    file_index: Any = None
    mermaid_ids: itertools.count = field(default_factory=itertools.count)
    track_ids: itertools.count = field(default_factory=itertools.count)
    embed_ids: itertools.count = field(default_factory=itertools.count)
    tracks_extracted: int = 0
    # Source text of each wiki link hidden from the markdown reader
    wikilinks: list[str] = field(default_factory=list)

    def next_mermaid_id(self) -> str:
        return f"mermaid_{next(self.mermaid_ids)}"

    def next_track_id(self) -> str:
        self.tracks_extracted += 1
        return f"track_{next(self.track_ids)}"

    def next_embed_marker(self) -> str:
        return f"track-embed-{next(self.embed_ids)}"
