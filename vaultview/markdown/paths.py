# vaultview/markdown/paths.py
"""
Vault path resolution for wiki-style link targets.

Resolution is purely syntactic unless a FileIndex is supplied, in which case
the syntactic path is confirmed against the index and, failing that, the
index's name lookup gets a chance.
"""

from __future__ import annotations

import logging
import re
from typing import Iterable, Mapping

logger = logging.getLogger(__name__)

_EXTENSION_RE = re.compile(r"\.[A-Za-z0-9]+$")
_INDEXED_EXTENSION_RE = re.compile(r"\.(md|txt|gpx|kml)$", re.IGNORECASE)
_NOTE_EXTENSION_RE = re.compile(r"\.(md|txt)$")
_ABSOLUTE_URL_RE = re.compile(r"^[a-z][a-z0-9+.-]*://", re.IGNORECASE)


def is_absolute_url(target: str) -> bool:
    return bool(_ABSOLUTE_URL_RE.match(target))


def has_extension(path: str) -> bool:
    return bool(_EXTENSION_RE.search(path.rsplit("/", 1)[-1]))


def _normalize(path: str) -> str | None:
    segments: list[str] = []
    for segment in path.split("/"):
        if segment in ("", "."):
            continue
        if segment == "..":
            if not segments:
                # Climbs above the vault root
                return None
            segments.pop()
            continue
        segments.append(segment)
    return "/" + "/".join(segments)


def current_directory(current_file_path: str | None) -> str:
    """Vault directory holding the current document, "/" when unknown."""
    if not current_file_path:
        return "/"
    parent = current_file_path.rsplit("/", 1)[0] if "/" in current_file_path else ""
    return _normalize(parent) or "/"


def build_link_path(target: str, current_file_path: str | None = None) -> str | None:
    """
    Combine a link target with the current document's directory.

    Args:
        target: Link target without display text or #fragment
        current_file_path: Vault path of the document holding the link

    Returns:
        Vault-absolute path, or None when the target is empty or climbs out
        of the vault
    """
    target = target.strip()
    if not target:
        return None

    if target.startswith("/"):
        joined = target
    else:
        joined = current_directory(current_file_path).rstrip("/") + "/" + target

    path = _normalize(joined)
    if path is None or path == "/":
        return None
    if not has_extension(path):
        path += ".md"
    return path


def _canonical(path: str) -> str:
    return path if path.startswith("/") else "/" + path


class FileIndex:
    """
    Case-insensitive lookup from link spellings to canonical vault paths.

    Either wrap an existing mapping (already keyed by spelling) or build one
    from the vault's file list with ``from_paths``.
    """

    def __init__(self, entries: Mapping[str, str] | None = None):
        self._entries: dict[str, str] = {}
        for key, path in (entries or {}).items():
            self._entries[key.lower()] = _canonical(path)

    @classmethod
    def from_paths(cls, paths: Iterable[str]) -> "FileIndex":
        index = cls()
        for raw_path in paths:
            path = _canonical(raw_path)
            name = path.rsplit("/", 1)[-1]
            if not name:
                continue
            index.add(name, path)
            stripped = _INDEXED_EXTENSION_RE.sub("", name)
            if stripped != name:
                index.add(stripped, path)
            index.add(path, path)
            index.add(path[1:], path)
            if "/Attachments/" in path:
                attachment = path.split("/Attachments/", 1)[1]
                if attachment:
                    index.add(f"attachments/{attachment}", path)
        logger.debug(f"Built file index with {len(index)} keys")
        return index

    @classmethod
    def coerce(cls, value: "FileIndex | Mapping[str, str] | Iterable[str] | None") -> "FileIndex | None":
        if value is None or isinstance(value, FileIndex):
            return value
        if isinstance(value, Mapping):
            return cls(value)
        return cls.from_paths(value)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return key.lower() in self._entries

    def add(self, key: str, path: str) -> None:
        self._entries[key.lower()] = _canonical(path)

    def get(self, key: str) -> str | None:
        return self._entries.get(key.lower())

    def find(self, link_path: str) -> str | None:
        """
        Look a link target up by the spellings Obsidian accepts.

        Tries, in order: the target itself, the target with ``.md``, the
        target without a ``.md``/``.txt`` extension, its last path segment
        (with and without ``.md``), then any indexed path ending with it.
        """
        link_path = link_path.strip()
        if not link_path:
            return None
        key = link_path.lower()

        for candidate in (key, f"{key}.md", _NOTE_EXTENSION_RE.sub("", link_path).lower()):
            match = self._entries.get(candidate)
            if match:
                return match

        file_name = key.rsplit("/", 1)[-1]
        if file_name and file_name != key:
            for candidate in (file_name, f"{file_name}.md"):
                match = self._entries.get(candidate)
                if match:
                    return match

        suffixes = (f"/{key.lstrip('/')}", f"/{key.lstrip('/')}.md")
        for entry, path in self._entries.items():
            if entry.endswith(suffixes):
                return path
        return None


def resolve_link_path(
    target: str,
    current_file_path: str | None = None,
    file_index: FileIndex | None = None,
) -> str | None:
    """
    Resolve a link target to a vault path.

    Without an index the directory-relative rule is the answer. With an index
    the syntactic path wins when the index knows it; otherwise the index's
    name lookup decides, and a miss is unresolved.
    """
    candidate = build_link_path(target, current_file_path)
    if file_index is None:
        return candidate
    if candidate is not None:
        match = file_index.get(candidate)
        if match:
            return match
    if target.strip().startswith(("./", "../")):
        return None
    return file_index.find(target)
