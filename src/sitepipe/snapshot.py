"""Source snapshot: an immutable relative-path -> file-text map of the project tree.

The snapshot is built once (see get_snapshot) and never refreshed while the
process runs; source edits are only visible to a new process.

Lookups normalize the requested path (empty segments dropped, '..' never
climbing above the root), so a caller can never reach a file outside the
indexed set.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Iterable, Iterator, Mapping

from sitepipe.core.utils.fs import walk_files


logger = logging.getLogger(__name__)

CONTENT_TYPE = "text/plain; charset=utf-8"
SOURCE_EXTENSIONS = (".rs", ".toml", ".css", ".html", ".py", ".md", ".yaml", ".json", ".ts")
SOURCE_EXCLUDES = ("target", "dist", "node_modules", "git", "frontend_rust", "build", "__pycache__")


class SourceNotFoundError(KeyError):
    """Raised when a normalized path is not in the snapshot."""

    def __init__(self, path: str):
        super().__init__(path)
        self.path = path


@dataclass(frozen=True)
class SourceFile:
    path: str
    content: str
    content_type: str = CONTENT_TYPE


def normalize_path(path: str) -> str:
    """Split on / and \\, drop empty segments, resolve '..' clamped at the root, rejoin with '/'.

    A '..' removes the preceding segment when there is one and is otherwise
    discarded, so the result never climbs above the snapshot root.
    """
    kept: list[str] = []
    for segment in path.replace("\\", "/").split("/"):
        if not segment:
            continue
        if segment == "..":
            if kept:
                kept.pop()
            continue
        kept.append(segment)
    return "/".join(kept)


def collect_sources(
    root: Path,
    extensions: Iterable[str] = SOURCE_EXTENSIONS,
    excluded: Iterable[str] = SOURCE_EXCLUDES,
    ) -> list[tuple[str, Path]]:
    """Return (relative_posix_path, absolute_path) pairs sorted by relative path."""
    root = Path(root).resolve()
    entries = [
        (p.relative_to(root).as_posix(), p)
        for p in walk_files(root, extensions, excluded)
    ]
    return sorted(entries, key=lambda e: e[0])


class SourceSnapshot(Mapping[str, str]):
    """Read-only mapping of relative path to file text."""

    def __init__(self, files: Mapping[str, str]):
        self._files = MappingProxyType(dict(files))

    @classmethod
    def build(
        cls,
        root: Path,
        extensions: Iterable[str] = SOURCE_EXTENSIONS,
        excluded: Iterable[str] = SOURCE_EXCLUDES,
        ) -> SourceSnapshot:
        """Walk root and read every matching file. Undecodable files are skipped with a warning."""
        files: dict[str, str] = {}
        for rel, path in collect_sources(root, extensions, excluded):
            try:
                files[rel] = path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as e:
                logger.warning("snapshot: skipping %s: %s", rel, e)
        logger.info("snapshot: indexed %d file(s) under %s", len(files), root)
        return cls(files)

    def __getitem__(self, path: str) -> str:
        return self._files[path]

    def __iter__(self) -> Iterator[str]:
        return iter(self._files)

    def __len__(self) -> int:
        return len(self._files)

    def lookup(self, path: str) -> SourceFile:
        """Resolve a caller-supplied path to its exact content; miss raises SourceNotFoundError."""
        key = normalize_path(path)
        try:
            return SourceFile(path=key, content=self._files[key])
        except KeyError:
            raise SourceNotFoundError(key) from None


@lru_cache(maxsize=None)
def get_snapshot(
    root: str,
    extensions: tuple[str, ...] = SOURCE_EXTENSIONS,
    excluded: tuple[str, ...] = SOURCE_EXCLUDES,
    ) -> SourceSnapshot:
    """Process-wide snapshot for root, built on first use and never rebuilt."""
    return SourceSnapshot.build(Path(root), extensions, excluded)
