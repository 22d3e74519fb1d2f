"""Shared tree walking and output writing helpers"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable, Iterator

from sitepipe.core.errors import OutputError


def is_pruned(name: str, excluded: Iterable[str]) -> bool:
    """True for hidden directories and directories named in excluded."""
    return name.startswith(".") or name in excluded


def walk_files(
    root: Path,
    extensions: Iterable[str],
    excluded: Iterable[str] = (),
    recursive: bool = True,
    ) -> Iterator[Path]:
    """Yield files under root whose suffix is in extensions, sorted per directory.

    Pruned directories (hidden or excluded) are never descended into.
    A missing root yields nothing.
    """
    root = Path(root)
    if not root.is_dir():
        return
    suffixes = {e.lower() for e in extensions}
    excluded = frozenset(excluded)
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(d for d in dirnames if not is_pruned(d, excluded)) if recursive else []
        for name in sorted(filenames):
            path = Path(dirpath) / name
            if path.suffix.lower() in suffixes:
                yield path


def write_text(path: Path, text: str, stage: str) -> Path:
    """Write text to path, creating parents; any OSError becomes a fatal OutputError."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    except OSError as e:
        raise OutputError(stage, path, e) from e
    return path
