from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

from clear_tools.common import to_mb

# Files whose (lower-case) name contain any of these are never proposed for removal;
# this protects notebooks, notebook checkpoints, and canvas-tool state
PROTECTED_NAME_PARTS = ("ipynb", "canvas")

_LOG = logging.getLogger("scanner")


@dataclass(frozen=True)
class Candidate:
    path: Path
    size_bytes: int

    @property
    def size_mb(self) -> int:
        return to_mb(self.size_bytes)


def is_protected(name: str) -> bool:
    name = name.lower()

    return any(part in name for part in PROTECTED_NAME_PARTS)


def walk(root: Path) -> Iterator[os.DirEntry[str]]:
    """Yields all entries below `root`, depth first and in name order. Folders that
    cannot be listed are logged and skipped. Symlinks to folders are not followed."""
    try:
        with os.scandir(root) as handle:
            entries = sorted(handle, key=lambda it: it.name)
    except OSError as error:
        _LOG.warning("skipping unreadable folder %s: %s", root, error)
        return

    for it in entries:
        yield it

        try:
            is_dir = it.is_dir(follow_symlinks=False)
        except OSError as error:
            _LOG.warning("skipping %s: %s", it.path, error)
            continue

        if is_dir:
            yield from walk(Path(it.path))


def scan(root: Path, size_threshold_mb: int) -> Iterator[Candidate]:
    for it in walk(root):
        try:
            if not it.is_file(follow_symlinks=False):
                continue

            stats = it.stat(follow_symlinks=False)
        except OSError as error:
            _LOG.warning("failed to read metadata for %s: %s", it.path, error)
            continue

        if is_protected(it.name):
            _LOG.debug("skipping protected file %s", it.path)
            continue

        candidate = Candidate(path=Path(it.path), size_bytes=stats.st_size)
        if candidate.size_mb >= size_threshold_mb:
            _LOG.info("found large file %s (%i MB)", it.path, candidate.size_mb)
            yield candidate
