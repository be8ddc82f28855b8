"""Utility helpers for working with files."""

from __future__ import annotations

import os
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterable, Iterator, Optional


def iter_search_path(path: Optional[str] = None) -> Iterator[Path]:
    """Yield the directories of a PATH-style string, skipping empty entries."""
    value = os.environ.get("PATH", "") if path is None else path
    for entry in value.split(os.pathsep):
        if entry:
            yield Path(entry)


def find_executable(names: Iterable[str], path: Optional[str] = None) -> Optional[Path]:
    """Return the first ``dir/name`` that exists, scanning directories in order."""
    candidates = list(names)
    for directory in iter_search_path(path):
        for name in candidates:
            candidate = directory / name
            if candidate.is_file():
                return candidate
    return None


@contextmanager
def temporary_file(text: str, *, prefix: str, suffix: str) -> Iterator[Path]:
    """Write ``text`` to a uniquely named file that is removed on exit."""
    fd, name = tempfile.mkstemp(prefix=prefix, suffix=suffix)
    path = Path(name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(text)
        yield path
    finally:
        path.unlink(missing_ok=True)
