"""Key/value stores backing the resolution cache."""

from __future__ import annotations

import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Iterable, Iterator, Mapping, Optional, Protocol

import fasteners

from cpresolve.errors import CacheIOError

LOGGER = logging.getLogger(__name__)


class CacheStore(Protocol):
    def get_many(self, keys: Iterable[str]) -> Dict[str, str]:
        """Return the stored value of every key present, last write wins."""

    def put_many(self, items: Mapping[str, str]) -> None:
        """Persist all items in one locked operation."""

    def clear(self) -> None:
        """Drop every entry."""

    def close(self) -> None:
        """Release any open handle."""


class MemoryCacheStore:
    """Process-local store, used where nothing should touch the disk."""

    def __init__(self) -> None:
        self.entries: Dict[str, str] = {}
        self.writes = 0
        self.closed = False

    def get_many(self, keys: Iterable[str]) -> Dict[str, str]:
        return {key: self.entries[key] for key in keys if key in self.entries}

    def put_many(self, items: Mapping[str, str]) -> None:
        self.entries.update(items)
        self.writes += 1

    def clear(self) -> None:
        self.entries.clear()

    def close(self) -> None:
        self.closed = True


class FileCacheStore:
    """Append-only ``key=value`` text file shared between processes.

    Reads and appends both hold an exclusive inter-process lock on a sibling
    ``.lock`` file for their whole duration.
    """

    def __init__(self, path: Path, *, lock_timeout: Optional[float] = None) -> None:
        self.path = Path(path)
        self.lock_path = self.path.with_name(self.path.name + ".lock")
        self.lock_timeout = lock_timeout

    @contextmanager
    def locked(self) -> Iterator[None]:
        lock = fasteners.InterProcessLock(str(self.lock_path))
        try:
            acquired = lock.acquire(blocking=True, timeout=self.lock_timeout)
        except OSError as exc:
            raise CacheIOError(f"Cannot lock cache {self.lock_path}: {exc}") from exc
        if not acquired:
            raise CacheIOError(
                f"Timed out after {self.lock_timeout}s waiting for cache lock {self.lock_path}"
            )
        try:
            yield
        finally:
            lock.release()

    def get_many(self, keys: Iterable[str]) -> Dict[str, str]:
        wanted = set(keys)
        found: Dict[str, str] = {}
        with self.locked():
            try:
                with self.path.open("r", encoding="utf-8") as handle:
                    for line in handle:
                        key, sep, value = line.rstrip("\n").partition("=")
                        if sep and key in wanted:
                            found[key] = value
            except FileNotFoundError:
                LOGGER.debug("Cache file %s does not exist yet", self.path)
            except OSError as exc:
                raise CacheIOError(f"Cannot read cache {self.path}: {exc}") from exc
        return found

    def put_many(self, items: Mapping[str, str]) -> None:
        for key, value in items.items():
            if "\n" in key or "\n" in value or "=" in key:
                raise CacheIOError(f"Cache entry '{key}' cannot be stored as a single line")
        with self.locked():
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                with self.path.open("a", encoding="utf-8") as handle:
                    for key, value in items.items():
                        handle.write(f"{key}={value}\n")
            except OSError as exc:
                raise CacheIOError(f"Cannot append to cache {self.path}: {exc}") from exc

    def clear(self) -> None:
        with self.locked():
            try:
                self.path.unlink(missing_ok=True)
            except OSError as exc:
                raise CacheIOError(f"Cannot delete cache {self.path}: {exc}") from exc

    def close(self) -> None:
        """Nothing stays open between operations."""


class SQLiteCacheStore:
    """Embedded database store; a key holds only its latest value."""

    def __init__(self, db_path: Path, *, lock_timeout: Optional[float] = None) -> None:
        self.db_path = Path(db_path)
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            self._conn = sqlite3.connect(
                self.db_path, timeout=lock_timeout if lock_timeout is not None else 5.0
            )
            self._conn.execute("PRAGMA journal_mode=WAL;")
            self._conn.execute("PRAGMA synchronous=NORMAL;")
            self._ensure_schema()
        except sqlite3.Error as exc:
            raise CacheIOError(f"Cannot open cache database {self.db_path}: {exc}") from exc

    @property
    def connection(self) -> sqlite3.Connection:
        return self._conn

    def close(self) -> None:
        self._conn.close()

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        try:
            yield self._conn
            self._conn.commit()
        except sqlite3.Error as exc:
            self._conn.rollback()
            raise CacheIOError(f"Cache database error in {self.db_path}: {exc}") from exc
        except Exception:
            self._conn.rollback()
            raise

    def _ensure_schema(self) -> None:
        with self.transaction() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS entries (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at TEXT DEFAULT CURRENT_TIMESTAMP
                )
                """
            )

    def get_many(self, keys: Iterable[str]) -> Dict[str, str]:
        wanted = list(keys)
        if not wanted:
            return {}
        placeholders = ", ".join("?" for _ in wanted)
        try:
            rows = self._conn.execute(
                f"SELECT key, value FROM entries WHERE key IN ({placeholders})", wanted
            ).fetchall()
        except sqlite3.Error as exc:
            raise CacheIOError(f"Cannot read cache database {self.db_path}: {exc}") from exc
        return {key: value for key, value in rows}

    def put_many(self, items: Mapping[str, str]) -> None:
        with self.transaction() as conn:
            conn.executemany(
                """
                INSERT INTO entries(key, value) VALUES (?, ?)
                ON CONFLICT(key) DO UPDATE SET
                    value = excluded.value,
                    updated_at = CURRENT_TIMESTAMP
                """,
                list(items.items()),
            )

    def clear(self) -> None:
        with self.transaction() as conn:
            conn.execute("DELETE FROM entries")
