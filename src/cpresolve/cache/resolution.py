"""Resolution results cached under a hash of the requested coordinates."""

from __future__ import annotations

import hashlib
import logging
from typing import Optional, Sequence

from cpresolve.cache.store import CacheStore
from cpresolve.models import ResolvedDependencies

LOGGER = logging.getLogger(__name__)

SEPARATOR = "&"
PATH_FIELD = "path"
TREE_FIELD = "tree"


def cache_key(ids: Sequence[str]) -> str:
    """MD5 digest of the ordered ids; order matters."""
    return hashlib.md5(SEPARATOR.join(ids).encode("utf-8")).hexdigest()


class ResolutionCache:
    """Stores classpath and tree as ``<key>.path`` and ``<key>.tree`` entries."""

    def __init__(self, backend: CacheStore) -> None:
        self.backend = backend

    @staticmethod
    def field_keys(ids: Sequence[str]) -> tuple[str, str]:
        key = cache_key(ids)
        return f"{key}.{PATH_FIELD}", f"{key}.{TREE_FIELD}"

    def lookup(self, ids: Sequence[str]) -> Optional[ResolvedDependencies]:
        """Return cached dependencies, or None unless both fields are present."""
        path_key, tree_key = self.field_keys(ids)
        entries = self.backend.get_many([path_key, tree_key])
        classpath = entries.get(path_key)
        tree = entries.get(tree_key)
        if classpath is None or tree is None:
            LOGGER.debug("Cache miss for %s", cache_key(ids))
            return None

        lines = tree.split(SEPARATOR) if tree else []
        resolved = ResolvedDependencies.of(classpath, lines)
        if not resolved.is_valid:
            return None
        LOGGER.debug("Cache hit for %s", cache_key(ids))
        return resolved

    def store(self, ids: Sequence[str], deps: ResolvedDependencies) -> None:
        path_key, tree_key = self.field_keys(ids)
        self.backend.put_many(
            {
                path_key: deps.classpath,
                tree_key: SEPARATOR.join(deps.tree),
            }
        )

    def clear(self) -> None:
        self.backend.clear()

    def close(self) -> None:
        self.backend.close()
