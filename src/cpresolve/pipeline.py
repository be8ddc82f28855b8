"""End-to-end resolution: expand, look up, resolve with Maven, cache."""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from cpresolve import coordinates
from cpresolve.cache.resolution import ResolutionCache
from cpresolve.cache.store import FileCacheStore, SQLiteCacheStore
from cpresolve.config import AppConfig
from cpresolve.errors import InvalidCoordinateError
from cpresolve.maven import descriptor
from cpresolve.maven.invoker import MavenInvoker
from cpresolve.maven.output import OutputParser
from cpresolve.models import ResolvedDependencies
from cpresolve.runtime.version import VersionResolver

LOGGER = logging.getLogger(__name__)

# Appended to the cache key ids so results with and without exclusions never collide.
EXCLUSIONS_KEY_MARKER = "!exclusions-applied"


def create_cache(config: AppConfig) -> ResolutionCache:
    path = config.resolve_cache_path()
    if config.cache_backend == "sqlite":
        return ResolutionCache(SQLiteCacheStore(path, lock_timeout=config.lock_timeout))
    return ResolutionCache(FileCacheStore(path, lock_timeout=config.lock_timeout))


class Pipeline:
    """Sequences version detection, expansion, caching and Maven resolution."""

    def __init__(
        self,
        config: AppConfig,
        *,
        cache: Optional[ResolutionCache] = None,
        invoker: Optional[MavenInvoker] = None,
        version_resolver: Optional[VersionResolver] = None,
    ) -> None:
        self.config = config
        if not config.use_cache:
            self.cache = None
        else:
            self.cache = cache if cache is not None else create_cache(config)
        self.invoker = invoker or MavenInvoker(
            config.mvn_executable, timeout=config.resolve_timeout
        )
        self.version_resolver = version_resolver or VersionResolver(
            explicit=config.scala_version
        )

    def expand(self, ids: Sequence[str]) -> List[str]:
        """Apply the Scala suffix to shorthand ids and validate every id."""
        if not ids:
            raise InvalidCoordinateError("", "no coordinates given")

        coordinates.parse_all(raw for raw in ids if not coordinates.is_shorthand(raw))

        expanded = list(ids)
        if self.config.force_scala or coordinates.any_shorthand(ids):
            scala_version = self.version_resolver.resolve()
            LOGGER.info("Using Scala version %s", scala_version)
            expanded = coordinates.expand_all(ids, scala_version)

        coordinates.parse_all(expanded)
        return expanded

    def cache_ids(self, expanded: Sequence[str]) -> List[str]:
        ids = list(expanded)
        if self.config.apply_exclusions:
            ids.append(EXCLUSIONS_KEY_MARKER)
        return ids

    def resolve(self, ids: Sequence[str]) -> ResolvedDependencies:
        expanded = self.expand(ids)
        key_ids = self.cache_ids(expanded)

        if self.cache is not None:
            cached = self.cache.lookup(key_ids)
            if cached is not None:
                return cached
        else:
            LOGGER.debug("Caching disabled, resolving with Maven")

        template = descriptor.load_template(self.config.template_path)
        pom = descriptor.generate(
            expanded, template, apply_exclusions=self.config.apply_exclusions
        )
        LOGGER.debug("Generated POM:\n%s", pom)
        parser = OutputParser(descriptor.project_identity(template))

        output = self.invoker.invoke(pom)
        resolved = parser.parse(output, descriptor=pom)

        if self.cache is not None:
            self.cache.store(key_ids, resolved)
        return resolved

    def clear_cache(self) -> None:
        if self.cache is not None:
            self.cache.clear()
            return
        cache = create_cache(self.config)
        try:
            cache.clear()
        finally:
            cache.close()

    def close(self) -> None:
        if self.cache is not None:
            self.cache.close()

    def __enter__(self) -> "Pipeline":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    @staticmethod
    def render(deps: ResolvedDependencies, *, show_tree: bool = False) -> str:
        if show_tree:
            return "\n".join(deps.tree)
        return deps.classpath
