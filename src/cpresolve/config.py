"""Application configuration defaults."""

from __future__ import annotations

import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

CACHE_FILE_ENV_VAR = "CPRESOLVE_CACHE_FILE"
TEMPLATE_ENV_VAR = "CPRESOLVE_POM_TEMPLATE"
CACHE_BACKENDS = ("file", "sqlite")


def _get_default_cache_path(backend: str = "file") -> Path:
    """Shared location in the system temporary directory."""
    name = "cpresolve.cache" if backend == "file" else "cpresolve-cache.db"
    return Path(tempfile.gettempdir()) / name


@dataclass(slots=True)
class AppConfig:
    cache_path: Path | None = None
    cache_backend: str = "file"
    use_cache: bool = True
    template_path: Path | None = None
    scala_version: str | None = None
    force_scala: bool = False
    apply_exclusions: bool = False
    mvn_executable: str = "mvn"
    resolve_timeout: float | None = 600.0
    lock_timeout: float | None = 60.0

    def __post_init__(self) -> None:
        if self.cache_backend not in CACHE_BACKENDS:
            raise ValueError(
                f"Unknown cache backend '{self.cache_backend}', expected one of {CACHE_BACKENDS}"
            )

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, **overrides) -> "AppConfig":
        """Build a config where explicit overrides beat environment variables."""
        env = os.environ if environ is None else environ
        config = cls(**{key: value for key, value in overrides.items() if value is not None})
        if config.cache_path is None and env.get(CACHE_FILE_ENV_VAR):
            config.cache_path = Path(env[CACHE_FILE_ENV_VAR])
        if config.template_path is None and env.get(TEMPLATE_ENV_VAR):
            config.template_path = Path(env[TEMPLATE_ENV_VAR])
        return config

    def resolve_cache_path(self) -> Path:
        if self.cache_path is None:
            return _get_default_cache_path(self.cache_backend)
        return Path(self.cache_path)
