"""Tests for application configuration."""

from __future__ import annotations

import tempfile
from pathlib import Path

import pytest

from cpresolve.config import CACHE_FILE_ENV_VAR, TEMPLATE_ENV_VAR, AppConfig


class TestAppConfig:
    """Test AppConfig dataclass."""

    def test_default_config(self) -> None:
        """Should create config with default values."""
        config = AppConfig()

        assert config.cache_path is None
        assert config.cache_backend == "file"
        assert config.use_cache is True
        assert config.apply_exclusions is False
        assert config.mvn_executable == "mvn"
        assert config.resolve_timeout == 600.0
        assert config.lock_timeout == 60.0

    def test_unknown_backend(self) -> None:
        with pytest.raises(ValueError, match="redis"):
            AppConfig(cache_backend="redis")

    def test_default_cache_path_in_tempdir(self) -> None:
        """Should share one file in the system temp directory."""
        resolved = AppConfig().resolve_cache_path()

        assert resolved == Path(tempfile.gettempdir()) / "cpresolve.cache"

    def test_default_sqlite_path(self) -> None:
        resolved = AppConfig(cache_backend="sqlite").resolve_cache_path()

        assert resolved.name == "cpresolve-cache.db"

    def test_explicit_cache_path(self) -> None:
        assert AppConfig(cache_path=Path("/x/c")).resolve_cache_path() == Path("/x/c")


class TestFromEnv:
    """Test AppConfig.from_env."""

    def test_reads_environment(self) -> None:
        config = AppConfig.from_env(
            {CACHE_FILE_ENV_VAR: "/env/cache", TEMPLATE_ENV_VAR: "/env/pom.xml"}
        )

        assert config.cache_path == Path("/env/cache")
        assert config.template_path == Path("/env/pom.xml")

    def test_overrides_beat_environment(self) -> None:
        config = AppConfig.from_env(
            {TEMPLATE_ENV_VAR: "/env/pom.xml"}, template_path=Path("/cli/pom.xml")
        )

        assert config.template_path == Path("/cli/pom.xml")

    def test_none_overrides_keep_defaults(self) -> None:
        config = AppConfig.from_env({}, scala_version=None, use_cache=False)

        assert config.scala_version is None
        assert config.use_cache is False
        assert config.template_path is None

    def test_empty_environment_values_ignored(self) -> None:
        config = AppConfig.from_env({CACHE_FILE_ENV_VAR: "", TEMPLATE_ENV_VAR: ""})

        assert config.cache_path is None
        assert config.template_path is None
