"""Tests for file utility functions."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from cpresolve.utils.files import find_executable, iter_search_path, temporary_file


class TestIterSearchPath:
    """Test iter_search_path function."""

    def test_splits_on_pathsep(self) -> None:
        value = os.pathsep.join(["/a", "", "/b"])

        assert list(iter_search_path(value)) == [Path("/a"), Path("/b")]

    def test_uses_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PATH", os.pathsep.join(["/x", "/y"]))

        assert list(iter_search_path()) == [Path("/x"), Path("/y")]


class TestFindExecutable:
    """Test find_executable function."""

    def test_name_order_within_directory(self, tmp_path: Path) -> None:
        (tmp_path / "tool").write_text("")
        (tmp_path / "tool.bat").write_text("")

        assert find_executable(["tool", "tool.bat"], str(tmp_path)) == tmp_path / "tool"

    def test_ignores_directories(self, tmp_path: Path) -> None:
        (tmp_path / "tool").mkdir()

        assert find_executable(["tool"], str(tmp_path)) is None


class TestTemporaryFile:
    """Test temporary_file context manager."""

    def test_writes_and_removes(self) -> None:
        with temporary_file("hello", prefix="t-", suffix=".txt") as path:
            assert path.read_text(encoding="utf-8") == "hello"
            assert path.name.startswith("t-")
            assert path.suffix == ".txt"

        assert not path.exists()

    def test_removed_on_error(self) -> None:
        with pytest.raises(RuntimeError):
            with temporary_file("x", prefix="t-", suffix=".txt") as path:
                raise RuntimeError("boom")

        assert not path.exists()

    def test_unique_names(self) -> None:
        with temporary_file("a", prefix="t-", suffix=".txt") as first:
            with temporary_file("b", prefix="t-", suffix=".txt") as second:
                assert first != second
