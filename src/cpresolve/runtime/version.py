"""Scala version detection.

The version is read from ``library.properties`` inside the ``scala-library.jar``
shipped with the Scala installation found on ``PATH``.
"""

from __future__ import annotations

import logging
import os
import re
import tempfile
import zipfile
from pathlib import Path
from typing import Callable, Optional

from cpresolve.errors import LibraryNotFoundError, RuntimeNotFoundError
from cpresolve.utils.files import find_executable

LOGGER = logging.getLogger(__name__)

RUNTIME_NAME = "scala"
LIBRARY_ARCHIVE = Path("lib") / "scala-library.jar"
PROPERTIES_ENTRY = "library.properties"
VERSION_ENV_VAR = "CPRESOLVE_SCALA_VERSION"

_VERSION_PATTERN = re.compile(r"^version\.number=(.+)$")

RuntimeLocator = Callable[[], Optional[Path]]


def locate_runtime(name: str = RUNTIME_NAME, path: Optional[str] = None) -> Optional[Path]:
    """Find ``name`` or ``name.bat`` in the first matching ``PATH`` directory."""
    return find_executable([name, f"{name}.bat"], path)


def install_root(executable: Path) -> Path:
    """Installation root of a runtime executable living in ``<root>/bin``."""
    return executable.resolve().parent.parent


def read_version_from_archive(archive: Path) -> str:
    """Extract ``library.properties`` into a private directory and scan it."""
    if not archive.is_file():
        raise LibraryNotFoundError(f"Scala library not found at {archive}")

    with tempfile.TemporaryDirectory(prefix="cpresolve-scala-") as workdir:
        try:
            with zipfile.ZipFile(archive) as jar:
                extracted = Path(jar.extract(PROPERTIES_ENTRY, path=workdir))
        except KeyError as exc:
            raise LibraryNotFoundError(f"{PROPERTIES_ENTRY} missing from {archive}") from exc
        except zipfile.BadZipFile as exc:
            raise LibraryNotFoundError(f"{archive} is not a readable jar: {exc}") from exc

        with extracted.open(encoding="utf-8", errors="replace") as handle:
            for line in handle:
                match = _VERSION_PATTERN.match(line.strip())
                if match:
                    return match.group(1).strip()

    raise LibraryNotFoundError(f"No version.number entry in {PROPERTIES_ENTRY} of {archive}")


def detect_version(locate: RuntimeLocator = locate_runtime) -> str:
    """Detect the Scala version of the installation found by ``locate``."""
    executable = locate()
    if executable is None:
        raise RuntimeNotFoundError(f"'{RUNTIME_NAME}' not found on PATH")

    root = install_root(executable)
    LOGGER.debug("Scala executable %s, installation root %s", executable, root)
    version = read_version_from_archive(root / LIBRARY_ARCHIVE)
    LOGGER.debug("Detected Scala version %s", version)
    return version


class VersionResolver:
    """Picks the Scala version: explicit value, then environment, then detection."""

    def __init__(
        self,
        *,
        explicit: Optional[str] = None,
        environ: Optional[dict] = None,
        locate: RuntimeLocator = locate_runtime,
    ) -> None:
        self.explicit = explicit
        self.environ = os.environ if environ is None else environ
        self.locate = locate

    def resolve(self) -> str:
        if self.explicit:
            return self.explicit
        from_env = self.environ.get(VERSION_ENV_VAR)
        if from_env:
            LOGGER.debug("Using Scala version %s from %s", from_env, VERSION_ENV_VAR)
            return from_env
        return detect_version(self.locate)
