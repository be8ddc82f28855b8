"""Running Maven against a generated POM."""

from __future__ import annotations

import logging
import subprocess
from typing import List, Optional

from cpresolve.errors import ResolverTimeoutError, UnresolvableDependenciesError
from cpresolve.utils.files import temporary_file

LOGGER = logging.getLogger(__name__)

GOALS = ("dependency:build-classpath", "dependency:tree")


class MavenInvoker:
    """Writes a descriptor to a temporary POM and runs the dependency goals on it."""

    def __init__(self, executable: str = "mvn", *, timeout: Optional[float] = None) -> None:
        self.executable = executable
        self.timeout = timeout

    def command(self, pom_path: str) -> List[str]:
        return [self.executable, "-B", "-f", pom_path, *GOALS]

    def invoke(self, descriptor: str) -> str:
        """Return Maven's merged stdout/stderr; the exit code is not interpreted."""
        with temporary_file(descriptor, prefix="cpresolve-", suffix=".pom.xml") as pom_path:
            cmd = self.command(str(pom_path))
            LOGGER.debug("Running %s", " ".join(cmd))
            try:
                result = subprocess.run(
                    cmd,
                    stdout=subprocess.PIPE,
                    stderr=subprocess.STDOUT,
                    encoding="utf-8",
                    errors="replace",
                    timeout=self.timeout,
                    check=False,
                )
            except OSError as exc:
                raise UnresolvableDependenciesError(
                    f"Cannot run Maven executable '{self.executable}': {exc}",
                    descriptor=descriptor,
                ) from exc
            except subprocess.TimeoutExpired as exc:
                output = exc.output or ""
                if isinstance(output, bytes):
                    output = output.decode("utf-8", errors="replace")
                raise ResolverTimeoutError(
                    f"Maven did not finish within {self.timeout} seconds",
                    descriptor=descriptor,
                    output=output,
                ) from exc

        LOGGER.debug("Maven exited with status %s", result.returncode)
        return result.stdout or ""
