"""Parsing of Maven console output into a classpath and a dependency tree.

The relevant part of a ``dependency:build-classpath dependency:tree`` run looks
like this::

    [INFO] Dependencies classpath:
    /repo/a.jar:/repo/b.jar
    [INFO]
    [INFO] --- maven-dependency-plugin:3.6.1:tree (default-cli) @ deps ---
    [INFO] cpresolve:deps:jar:1.0
    [INFO] +- org.example:a:jar:1.0:compile
    [INFO] |  \\- org.example:c:jar:2.0:compile
    [INFO] \\- org.example:b:jar:1.0:compile
    [INFO] ------------------------------------------------------------------------

Lines are consumed by a small state machine so that each section boundary is
explicit.
"""

from __future__ import annotations

import enum
import logging
import re
from typing import List, Optional

from cpresolve.errors import UnresolvableDependenciesError
from cpresolve.maven.descriptor import ROOT_PROJECT
from cpresolve.models import ResolvedDependencies

LOGGER = logging.getLogger(__name__)

CLASSPATH_MARKER = "Dependencies classpath:"
TREE_MARGIN = 4
SCOPE_SUFFIX = ":compile"

_STATUS_PREFIX = re.compile(r"^\[(?:INFO|WARNING|WARN|ERROR|DEBUG)\]")
_ANSI_ESCAPE = re.compile(r"\x1b\[[0-9;]*[A-Za-z]")
_TREE_GLYPHS = re.compile(r"^[ |\-+\\]+")
_DASH_LINE = re.compile(r"^-{3,}$")


class ParseState(enum.Enum):
    SEEK_CLASSPATH = "seeking classpath marker"
    IN_CLASSPATH = "in classpath block"
    SEEK_TREE = "seeking tree root"
    IN_TREE = "in tree block"
    DONE = "done"


def is_status_line(line: str) -> bool:
    return bool(_STATUS_PREFIX.match(line))


def strip_status(line: str) -> str:
    """Remove a leading ``[INFO]``-style prefix, keeping the text after it."""
    return _STATUS_PREFIX.sub("", line, count=1)


def flatten_tree_line(line: str) -> str:
    """Turn one ``dependency:tree`` line into an indentation-only display line.

    ``line`` has already lost its status prefix. The fixed margin holds the
    top-level glyph, deeper glyph runs become blanks of the same width.
    """
    text = line[TREE_MARGIN:]
    if text.endswith(SCOPE_SUFFIX):
        text = text[: -len(SCOPE_SUFFIX)]
    match = _TREE_GLYPHS.match(text)
    if match:
        text = " " * match.end() + text[match.end():]
    return text.rstrip()


class OutputParser:
    """Extracts :class:`ResolvedDependencies` from raw Maven output."""

    def __init__(self, root_project: str = ROOT_PROJECT) -> None:
        self.root_project = root_project

    def parse(self, output: str, *, descriptor: str = "") -> ResolvedDependencies:
        state = ParseState.SEEK_CLASSPATH
        classpath: List[str] = []
        tree: List[str] = []

        for raw_line in output.splitlines():
            line = _ANSI_ESCAPE.sub("", raw_line).rstrip("\r")

            if state is ParseState.SEEK_CLASSPATH:
                if CLASSPATH_MARKER in line:
                    state = ParseState.IN_CLASSPATH
                    tail = line.split(CLASSPATH_MARKER, 1)[1].strip()
                    if tail:
                        classpath.append(tail)
            elif state is ParseState.IN_CLASSPATH:
                if is_status_line(line):
                    state = self._check_root(line, ParseState.SEEK_TREE)
                elif line.strip():
                    classpath.append(line.strip())
            elif state is ParseState.SEEK_TREE:
                state = self._check_root(line, state)
            elif state is ParseState.IN_TREE:
                text = strip_status(line)
                if _DASH_LINE.match(text.strip()):
                    state = ParseState.DONE
                    break
                flattened = flatten_tree_line(text)
                if flattened:
                    tree.append(flattened)

        resolved = ResolvedDependencies.of("".join(classpath).strip(), tree)
        if state is not ParseState.DONE or not resolved.is_valid:
            LOGGER.debug("Maven output parsing stopped while %s", state.value)
            raise UnresolvableDependenciesError(
                f"Could not resolve dependencies (output parsing stopped while {state.value})",
                descriptor=descriptor,
                output=output,
            )
        return resolved

    def _check_root(self, line: str, state: ParseState) -> ParseState:
        if strip_status(line).strip() == self.root_project:
            return ParseState.IN_TREE
        return state


def parse_output(
    output: str, *, root_project: Optional[str] = None, descriptor: str = ""
) -> ResolvedDependencies:
    parser = OutputParser(root_project or ROOT_PROJECT)
    return parser.parse(output, descriptor=descriptor)
