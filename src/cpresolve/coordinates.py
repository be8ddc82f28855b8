"""Parsing and rewriting of Maven coordinate strings.

Accepted forms::

    group:artifact:version
    group:artifact:version:classifier
    group::artifact:version            (Scala shorthand, artifact gets _<scala version>)
    group:artifact:version!xgroup:xartifact!other:thing

Exclusions follow the base coordinate, each introduced by ``!``.
"""

from __future__ import annotations

from typing import Iterable, List

from cpresolve.errors import InvalidCoordinateError
from cpresolve.models import Coordinate

EXCLUSION_PREFIX = "!"
SHORTHAND_SEPARATOR = "::"


def split_exclusions(raw: str) -> tuple[str, list[str]]:
    """Return the base coordinate and its raw ``group:artifact`` exclusions."""
    base, *exclusions = raw.split(EXCLUSION_PREFIX)
    return base.strip(), [item.strip() for item in exclusions]


def strip_exclusions(raw: str) -> str:
    return split_exclusions(raw)[0]


def tokenize(base: str) -> list[str]:
    """Split a base coordinate and check it has 3 or 4 non-empty parts."""
    tokens = base.split(":")
    if len(tokens) not in (3, 4):
        raise InvalidCoordinateError(
            base, f"expected 3 or 4 ':'-separated parts, got {len(tokens)}"
        )
    if not all(tokens):
        raise InvalidCoordinateError(base, "empty group, artifact, version or classifier")
    return tokens


def _parse_exclusion(raw: str, item: str) -> tuple[str, str]:
    parts = item.split(":")
    if len(parts) != 2 or not all(parts):
        raise InvalidCoordinateError(raw, f"exclusion '{item}' must be group:artifact")
    return parts[0], parts[1]


def parse(raw: str) -> Coordinate:
    """Parse a raw coordinate string into a :class:`Coordinate`."""
    base, exclusions = split_exclusions(raw)
    tokens = tokenize(base)
    classifier = tokens[3] if len(tokens) == 4 else None
    return Coordinate(
        group=tokens[0],
        artifact=tokens[1],
        version=tokens[2],
        classifier=classifier,
        exclusions=frozenset(_parse_exclusion(raw, item) for item in exclusions),
    )


def parse_all(ids: Iterable[str]) -> List[Coordinate]:
    return [parse(raw) for raw in ids]


def is_shorthand(raw: str) -> bool:
    """True when the id has the ``group::artifact:version[:classifier]`` shape."""
    group, sep, rest = strip_exclusions(raw).partition(SHORTHAND_SEPARATOR)
    if not sep or not group or ":" in group:
        return False
    tokens = rest.split(":")
    return len(tokens) in (2, 3) and all(tokens)


def any_shorthand(ids: Iterable[str]) -> bool:
    return any(is_shorthand(raw) for raw in ids)


def expand_shorthand(raw: str, scala_version: str) -> str:
    """Rewrite ``g::a:v`` to ``g:a_<scala_version>:v``; other ids are returned as-is."""
    if not is_shorthand(raw):
        return raw
    base, _, tail = raw.partition(EXCLUSION_PREFIX)
    group, _, rest = base.strip().partition(SHORTHAND_SEPARATOR)
    artifact, _, remainder = rest.partition(":")
    expanded = f"{group}:{artifact}_{scala_version}:{remainder}"
    if tail:
        expanded = f"{expanded}{EXCLUSION_PREFIX}{tail}"
    return expanded


def expand_all(ids: Iterable[str], scala_version: str) -> List[str]:
    return [expand_shorthand(raw, scala_version) for raw in ids]
