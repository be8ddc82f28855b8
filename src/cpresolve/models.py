"""Core cpresolve data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet, Optional, Sequence, Tuple
from xml.sax.saxutils import escape


@dataclass(frozen=True, slots=True)
class Coordinate:
    """Maven artifact identity parsed from a command line argument."""

    group: str
    artifact: str
    version: str
    classifier: Optional[str] = None
    exclusions: FrozenSet[Tuple[str, str]] = field(default_factory=frozenset)

    @property
    def raw(self) -> str:
        """Colon form without exclusions, as sent to the descriptor."""
        parts = [self.group, self.artifact, self.version]
        if self.classifier:
            parts.append(self.classifier)
        return ":".join(parts)

    def dependency_xml(self, *, with_exclusions: bool = False, indent: str = "    ") -> str:
        """Render this coordinate as a POM ``<dependency>`` block."""
        inner = indent * 2
        lines = [
            f"{indent}<dependency>",
            f"{inner}<groupId>{escape(self.group)}</groupId>",
            f"{inner}<artifactId>{escape(self.artifact)}</artifactId>",
            f"{inner}<version>{escape(self.version)}</version>",
        ]
        if self.classifier:
            lines.append(f"{inner}<classifier>{escape(self.classifier)}</classifier>")
        if with_exclusions and self.exclusions:
            lines.append(f"{inner}<exclusions>")
            for group, artifact in sorted(self.exclusions):
                lines.extend(
                    [
                        f"{inner}{indent}<exclusion>",
                        f"{inner}{indent * 2}<groupId>{escape(group)}</groupId>",
                        f"{inner}{indent * 2}<artifactId>{escape(artifact)}</artifactId>",
                        f"{inner}{indent}</exclusion>",
                    ]
                )
            lines.append(f"{inner}</exclusions>")
        lines.append(f"{indent}</dependency>")
        return "\n".join(lines)


@dataclass(frozen=True, slots=True)
class ResolvedDependencies:
    """Flat classpath plus display-ready dependency tree lines."""

    classpath: str
    tree: Tuple[str, ...] = ()

    @classmethod
    def of(cls, classpath: str, tree: Sequence[str]) -> "ResolvedDependencies":
        return cls(classpath=classpath, tree=tuple(tree))

    @property
    def is_valid(self) -> bool:
        return bool(self.classpath) and self.tree is not None
