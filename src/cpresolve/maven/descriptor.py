"""Generation of the throwaway POM handed to Maven."""

from __future__ import annotations

import logging
from importlib.resources import files
from pathlib import Path
from typing import Optional, Sequence
from xml.etree import ElementTree

from cpresolve.coordinates import parse
from cpresolve.errors import DescriptorTemplateError

LOGGER = logging.getLogger(__name__)

DEPENDENCIES_MARKER = "<dependencies></dependencies>"
# Identity of the synthetic project declared by the built-in template.
ROOT_PROJECT = "cpresolve:deps:jar:1.0"


def load_template(path: Optional[Path] = None) -> str:
    """Return the POM template text, from ``path`` or the packaged default."""
    if path is None:
        template = files("cpresolve.maven").joinpath("templates", "pom.xml")
        return template.read_text(encoding="utf-8")
    try:
        return Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        raise DescriptorTemplateError(f"Cannot read POM template {path}: {exc}") from exc


def generate(
    ids: Sequence[str],
    template: Optional[str] = None,
    *,
    apply_exclusions: bool = False,
) -> str:
    """Inject one ``<dependency>`` block per id into the template."""
    text = load_template() if template is None else template
    head, marker, tail = text.partition(DEPENDENCIES_MARKER)
    if not marker:
        raise DescriptorTemplateError(
            f"POM template has no '{DEPENDENCIES_MARKER}' placeholder"
        )

    blocks = [
        parse(raw).dependency_xml(with_exclusions=apply_exclusions, indent="    ")
        for raw in ids
    ]
    LOGGER.debug("Generated %d dependency blocks", len(blocks))
    body = "\n".join(["<dependencies>", *blocks, "  </dependencies>"])
    return head + body + tail


def _child_text(root: ElementTree.Element, name: str, namespace: str) -> Optional[str]:
    node = root.find(f"{namespace}{name}")
    if node is None or node.text is None:
        return None
    return node.text.strip()


def project_identity(template: str) -> str:
    """``group:artifact:packaging:version`` of the project a template declares.

    Maven prints this identity as the root of ``dependency:tree``.
    """
    try:
        root = ElementTree.fromstring(template.encode("utf-8"))
    except ElementTree.ParseError as exc:
        raise DescriptorTemplateError(f"POM template is not valid XML: {exc}") from exc

    namespace = root.tag[: root.tag.index("}") + 1] if root.tag.startswith("{") else ""
    group = _child_text(root, "groupId", namespace)
    artifact = _child_text(root, "artifactId", namespace)
    version = _child_text(root, "version", namespace)
    if not (group and artifact and version):
        raise DescriptorTemplateError("POM template must declare groupId, artifactId and version")
    packaging = _child_text(root, "packaging", namespace) or "jar"
    return f"{group}:{artifact}:{packaging}:{version}"
