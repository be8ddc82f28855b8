"""Tests for POM generation."""

from __future__ import annotations

from pathlib import Path
from xml.etree import ElementTree

import pytest

from cpresolve.errors import DescriptorTemplateError, InvalidCoordinateError
from cpresolve.maven.descriptor import (
    DEPENDENCIES_MARKER,
    ROOT_PROJECT,
    generate,
    load_template,
    project_identity,
)

NS = {"m": "http://maven.apache.org/POM/4.0.0"}

CUSTOM_TEMPLATE = """\
<project>
  <modelVersion>4.0.0</modelVersion>
  <groupId>acme</groupId>
  <artifactId>scripts</artifactId>
  <version>2.0</version>
  <packaging>pom</packaging>
  <repositories>
    <repository><id>internal</id><url>https://repo.acme.test/maven</url></repository>
  </repositories>
  <dependencies></dependencies>
</project>
"""


def dependencies(pom: str) -> list[dict[str, str]]:
    root = ElementTree.fromstring(pom.encode("utf-8"))
    result = []
    for node in root.iterfind("m:dependencies/m:dependency", NS):
        result.append({child.tag.split("}")[1]: child.text for child in node if child.text})
    return result


class TestLoadTemplate:
    """Test load_template function."""

    def test_builtin_template(self) -> None:
        """Should ship a template with the dependency marker."""
        template = load_template()

        assert DEPENDENCIES_MARKER in template

    def test_custom_template(self, tmp_path: Path) -> None:
        path = tmp_path / "pom.xml"
        path.write_text(CUSTOM_TEMPLATE, encoding="utf-8")

        assert load_template(path) == CUSTOM_TEMPLATE

    def test_missing_custom_template(self, tmp_path: Path) -> None:
        with pytest.raises(DescriptorTemplateError):
            load_template(tmp_path / "missing.xml")


class TestGenerate:
    """Test generate function."""

    def test_renders_coordinates_in_order(self) -> None:
        """Should produce a valid POM listing every coordinate."""
        pom = generate(["com.typesafe:config:1.4.3", "org.lwjgl:lwjgl:3.3.3:natives-linux"])

        assert dependencies(pom) == [
            {"groupId": "com.typesafe", "artifactId": "config", "version": "1.4.3"},
            {
                "groupId": "org.lwjgl",
                "artifactId": "lwjgl",
                "version": "3.3.3",
                "classifier": "natives-linux",
            },
        ]

    def test_keeps_template_around_dependencies(self) -> None:
        pom = generate(["g:a:1"], CUSTOM_TEMPLATE)

        assert pom.startswith("<project>")
        assert "https://repo.acme.test/maven" in pom
        assert DEPENDENCIES_MARKER not in pom
        assert pom.rstrip().endswith("</project>")

    def test_exclusions_not_written_by_default(self) -> None:
        """Exclusions are parsed but left out of the POM."""
        pom = generate(["g:a:1!x:y"])

        assert "<exclusion>" not in pom
        assert dependencies(pom) == [{"groupId": "g", "artifactId": "a", "version": "1"}]

    def test_exclusions_written_when_applied(self) -> None:
        pom = generate(["g:a:1!x:y"], apply_exclusions=True)

        root = ElementTree.fromstring(pom.encode("utf-8"))
        excluded = root.find("m:dependencies/m:dependency/m:exclusions/m:exclusion", NS)
        assert excluded is not None
        assert excluded.find("m:groupId", NS).text == "x"
        assert excluded.find("m:artifactId", NS).text == "y"

    def test_empty_list(self) -> None:
        assert dependencies(generate([])) == []

    def test_rejects_invalid_coordinate(self) -> None:
        with pytest.raises(InvalidCoordinateError):
            generate(["g:a:1", "broken"])

    def test_template_without_marker(self) -> None:
        with pytest.raises(DescriptorTemplateError):
            generate(["g:a:1"], "<project></project>")


class TestProjectIdentity:
    """Test project_identity function."""

    def test_builtin_template(self) -> None:
        assert project_identity(load_template()) == ROOT_PROJECT

    def test_custom_template_without_namespace(self) -> None:
        assert project_identity(CUSTOM_TEMPLATE) == "acme:scripts:pom:2.0"

    def test_packaging_defaults_to_jar(self) -> None:
        template = (
            "<project><groupId>g</groupId><artifactId>a</artifactId>"
            "<version>1</version><dependencies></dependencies></project>"
        )

        assert project_identity(template) == "g:a:jar:1"

    def test_invalid_xml(self) -> None:
        with pytest.raises(DescriptorTemplateError):
            project_identity("<project>")

    def test_missing_fields(self) -> None:
        with pytest.raises(DescriptorTemplateError):
            project_identity("<project><groupId>g</groupId></project>")
