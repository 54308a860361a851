"""Serialization of analyzer results to JSON and YAML files."""

from __future__ import annotations

import json
from collections.abc import Iterable
from dataclasses import asdict
from enum import Enum
from pathlib import Path
from typing import Any

import structlog
import yaml

from dependency_analyzer.exceptions import OutputError
from dependency_analyzer.models.curation import PackageCuration
from dependency_analyzer.models.dependency import PackageReference, Project, Scope
from dependency_analyzer.models.package import CuratedPackage, Package
from dependency_analyzer.models.result import AnalyzerResult

log = structlog.get_logger("dependency_analyzer.output")

RESULT_FILE_STEM = "all-dependencies"


class OutputFormat(Enum):
    JSON = "json"
    YAML = "yaml"

    @property
    def file_extension(self) -> str:
        return "yml" if self is OutputFormat.YAML else "json"

    def dumps(self, data: dict[str, Any]) -> str:
        if self is OutputFormat.YAML:
            return yaml.safe_dump(data, sort_keys=False, allow_unicode=True)
        return json.dumps(data, indent=2, ensure_ascii=False) + "\n"


def _reference_to_dict(ref: PackageReference) -> dict[str, Any]:
    # Depth-first with an explicit stack; children keep their order.
    root = _reference_node(ref)
    stack = [(ref, root)]
    while stack:
        current, data = stack.pop()
        for child in current.dependencies:
            child_data = _reference_node(child)
            data["dependencies"].append(child_data)
            stack.append((child, child_data))
    return root


def _reference_node(ref: PackageReference) -> dict[str, Any]:
    data: dict[str, Any] = {"id": str(ref.id), "dependencies": []}
    if ref.errors:
        data["errors"] = list(ref.errors)
    if ref.optional:
        data["optional"] = True
    return data


def _scope_to_dict(scope: Scope) -> dict[str, Any]:
    return {
        "name": scope.name,
        "dependencies": [_reference_to_dict(d) for d in scope.dependencies],
    }


def _project_to_dict(project: Project) -> dict[str, Any]:
    return {
        "id": str(project.id),
        "definition_file_path": project.definition_file_path,
        "declared_licenses": list(project.declared_licenses),
        "vcs": asdict(project.vcs),
        "vcs_processed": asdict(project.vcs_processed),
        "homepage_url": project.homepage_url,
        "scopes": [_scope_to_dict(s) for s in project.scopes],
    }


def _package_to_dict(pkg: Package) -> dict[str, Any]:
    return {
        "id": str(pkg.id),
        "declared_licenses": list(pkg.declared_licenses),
        "description": pkg.description,
        "homepage_url": pkg.homepage_url,
        "binary_artifact": asdict(pkg.binary_artifact),
        "source_artifact": asdict(pkg.source_artifact),
        "vcs": asdict(pkg.vcs),
    }


def _curation_to_dict(curation: PackageCuration) -> dict[str, Any]:
    data = {
        key: list(value) if isinstance(value, tuple) else value
        for key, value in asdict(curation.data).items()
        if value is not None
    }
    return {"id": str(curation.id), "curations": data}


def _curated_package_to_dict(curated: CuratedPackage) -> dict[str, Any]:
    return {
        "package": _package_to_dict(curated.package),
        "curations": [_curation_to_dict(c) for c in curated.curations],
    }


def result_to_dict(result: AnalyzerResult) -> dict[str, Any]:
    """Plain data representation of *result*, with identifiers as strings."""
    return {
        "config": asdict(result.config),
        "repository": asdict(result.repository),
        "analyzer_result": {
            "projects": [_project_to_dict(p) for p in result.projects],
            "packages": [_curated_package_to_dict(p) for p in result.packages],
            "errors": {str(k): list(v) for k, v in result.errors.items()},
            "has_errors": result.has_errors(),
        },
    }


def write_result(
    result: AnalyzerResult, output_dir: Path, formats: Iterable[OutputFormat]
) -> list[Path]:
    """Write *result* as ``all-dependencies.<ext>`` for each format.

    Raises FileExistsError if *output_dir* already exists, and OutputError if a
    format's serializer cannot handle the result (e.g. a dependency tree nested
    deeper than the YAML emitter can recurse). Nothing is written in that case.
    """
    output_dir = Path(output_dir)
    if output_dir.exists():
        raise FileExistsError(f"The output directory '{output_dir}' must not exist yet.")

    data = result_to_dict(result)
    rendered: list[tuple[OutputFormat, str]] = []
    for fmt in formats:
        try:
            rendered.append((fmt, fmt.dumps(data)))
        except RecursionError as e:
            raise OutputError(
                f"The dependency tree is too deep to serialize as {fmt.value.upper()}."
            ) from e

    output_dir.mkdir(parents=True)
    written: list[Path] = []
    for fmt, text in rendered:
        output_file = output_dir / f"{RESULT_FILE_STEM}.{fmt.file_extension}"
        output_file.write_text(text, encoding="utf-8")
        log.info("output.written", file=str(output_file), format=fmt.value)
        written.append(output_file)
    return written
