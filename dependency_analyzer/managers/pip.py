"""PIP support for requirements files."""

from __future__ import annotations

import re
from pathlib import Path

from dependency_analyzer.managers.base import PackageManager, project_name, relative_path
from dependency_analyzer.models.dependency import PackageReference, Project, Scope
from dependency_analyzer.models.identifier import Identifier
from dependency_analyzer.models.package import CuratedPackage, Package
from dependency_analyzer.models.result import ProjectAnalyzerResult

# Matches: package_name, optional [extras], then the version specifier(s)
_REQ_RE = re.compile(
    r"^([A-Za-z0-9]([A-Za-z0-9._-]*[A-Za-z0-9])?)"  # package name
    r"\s*(\[[^\]]*\])?"  # extras
    r"\s*"
    r"(.*)?$",  # everything after name = constraint
)

_EXACT_VERSION_RE = re.compile(r"^===?\s*([^\s,]+)$")

_SCOPE = "install"


def _normalize_name(name: str) -> str:
    """PEP 503 name normalization."""
    return re.sub(r"[-_.]+", "-", name).lower()


class Pip(PackageManager):
    """Reads pinned requirements; nothing is installed or downloaded."""

    @property
    def name(self) -> str:
        return "PIP"

    def resolve_dependencies_for(
        self, root_dir: Path, definition_file: Path
    ) -> ProjectAnalyzerResult:
        content = definition_file.read_text(encoding="utf-8", errors="replace")

        packages: list[CuratedPackage] = []
        references: list[PackageReference] = []
        errors: list[str] = []

        for raw_line in content.splitlines():
            line = raw_line.split(" #", 1)[0].strip()
            if not line or line.startswith("#"):
                continue
            if line.startswith(("-r", "-c", "-e", "--")):
                errors.append(f"Unsupported requirements option '{line}' was ignored.")
                continue

            # Strip environment markers (everything after ";")
            line = line.split(";", 1)[0].strip()

            m = _REQ_RE.match(line)
            if not m:
                errors.append(f"Could not parse requirement '{line}'.")
                continue

            name = _normalize_name(m.group(1))
            constraint = (m.group(4) or "").strip()
            exact = _EXACT_VERSION_RE.match(constraint)
            version = exact.group(1) if exact else ""

            ref_errors: tuple[str, ...] = ()
            if not exact and not self.config.allow_dynamic_versions:
                ref_errors = (
                    f"Requirement '{line}' is not pinned to an exact version.",
                )

            pkg_id = Identifier("PyPI", "", name, version)
            packages.append(
                CuratedPackage(
                    Package(id=pkg_id, homepage_url=f"https://pypi.org/project/{name}/")
                )
            )
            references.append(PackageReference(id=pkg_id, errors=ref_errors))

        label = project_name(root_dir, definition_file.parent)
        if definition_file.name != "requirements.txt":
            label = f"{label}/{definition_file.name}"

        project = Project(
            id=Identifier(self.name, "", label, ""),
            definition_file_path=relative_path(root_dir, definition_file),
            scopes=(Scope(name=_SCOPE, dependencies=tuple(references)),),
        )
        return ProjectAnalyzerResult(
            config=self.config,
            project=project,
            packages=tuple(packages),
            errors=tuple(errors),
        )
