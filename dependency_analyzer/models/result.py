"""Analyzer results for single definition files and for a whole run."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from dependency_analyzer import collector
from dependency_analyzer.config import AnalyzerConfiguration
from dependency_analyzer.exceptions import ResultIntegrityError
from dependency_analyzer.models.dependency import Project
from dependency_analyzer.models.identifier import Identifier
from dependency_analyzer.models.package import CuratedPackage, VcsInfo


def sorted_packages(packages: Iterable[CuratedPackage]) -> tuple[CuratedPackage, ...]:
    """Deduplicate by identifier (first one wins) and sort by identifier."""
    by_id: dict[Identifier, CuratedPackage] = {}
    for pkg in packages:
        by_id.setdefault(pkg.id, pkg)
    return tuple(by_id[pkg_id] for pkg_id in sorted(by_id))


@dataclass(frozen=True)
class ProjectAnalyzerResult:
    """
    Everything found for one definition file: the project with its dependency
    scopes, the packages those scopes refer to, and top-level errors.

    Construction fails if a non-optional reference has no matching package.
    """

    config: AnalyzerConfiguration
    project: Project
    packages: tuple[CuratedPackage, ...] = ()
    errors: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "packages", sorted_packages(self.packages))
        object.__setattr__(self, "errors", tuple(self.errors))

        package_ids = {pkg.id for pkg in self.packages}
        missing = self.project.collect_dependency_ids(include_optional=False) - package_ids
        if missing:
            raise ResultIntegrityError(missing, context=f"Project '{self.project.id}'")

    def has_errors(self) -> bool:
        return collector.has_errors(self.project, self.errors)

    def collect_errors(self) -> dict[Identifier, list[str]]:
        return collector.collect_errors(self.project, self.errors)


@dataclass(frozen=True)
class AnalyzerResult:
    """The merged result of all package managers for one analyzed root."""

    config: AnalyzerConfiguration
    repository: VcsInfo
    projects: tuple[Project, ...] = ()
    packages: tuple[CuratedPackage, ...] = ()
    # Top-level errors per project, including aggregation errors.
    errors: dict[Identifier, list[str]] = field(default_factory=dict)

    def get_project(self, project_id: Identifier) -> Project | None:
        return next((p for p in self.projects if p.id == project_id), None)

    def get_package(self, pkg_id: Identifier) -> CuratedPackage | None:
        return next((p for p in self.packages if p.id == pkg_id), None)

    def has_errors(self) -> bool:
        return any(self.errors.values()) or any(
            collector.has_errors(project) for project in self.projects
        )

    def collect_errors(self) -> dict[Identifier, list[str]]:
        return collector.merge_errors(
            self.errors, *(collector.collect_errors(project) for project in self.projects)
        )
