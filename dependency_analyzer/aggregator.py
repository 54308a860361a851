"""Result aggregator: merge per-definition-file results into one AnalyzerResult."""

from __future__ import annotations

import threading

import structlog

from dependency_analyzer.config import AnalyzerConfiguration
from dependency_analyzer.exceptions import AnalyzerError, ResultIntegrityError
from dependency_analyzer.models.dependency import Project
from dependency_analyzer.models.identifier import Identifier
from dependency_analyzer.models.package import CuratedPackage, VcsInfo
from dependency_analyzer.models.result import AnalyzerResult, ProjectAnalyzerResult

log = structlog.get_logger("dependency_analyzer.engine")


class AnalyzerResultBuilder:
    """
    Accumulate ProjectAnalyzerResults into one AnalyzerResult.

    add_result() is serialized by a lock; the builder freezes on build().
    """

    def __init__(self, config: AnalyzerConfiguration, repository: VcsInfo = VcsInfo.EMPTY) -> None:
        self.config = config
        self.repository = repository
        self._lock = threading.Lock()
        self._projects: dict[Identifier, Project] = {}
        self._packages: dict[Identifier, CuratedPackage] = {}
        self._errors: dict[Identifier, list[str]] = {}
        self._frozen = False

    @property
    def frozen(self) -> bool:
        return self._frozen

    def add_result(self, result: ProjectAnalyzerResult) -> AnalyzerResultBuilder:
        """Add one project and its packages.

        A second project with an already known identifier is not merged; it is
        recorded as an error of that identifier instead. Packages already known
        by identifier keep their first-seen metadata.
        """
        with self._lock:
            if self._frozen:
                raise AnalyzerError("Cannot add results after build() was called.")

            project = result.project
            if project.id in self._projects:
                existing = self._projects[project.id]
                message = (
                    f"Multiple projects with the same id '{project.id}' found: "
                    f"'{existing.definition_file_path}' and "
                    f"'{project.definition_file_path}'. Only the first one is kept."
                )
                log.error("aggregator.duplicate_project", project=str(project.id))
                self._add_errors(project.id, [message])
                return self

            self._projects[project.id] = project

            added = 0
            for pkg in result.packages:
                if pkg.id not in self._packages:
                    self._packages[pkg.id] = pkg
                    added += 1

            self._add_errors(project.id, result.errors)

            log.debug(
                "aggregator.result_added",
                project=str(project.id),
                packages=len(result.packages),
                new_packages=added,
                errors=len(result.errors),
            )
        return self

    def _add_errors(self, project_id: Identifier, errors: tuple[str, ...] | list[str]) -> None:
        if errors:
            self._errors.setdefault(project_id, []).extend(errors)

    def build(self) -> AnalyzerResult:
        """Freeze the builder and return the merged, validated result.

        Raises ResultIntegrityError if a project references a non-optional
        identifier that no package in the merged set has.
        """
        with self._lock:
            self._frozen = True

            missing: set[Identifier] = set()
            for project in self._projects.values():
                missing |= project.collect_dependency_ids(include_optional=False) - self._packages.keys()
            if missing:
                raise ResultIntegrityError(missing, context="Merged analyzer result")

            return AnalyzerResult(
                config=self.config,
                repository=self.repository,
                projects=tuple(self._projects[k] for k in sorted(self._projects)),
                packages=tuple(self._packages[k] for k in sorted(self._packages)),
                errors={k: list(self._errors[k]) for k in sorted(self._errors)},
            )
