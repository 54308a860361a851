"""Abstract base class for package manager backends."""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

import structlog

from dependency_analyzer.config import AnalyzerConfiguration
from dependency_analyzer.models.dependency import Project
from dependency_analyzer.models.identifier import Identifier
from dependency_analyzer.models.result import ProjectAnalyzerResult

log = structlog.get_logger("dependency_analyzer.managers")


def relative_path(root_dir: Path, path: Path) -> str:
    """Path of *path* relative to *root_dir*, as a POSIX string ("" for the root itself)."""
    try:
        rel = path.resolve().relative_to(root_dir.resolve())
    except ValueError:
        return path.as_posix()
    return "" if rel == Path(".") else rel.as_posix()


class PackageManager(ABC):
    """
    Dependency resolution for one package manager ecosystem.

    Ordinary resolution failures must not raise: they belong in the result's
    errors or in the errors of the affected PackageReference. One result is
    returned per definition file.
    """

    def __init__(self, config: AnalyzerConfiguration) -> None:
        self.config = config

    @property
    @abstractmethod
    def name(self) -> str:
        """Package manager name as registered, e.g. 'CocoaPods'."""
        ...

    @property
    def project_type(self) -> str:
        """Identifier type used for this manager's projects."""
        return self.name

    def map_definition_files(self, definition_files: list[Path]) -> dict[Path, list[Path]]:
        """Group the discovered files by the definition file of their project.

        Every project file maps to the discovered files it covers, itself included.
        """
        return {f: [f] for f in definition_files}

    def resolve_dependencies(
        self, root_dir: Path, definition_files: list[Path]
    ) -> dict[Path, ProjectAnalyzerResult]:
        """Resolve every project; a failing project yields an error result.

        The returned mapping has one entry per discovered file. Files covered by
        the same project share one result object.
        """
        results: dict[Path, ProjectAnalyzerResult] = {}
        for definition_file, covered in self.map_definition_files(definition_files).items():
            log.info(
                "manager.resolving",
                manager=self.name,
                definition_file=relative_path(root_dir, definition_file) or ".",
            )
            try:
                result = self.resolve_dependencies_for(root_dir, definition_file)
            except Exception as e:
                log.error(
                    "manager.resolution_failed",
                    manager=self.name,
                    definition_file=str(definition_file),
                    error=str(e),
                )
                result = self.error_result(root_dir, definition_file, f"{type(e).__name__}: {e}")
            for path in covered:
                results[path] = result
        for path in definition_files:
            if path not in results:
                results[path] = self.error_result(
                    root_dir, path, f"{self.name} did not resolve '{path.name}'."
                )
        return results

    @abstractmethod
    def resolve_dependencies_for(
        self, root_dir: Path, definition_file: Path
    ) -> ProjectAnalyzerResult:
        """
        Resolve a single definition file.

        Args:
            root_dir: The analyzed root directory.
            definition_file: Absolute path of the definition file.

        Returns:
            ProjectAnalyzerResult with the project, its packages and errors.
        """
        ...

    def error_result(
        self, root_dir: Path, definition_file: Path, error: str
    ) -> ProjectAnalyzerResult:
        """Build a result that only carries *error* for *definition_file*."""
        return error_result(
            self.config, self.project_type, root_dir, definition_file, error
        )

    def __str__(self) -> str:
        return self.name


def error_result(
    config: AnalyzerConfiguration,
    project_type: str,
    root_dir: Path,
    definition_file: Path,
    error: str,
) -> ProjectAnalyzerResult:
    """A minimal result for a definition file that could not be resolved."""
    rel = relative_path(root_dir, definition_file)
    project = Project(
        id=Identifier(project_type, "", rel or definition_file.name, ""),
        definition_file_path=rel,
    )
    return ProjectAnalyzerResult(config=config, project=project, errors=(error,))


def distinct_results(
    results: dict[Path, ProjectAnalyzerResult],
) -> list[ProjectAnalyzerResult]:
    """The distinct result objects of *results*, in first-seen order."""
    seen: dict[int, ProjectAnalyzerResult] = {}
    for result in results.values():
        seen.setdefault(id(result), result)
    return list(seen.values())


def project_name(root_dir: Path, project_dir: Path) -> str:
    """Name of the project in *project_dir*, qualified by its path below *root_dir*.

    The root project is named after the root directory; nested projects get
    their relative directory appended, e.g. "repo/services/api".
    """
    rel = relative_path(root_dir, project_dir)
    base = root_dir.resolve().name
    return f"{base}/{rel}" if rel else base
