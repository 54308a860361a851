"""Fallback for roots that no package manager claims."""

from __future__ import annotations

from pathlib import Path

from dependency_analyzer.config import AnalyzerConfiguration
from dependency_analyzer.managers.base import PackageManager
from dependency_analyzer.managers.registry import PackageManagerDescriptor
from dependency_analyzer.models.dependency import Project
from dependency_analyzer.models.identifier import Identifier
from dependency_analyzer.models.result import ProjectAnalyzerResult
from dependency_analyzer.vcs import get_clone_info


class UnmanagedProjects(PackageManager):
    """Produces a bare project for the analyzed root, without dependencies."""

    @property
    def name(self) -> str:
        return "Unmanaged"

    def resolve_dependencies_for(
        self, root_dir: Path, definition_file: Path
    ) -> ProjectAnalyzerResult:
        vcs = get_clone_info(definition_file)
        project = Project(
            id=Identifier(self.name, "", definition_file.resolve().name, vcs.revision),
            definition_file_path="",
            vcs=vcs,
            vcs_processed=vcs.normalize(),
        )
        return ProjectAnalyzerResult(config=self.config, project=project)


def _create(config: AnalyzerConfiguration) -> PackageManager:
    return UnmanagedProjects(config)


# Not part of any registry: discovery adds it on its own.
Unmanaged = PackageManagerDescriptor(
    name="Unmanaged",
    homepage_url="",
    primary_language="",
    definition_files=(),
    factory=_create,
)
