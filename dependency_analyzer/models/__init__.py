"""Immutable data model of analyzer results."""

from dependency_analyzer.models.identifier import Identifier
from dependency_analyzer.models.package import CuratedPackage, Package, RemoteArtifact, VcsInfo
from dependency_analyzer.models.curation import PackageCuration, PackageCurationData
from dependency_analyzer.models.dependency import PackageReference, Project, Scope
from dependency_analyzer.models.result import AnalyzerResult, ProjectAnalyzerResult

__all__ = [
    "AnalyzerResult",
    "CuratedPackage",
    "Identifier",
    "Package",
    "PackageCuration",
    "PackageCurationData",
    "PackageReference",
    "Project",
    "ProjectAnalyzerResult",
    "RemoteArtifact",
    "Scope",
    "VcsInfo",
]
