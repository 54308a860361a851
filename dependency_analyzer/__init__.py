"""Dependency analyzer: multi package manager dependency resolution engine."""

__version__ = "0.1.0"

from dependency_analyzer.aggregator import AnalyzerResultBuilder
from dependency_analyzer.analyzer import Analyzer
from dependency_analyzer.config import AnalyzerConfiguration, AnalyzerSettings
from dependency_analyzer.discovery import discover, find_managed_files
from dependency_analyzer.models import (
    AnalyzerResult,
    CuratedPackage,
    Identifier,
    Package,
    PackageCuration,
    PackageCurationData,
    PackageReference,
    Project,
    ProjectAnalyzerResult,
    Scope,
    VcsInfo,
)

__all__ = [
    "Analyzer",
    "AnalyzerConfiguration",
    "AnalyzerResult",
    "AnalyzerResultBuilder",
    "AnalyzerSettings",
    "CuratedPackage",
    "Identifier",
    "Package",
    "PackageCuration",
    "PackageCurationData",
    "PackageReference",
    "Project",
    "ProjectAnalyzerResult",
    "Scope",
    "VcsInfo",
    "discover",
    "find_managed_files",
]
