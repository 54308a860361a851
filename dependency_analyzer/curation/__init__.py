"""Package curations: user-supplied corrections of package metadata."""

from dependency_analyzer.curation.pipeline import apply_curations, curate_result
from dependency_analyzer.curation.provider import (
    NoCurationProvider,
    PackageCurationProvider,
    SimplePackageCurationProvider,
    YamlFilePackageCurationProvider,
    load_curations,
)

__all__ = [
    "NoCurationProvider",
    "PackageCurationProvider",
    "SimplePackageCurationProvider",
    "YamlFilePackageCurationProvider",
    "apply_curations",
    "curate_result",
    "load_curations",
]
