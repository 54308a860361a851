"""Apply package curations to analyzer results."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import replace

import structlog

from dependency_analyzer.curation.provider import PackageCurationProvider
from dependency_analyzer.exceptions import CurationError
from dependency_analyzer.models.curation import PackageCuration
from dependency_analyzer.models.package import CuratedPackage
from dependency_analyzer.models.result import ProjectAnalyzerResult

log = structlog.get_logger("dependency_analyzer.curation")


def apply_curations(
    curated_package: CuratedPackage, curations: Iterable[PackageCuration]
) -> CuratedPackage:
    """Left-fold *curations* over *curated_package*; each sees the previous output.

    A curation that cannot be applied is skipped with a warning.
    """
    current = curated_package
    for curation in curations:
        log.debug("curation.applying", curation=str(curation), package=str(current.id))
        try:
            current = curation.apply(current)
        except CurationError as e:
            log.warning(
                "curation.skipped", curation=str(curation), package=str(current.id), error=str(e)
            )
    return current

def curate_result(
    result: ProjectAnalyzerResult, provider: PackageCurationProvider
) -> ProjectAnalyzerResult:
    """Return a copy of *result* whose packages have their curations applied."""
    packages = tuple(
        apply_curations(pkg, provider.get_curations_for(pkg.id)) for pkg in result.packages
    )
    return replace(result, packages=packages)
