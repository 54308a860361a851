"""Package curations: user-supplied corrections of package metadata."""

from __future__ import annotations

from dataclasses import dataclass, replace

from dependency_analyzer.exceptions import CurationError
from dependency_analyzer.models.identifier import Identifier
from dependency_analyzer.models.package import CuratedPackage, RemoteArtifact, VcsInfo


@dataclass(frozen=True)
class PackageCurationData:
    """Field overrides of a curation. ``None`` keeps the package's value."""

    comment: str = ""
    declared_licenses: tuple[str, ...] | None = None
    description: str | None = None
    homepage_url: str | None = None
    binary_artifact: RemoteArtifact | None = None
    source_artifact: RemoteArtifact | None = None
    vcs: VcsInfo | None = None


@dataclass(frozen=True)
class PackageCuration:
    """Overrides for all packages whose identifier matches ``id``."""

    id: Identifier
    data: PackageCurationData

    def is_applicable(self, pkg_id: Identifier) -> bool:
        return pkg_id.matches(self.id)

    def apply(self, target: CuratedPackage) -> CuratedPackage:
        """Return a new CuratedPackage with this curation's overrides applied.

        Raises CurationError if the curation does not match the package.
        """
        pkg = target.package
        if not self.is_applicable(pkg.id):
            raise CurationError(
                f"Package curation identifier '{self.id}' does not match "
                f"package identifier '{pkg.id}'."
            )

        overrides = {}
        if self.data.declared_licenses is not None:
            overrides["declared_licenses"] = tuple(self.data.declared_licenses)
        if self.data.description is not None:
            overrides["description"] = self.data.description
        if self.data.homepage_url is not None:
            overrides["homepage_url"] = self.data.homepage_url
        if self.data.binary_artifact is not None:
            overrides["binary_artifact"] = self.data.binary_artifact
        if self.data.source_artifact is not None:
            overrides["source_artifact"] = self.data.source_artifact
        if self.data.vcs is not None:
            overrides["vcs"] = pkg.vcs.merge(self.data.vcs)

        return CuratedPackage(
            package=replace(pkg, **overrides),
            curations=target.curations + (self,),
        )

    def __str__(self) -> str:
        comment = f" ({self.data.comment})" if self.data.comment else ""
        return f"{self.id}{comment}"
