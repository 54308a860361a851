"""Package metadata as reported by package managers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, ClassVar

from dependency_analyzer.models.identifier import Identifier

if TYPE_CHECKING:
    from dependency_analyzer.models.curation import PackageCuration


@dataclass(frozen=True)
class VcsInfo:
    """Version control location of a project or package."""

    type: str = ""  # "git", "hg", "svn", ... ("" = unknown)
    url: str = ""
    revision: str = ""
    path: str = ""  # path inside the repository

    EMPTY: ClassVar[VcsInfo]

    def merge(self, other: VcsInfo) -> VcsInfo:
        """Return a copy where every non-empty field of *other* wins."""
        return VcsInfo(
            type=other.type or self.type,
            url=other.url or self.url,
            revision=other.revision or self.revision,
            path=other.path or self.path,
        )

    def normalize(self) -> VcsInfo:
        url = self.url.strip().rstrip("/")
        if url.startswith("git@") and ":" in url:
            # git@host:org/repo.git -> ssh://git@host/org/repo.git
            host, _, rest = url.partition(":")
            url = f"ssh://{host}/{rest}"
        return VcsInfo(type=self.type.lower(), url=url, revision=self.revision, path=self.path)


VcsInfo.EMPTY = VcsInfo()


@dataclass(frozen=True)
class RemoteArtifact:
    """A downloadable artifact (binary or source archive)."""

    url: str = ""
    hash: str = ""
    hash_algorithm: str = ""

    EMPTY: ClassVar[RemoteArtifact]


RemoteArtifact.EMPTY = RemoteArtifact()


@dataclass(frozen=True)
class Package:
    """Metadata of a single package, as found in upstream manifests or registries."""

    id: Identifier
    declared_licenses: tuple[str, ...] = ()
    description: str = ""
    homepage_url: str = ""
    binary_artifact: RemoteArtifact = RemoteArtifact.EMPTY
    source_artifact: RemoteArtifact = RemoteArtifact.EMPTY
    vcs: VcsInfo = VcsInfo.EMPTY

    def __post_init__(self) -> None:
        object.__setattr__(self, "declared_licenses", tuple(sorted(set(self.declared_licenses))))


@dataclass(frozen=True)
class CuratedPackage:
    """A package together with the curations that produced it."""

    package: Package
    curations: tuple[PackageCuration, ...] = field(default=())

    @property
    def id(self) -> Identifier:
        return self.package.id
