"""Dependency graph model: package references, scopes and projects."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from dependency_analyzer.models.identifier import Identifier
from dependency_analyzer.models.package import VcsInfo


@dataclass(frozen=True)
class PackageReference:
    """
    A node in a dependency tree.
    Diamond dependencies show up as separate nodes so the path to each is kept.
    """

    id: Identifier
    dependencies: tuple[PackageReference, ...] = ()
    errors: tuple[str, ...] = ()
    # Declared but not added to the package set (optional, or could not be resolved).
    optional: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "dependencies", tuple(self.dependencies))
        object.__setattr__(self, "errors", tuple(self.errors))


def iter_references(roots: Iterable[PackageReference]) -> Iterator[PackageReference]:
    """Walk the trees below *roots* depth-first (pre-order), using an explicit stack."""
    stack = list(reversed(tuple(roots)))
    while stack:
        ref = stack.pop()
        yield ref
        stack.extend(reversed(ref.dependencies))


@dataclass(frozen=True)
class Scope:
    """Named group of root dependencies, e.g. "compile" or "test"."""

    name: str
    dependencies: tuple[PackageReference, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "dependencies", tuple(self.dependencies))

    def collect_dependency_ids(self, include_optional: bool = True) -> set[Identifier]:
        return {
            ref.id
            for ref in iter_references(self.dependencies)
            if include_optional or not ref.optional
        }


@dataclass(frozen=True)
class Project:
    """A project defined by a definition file, with its dependency scopes."""

    id: Identifier
    definition_file_path: str = ""  # relative to the analyzed root
    declared_licenses: tuple[str, ...] = ()
    vcs: VcsInfo = VcsInfo.EMPTY
    vcs_processed: VcsInfo = VcsInfo.EMPTY
    homepage_url: str = ""
    scopes: tuple[Scope, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "declared_licenses", tuple(sorted(set(self.declared_licenses))))
        object.__setattr__(self, "scopes", tuple(self.scopes))
        seen: set[str] = set()
        for scope in self.scopes:
            if scope.name in seen:
                raise ValueError(f"Duplicate scope '{scope.name}' in project '{self.id}'.")
            seen.add(scope.name)

    def scope(self, name: str) -> Scope | None:
        return next((s for s in self.scopes if s.name == name), None)

    def collect_dependency_ids(self, include_optional: bool = True) -> set[Identifier]:
        """Return all identifiers reachable from any scope.

        With include_optional=False, references flagged optional are left out;
        their children are still visited.
        """
        ids: set[Identifier] = set()
        for scope in self.scopes:
            ids |= scope.collect_dependency_ids(include_optional)
        return ids
