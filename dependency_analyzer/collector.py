"""Error collection over dependency trees."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence

from dependency_analyzer.models.dependency import Project, iter_references
from dependency_analyzer.models.identifier import Identifier


def _add_distinct(target: list[str], errors: Iterable[str]) -> None:
    for error in errors:
        if error not in target:
            target.append(error)


def has_errors(project: Project, errors: Sequence[str] = ()) -> bool:
    """Return True if there are top-level errors or any node in any scope has errors."""
    if errors:
        return True
    return any(
        ref.errors for scope in project.scopes for ref in iter_references(scope.dependencies)
    )


def collect_errors(
    project: Project, errors: Sequence[str] = ()
) -> dict[Identifier, list[str]]:
    """Map each identifier to its distinct errors, in order of first occurrence.

    Top-level errors are filed under the project's own identifier. Identifiers
    without errors are left out.
    """
    collected: dict[Identifier, list[str]] = {}
    if errors:
        _add_distinct(collected.setdefault(project.id, []), errors)

    for scope in project.scopes:
        for ref in iter_references(scope.dependencies):
            if ref.errors:
                _add_distinct(collected.setdefault(ref.id, []), ref.errors)

    return collected


def merge_errors(
    *error_maps: Mapping[Identifier, Iterable[str]],
) -> dict[Identifier, list[str]]:
    """Merge several error maps, keeping each identifier's errors distinct."""
    merged: dict[Identifier, list[str]] = {}
    for error_map in error_maps:
        for pkg_id, errors in error_map.items():
            errors = list(errors)
            if errors:
                _add_distinct(merged.setdefault(pkg_id, []), errors)
    return merged
