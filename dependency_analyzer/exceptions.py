"""Custom exceptions for the dependency analyzer."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any


class AnalyzerError(Exception):
    """Base exception for all analyzer errors."""


class DiscoveryError(AnalyzerError):
    """Raised when the project tree cannot be read during discovery."""


class ResultIntegrityError(AnalyzerError):
    """Raised when a project references packages that are not in the package set."""

    def __init__(self, missing_ids: Iterable[Any], context: str = ""):
        self.missing_ids = sorted(missing_ids)
        prefix = f"{context}: " if context else ""
        super().__init__(
            f"{prefix}The following references do not actually refer to packages: "
            f"{[str(i) for i in self.missing_ids]}."
        )


class CurationError(AnalyzerError):
    """Raised when a curation cannot be loaded or applied."""


class PackageManagerNotFoundError(AnalyzerError):
    """Raised when a package manager name is not registered."""

    def __init__(self, name: str, known: list[str]):
        self.name = name
        self.known = known
        super().__init__(f"Package manager '{name}' is not one of {known}.")


class OutputError(AnalyzerError):
    """Raised when a result cannot be serialized to an output format."""
