"""Package and project identifiers."""

from __future__ import annotations

from dataclasses import dataclass
from fnmatch import fnmatchcase


@dataclass(frozen=True, order=True)
class Identifier:
    """
    Stable cross-reference key for projects and packages.
    Ordering and equality are plain field comparisons, no version semantics.
    """

    type: str  # package manager type, e.g. "Pod", "PyPI", "Crate"
    namespace: str
    name: str
    version: str

    @classmethod
    def from_string(cls, value: str) -> Identifier:
        """Parse ``type:namespace:name:version``."""
        parts = value.split(":")
        if len(parts) != 4:
            raise ValueError(
                f"Identifier '{value}' must consist of exactly 4 colon-separated parts."
            )
        return cls(*parts)

    def matches(self, pattern: Identifier) -> bool:
        """Return True if every field matches the glob in the same field of *pattern*."""
        return all(
            fnmatchcase(value, glob)
            for value, glob in zip(
                (self.type, self.namespace, self.name, self.version),
                (pattern.type, pattern.namespace, pattern.name, pattern.version),
            )
        )

    def __str__(self) -> str:
        return f"{self.type}:{self.namespace}:{self.name}:{self.version}"
