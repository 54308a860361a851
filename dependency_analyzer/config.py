"""Analyzer configuration.

Environment variables:
    DEP_ANALYZER_ALLOW_DYNAMIC_VERSIONS    accept unpinned versions (default: false)
    DEP_ANALYZER_IGNORE_TOOL_VERSIONS      skip tool version checks (default: false)
    DEP_ANALYZER_RESOLUTION_TIMEOUT        per package manager timeout in seconds (default: none)
    DEP_ANALYZER_MAX_WORKERS               concurrent package manager resolutions (default: 4)
"""

from __future__ import annotations

import os
from dataclasses import dataclass

_TRUTHY = {"1", "true", "yes", "on"}


def _env_bool(key: str, default: bool = False) -> bool:
    value = os.environ.get(key)
    if value is None:
        return default
    return value.strip().lower() in _TRUTHY


@dataclass(frozen=True)
class AnalyzerConfiguration:
    """Options that influence resolution results; stored with every result."""

    ignore_tool_versions: bool = False
    allow_dynamic_versions: bool = False

    @classmethod
    def from_env(cls) -> AnalyzerConfiguration:
        return cls(
            ignore_tool_versions=_env_bool("DEP_ANALYZER_IGNORE_TOOL_VERSIONS"),
            allow_dynamic_versions=_env_bool("DEP_ANALYZER_ALLOW_DYNAMIC_VERSIONS"),
        )


@dataclass(frozen=True)
class AnalyzerSettings:
    """Engine knobs that do not affect the content of results."""

    resolution_timeout: float | None = None  # seconds per package manager
    max_workers: int = 4

    def __post_init__(self) -> None:
        if self.max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        if self.resolution_timeout is not None and self.resolution_timeout <= 0:
            raise ValueError("resolution_timeout must be positive")

    @classmethod
    def from_env(cls) -> AnalyzerSettings:
        timeout = os.environ.get("DEP_ANALYZER_RESOLUTION_TIMEOUT")
        return cls(
            resolution_timeout=float(timeout) if timeout else None,
            max_workers=int(os.environ.get("DEP_ANALYZER_MAX_WORKERS", "4")),
        )
