"""Package manager registry: the closed set of supported backends."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

import structlog

from dependency_analyzer.config import AnalyzerConfiguration
from dependency_analyzer.exceptions import PackageManagerNotFoundError
from dependency_analyzer.managers.base import PackageManager

log = structlog.get_logger("dependency_analyzer.managers")


@dataclass(frozen=True)
class PackageManagerDescriptor:
    """Package manager declaration."""

    name: str
    homepage_url: str
    primary_language: str
    definition_files: tuple[str, ...]  # exact file names, e.g. ("Podfile.lock", "Podfile")
    factory: Callable[[AnalyzerConfiguration], PackageManager]

    def matches(self, file_name: str) -> bool:
        return file_name in self.definition_files

    def create(self, config: AnalyzerConfiguration) -> PackageManager:
        return self.factory(config)

    def __str__(self) -> str:
        return self.name


class PackageManagerRegistry:
    """Package manager registration center."""

    def __init__(self) -> None:
        self._managers: dict[str, PackageManagerDescriptor] = {}

    def register(self, descriptor: PackageManagerDescriptor) -> None:
        self._managers[descriptor.name.upper()] = descriptor
        log.debug("registry.registered", manager=descriptor.name)

    def get(self, name: str) -> PackageManagerDescriptor | None:
        return self._managers.get(name.upper())

    def require(self, name: str) -> PackageManagerDescriptor:
        desc = self.get(name)
        if desc is None:
            raise PackageManagerNotFoundError(name, self.names())
        return desc

    def names(self) -> list[str]:
        return [d.name for d in self._managers.values()]

    def list_all(self) -> list[PackageManagerDescriptor]:
        return list(self._managers.values())

    def find_by_definition_file(self, file_name: str) -> list[PackageManagerDescriptor]:
        return [d for d in self._managers.values() if d.matches(file_name)]


def create_default_registry() -> PackageManagerRegistry:
    """Create a registry with all built-in package managers."""
    from dependency_analyzer.managers.cargo import Cargo
    from dependency_analyzer.managers.cocoapods import CocoaPods
    from dependency_analyzer.managers.pip import Pip

    registry = PackageManagerRegistry()
    registry.register(
        PackageManagerDescriptor(
            name="Cargo",
            homepage_url="https://doc.rust-lang.org/cargo/",
            primary_language="Rust",
            definition_files=("Cargo.toml",),
            factory=Cargo,
        )
    )
    registry.register(
        PackageManagerDescriptor(
            name="CocoaPods",
            homepage_url="https://cocoapods.org/",
            primary_language="Objective-C",
            definition_files=("Podfile.lock", "Podfile"),
            factory=CocoaPods,
        )
    )
    registry.register(
        PackageManagerDescriptor(
            name="PIP",
            homepage_url="https://pip.pypa.io/",
            primary_language="Python",
            definition_files=("requirements.txt", "requirements-dev.txt", "requirements-test.txt"),
            factory=Pip,
        )
    )
    return registry
