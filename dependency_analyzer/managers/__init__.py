"""Package manager backends and their registry."""

from dependency_analyzer.managers.base import PackageManager
from dependency_analyzer.managers.registry import (
    PackageManagerDescriptor,
    PackageManagerRegistry,
    create_default_registry,
)
from dependency_analyzer.managers.unmanaged import Unmanaged

__all__ = [
    "PackageManager",
    "PackageManagerDescriptor",
    "PackageManagerRegistry",
    "Unmanaged",
    "create_default_registry",
]
