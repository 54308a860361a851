"""Definition file discovery: match files under a root to package managers."""

from __future__ import annotations

import os
from collections.abc import Sequence
from pathlib import Path

import structlog

from dependency_analyzer.exceptions import DiscoveryError
from dependency_analyzer.managers.base import relative_path
from dependency_analyzer.managers.registry import PackageManagerDescriptor
from dependency_analyzer.managers.unmanaged import Unmanaged

log = structlog.get_logger("dependency_analyzer.discovery")

# VCS metadata directories are never part of a project
_SKIP_DIRS = {".git", ".hg", ".svn"}

ManagedFiles = dict[PackageManagerDescriptor, list[Path]]


def find_managed_files(
    root_dir: Path, managers: Sequence[PackageManagerDescriptor]
) -> ManagedFiles:
    """Walk *root_dir* once and collect each manager's definition files.

    A file may be claimed by several managers. Managers without files are
    left out of the result. Raises DiscoveryError if the tree is unreadable.
    """
    root_dir = Path(root_dir)
    if not root_dir.is_dir():
        raise DiscoveryError(f"Project path is not a directory: {root_dir}")

    def _on_error(err: OSError) -> None:
        raise DiscoveryError(f"Cannot read '{err.filename}': {err.strerror}") from err

    found: ManagedFiles = {}
    for dirpath, dirnames, filenames in os.walk(root_dir, onerror=_on_error):
        dirnames[:] = sorted(d for d in dirnames if d not in _SKIP_DIRS)
        for filename in sorted(filenames):
            for manager in managers:
                if manager.matches(filename):
                    found.setdefault(manager, []).append(Path(dirpath) / filename)

    # Keep the managers' order for a stable result.
    return {m: found[m] for m in managers if m in found}


def discover(
    root_path: Path, managers: Sequence[PackageManagerDescriptor]
) -> ManagedFiles:
    """Map package managers to their definition files below *root_path*.

    With a single active manager, a file path is taken as that manager's
    definition file regardless of its name. The Unmanaged fallback is added
    when nothing is found, or nothing is found directly in the root directory.
    """
    root_path = Path(root_path).absolute()

    if len(managers) == 1 and root_path.is_file():
        managed = {managers[0]: [root_path]}
        root_dir = root_path.parent
    else:
        managed = find_managed_files(root_path, managers)
        root_dir = root_path
        has_root_definition_file = any(
            f.parent == root_path for files in managed.values() for f in files
        )
        if not managed or not has_root_definition_file:
            managed[Unmanaged] = [root_path]

    for manager, files in managed.items():
        log.info(
            "discovery.projects_found",
            manager=manager.name,
            files=[relative_path(root_dir, f) or "." for f in files],
        )

    return managed
