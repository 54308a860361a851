"""Cargo support: declared dependencies from Cargo.toml, versions from Cargo.lock."""

from __future__ import annotations

import sys
from pathlib import Path

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from dependency_analyzer.managers.base import PackageManager, relative_path
from dependency_analyzer.models.dependency import PackageReference, Project, Scope
from dependency_analyzer.models.identifier import Identifier
from dependency_analyzer.models.package import (
    CuratedPackage,
    Package,
    RemoteArtifact,
    VcsInfo,
)
from dependency_analyzer.models.result import ProjectAnalyzerResult

_DEP_SECTIONS = ("dependencies", "dev-dependencies", "build-dependencies")

_CRATES_IO_SOURCE = "registry+https://github.com/rust-lang/crates.io-index"

_LockKey = tuple[str, str]  # (name, version)

_INHERITABLE_FIELDS = ("version", "license", "repository", "homepage")


def _dep_package_name(key: str, spec: str | dict) -> str:
    """Renamed dependencies carry the real crate name in 'package'."""
    if isinstance(spec, dict):
        return spec.get("package", key)
    return key


def _parse_lock_dep(entry: str) -> tuple[str, str | None]:
    """Parse "name", "name version" or "name version (source)"."""
    parts = entry.split()
    return parts[0], parts[1] if len(parts) > 1 else None


def _license_list(expression: str | None) -> tuple[str, ...]:
    if not expression:
        return ()
    # Old-style "MIT/Apache-2.0" and SPDX "MIT OR Apache-2.0"
    normalized = expression.replace("/", " OR ")
    return tuple(part.strip() for part in normalized.split(" OR ") if part.strip())


def _version_key(version: str) -> tuple[tuple[int, ...], bool]:
    """Sort key for semver strings; a pre-release sorts below its release."""
    release, _, pre = version.split("+", 1)[0].partition("-")
    numbers = tuple(int(part) if part.isdigit() else 0 for part in release.split("."))
    return numbers, not pre


def _workspace_package(root_dir: Path, start: Path) -> dict:
    """The [workspace.package] table of the nearest enclosing workspace, if any."""
    root_dir = root_dir.resolve()
    current = start.resolve()
    while True:
        candidate = current / "Cargo.toml"
        if candidate.is_file():
            workspace = tomllib.loads(candidate.read_text(encoding="utf-8")).get("workspace")
            if isinstance(workspace, dict):
                return workspace.get("package", {})
        if current == root_dir or current.parent == current:
            return {}
        current = current.parent


class Cargo(PackageManager):
    """Reads Cargo.toml and its Cargo.lock; cargo itself is not invoked."""

    @property
    def name(self) -> str:
        return "Cargo"

    def resolve_dependencies_for(
        self, root_dir: Path, definition_file: Path
    ) -> ProjectAnalyzerResult:
        manifest = tomllib.loads(definition_file.read_text(encoding="utf-8"))
        package_table = manifest.get("package", {})
        errors: list[str] = []
        fields = self._package_fields(root_dir, definition_file, package_table, errors)
        crate_name = package_table.get("name", definition_file.parent.resolve().name)
        crate_version = fields["version"]

        lockfile = self._find_lockfile(root_dir, definition_file.parent)
        lock_packages: dict[_LockKey, dict] = {}
        if lockfile is None:
            errors.append(
                f"No Cargo.lock found for '{relative_path(root_dir, definition_file)}'. "
                "Run 'cargo generate-lockfile' to create one."
            )
        else:
            lock = tomllib.loads(lockfile.read_text(encoding="utf-8"))
            for entry in lock.get("package", []):
                lock_packages[(entry["name"], str(entry["version"]))] = entry

        resolver = _LockResolver(lock_packages)
        root_key = (crate_name, crate_version)
        root_deps = dict(
            _parse_lock_dep(d) for d in lock_packages.get(root_key, {}).get("dependencies", [])
        )

        scopes: list[Scope] = []
        for section in _DEP_SECTIONS:
            dep_table = manifest.get(section, {})
            if not dep_table:
                continue
            references = tuple(
                resolver.reference(
                    _dep_package_name(key, spec),
                    root_deps.get(_dep_package_name(key, spec)),
                    path=(root_key,),
                )
                for key, spec in dep_table.items()
            )
            scopes.append(Scope(name=section, dependencies=references))

        repository = fields["repository"]
        project = Project(
            id=Identifier(self.name, "", crate_name, crate_version),
            definition_file_path=relative_path(root_dir, definition_file),
            declared_licenses=_license_list(fields["license"]),
            vcs=VcsInfo(type="git", url=repository) if repository else VcsInfo.EMPTY,
            vcs_processed=VcsInfo(type="git", url=repository).normalize()
            if repository
            else VcsInfo.EMPTY,
            homepage_url=fields["homepage"],
            scopes=tuple(scopes),
        )
        return ProjectAnalyzerResult(
            config=self.config,
            project=project,
            packages=tuple(resolver.packages.values()),
            errors=tuple(errors),
        )

    @staticmethod
    def _package_fields(
        root_dir: Path, definition_file: Path, package_table: dict, errors: list[str]
    ) -> dict[str, str]:
        """Project metadata, with `field.workspace = true` taken from [workspace.package]."""
        workspace_package: dict | None = None
        fields: dict[str, str] = {}
        for field in _INHERITABLE_FIELDS:
            value = package_table.get(field, "")
            if isinstance(value, dict) and value.get("workspace") is True:
                if workspace_package is None:
                    workspace_package = _workspace_package(root_dir, definition_file.parent)
                if field not in workspace_package:
                    errors.append(
                        f"'package.{field}' is inherited from the workspace, "
                        "but no enclosing [workspace.package] defines it."
                    )
                value = workspace_package.get(field, "")
            fields[field] = str(value) if value else ""
        return fields

    @staticmethod
    def _find_lockfile(root_dir: Path, start: Path) -> Path | None:
        """Look for Cargo.lock from the manifest's directory up to the analyzed root."""
        root_dir = root_dir.resolve()
        current = start.resolve()
        while True:
            candidate = current / "Cargo.lock"
            if candidate.is_file():
                return candidate
            if current == root_dir or current.parent == current:
                return None
            current = current.parent


class _LockResolver:
    """Builds package references from Cargo.lock entries."""

    def __init__(self, lock_packages: dict[_LockKey, dict]) -> None:
        self._lock_packages = lock_packages
        self.packages: dict[_LockKey, CuratedPackage] = {}

    def _find(self, name: str, version: str | None) -> dict | None:
        if version is not None:
            return self._lock_packages.get((name, version))
        candidates = [k for k in self._lock_packages if k[0] == name]
        if not candidates:
            return None
        return self._lock_packages[max(candidates, key=lambda k: _version_key(k[1]))]

    def reference(
        self, name: str, version: str | None, path: tuple[_LockKey, ...]
    ) -> PackageReference:
        entry = self._find(name, version)
        if entry is None:
            return PackageReference(
                id=Identifier("Crate", "", name, version or ""),
                errors=(f"Crate '{name}' is not listed in 'Cargo.lock'.",)
                if self._lock_packages
                else (),
                optional=True,
            )

        key = (entry["name"], str(entry["version"]))
        pkg_id = Identifier("Crate", "", *key)
        if key in path:
            chain = " -> ".join(f"{n} {v}".strip() for n, v in path + (key,))
            return PackageReference(
                id=pkg_id,
                errors=(f"Dependency cycle detected: {chain}.",),
                optional=key not in self.packages,
            )

        if key not in self.packages:
            self.packages[key] = CuratedPackage(_package(pkg_id, entry))

        children = tuple(
            self.reference(*_parse_lock_dep(dep), path=path + (key,))
            for dep in entry.get("dependencies", [])
        )
        return PackageReference(id=pkg_id, dependencies=children)


def _package(pkg_id: Identifier, entry: dict) -> Package:
    source = entry.get("source", "")
    source_artifact = RemoteArtifact.EMPTY
    vcs = VcsInfo.EMPTY
    if source == _CRATES_IO_SOURCE:
        source_artifact = RemoteArtifact(
            url=f"https://crates.io/api/v1/crates/{pkg_id.name}/{pkg_id.version}/download",
            hash=entry.get("checksum", ""),
            hash_algorithm="SHA-256" if entry.get("checksum") else "",
        )
    elif source.startswith("git+"):
        url, _, revision = source[len("git+"):].partition("#")
        vcs = VcsInfo(type="git", url=url.split("?", 1)[0], revision=revision)

    return Package(
        id=pkg_id,
        homepage_url=f"https://crates.io/crates/{pkg_id.name}",
        source_artifact=source_artifact,
        vcs=vcs,
    )
