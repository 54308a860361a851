"""CocoaPods support, based on the resolved versions in Podfile.lock."""

from __future__ import annotations

import re
from pathlib import Path

import yaml

from dependency_analyzer.managers.base import PackageManager, project_name, relative_path
from dependency_analyzer.models.dependency import PackageReference, Project, Scope
from dependency_analyzer.models.identifier import Identifier
from dependency_analyzer.models.package import CuratedPackage, Package, VcsInfo
from dependency_analyzer.models.result import ProjectAnalyzerResult

# "Alamofire (4.7.3)", "AFNetworking/NSURLSession (= 3.2.1)", "SwiftyJSON"
_POD_RE = re.compile(r"^(?P<name>\S+)(?:\s+\((?P<version>[^)]*)\))?$")

_LOCKFILE = "Podfile.lock"
_PODFILE = "Podfile"
_SCOPE = "dependencies"


def _split(entry: str) -> tuple[str, str]:
    m = _POD_RE.match(entry.strip())
    if not m:
        raise ValueError(f"Unrecognized pod entry '{entry}'.")
    return m.group("name"), (m.group("version") or "").strip()


class CocoaPods(PackageManager):
    """Resolves pods from Podfile.lock; the pod tool itself is not invoked."""

    @property
    def name(self) -> str:
        return "CocoaPods"

    def map_definition_files(self, definition_files: list[Path]) -> dict[Path, list[Path]]:
        # A Podfile.lock next to a Podfile belongs to the Podfile's project.
        podfiles = {f.parent: f for f in definition_files if f.name == _PODFILE}
        projects: dict[Path, list[Path]] = {}
        for f in definition_files:
            owner = podfiles.get(f.parent, f) if f.name == _LOCKFILE else f
            projects.setdefault(owner, []).append(f)
        return projects

    def resolve_dependencies_for(
        self, root_dir: Path, definition_file: Path
    ) -> ProjectAnalyzerResult:
        rel = relative_path(root_dir, definition_file)
        project_dir = definition_file.parent
        lockfile = definition_file if definition_file.name == _LOCKFILE else project_dir / _LOCKFILE

        project_id = Identifier(self.name, "", project_name(root_dir, project_dir), "")

        if not lockfile.is_file():
            return ProjectAnalyzerResult(
                config=self.config,
                project=Project(id=project_id, definition_file_path=rel),
                errors=(
                    f"No lockfile found in '{relative_path(root_dir, project_dir) or '.'}'. "
                    "Run 'pod install' to create one.",
                ),
            )

        data = yaml.safe_load(lockfile.read_text(encoding="utf-8")) or {}
        if not isinstance(data, dict):
            raise ValueError(f"'{lockfile.name}' does not contain a YAML mapping.")

        versions: dict[str, str] = {}
        children: dict[str, list[str]] = {}
        for entry in data.get("PODS") or []:
            if isinstance(entry, dict):
                for key, deps in entry.items():
                    name, version = _split(key)
                    versions[name] = version
                    children[name] = [_split(d)[0] for d in deps or []]
            else:
                name, version = _split(entry)
                versions[name] = version
                children[name] = []

        checkout_options = data.get("CHECKOUT OPTIONS") or {}

        packages: dict[str, CuratedPackage] = {}

        def build(name: str, path: tuple[str, ...]) -> PackageReference:
            if name not in versions:
                return PackageReference(
                    id=Identifier("Pod", "", name, ""),
                    errors=(f"Pod '{name}' is not listed in '{_LOCKFILE}'.",),
                    optional=True,
                )
            pkg_id = Identifier("Pod", "", name, versions[name])
            if name in path:
                return PackageReference(
                    id=pkg_id,
                    errors=(f"Dependency cycle detected: {' -> '.join(path + (name,))}.",),
                )
            if name not in packages:
                packages[name] = CuratedPackage(self._package(pkg_id, checkout_options))
            return PackageReference(
                id=pkg_id,
                dependencies=tuple(build(child, path + (name,)) for child in children[name]),
            )

        roots = tuple(build(_split(d)[0], ()) for d in data.get("DEPENDENCIES") or [])

        project = Project(
            id=project_id,
            definition_file_path=rel,
            scopes=(Scope(name=_SCOPE, dependencies=roots),),
        )
        return ProjectAnalyzerResult(
            config=self.config, project=project, packages=tuple(packages.values())
        )

    @staticmethod
    def _package(pkg_id: Identifier, checkout_options: dict) -> Package:
        base_name = pkg_id.name.split("/", 1)[0]
        vcs = VcsInfo.EMPTY
        checkout = checkout_options.get(base_name) or {}
        if ":git" in checkout:
            vcs = VcsInfo(
                type="git",
                url=checkout[":git"],
                revision=checkout.get(":commit") or checkout.get(":tag") or "",
            )
        return Package(
            id=pkg_id,
            homepage_url=f"https://cocoapods.org/pods/{base_name}",
            vcs=vcs,
        )
