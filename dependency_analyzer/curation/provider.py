"""Curation providers: where package curations come from."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path
from typing import Protocol, runtime_checkable

import structlog
import yaml
from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from dependency_analyzer.exceptions import CurationError
from dependency_analyzer.models.curation import PackageCuration, PackageCurationData
from dependency_analyzer.models.identifier import Identifier
from dependency_analyzer.models.package import RemoteArtifact, VcsInfo

log = structlog.get_logger("dependency_analyzer.curation")


@runtime_checkable
class PackageCurationProvider(Protocol):
    """Interface that every curation source must satisfy."""

    def get_curations_for(self, pkg_id: Identifier) -> list[PackageCuration]: ...


class NoCurationProvider:
    """Provides no curations at all."""

    def get_curations_for(self, pkg_id: Identifier) -> list[PackageCuration]:
        return []


class SimplePackageCurationProvider:
    """Serves a fixed list of curations, matched by identifier pattern, in list order."""

    def __init__(self, curations: Iterable[PackageCuration]) -> None:
        self.curations = list(curations)

    def get_curations_for(self, pkg_id: Identifier) -> list[PackageCuration]:
        return [c for c in self.curations if c.is_applicable(pkg_id)]


# ── YAML file schema ─────────────────────────────────────────────────────


class RemoteArtifactSchema(BaseModel):
    model_config = ConfigDict(extra="forbid")

    url: str = ""
    hash: str = ""
    hash_algorithm: str = ""


class VcsInfoSchema(BaseModel):
    model_config = ConfigDict(extra="forbid")

    type: str = ""
    url: str = ""
    revision: str = ""
    path: str = ""


class CurationDataSchema(BaseModel):
    model_config = ConfigDict(extra="forbid")

    comment: str = ""
    declared_licenses: list[str] | None = None
    description: str | None = None
    homepage_url: str | None = None
    binary_artifact: RemoteArtifactSchema | None = None
    source_artifact: RemoteArtifactSchema | None = None
    vcs: VcsInfoSchema | None = None


class CurationEntrySchema(BaseModel):
    """One entry of a curations file: ``{id: "type:ns:name:version", curations: {...}}``."""

    id: str
    curations: CurationDataSchema

    @field_validator("id")
    @classmethod
    def _valid_identifier(cls, v: str) -> str:
        Identifier.from_string(v)
        return v

    def to_curation(self) -> PackageCuration:
        data = self.curations
        return PackageCuration(
            id=Identifier.from_string(self.id),
            data=PackageCurationData(
                comment=data.comment,
                declared_licenses=tuple(data.declared_licenses)
                if data.declared_licenses is not None
                else None,
                description=data.description,
                homepage_url=data.homepage_url,
                binary_artifact=RemoteArtifact(**data.binary_artifact.model_dump())
                if data.binary_artifact
                else None,
                source_artifact=RemoteArtifact(**data.source_artifact.model_dump())
                if data.source_artifact
                else None,
                vcs=VcsInfo(**data.vcs.model_dump()) if data.vcs else None,
            ),
        )


def load_curations(path: Path) -> list[PackageCuration]:
    """Load curations from a YAML file.

    Entries that fail validation are skipped with a warning. Raises
    CurationError if the file cannot be read or is not a YAML list.
    """
    try:
        raw = yaml.safe_load(Path(path).read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as e:
        raise CurationError(f"Cannot read curations file '{path}': {e}") from e

    if raw is None:
        return []
    if not isinstance(raw, list):
        raise CurationError(f"Curations file '{path}' must contain a YAML list.")

    curations: list[PackageCuration] = []
    for index, entry in enumerate(raw):
        try:
            curations.append(CurationEntrySchema.model_validate(entry).to_curation())
        except ValidationError as e:
            log.warning(
                "curation.invalid_entry_skipped",
                file=str(path),
                index=index,
                error=str(e),
            )
    log.info("curation.loaded", file=str(path), count=len(curations))
    return curations


class YamlFilePackageCurationProvider(SimplePackageCurationProvider):
    """Curations from a YAML file."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        super().__init__(load_curations(self.path))
