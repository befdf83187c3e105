"""
Deploy request — everything a caller specifies for one deployment.

The request is the external, untrusted input of the deployer. Parsing
it is the one place an unknown manifest source can show up; past
validation, ``source`` is a closed enum.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from deployer.core.errors import UnsupportedSourceError
from deployer.core.models.artifact import Artifact
from deployer.core.models.manifest import KubernetesManifest
from deployer.core.models.moniker import Moniker, Relationships


class ManifestSource(StrEnum):
    """Where the manifest body comes from."""

    INLINE = "inline"
    BY_REFERENCE = "by-reference"


class DeployManifestDescription(BaseModel):
    """A single deployment request.

    ``manifest`` is held as the caller's own KubernetesManifest object
    (a plain mapping is wrapped once, on input), so inline deploys
    operate on exactly the document that was passed in.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    account: str = ""
    source: ManifestSource = ManifestSource.INLINE
    manifest: KubernetesManifest | None = None
    manifest_artifact: Artifact | None = None
    namespace_override: str | None = None
    versioned: bool | None = None
    artifacts: list[Artifact] = Field(default_factory=list)
    moniker: Moniker = Field(default_factory=Moniker)
    relationships: Relationships = Field(default_factory=Relationships)

    @field_validator("source", mode="before")
    @classmethod
    def _parse_source(cls, value: Any) -> ManifestSource:
        if value is None or value == "":
            return ManifestSource.INLINE
        try:
            return ManifestSource(value)
        except ValueError:
            raise UnsupportedSourceError(value) from None

    @field_validator("manifest", mode="before")
    @classmethod
    def _wrap_manifest(cls, value: Any) -> Any:
        if isinstance(value, dict) and not isinstance(value, KubernetesManifest):
            return KubernetesManifest(value)
        return value

    @field_validator("artifacts", mode="before")
    @classmethod
    def _default_artifacts(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("moniker", mode="before")
    @classmethod
    def _default_moniker(cls, value: Any) -> Any:
        return Moniker() if value is None else value

    @field_validator("relationships", mode="before")
    @classmethod
    def _default_relationships(cls, value: Any) -> Any:
        return Relationships() if value is None else value

    @model_validator(mode="after")
    def _check_source_payload(self) -> DeployManifestDescription:
        if self.source == ManifestSource.INLINE and self.manifest is None:
            raise ValueError("source 'inline' requires 'manifest'")
        if self.source == ManifestSource.BY_REFERENCE and self.manifest_artifact is None:
            raise ValueError("source 'by-reference' requires 'manifest_artifact'")
        return self
