"""
Operation results — what a deploy hands back to its caller.

ReplaceResult is the intermediate product of artifact replacement.
OperationResult is the final output: the manifests the cluster
accepted, plus the artifacts created (the manifest itself) and bound
(artifacts its body referenced).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, Field

from deployer.core.models.artifact import Artifact
from deployer.core.models.manifest import KubernetesManifest


@dataclass
class ReplaceResult:
    """A rewritten manifest and the candidate artifacts it now references."""

    manifest: KubernetesManifest
    bound_artifacts: list[Artifact] = field(default_factory=list)


class OperationResult(BaseModel):
    """Outcome of submitting one or more manifests."""

    manifest_names_by_namespace: dict[str, list[str]] = Field(default_factory=dict)
    manifests: list[dict[str, Any]] = Field(default_factory=list)
    created_artifacts: list[Artifact] = Field(default_factory=list)
    bound_artifacts: list[Artifact] = Field(default_factory=list)

    def add_manifest(self, manifest: KubernetesManifest) -> None:
        """Record a submitted manifest under its namespace."""
        names = self.manifest_names_by_namespace.setdefault(manifest.namespace, [])
        full_name = manifest.full_resource_name
        if full_name not in names:
            names.append(full_name)
        self.manifests.append(dict(manifest))
