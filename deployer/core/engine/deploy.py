"""
Deploy engine — prepares one manifest and submits it.

The engine takes a deploy request, resolves its manifest, finds how the
manifest's kind is deployed, names and annotates it, binds the request's
artifacts into it, and hands it to the kind's handler.

Flow:
    resolve source → namespace → kind lookup → versioning → convert
        → annotate → name → replace artifacts → submit → aggregate

Stages only move forward. Any DeployError aborts the rest; there is no
partial result.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import yaml

from deployer.adapters.base import ArtifactConverter, ArtifactDownloader, ArtifactProvider, Namer
from deployer.adapters.registry import ResourceProperties, ResourcePropertyRegistry
from deployer.core.annotater import annotate_artifact, annotate_relationships
from deployer.core.errors import (
    ArtifactFetchError,
    DeployError,
    InvalidManifestError,
    UnsupportedSourceError,
)
from deployer.core.models.account import KubernetesCredentials
from deployer.core.models.artifact import Artifact
from deployer.core.models.description import DeployManifestDescription, ManifestSource
from deployer.core.models.manifest import KubernetesManifest
from deployer.core.models.moniker import Moniker, Relationships
from deployer.core.models.result import OperationResult
from deployer.core.task import Task

logger = logging.getLogger(__name__)

OP_NAME = "DEPLOY_KUBERNETES_MANIFEST"


# ── Stages ──────────────────────────────────────────────────────


def resolve_manifest(
    description: DeployManifestDescription,
    downloader: ArtifactDownloader | None,
    task: Task,
) -> KubernetesManifest:
    """Get the manifest the request points at.

    Inline manifests are returned as-is (the same object). By-reference
    manifests are downloaded; any failure becomes ArtifactFetchError.
    """
    match description.source:
        case ManifestSource.INLINE:
            return description.manifest  # type: ignore[return-value]
        case ManifestSource.BY_REFERENCE:
            artifact = description.manifest_artifact
            task.update_status(OP_NAME, f"Fetching manifest from artifact {artifact.display}...")
            if downloader is None:
                raise ArtifactFetchError(artifact.display, "no downloader configured")
            try:
                return downloader.download_manifest(artifact)
            except DeployError:
                raise
            except (OSError, ValueError, yaml.YAMLError) as e:
                raise ArtifactFetchError(artifact.display, str(e)) from e
        case _:
            raise UnsupportedSourceError(description.source)


def apply_namespace(
    manifest: KubernetesManifest,
    namespace_override: str | None,
    credentials: KubernetesCredentials,
) -> str:
    """Pick and set the target namespace; returns it."""
    if namespace_override:
        manifest.namespace = namespace_override
    elif not manifest.namespace:
        manifest.namespace = credentials.default_namespace or "default"
    return manifest.namespace


def require_name(manifest: KubernetesManifest) -> None:
    if not manifest.name:
        raise InvalidManifestError(manifest.kind, "metadata.name is required")


def find_resource_properties(
    registry: ResourcePropertyRegistry,
    kind: str,
    task: Task,
) -> ResourceProperties:
    task.update_status(OP_NAME, f"Finding deployer for {kind}...")
    return registry.get(kind)


def resolve_versioned(override: bool | None, properties: ResourceProperties) -> bool:
    """An explicit request beats the kind's default."""
    if override is not None:
        return override
    return properties.versioned


def select_converter(versioned: bool, properties: ResourceProperties) -> ArtifactConverter:
    return properties.versioned_converter if versioned else properties.unversioned_converter


def annotate_manifest(
    manifest: KubernetesManifest,
    artifact: Artifact,
    relationships: Relationships,
    moniker: Moniker,
    namer: Namer,
) -> None:
    annotate_artifact(manifest, artifact)
    annotate_relationships(manifest, relationships)
    namer.apply_moniker(manifest, moniker)


def aggregate_result(
    result: OperationResult,
    created: Artifact,
    bound: list[Artifact],
) -> OperationResult:
    """Created artifact first, then bound ones in binding order."""
    result.created_artifacts.append(created)
    result.bound_artifacts.extend(bound)
    return result


# ── Operation ───────────────────────────────────────────────────


@dataclass
class DeployManifestOperation:
    """One deployment, wired to its collaborators."""

    description: DeployManifestDescription
    credentials: KubernetesCredentials
    registry: ResourcePropertyRegistry
    namer: Namer
    provider: ArtifactProvider
    downloader: ArtifactDownloader | None = None

    def operate(self, task: Task) -> OperationResult:
        """Run every stage.

        Raises:
            DeployError: From whichever stage failed. The task records
                the failure before it propagates.
        """
        try:
            return self._operate(task)
        except DeployError as e:
            task.fail(OP_NAME, f"Deployment failed: {e}")
            raise

    def _operate(self, task: Task) -> OperationResult:
        description = self.description
        task.update_status(OP_NAME, "Beginning deployment of manifest...")

        manifest = resolve_manifest(description, self.downloader, task)
        namespace = apply_namespace(manifest, description.namespace_override, self.credentials)
        require_name(manifest)
        logger.debug("Deploying %s into namespace %s", manifest.full_resource_name, namespace)

        properties = find_resource_properties(self.registry, manifest.kind, task)
        versioned = resolve_versioned(description.versioned, properties)
        converter = select_converter(versioned, properties)

        task.update_status(OP_NAME, "Converting manifest to artifact...")
        # Fingerprint the body as it will be submitted, candidates bound
        preview = properties.handler.replace_artifacts(manifest, description.artifacts)
        artifact = converter.to_artifact(self.provider, preview.manifest)

        task.update_status(OP_NAME, "Annotating manifest with artifact, relationships & moniker...")
        annotate_manifest(manifest, artifact, description.relationships, description.moniker, self.namer)

        task.update_status(OP_NAME, "Setting a resource name...")
        manifest.name = converter.get_deployed_name(artifact)

        task.update_status(OP_NAME, "Swapping out artifacts from context...")
        replaced = properties.handler.replace_artifacts(manifest, description.artifacts)
        manifest = replaced.manifest

        task.update_status(OP_NAME, "Submitting manifest to kubernetes master...")
        result = properties.handler.deploy_augmented_manifest(self.credentials, manifest)

        aggregate_result(result, artifact, replaced.bound_artifacts)
        task.complete(OP_NAME, f"Deployed {manifest.full_resource_name} to {namespace}.")
        return result
