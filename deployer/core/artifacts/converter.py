"""
Artifact converters — how a manifest deployment is identified and named.

Two strategies, picked per deployment:

    UnversionedArtifactConverter — the resource keeps its own name and
        is updated in place on every deploy.
    VersionedArtifactConverter — each distinct manifest body gets its
        own ``<name>-vNNN`` resource. Re-deploying an unchanged body
        reuses the version it was first deployed under.
"""

from __future__ import annotations

import copy
import hashlib
import json
import logging
import re

from deployer.adapters.base import ArtifactConverter, ArtifactProvider
from deployer.core.annotater import STAMPED_LABELS, STAMPED_PREFIXES
from deployer.core.models.artifact import Artifact
from deployer.core.models.manifest import KubernetesManifest, lower_camel

logger = logging.getLogger(__name__)

_VERSION_RE = re.compile(r"^v(\d+)$")


def artifact_type(kind: str) -> str:
    """``ReplicaSet`` → ``kubernetes/replicaSet``."""
    return f"kubernetes/{lower_camel(kind)}"


def format_version(number: int) -> str:
    return f"v{number:03d}"


def parse_version(version: str | None) -> int | None:
    """``v007`` → 7; anything else → None."""
    if not version:
        return None
    match = _VERSION_RE.match(version)
    return int(match.group(1)) if match else None


def manifest_digest(manifest: KubernetesManifest) -> str:
    """Fingerprint of a manifest body.

    Ignores the resource name and namespace, and everything the deployer
    stamps itself, so the same user-authored body always hashes the same.
    """
    body = copy.deepcopy(dict(manifest))
    metadata = body.get("metadata")
    if isinstance(metadata, dict):
        metadata.pop("name", None)
        metadata.pop("namespace", None)
        for key in ("annotations", "labels"):
            values = metadata.get(key)
            if not isinstance(values, dict):
                continue
            kept = {
                k: v for k, v in values.items()
                if not k.startswith(STAMPED_PREFIXES) and k not in STAMPED_LABELS
            }
            if kept:
                metadata[key] = kept
            else:
                metadata.pop(key)
    canonical = json.dumps(body, sort_keys=True, separators=(",", ":"), default=str)
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()


class UnversionedArtifactConverter(ArtifactConverter):
    """Deployed name = manifest name."""

    @property
    def versioned(self) -> bool:
        return False

    def to_artifact(self, provider: ArtifactProvider, manifest: KubernetesManifest) -> Artifact:
        return Artifact(
            type=artifact_type(manifest.kind),
            name=manifest.name,
            location=manifest.namespace,
            reference=manifest.name,
            digest=manifest_digest(manifest),
        )

    def get_deployed_name(self, artifact: Artifact) -> str:
        return artifact.name


class VersionedArtifactConverter(ArtifactConverter):
    """Deployed name = ``<manifest name>-vNNN``."""

    @property
    def versioned(self) -> bool:
        return True

    def to_artifact(self, provider: ArtifactProvider, manifest: KubernetesManifest) -> Artifact:
        """Pass the manifest with its artifacts already bound: a new image
        reference must change the digest, or the old version is reused.
        """
        kind_type = artifact_type(manifest.kind)
        name = manifest.name
        location = manifest.namespace
        digest = manifest_digest(manifest)

        version = self._resolve_version(provider, kind_type, name, location, digest)
        return Artifact(
            type=kind_type,
            name=name,
            version=version,
            location=location,
            reference=f"{name}-{version}",
            digest=digest,
        )

    def get_deployed_name(self, artifact: Artifact) -> str:
        return f"{artifact.name}-{artifact.version}"

    def _resolve_version(
        self,
        provider: ArtifactProvider,
        kind_type: str,
        name: str,
        location: str,
        digest: str,
    ) -> str:
        existing = provider.get_artifacts(kind_type, name, location)

        for artifact in existing:
            if artifact.digest == digest and parse_version(artifact.version) is not None:
                logger.debug(
                    "Manifest %s/%s unchanged, reusing %s", location, name, artifact.version
                )
                return artifact.version  # type: ignore[return-value]

        taken = [n for n in (parse_version(a.version) for a in existing) if n is not None]
        next_version = format_version(max(taken) + 1 if taken else 0)
        logger.debug("Manifest %s/%s gets new version %s", location, name, next_version)
        return next_version
