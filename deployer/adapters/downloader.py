"""
Manifest downloader — fetches by-reference manifests.

Supported artifact types (the artifact's ``reference`` says where):

    embedded/base64  — the manifest itself, base64-encoded
    local/file       — a path, relative to ``base_dir`` unless absolute
    http/file        — an http(s) URL

Every failure, whatever its cause, surfaces as ArtifactFetchError.
"""

from __future__ import annotations

import base64
import logging
import urllib.request
from pathlib import Path

import yaml

from deployer.adapters.base import ArtifactDownloader
from deployer.core.errors import ArtifactFetchError
from deployer.core.models.artifact import EMBEDDED_BASE64, HTTP_FILE, LOCAL_FILE, Artifact
from deployer.core.models.manifest import KubernetesManifest

logger = logging.getLogger(__name__)


class ManifestDownloader(ArtifactDownloader):
    """Reads manifests from inline payloads, local files and URLs."""

    def __init__(self, base_dir: Path | None = None, timeout: int = 30):
        self._base_dir = base_dir or Path.cwd()
        self._timeout = timeout

    def download_manifest(self, artifact: Artifact) -> KubernetesManifest:
        reference = artifact.reference
        if not reference:
            raise ArtifactFetchError(artifact.display, "artifact has no reference")

        try:
            text = self._fetch(artifact)
            manifest = KubernetesManifest.from_yaml(text)
        except ArtifactFetchError:
            raise
        except (OSError, ValueError, yaml.YAMLError) as e:
            raise ArtifactFetchError(reference, str(e)) from e

        if not manifest.kind:
            raise ArtifactFetchError(reference, "document has no 'kind'")
        if not manifest.name:
            raise ArtifactFetchError(reference, "document has no 'metadata.name'")

        logger.debug("Downloaded %s from %s", manifest.full_resource_name, artifact.type)
        return manifest

    def _fetch(self, artifact: Artifact) -> str:
        reference = artifact.reference
        if artifact.type == EMBEDDED_BASE64:
            return base64.b64decode(reference, validate=True).decode("utf-8")

        if artifact.type == LOCAL_FILE:
            path = Path(reference).expanduser()
            if not path.is_absolute():
                path = self._base_dir / path
            return path.read_text(encoding="utf-8")

        if artifact.type == HTTP_FILE:
            req = urllib.request.Request(
                reference,
                headers={"User-Agent": "manifest-deployer/1.0"},
            )
            with urllib.request.urlopen(req, timeout=self._timeout) as resp:
                return resp.read().decode("utf-8")

        raise ArtifactFetchError(reference, f"unsupported artifact type '{artifact.type}'")
