"""
Mock adapters — recording test doubles for the deploy pipeline.

Used by tests to run the full pipeline without kubectl or the network. Each double
records what it received and can be configured to fail.
"""

from __future__ import annotations

from deployer.adapters.base import ArtifactDownloader, ArtifactProvider, ManifestHandler
from deployer.core.artifacts.replacer import ArtifactReplacer
from deployer.core.errors import ArtifactFetchError, SubmissionError
from deployer.core.models.account import KubernetesCredentials
from deployer.core.models.artifact import Artifact
from deployer.core.models.manifest import KubernetesManifest
from deployer.core.models.result import OperationResult, ReplaceResult


class MockManifestHandler(ManifestHandler):
    """Handler that records submissions instead of applying them.

    Replacement goes through a real ArtifactReplacer (no rules unless
    given), so bound artifacts behave as they would in production.
    """

    def __init__(self, replacer: ArtifactReplacer | None = None):
        self._replacer = replacer or ArtifactReplacer()
        self._call_log: list[tuple[str, KubernetesManifest]] = []
        self._failure: str | None = None

    @property
    def call_log(self) -> list[tuple[str, KubernetesManifest]]:
        """(method, manifest) for every call received."""
        return self._call_log

    @property
    def submitted(self) -> list[KubernetesManifest]:
        return [m for method, m in self._call_log if method == "deploy"]

    def set_failure(self, reason: str = "Mock failure") -> None:
        """Make every subsequent submission raise SubmissionError."""
        self._failure = reason

    def replace_artifacts(
        self,
        manifest: KubernetesManifest,
        artifacts: list[Artifact],
    ) -> ReplaceResult:
        self._call_log.append(("replace", manifest))
        return self._replacer.replace_all(manifest, artifacts)

    def deploy_augmented_manifest(
        self,
        credentials: KubernetesCredentials,
        manifest: KubernetesManifest,
    ) -> OperationResult:
        self._call_log.append(("deploy", manifest))
        if self._failure is not None:
            raise SubmissionError(manifest.kind, manifest.name, self._failure)
        result = OperationResult()
        result.add_manifest(manifest)
        return result

    def reset(self) -> None:
        self._call_log.clear()
        self._failure = None


class MockDownloader(ArtifactDownloader):
    """Serves manifests from a reference → manifest map."""

    def __init__(self, manifests: dict[str, dict] | None = None):
        self._manifests = dict(manifests or {})
        self._failures: dict[str, str] = {}
        self._call_log: list[Artifact] = []

    @property
    def call_log(self) -> list[Artifact]:
        return self._call_log

    def add(self, reference: str, manifest: dict) -> None:
        self._manifests[reference] = manifest

    def set_failure(self, reference: str, reason: str = "Mock failure") -> None:
        self._failures[reference] = reason

    def download_manifest(self, artifact: Artifact) -> KubernetesManifest:
        self._call_log.append(artifact)
        reference = artifact.reference
        if reference in self._failures:
            raise ArtifactFetchError(reference, self._failures[reference])
        if reference not in self._manifests:
            raise ArtifactFetchError(reference, "not found")
        return KubernetesManifest(self._manifests[reference]).deep_copy()


class StaticArtifactProvider(ArtifactProvider):
    """Provider over a fixed list of previously deployed artifacts."""

    def __init__(self, artifacts: list[Artifact] | None = None):
        self._artifacts = list(artifacts or [])

    def get_artifacts(self, type: str, name: str, location: str) -> list[Artifact]:
        return [
            a for a in self._artifacts
            if a.type == type and a.name == name and a.location == location
        ]
