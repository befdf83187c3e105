"""
Adapter base — the capability contracts between the deploy pipeline and
everything it delegates to.

The pipeline only talks to collaborators through these interfaces,
never to kubectl, the artifact store or the network directly:

    ArtifactDownloader  — fetch a manifest by artifact reference
    ArtifactProvider    — look up previously deployed artifacts
    ArtifactConverter   — describe a manifest as an artifact, name it
    ManifestHandler     — rewrite artifact references, submit to a cluster
    Namer               — stamp a moniker onto a manifest

Unlike action adapters, these DO raise: failures surface as typed
DeployError subclasses and abort the deployment.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from deployer.core.models.account import KubernetesCredentials
from deployer.core.models.artifact import Artifact
from deployer.core.models.manifest import KubernetesManifest
from deployer.core.models.moniker import Moniker
from deployer.core.models.result import OperationResult, ReplaceResult


class ArtifactDownloader(ABC):
    """Fetches and parses a manifest referenced by an artifact."""

    @abstractmethod
    def download_manifest(self, artifact: Artifact) -> KubernetesManifest:
        """Download the artifact and parse it as a single manifest.

        Raises:
            ArtifactFetchError: On any I/O or parse failure.
        """


class ArtifactProvider(ABC):
    """Read access to artifacts that were deployed before."""

    @abstractmethod
    def get_artifacts(self, type: str, name: str, location: str) -> list[Artifact]:
        """All known artifacts matching (type, name, location), oldest first."""


class ArtifactConverter(ABC):
    """Maps a manifest to the artifact that identifies its deployment."""

    @property
    @abstractmethod
    def versioned(self) -> bool:
        """Whether deployed names carry a version suffix."""

    @abstractmethod
    def to_artifact(self, provider: ArtifactProvider, manifest: KubernetesManifest) -> Artifact:
        """Describe this manifest deployment as an artifact."""

    @abstractmethod
    def get_deployed_name(self, artifact: Artifact) -> str:
        """The resource name the manifest is submitted under."""


class ManifestHandler(ABC):
    """Cluster-facing handler for one family of resource kinds."""

    @abstractmethod
    def replace_artifacts(
        self,
        manifest: KubernetesManifest,
        artifacts: list[Artifact],
    ) -> ReplaceResult:
        """Substitute artifact placeholders in the manifest body.

        Candidates that aren't referenced anywhere are left out of
        ``bound_artifacts``. No matches is not an error.
        """

    @abstractmethod
    def deploy_augmented_manifest(
        self,
        credentials: KubernetesCredentials,
        manifest: KubernetesManifest,
    ) -> OperationResult:
        """Submit the fully prepared manifest.

        Raises:
            SubmissionError: If the cluster doesn't accept it.
        """

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}>"


class Namer(ABC):
    """Applies a naming scheme to manifests."""

    @abstractmethod
    def apply_moniker(self, manifest: KubernetesManifest, moniker: Moniker) -> None:
        """Stamp the moniker onto the manifest in place."""
