"""Adapters — collaborators the deploy pipeline delegates to.

Public re-exports for convenient access.
"""

from deployer.adapters.base import (
    ArtifactConverter,
    ArtifactDownloader,
    ArtifactProvider,
    ManifestHandler,
    Namer,
)
from deployer.adapters.downloader import ManifestDownloader
from deployer.adapters.kubectl import KubectlJobExecutor, KubernetesHandler
from deployer.adapters.mock import MockDownloader, MockManifestHandler, StaticArtifactProvider
from deployer.adapters.namer import ManifestNamer

__all__ = [
    "ArtifactConverter",
    "ArtifactDownloader",
    "ArtifactProvider",
    "KubectlJobExecutor",
    "KubernetesHandler",
    "ManifestDownloader",
    "ManifestHandler",
    "ManifestNamer",
    "MockDownloader",
    "MockManifestHandler",
    "Namer",
    "StaticArtifactProvider",
]
