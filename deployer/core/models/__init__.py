"""
Domain models — the types that flow through a deployment.

    from deployer.core.models import Artifact, KubernetesManifest, OperationResult
"""

from deployer.core.models.account import KubernetesCredentials
from deployer.core.models.artifact import Artifact
from deployer.core.models.config import DeployerConfig, KindSettings
from deployer.core.models.description import DeployManifestDescription, ManifestSource
from deployer.core.models.manifest import KubernetesManifest
from deployer.core.models.moniker import Moniker, Relationships
from deployer.core.models.result import OperationResult, ReplaceResult

__all__ = [
    "Artifact",
    "DeployManifestDescription",
    "DeployerConfig",
    "KindSettings",
    "KubernetesCredentials",
    "KubernetesManifest",
    "ManifestSource",
    "Moniker",
    "OperationResult",
    "Relationships",
    "ReplaceResult",
]
