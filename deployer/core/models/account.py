"""
Account credentials — how to reach one cluster.

Credentials are opaque to the deploy pipeline except for the default
namespace; the kubectl executor uses the rest.
"""

from __future__ import annotations

from pydantic import BaseModel


class KubernetesCredentials(BaseModel):
    """A named cluster account declared in deployer.yml."""

    name: str
    context: str = ""               # kubeconfig context ("" = current)
    kubeconfig: str = ""            # path ("" = kubectl default)
    default_namespace: str = "default"
    kubectl: str = "kubectl"        # binary to invoke
    timeout: int = 60               # seconds per kubectl call
