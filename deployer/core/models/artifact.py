"""
Artifact model — a versioned, addressable deployment input or output.

An artifact is either a build output referenced by a manifest (a
container image, a config map) or the deployed manifest's own identity.
Artifacts are immutable and hashable so they can be de-duplicated.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

# Artifact types the replacer understands
DOCKER_IMAGE = "docker/image"
KUBERNETES_CONFIG_MAP = "kubernetes/configMap"
KUBERNETES_SECRET = "kubernetes/secret"

# Artifact types the downloader can fetch manifests from
EMBEDDED_BASE64 = "embedded/base64"
HTTP_FILE = "http/file"
LOCAL_FILE = "local/file"


class Artifact(BaseModel):
    """An immutable artifact record.

    For a docker image, ``name`` is the untagged image
    (``gcr.io/project/app``) and ``reference`` the full pullable
    location (``gcr.io/project/app:1.4.2``). For a deployed manifest,
    ``name`` is the base resource name, ``location`` the namespace,
    and ``reference`` the deployed (possibly versioned) name.
    """

    model_config = ConfigDict(frozen=True)

    type: str
    name: str = ""
    version: str | None = None
    location: str = ""
    reference: str = ""
    digest: str | None = None

    @property
    def display(self) -> str:
        """Short human-readable identity for logs and errors."""
        return self.reference or self.name or self.type
