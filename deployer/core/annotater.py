"""
Manifest annotater — stamps artifact identity and ownership onto manifests.

Annotation keys are namespaced by concern so the deployer can find
(and ignore, when fingerprinting) what it wrote itself:

    artifact.deployer.io/*       — identity of the deployed artifact
    relationships.deployer.io/*  — ownership / ancestry
    moniker.deployer.io/*        — naming scheme (written by the namer)
"""

from __future__ import annotations

import json

from deployer.core.models.artifact import Artifact
from deployer.core.models.manifest import KubernetesManifest
from deployer.core.models.moniker import Relationships

ARTIFACT_PREFIX = "artifact.deployer.io/"
RELATIONSHIPS_PREFIX = "relationships.deployer.io/"
MONIKER_PREFIX = "moniker.deployer.io/"

LABEL_NAME = "app.kubernetes.io/name"
LABEL_MANAGED_BY = "app.kubernetes.io/managed-by"
MANAGED_BY = "deployer"

STAMPED_PREFIXES = (ARTIFACT_PREFIX, RELATIONSHIPS_PREFIX, MONIKER_PREFIX)
STAMPED_LABELS = (LABEL_NAME, LABEL_MANAGED_BY)


def annotate_artifact(manifest: KubernetesManifest, artifact: Artifact) -> None:
    """Stamp the manifest's own artifact identity."""
    annotations = manifest.annotations
    annotations[f"{ARTIFACT_PREFIX}type"] = artifact.type
    annotations[f"{ARTIFACT_PREFIX}name"] = artifact.name
    annotations[f"{ARTIFACT_PREFIX}location"] = artifact.location
    if artifact.version:
        annotations[f"{ARTIFACT_PREFIX}version"] = artifact.version
    else:
        annotations.pop(f"{ARTIFACT_PREFIX}version", None)


def annotate_relationships(manifest: KubernetesManifest, relationships: Relationships) -> None:
    """Stamp ownership links. Empty fields are not written."""
    annotations = manifest.annotations
    if relationships.owner:
        annotations[f"{RELATIONSHIPS_PREFIX}owner"] = relationships.owner
    if relationships.load_balancers:
        annotations[f"{RELATIONSHIPS_PREFIX}loadBalancers"] = json.dumps(relationships.load_balancers)
    if relationships.security_groups:
        annotations[f"{RELATIONSHIPS_PREFIX}securityGroups"] = json.dumps(relationships.security_groups)
