"""
Manifest namer — application/cluster naming stamped as annotations.

    moniker.deployer.io/application  app (defaults to the manifest name)
    moniker.deployer.io/cluster      cluster (defaults to "<lowerKind> <name>")
    moniker.deployer.io/stack        only when set
    moniker.deployer.io/detail       only when set
    moniker.deployer.io/sequence     only when set

Also sets the standard ``app.kubernetes.io/name`` label (unless the
manifest already has one) and ``app.kubernetes.io/managed-by``.
"""

from __future__ import annotations

from deployer.adapters.base import Namer
from deployer.core.annotater import LABEL_MANAGED_BY, LABEL_NAME, MANAGED_BY, MONIKER_PREFIX
from deployer.core.models.manifest import KubernetesManifest, lower_camel
from deployer.core.models.moniker import Moniker


class ManifestNamer(Namer):

    def apply_moniker(self, manifest: KubernetesManifest, moniker: Moniker) -> None:
        app = moniker.app or manifest.name
        cluster = moniker.cluster or f"{lower_camel(manifest.kind)} {manifest.name}"

        annotations = manifest.annotations
        annotations[f"{MONIKER_PREFIX}application"] = app
        annotations[f"{MONIKER_PREFIX}cluster"] = cluster
        if moniker.stack:
            annotations[f"{MONIKER_PREFIX}stack"] = moniker.stack
        if moniker.detail:
            annotations[f"{MONIKER_PREFIX}detail"] = moniker.detail
        if moniker.sequence is not None:
            annotations[f"{MONIKER_PREFIX}sequence"] = str(moniker.sequence)

        labels = manifest.labels
        labels.setdefault(LABEL_NAME, app)
        labels[LABEL_MANAGED_BY] = MANAGED_BY
