"""
Resource property registry — kind → how to deploy it.

The registry is the single point of kind dispatch. The deploy pipeline
never picks converters or handlers itself; it looks the manifest's
kind up here and uses the bundle it gets back.

Build once, then only read:

    registry = default_registry(executor, kinds=config.kinds)
    properties = registry.get("Deployment")
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from deployer.adapters.base import ArtifactConverter, ManifestHandler
from deployer.adapters.kubectl import KubectlJobExecutor, KubernetesHandler
from deployer.core.artifacts.converter import (
    UnversionedArtifactConverter,
    VersionedArtifactConverter,
)
from deployer.core.artifacts.replacer import (
    CRON_JOB_POD_SPEC,
    POD_SPEC,
    POD_TEMPLATE_SPEC,
    ArtifactReplacer,
    pod_spec_rules,
)
from deployer.core.errors import UnknownKindError
from deployer.core.models.config import KindSettings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResourceProperties:
    """Everything the pipeline needs to deploy one kind."""

    kind: str
    versioned: bool
    versioned_converter: ArtifactConverter
    unversioned_converter: ArtifactConverter
    handler: ManifestHandler


class ResourcePropertyRegistry:
    """Maps resource kinds to their ResourceProperties."""

    def __init__(self) -> None:
        self._properties: dict[str, ResourceProperties] = {}

    def register(self, properties: ResourceProperties) -> None:
        kind = properties.kind
        if kind in self._properties:
            logger.warning("Overwriting resource properties for kind: %s", kind)
        self._properties[kind] = properties
        logger.debug("Registered kind: %s (versioned=%s)", kind, properties.versioned)

    def get(self, kind: str) -> ResourceProperties:
        """Look up a kind.

        Raises:
            UnknownKindError: If nothing is registered for ``kind``.
        """
        properties = self._properties.get(kind)
        if properties is None:
            raise UnknownKindError(kind)
        return properties

    def __contains__(self, kind: object) -> bool:
        return kind in self._properties

    def __len__(self) -> int:
        return len(self._properties)

    def list_kinds(self) -> list[str]:
        return sorted(self._properties)

    def kind_status(self) -> dict[str, dict[str, Any]]:
        """Summary of every registered kind, for ``deployer kinds``."""
        return {
            kind: {
                "kind": kind,
                "versioned": props.versioned,
                "handler": props.handler.__class__.__name__,
            }
            for kind, props in sorted(self._properties.items())
        }


# ── Defaults ────────────────────────────────────────────────────

# Kinds that carry a pod spec, and where it lives
_POD_SPEC_KINDS = {
    "Pod": POD_SPEC,
    "Deployment": POD_TEMPLATE_SPEC,
    "StatefulSet": POD_TEMPLATE_SPEC,
    "DaemonSet": POD_TEMPLATE_SPEC,
    "ReplicaSet": POD_TEMPLATE_SPEC,
    "Job": POD_TEMPLATE_SPEC,
    "CronJob": CRON_JOB_POD_SPEC,
}

_PLAIN_KINDS = (
    "Service", "Ingress", "ConfigMap", "Secret",
    "PersistentVolumeClaim", "PersistentVolume", "StorageClass",
    "Namespace", "ServiceAccount", "Role", "ClusterRole",
    "RoleBinding", "ClusterRoleBinding", "HorizontalPodAutoscaler",
    "NetworkPolicy", "ResourceQuota", "LimitRange",
)

BUILTIN_KINDS = frozenset(_POD_SPEC_KINDS) | frozenset(_PLAIN_KINDS)

# Immutable-by-convention kinds: every change is a new resource
VERSIONED_BY_DEFAULT = frozenset({"ConfigMap", "Secret", "ReplicaSet", "Pod"})


def default_registry(
    executor: KubectlJobExecutor | None = None,
    kinds: dict[str, KindSettings] | None = None,
) -> ResourcePropertyRegistry:
    """Registry with the built-in Kubernetes kinds.

    Args:
        executor: Shared kubectl executor for every handler.
        kinds: Per-kind overrides from config. Kinds not built in are
            registered with a handler that replaces nothing.
    """
    executor = executor or KubectlJobExecutor()
    kinds = kinds or {}
    versioned_converter = VersionedArtifactConverter()
    unversioned_converter = UnversionedArtifactConverter()
    plain_handler = KubernetesHandler(executor)

    def _versioned(kind: str) -> bool:
        if kind in kinds:
            return kinds[kind].versioned
        return kind in VERSIONED_BY_DEFAULT

    registry = ResourcePropertyRegistry()
    handlers: dict[tuple[str, ...], KubernetesHandler] = {}

    for kind, prefix in _POD_SPEC_KINDS.items():
        if prefix not in handlers:
            handlers[prefix] = KubernetesHandler(executor, ArtifactReplacer(pod_spec_rules(prefix)))
        registry.register(ResourceProperties(
            kind=kind,
            versioned=_versioned(kind),
            versioned_converter=versioned_converter,
            unversioned_converter=unversioned_converter,
            handler=handlers[prefix],
        ))

    custom_kinds = [k for k in kinds if k not in BUILTIN_KINDS]
    for kind in (*_PLAIN_KINDS, *custom_kinds):
        registry.register(ResourceProperties(
            kind=kind,
            versioned=_versioned(kind),
            versioned_converter=versioned_converter,
            unversioned_converter=unversioned_converter,
            handler=plain_handler,
        ))

    return registry
