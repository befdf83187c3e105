"""
Artifact replacer — binds candidate artifacts to placeholders in a manifest.

A replace rule names an artifact type and a path into the manifest
(``*`` fans out over every list item or mapping value). For each string
found at a rule's path, the first candidate of that type whose ``name``
or ``reference`` equals the string wins, and the string is rewritten
to the candidate's ``reference``. Every matching occurrence is
rewritten; each bound candidate is reported once.

    rules = pod_spec_rules(("spec", "template", "spec"))
    result = ArtifactReplacer(rules).replace_all(manifest, candidates)
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any

from deployer.core.models.artifact import (
    DOCKER_IMAGE,
    KUBERNETES_CONFIG_MAP,
    KUBERNETES_SECRET,
    Artifact,
)
from deployer.core.models.manifest import KubernetesManifest
from deployer.core.models.result import ReplaceResult

logger = logging.getLogger(__name__)

Path = tuple[str, ...]


@dataclass(frozen=True)
class ReplaceRule:
    """One placeholder location for one artifact type."""

    artifact_type: str
    path: Path


# ── Pod spec locations ──────────────────────────────────────────

POD_SPEC = ("spec",)
POD_TEMPLATE_SPEC = ("spec", "template", "spec")
CRON_JOB_POD_SPEC = ("spec", "jobTemplate", "spec", "template", "spec")

_CONTAINER_LISTS = ("containers", "initContainers")

# Relative to a pod spec
_IMAGE_PATHS: list[Path] = [(c, "*", "image") for c in _CONTAINER_LISTS]

_CONFIG_MAP_PATHS: list[Path] = [
    ("volumes", "*", "configMap", "name"),
    ("volumes", "*", "projected", "sources", "*", "configMap", "name"),
    *[(c, "*", "envFrom", "*", "configMapRef", "name") for c in _CONTAINER_LISTS],
    *[(c, "*", "env", "*", "valueFrom", "configMapKeyRef", "name") for c in _CONTAINER_LISTS],
]

_SECRET_PATHS: list[Path] = [
    ("volumes", "*", "secret", "secretName"),
    ("volumes", "*", "projected", "sources", "*", "secret", "name"),
    *[(c, "*", "envFrom", "*", "secretRef", "name") for c in _CONTAINER_LISTS],
    *[(c, "*", "env", "*", "valueFrom", "secretKeyRef", "name") for c in _CONTAINER_LISTS],
]


def pod_spec_rules(prefix: Path) -> list[ReplaceRule]:
    """Replace rules for a pod spec found at ``prefix``."""
    rules: list[ReplaceRule] = []
    for artifact_type, paths in (
        (DOCKER_IMAGE, _IMAGE_PATHS),
        (KUBERNETES_CONFIG_MAP, _CONFIG_MAP_PATHS),
        (KUBERNETES_SECRET, _SECRET_PATHS),
    ):
        rules.extend(ReplaceRule(artifact_type, prefix + path) for path in paths)
    return rules


# ── Replacement ─────────────────────────────────────────────────


def _walk(node: Any, path: Path) -> Iterator[tuple[Any, Any]]:
    """Yield (container, key) for every value at ``path`` under ``node``."""
    if not path:
        return
    head, rest = path[0], path[1:]

    if head == "*":
        if isinstance(node, list):
            children = list(enumerate(node))
        elif isinstance(node, dict):
            children = list(node.items())
        else:
            return
    elif isinstance(node, dict) and head in node:
        children = [(head, node[head])]
    else:
        return

    for key, child in children:
        if rest:
            yield from _walk(child, rest)
        else:
            yield node, key


def _match(value: str, candidates: list[Artifact]) -> Artifact | None:
    """First candidate whose name or reference equals ``value``."""
    for artifact in candidates:
        if value == artifact.name or value == artifact.reference:
            return artifact
    return None


class ArtifactReplacer:
    """Applies a fixed set of replace rules to manifests."""

    def __init__(self, rules: list[ReplaceRule] | None = None):
        self._rules = list(rules or [])

    @property
    def rules(self) -> list[ReplaceRule]:
        return list(self._rules)

    @property
    def artifact_types(self) -> set[str]:
        return {rule.artifact_type for rule in self._rules}

    def replace_all(
        self,
        manifest: KubernetesManifest,
        artifacts: list[Artifact],
    ) -> ReplaceResult:
        """Rewrite placeholders in a copy of ``manifest``.

        The input manifest is left untouched.
        """
        rewritten = manifest.deep_copy()
        bound: list[Artifact] = []

        for rule in self._rules:
            candidates = [
                a for a in artifacts
                if a.type == rule.artifact_type and a.reference
            ]
            if not candidates:
                continue

            for container, key in _walk(rewritten, rule.path):
                value = container[key]
                if not isinstance(value, str):
                    continue
                artifact = _match(value, candidates)
                if artifact is None:
                    continue
                container[key] = artifact.reference
                logger.debug(
                    "Bound %s → %s in %s", value, artifact.reference, rewritten.full_resource_name
                )
                if artifact not in bound:
                    bound.append(artifact)

        return ReplaceResult(manifest=rewritten, bound_artifacts=bound)
