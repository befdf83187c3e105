"""
KubernetesManifest — a mutable wrapper over one raw resource document.

The manifest is kept as the plain mapping the user wrote (so arbitrary
nested fields survive untouched) with typed accessors for the handful
of fields the deployer reads and writes: kind, name, namespace,
annotations and labels.
"""

from __future__ import annotations

import copy
from typing import Any

import yaml


class KubernetesManifest(dict):
    """One Kubernetes resource document.

    Accessors for ``annotations`` and ``labels`` create the nested
    ``metadata`` maps on first use, so callers can always write through
    them.
    """

    @property
    def kind(self) -> str:
        return str(self.get("kind") or "")

    @property
    def api_version(self) -> str:
        return str(self.get("apiVersion") or "")

    def _metadata(self) -> dict[str, Any]:
        metadata = self.get("metadata")
        if not isinstance(metadata, dict):
            metadata = {}
            self["metadata"] = metadata
        return metadata

    @property
    def name(self) -> str:
        return str(self._metadata().get("name") or "")

    @name.setter
    def name(self, value: str) -> None:
        self._metadata()["name"] = value

    @property
    def namespace(self) -> str:
        return str(self._metadata().get("namespace") or "")

    @namespace.setter
    def namespace(self, value: str) -> None:
        self._metadata()["namespace"] = value

    @property
    def annotations(self) -> dict[str, str]:
        metadata = self._metadata()
        if not isinstance(metadata.get("annotations"), dict):
            metadata["annotations"] = {}
        return metadata["annotations"]

    @property
    def labels(self) -> dict[str, str]:
        metadata = self._metadata()
        if not isinstance(metadata.get("labels"), dict):
            metadata["labels"] = {}
        return metadata["labels"]

    @property
    def full_resource_name(self) -> str:
        """``<kind> <name>``, as used in status messages."""
        return f"{self.kind} {self.name}".strip()

    def deep_copy(self) -> KubernetesManifest:
        return KubernetesManifest(copy.deepcopy(dict(self)))

    def to_yaml(self) -> str:
        return yaml.safe_dump(dict(self), default_flow_style=False, sort_keys=False)

    @classmethod
    def from_yaml(cls, text: str) -> KubernetesManifest:
        """Parse a single YAML document into a manifest.

        Raises:
            yaml.YAMLError: If the text isn't valid YAML.
            ValueError: If the document isn't a mapping.
        """
        data = yaml.safe_load(text)
        if not isinstance(data, dict):
            raise ValueError(
                f"Expected a YAML mapping, got {type(data).__name__}"
            )
        return cls(data)


def lower_camel(kind: str) -> str:
    """``ConfigMap`` → ``configMap``; used for artifact types and clusters."""
    if not kind:
        return kind
    return kind[0].lower() + kind[1:]
