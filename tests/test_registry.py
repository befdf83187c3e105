"""
Tests for the resource property registry.
"""

import logging

import pytest

from deployer.adapters.kubectl import KubectlJobExecutor, KubernetesHandler
from deployer.adapters.mock import MockManifestHandler
from deployer.adapters.registry import (
    BUILTIN_KINDS,
    ResourceProperties,
    ResourcePropertyRegistry,
    default_registry,
)
from deployer.core.artifacts.converter import (
    UnversionedArtifactConverter,
    VersionedArtifactConverter,
)
from deployer.core.errors import UnknownKindError
from deployer.core.models.config import KindSettings


def _props(kind: str, versioned: bool = False) -> ResourceProperties:
    return ResourceProperties(
        kind=kind,
        versioned=versioned,
        versioned_converter=VersionedArtifactConverter(),
        unversioned_converter=UnversionedArtifactConverter(),
        handler=MockManifestHandler(),
    )


class TestResourcePropertyRegistry:

    def test_register_and_get(self):
        registry = ResourcePropertyRegistry()
        props = _props("Deployment")
        registry.register(props)
        assert registry.get("Deployment") is props
        assert "Deployment" in registry
        assert len(registry) == 1

    def test_unknown_kind_raises(self):
        registry = ResourcePropertyRegistry()
        with pytest.raises(UnknownKindError) as exc_info:
            registry.get("ConfigMap")
        assert exc_info.value.kind == "ConfigMap"
        assert exc_info.value.code == "E103"

    def test_overwrite_warns(self, caplog):
        registry = ResourcePropertyRegistry()
        registry.register(_props("Service"))
        with caplog.at_level(logging.WARNING, logger="deployer.adapters.registry"):
            registry.register(_props("Service", versioned=True))
        assert "Overwriting" in caplog.text
        assert registry.get("Service").versioned is True

    def test_kind_status(self):
        registry = ResourcePropertyRegistry()
        registry.register(_props("Secret", versioned=True))
        registry.register(_props("Deployment"))
        status = registry.kind_status()
        assert list(status) == ["Deployment", "Secret"]
        assert status["Secret"] == {"kind": "Secret", "versioned": True, "handler": "MockManifestHandler"}


class TestDefaultRegistry:

    def test_builtin_kinds_registered(self):
        registry = default_registry(KubectlJobExecutor())
        assert set(registry.list_kinds()) == BUILTIN_KINDS

    def test_versioned_defaults(self):
        registry = default_registry()
        assert registry.get("ConfigMap").versioned is True
        assert registry.get("Secret").versioned is True
        assert registry.get("Deployment").versioned is False
        assert registry.get("Service").versioned is False

    def test_pod_kinds_have_replace_rules(self):
        registry = default_registry()
        handler = registry.get("Deployment").handler
        assert isinstance(handler, KubernetesHandler)
        assert "docker/image" in handler.replacer.artifact_types
        assert registry.get("StatefulSet").handler is handler
        assert registry.get("Service").handler.replacer.rules == []

    def test_config_overrides(self):
        registry = default_registry(kinds={
            "ConfigMap": KindSettings(versioned=False),
            "Widget": KindSettings(versioned=True),
        })
        assert registry.get("ConfigMap").versioned is False
        assert registry.get("Widget").versioned is True
        assert registry.get("Widget").handler.replacer.rules == []

    def test_converters_match_flag(self):
        props = default_registry().get("Pod")
        assert props.versioned_converter.versioned is True
        assert props.unversioned_converter.versioned is False
