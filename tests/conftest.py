"""
Shared test fixtures and configuration.
"""

from pathlib import Path

import pytest

from deployer.adapters.mock import MockManifestHandler, StaticArtifactProvider
from deployer.adapters.namer import ManifestNamer
from deployer.adapters.registry import ResourceProperties, ResourcePropertyRegistry
from deployer.core.artifacts.converter import (
    UnversionedArtifactConverter,
    VersionedArtifactConverter,
)
from deployer.core.artifacts.replacer import POD_TEMPLATE_SPEC, ArtifactReplacer, pod_spec_rules
from deployer.core.models.account import KubernetesCredentials
from deployer.core.models.manifest import KubernetesManifest
from deployer.core.task import Task

from tests.factories import make_deployment


@pytest.fixture
def deployment() -> KubernetesManifest:
    return KubernetesManifest(make_deployment())


@pytest.fixture
def credentials() -> KubernetesCredentials:
    return KubernetesCredentials(name="dev", context="kind-dev", default_namespace="dev-ns")


@pytest.fixture
def task() -> Task:
    return Task(id="deploy-test")


@pytest.fixture
def namer() -> ManifestNamer:
    return ManifestNamer()


@pytest.fixture
def provider() -> StaticArtifactProvider:
    return StaticArtifactProvider()


@pytest.fixture
def mock_handler() -> MockManifestHandler:
    """Recording handler with the pod template replace rules."""
    return MockManifestHandler(ArtifactReplacer(pod_spec_rules(POD_TEMPLATE_SPEC)))


@pytest.fixture
def mock_registry(mock_handler: MockManifestHandler) -> ResourcePropertyRegistry:
    """Registry with Deployment (unversioned) and Secret (versioned) on the mock handler."""
    registry = ResourcePropertyRegistry()
    for kind, versioned in (("Deployment", False), ("Secret", True)):
        registry.register(ResourceProperties(
            kind=kind,
            versioned=versioned,
            versioned_converter=VersionedArtifactConverter(),
            unversioned_converter=UnversionedArtifactConverter(),
            handler=mock_handler,
        ))
    return registry


@pytest.fixture
def tmp_state_dir(tmp_path: Path) -> Path:
    """Return a temporary directory for state files."""
    state_dir = tmp_path / "state"
    state_dir.mkdir()
    return state_dir
