"""
Deploy use case — one manifest, end to end.

This is the top-level entry the CLI calls: it picks the account,
builds the collaborators from config, runs the deploy operation,
remembers the artifacts it created, and writes the audit entry.
It never raises DeployError; failures come back on the result.
"""

from __future__ import annotations

import logging
import time
import uuid
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from deployer.adapters.base import ArtifactDownloader, ArtifactProvider, Namer
from deployer.adapters.downloader import ManifestDownloader
from deployer.adapters.kubectl import KubectlJobExecutor
from deployer.adapters.namer import ManifestNamer
from deployer.adapters.registry import ResourcePropertyRegistry, default_registry
from deployer.core.engine.deploy import DeployManifestOperation
from deployer.core.errors import ConfigError, DeployError
from deployer.core.models.artifact import Artifact
from deployer.core.models.config import DeployerConfig
from deployer.core.models.description import DeployManifestDescription
from deployer.core.models.result import OperationResult
from deployer.core.persistence.artifact_store import ArtifactStore
from deployer.core.persistence.audit import AuditEntry, AuditWriter
from deployer.core.task import Task

logger = logging.getLogger(__name__)


@dataclass
class DeployResult:
    """Outcome of one deploy attempt."""

    operation_id: str = ""
    result: OperationResult | None = None
    task: Task | None = None
    error: str | None = None
    error_code: str | None = None
    dry_run: bool = False
    duration_ms: int = 0
    warnings: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "operation_id": self.operation_id,
            "status": "ok" if self.ok else "failed",
            "dry_run": self.dry_run,
            "duration_ms": self.duration_ms,
        }
        if self.error:
            data["error"] = self.error
            data["error_code"] = self.error_code
        if self.result is not None:
            data["result"] = self.result.model_dump(mode="json")
        if self.task is not None:
            data["task"] = self.task.to_dict()
        if self.warnings:
            data["warnings"] = self.warnings
        return data


def generate_operation_id() -> str:
    now = datetime.now(UTC).strftime("%Y%m%d-%H%M%S")
    return f"deploy-{now}-{uuid.uuid4().hex[:6]}"


# ── Request loading ─────────────────────────────────────────────


def load_description(path: Path) -> DeployManifestDescription:
    """Read a deploy request from a YAML or JSON file.

    A plain Kubernetes document (one with ``kind``) is treated as an
    inline request for that manifest.

    Raises:
        ConfigError: Unreadable file, bad YAML, or an invalid request.
        UnsupportedSourceError: The request names an unknown source.
    """
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    if "kind" in data:
        data = {"source": "inline", "manifest": data}

    try:
        return DeployManifestDescription.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid deploy request in {path}: {e}") from e


def parse_artifact_option(text: str) -> Artifact:
    """``TYPE=NAME=REFERENCE`` → Artifact.

    Raises:
        ValueError: If any of the three parts is missing.
    """
    parts = text.split("=", 2)
    if len(parts) != 3 or not all(parts):
        raise ValueError(f"Expected TYPE=NAME=REFERENCE, got {text!r}")
    artifact_type, name, reference = parts
    return Artifact(type=artifact_type, name=name, reference=reference)


def apply_overrides(
    description: DeployManifestDescription,
    account: str | None = None,
    namespace: str | None = None,
    versioned: bool | None = None,
    artifacts: list[Artifact] | None = None,
    app: str | None = None,
) -> DeployManifestDescription:
    """Layer command-line options over a loaded request.

    Extra artifacts are appended after the request's own, so the
    request's candidates win ties.
    """
    update: dict[str, Any] = {}
    if account:
        update["account"] = account
    if namespace:
        update["namespace_override"] = namespace
    if versioned is not None:
        update["versioned"] = versioned
    if artifacts:
        update["artifacts"] = [*description.artifacts, *artifacts]
    if app:
        update["moniker"] = description.moniker.model_copy(update={"app": app})
        if not description.relationships.owner:
            update["relationships"] = description.relationships.model_copy(update={"owner": app})
    return description.model_copy(update=update) if update else description


# ── Deploy ──────────────────────────────────────────────────────


def deploy_manifest(
    description: DeployManifestDescription,
    config: DeployerConfig,
    registry: ResourcePropertyRegistry | None = None,
    downloader: ArtifactDownloader | None = None,
    executor: KubectlJobExecutor | None = None,
    dry_run: bool = False,
    state_dir: Path | None = None,
    namer: Namer | None = None,
    provider: ArtifactProvider | None = None,
) -> DeployResult:
    """Deploy one manifest.

    The caller's description is left untouched; the pipeline works on a
    deep copy, so the same request can be deployed again.

    Args:
        description: The deploy request.
        config: Accounts, kind overrides and state directory.
        registry: Pre-built kind registry (default: built from config).
        downloader: Manifest downloader for by-reference requests.
        executor: kubectl executor (default: one honouring ``dry_run``).
        dry_run: Submit with ``--dry-run=client`` and don't record artifacts.
        state_dir: Where the artifact store and audit ledger live
            (default: ``config.state_dir``).
        namer: Moniker namer (default: ManifestNamer).
        provider: Artifact history (default: the account's ArtifactStore).

    Returns:
        DeployResult; ``error`` is set when the deploy failed.
    """
    operation_id = generate_operation_id()
    task = Task(id=operation_id)
    deploy = DeployResult(operation_id=operation_id, task=task, dry_run=dry_run)
    state_dir = state_dir or Path(config.state_dir)
    audit = AuditWriter(state_dir)
    start = time.monotonic()

    description = description.model_copy(deep=True)
    account_name = description.account or config.default_account
    try:
        credentials = config.get_account(description.account or None)
        account_name = credentials.name

        executor = executor or KubectlJobExecutor(dry_run=dry_run)
        registry = registry or default_registry(executor, config.kinds)
        store = ArtifactStore(state_dir, credentials.name)

        operation = DeployManifestOperation(
            description=description,
            credentials=credentials,
            registry=registry,
            namer=namer or ManifestNamer(),
            provider=provider or store,
            downloader=downloader or ManifestDownloader(),
        )
        deploy.result = operation.operate(task)

        if not dry_run:
            try:
                store.record(credentials.name, deploy.result.created_artifacts)
            except OSError as e:
                logger.error("Failed to record artifacts in %s: %s", store.path, e)
                deploy.warnings.append(f"Artifact history not saved: {e}")

    except DeployError as e:
        deploy.error = str(e)
        deploy.error_code = e.code
        logger.debug("Deploy %s failed", operation_id, exc_info=True)

    deploy.duration_ms = int((time.monotonic() - start) * 1000)
    audit.write(_audit_entry(deploy, description, account_name))
    return deploy


def _audit_entry(
    deploy: DeployResult,
    description: DeployManifestDescription,
    account: str,
) -> AuditEntry:
    entry = AuditEntry(
        operation_id=deploy.operation_id,
        account=account,
        status="ok" if deploy.ok else "failed",
        duration_ms=deploy.duration_ms,
        dry_run=deploy.dry_run,
    )

    manifest: dict[str, Any] | None = None
    if deploy.result is not None and deploy.result.manifests:
        manifest = deploy.result.manifests[0]
    elif description.manifest is not None:
        manifest = description.manifest

    if manifest is not None:
        metadata = manifest.get("metadata") or {}
        entry.kind = str(manifest.get("kind") or "")
        entry.name = str(metadata.get("name") or "")
        entry.namespace = str(metadata.get("namespace") or "")

    if deploy.result is not None:
        entry.created = [a.reference or a.name for a in deploy.result.created_artifacts]
        entry.bound = [a.reference or a.name for a in deploy.result.bound_artifacts]
    if deploy.error:
        entry.errors = [deploy.error]
    return entry
