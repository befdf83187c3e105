"""
Kubectl adapter — submits prepared manifests to a cluster.

The executor is the only code that shells out. It pipes the manifest
as YAML into ``kubectl apply -f -`` and reads back the object the API
server accepted (``-o json``), so defaulted fields appear in the result.

KubernetesHandler pairs an executor with an ArtifactReplacer; one
handler instance serves every kind that shares the same replace rules.
"""

from __future__ import annotations

import json
import logging
import os
import subprocess

from deployer.adapters.base import ManifestHandler
from deployer.core.artifacts.replacer import ArtifactReplacer
from deployer.core.errors import SubmissionError
from deployer.core.models.account import KubernetesCredentials
from deployer.core.models.artifact import Artifact
from deployer.core.models.manifest import KubernetesManifest
from deployer.core.models.result import OperationResult, ReplaceResult

logger = logging.getLogger(__name__)


class KubectlJobExecutor:
    """Runs kubectl against the cluster an account points at."""

    def __init__(self, dry_run: bool = False):
        self.dry_run = dry_run

    def _kubectl(
        self,
        credentials: KubernetesCredentials,
        *args: str,
        input: str | None = None,
    ) -> subprocess.CompletedProcess[str]:
        cmd = [credentials.kubectl]
        if credentials.kubeconfig:
            cmd += ["--kubeconfig", os.path.expanduser(credentials.kubeconfig)]
        if credentials.context:
            cmd += ["--context", credentials.context]
        cmd += list(args)

        logger.debug("Running: %s", " ".join(cmd))
        return subprocess.run(
            cmd,
            input=input,
            capture_output=True,
            text=True,
            timeout=credentials.timeout,
        )

    def is_available(self, credentials: KubernetesCredentials) -> dict:
        """Check that the account's kubectl binary runs.

        Uses ``kubectl version --client -o json``; never contacts the cluster.
        """
        try:
            result = self._kubectl(credentials, "version", "--client", "-o", "json")
        except (FileNotFoundError, subprocess.TimeoutExpired):
            return {"available": False, "version": None}
        if result.returncode != 0:
            return {"available": False, "version": None}
        try:
            version = json.loads(result.stdout).get("clientVersion", {}).get("gitVersion", "")
        except ValueError:
            version = result.stdout.strip()
        return {"available": True, "version": version}

    def deploy(
        self,
        credentials: KubernetesCredentials,
        manifest: KubernetesManifest,
    ) -> KubernetesManifest:
        """Apply one manifest and return the object as the server stored it.

        Raises:
            SubmissionError: kubectl missing, timed out, or exited non-zero.
        """
        args = ["apply", "-o", "json", "-f", "-"]
        if self.dry_run:
            args.append("--dry-run=client")

        try:
            result = self._kubectl(credentials, *args, input=manifest.to_yaml())
        except FileNotFoundError:
            raise SubmissionError(
                manifest.kind, manifest.name, f"'{credentials.kubectl}' not found on PATH"
            ) from None
        except subprocess.TimeoutExpired:
            raise SubmissionError(
                manifest.kind, manifest.name, f"kubectl timed out after {credentials.timeout}s"
            ) from None

        if result.returncode != 0:
            reason = result.stderr.strip() or f"kubectl exited with {result.returncode}"
            raise SubmissionError(manifest.kind, manifest.name, reason)

        try:
            applied = json.loads(result.stdout)
        except ValueError:
            applied = None
        if not isinstance(applied, dict) or not applied.get("kind"):
            # Older kubectl prints "deployment.apps/x configured" despite -o json
            return manifest
        return KubernetesManifest(applied)


class KubernetesHandler(ManifestHandler):
    """Replaces artifacts by rule and submits through kubectl."""

    def __init__(
        self,
        executor: KubectlJobExecutor,
        replacer: ArtifactReplacer | None = None,
    ):
        self._executor = executor
        self._replacer = replacer or ArtifactReplacer()

    @property
    def replacer(self) -> ArtifactReplacer:
        return self._replacer

    def replace_artifacts(
        self,
        manifest: KubernetesManifest,
        artifacts: list[Artifact],
    ) -> ReplaceResult:
        return self._replacer.replace_all(manifest, artifacts)

    def deploy_augmented_manifest(
        self,
        credentials: KubernetesCredentials,
        manifest: KubernetesManifest,
    ) -> OperationResult:
        applied = self._executor.deploy(credentials, manifest)
        result = OperationResult()
        result.add_manifest(applied)
        logger.info(
            "Applied %s in namespace %s (account %s)",
            manifest.full_resource_name,
            manifest.namespace,
            credentials.name,
        )
        return result

    def __repr__(self) -> str:
        return f"<KubernetesHandler rules={len(self._replacer.rules)}>"
