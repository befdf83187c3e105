"""
Artifact store — deployed-artifact history, per account.

Stored as JSON in ``<state_dir>/artifacts.json``:

    {"accounts": {"dev": [{"type": "kubernetes/configMap", ...}, ...]}}

The versioned converter reads it (through ArtifactProvider) to find
the versions a manifest was already deployed under. Writes are atomic
(temp file, then rename). A missing or unreadable file is an empty store.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path

from pydantic import ValidationError

from deployer.adapters.base import ArtifactProvider
from deployer.core.models.artifact import Artifact

logger = logging.getLogger(__name__)

ARTIFACTS_FILE = "artifacts.json"


class ArtifactStore(ArtifactProvider):
    """Artifact history for one account, backed by a JSON file."""

    def __init__(self, state_dir: Path, account: str):
        self._path = state_dir / ARTIFACTS_FILE
        self._account = account

    @property
    def path(self) -> Path:
        return self._path

    def get_artifacts(self, type: str, name: str, location: str) -> list[Artifact]:
        return [
            a for a in self._load().get(self._account, [])
            if a.type == type and a.name == name and a.location == location
        ]

    def record(self, account: str, artifacts: list[Artifact]) -> None:
        """Remember deployed artifacts. Already-known ones are skipped."""
        data = self._load()
        known = data.setdefault(account, [])
        added = 0
        for artifact in artifacts:
            if artifact not in known:
                known.append(artifact)
                added += 1
        if added:
            self._save(data)
            logger.debug("Recorded %d artifact(s) for account %s", added, account)

    def _load(self) -> dict[str, list[Artifact]]:
        if not self._path.is_file():
            return {}

        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
            return {
                account: [Artifact.model_validate(a) for a in items]
                for account, items in raw.get("accounts", {}).items()
            }
        except (OSError, ValueError, AttributeError, TypeError, ValidationError) as e:
            logger.warning("Cannot load artifact store %s: %s — starting fresh", self._path, e)
            return {}

    def _save(self, data: dict[str, list[Artifact]]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        content = json.dumps(
            {
                "accounts": {
                    account: [a.model_dump(mode="json") for a in items]
                    for account, items in data.items()
                }
            },
            indent=2,
            ensure_ascii=False,
        ) + "\n"

        fd, tmp_path = tempfile.mkstemp(dir=self._path.parent, prefix=".artifacts_", suffix=".tmp")
        tmp = Path(tmp_path)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(content)
            tmp.replace(self._path)
        except OSError:
            tmp.unlink(missing_ok=True)
            raise
