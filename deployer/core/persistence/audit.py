"""
Audit ledger — one NDJSON line per deploy attempt.

Successful and failed deploys are both recorded, with the artifacts
they created and bound, so ``deployer history`` can show what went
where and when. Entries are only ever appended.
"""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

logger = logging.getLogger(__name__)

AUDIT_FILE = "audit.ndjson"


class AuditEntry(BaseModel):
    """A single deploy attempt."""

    timestamp: str = Field(default_factory=lambda: datetime.now(UTC).isoformat())
    operation_id: str = ""
    account: str = ""

    # Target
    kind: str = ""
    name: str = ""                 # deployed (possibly versioned) name
    namespace: str = ""

    # Outcome
    status: str = ""               # ok, failed
    created: list[str] = Field(default_factory=list)
    bound: list[str] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)
    duration_ms: int = 0
    dry_run: bool = False


class AuditWriter:
    """Appends to and reads back ``<state_dir>/audit.ndjson``."""

    def __init__(self, state_dir: Path):
        self._path = state_dir / AUDIT_FILE

    @property
    def path(self) -> Path:
        return self._path

    def write(self, entry: AuditEntry) -> None:
        """Append one entry. I/O failures are logged, not raised."""
        self._path.parent.mkdir(parents=True, exist_ok=True)
        line = json.dumps(entry.model_dump(mode="json"), ensure_ascii=False) + "\n"

        try:
            with self._path.open("a", encoding="utf-8") as f:
                f.write(line)
            logger.debug("Audit entry written: %s (%s)", entry.operation_id, entry.status)
        except OSError as e:
            logger.error("Failed to write audit entry: %s", e)

    def read_all(self) -> list[AuditEntry]:
        """All entries, oldest first. Corrupt lines are skipped."""
        if not self._path.is_file():
            return []

        entries: list[AuditEntry] = []
        try:
            with self._path.open("r", encoding="utf-8") as f:
                for line_num, line in enumerate(f, start=1):
                    line = line.strip()
                    if not line:
                        continue
                    try:
                        entries.append(AuditEntry.model_validate(json.loads(line)))
                    except (ValueError, ValidationError) as e:
                        logger.warning("Skipping corrupt audit entry at line %d: %s", line_num, e)
        except OSError as e:
            logger.error("Failed to read audit ledger: %s", e)

        return entries

    def read_recent(self, n: int = 20) -> list[AuditEntry]:
        return self.read_all()[-n:] if n > 0 else []
