"""
Task — the status log of one deploy invocation.

The task is passed explicitly to every pipeline stage; stages report
progress with ``task.update_status(phase, message)``. Each status is
kept in order on the task and also logged at INFO.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

logger = logging.getLogger(__name__)


@dataclass
class TaskStatus:
    """One status line."""

    phase: str
    status: str
    timestamp: str = field(default_factory=lambda: datetime.now(UTC).isoformat())


@dataclass
class Task:
    """Ordered status history of a single operation."""

    id: str
    history: list[TaskStatus] = field(default_factory=list)
    completed: bool = False
    failed: bool = False

    def update_status(self, phase: str, status: str) -> None:
        self.history.append(TaskStatus(phase=phase, status=status))
        logger.info("[%s] %s: %s", self.id, phase, status)

    def fail(self, phase: str, status: str) -> None:
        self.failed = True
        self.completed = True
        self.update_status(phase, status)

    def complete(self, phase: str, status: str = "Orchestration completed.") -> None:
        self.completed = True
        self.update_status(phase, status)

    @property
    def messages(self) -> list[str]:
        return [s.status for s in self.history]

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "completed": self.completed,
            "failed": self.failed,
            "history": [
                {"phase": s.phase, "status": s.status, "timestamp": s.timestamp}
                for s in self.history
            ],
        }
