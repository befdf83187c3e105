"""
Moniker and relationships — naming and ownership metadata.

Both are stamped onto a manifest as annotations so deployed resources
can later be grouped (by application/cluster) and traced back to the
entity that requested them.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class Moniker(BaseModel):
    """Naming scheme applied to a manifest.

    Empty fields are derived from the manifest by the namer.
    """

    app: str = ""
    cluster: str = ""
    stack: str = ""
    detail: str = ""
    sequence: int | None = None


class Relationships(BaseModel):
    """Ownership/ancestry links for a deployed manifest."""

    owner: str = ""                 # application that requested the deploy
    load_balancers: list[str] = Field(default_factory=list)
    security_groups: list[str] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.owner or self.load_balancers or self.security_groups)
