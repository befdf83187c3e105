"""
DeployerConfig — the parsed contents of deployer.yml.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from deployer.core.errors import AccountNotFoundError
from deployer.core.models.account import KubernetesCredentials


class KindSettings(BaseModel):
    """Per-kind overrides."""

    versioned: bool = False


class DeployerConfig(BaseModel):
    """Root configuration: accounts, kind overrides and the state directory."""

    default_account: str = ""
    state_dir: str = ".state"
    accounts: list[KubernetesCredentials] = Field(default_factory=list)
    kinds: dict[str, KindSettings] = Field(default_factory=dict)

    def get_account(self, name: str | None = None) -> KubernetesCredentials:
        """Look up credentials by name (or the default account).

        Falls back to the only configured account when no default is set.

        Raises:
            AccountNotFoundError: If no matching account exists.
        """
        wanted = name or self.default_account
        if not wanted and len(self.accounts) == 1:
            return self.accounts[0]
        for account in self.accounts:
            if account.name == wanted:
                return account
        raise AccountNotFoundError(wanted, [a.name for a in self.accounts])
