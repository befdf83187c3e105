"""
Config check use case — validate deployer.yml and report issues.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from deployer.adapters.kubectl import KubectlJobExecutor
from deployer.adapters.registry import BUILTIN_KINDS
from deployer.core.config.loader import CONFIG_FILE, find_config_file, load_config
from deployer.core.errors import ConfigError
from deployer.core.models.config import DeployerConfig


@dataclass
class ConfigCheckResult:
    """Result of configuration validation."""

    valid: bool = False
    config: DeployerConfig | None = None
    config_path: Path | None = None
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    kubectl: dict[str, dict] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "valid": self.valid,
            "config_path": str(self.config_path) if self.config_path else None,
            "errors": self.errors,
            "warnings": self.warnings,
            "default_account": self.config.default_account if self.config else None,
            "accounts": [a.name for a in self.config.accounts] if self.config else [],
            "custom_kinds": _custom_kinds(self.config) if self.config else [],
            "kubectl": self.kubectl,
        }


def _custom_kinds(config: DeployerConfig) -> list[str]:
    return sorted(k for k in config.kinds if k not in BUILTIN_KINDS)


def check_config(
    config_path: Path | None = None,
    executor: KubectlJobExecutor | None = None,
) -> ConfigCheckResult:
    """Validate deployer.yml: schema first, then account consistency.

    With an ``executor``, also check that each account's kubectl runs
    (client only; the cluster is not contacted).
    """
    result = ConfigCheckResult()

    if config_path is None:
        config_path = find_config_file()
    if config_path is None:
        result.errors.append(f"No {CONFIG_FILE} found.")
        return result
    result.config_path = config_path

    try:
        config = load_config(config_path)
    except ConfigError as e:
        result.errors.append(e.message)
        return result
    result.config = config

    if not config.accounts:
        result.errors.append("No accounts defined. Add at least one under 'accounts'.")

    names = [a.name for a in config.accounts]
    dupes = {n for n in names if names.count(n) > 1}
    if dupes:
        result.errors.append(f"Duplicate account names: {', '.join(sorted(dupes))}")

    if config.default_account and config.default_account not in names:
        result.errors.append(f"default_account '{config.default_account}' is not a configured account")
    elif not config.default_account and len(names) > 1:
        result.warnings.append("No default_account set; every deploy must name its account.")

    root = config_path.parent
    for account in config.accounts:
        if account.kubeconfig:
            kubeconfig = Path(account.kubeconfig).expanduser()
            if not kubeconfig.is_absolute():
                kubeconfig = root / kubeconfig
            if not kubeconfig.is_file():
                result.warnings.append(
                    f"Account '{account.name}' kubeconfig does not exist: {account.kubeconfig}"
                )
        if account.timeout <= 0:
            result.errors.append(f"Account '{account.name}' timeout must be positive")
        if executor is not None:
            status = executor.is_available(account)
            result.kubectl[account.name] = status
            if not status["available"]:
                result.warnings.append(
                    f"Account '{account.name}' cannot run '{account.kubectl}'"
                )

    for kind in _custom_kinds(config):
        result.warnings.append(f"Custom kind '{kind}' is deployed without artifact replacement.")

    result.valid = len(result.errors) == 0
    return result
