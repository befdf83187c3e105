"""
Configuration loader — reads deployer.yml into a DeployerConfig.

deployer.yml is looked up from the working directory upwards, so the
CLI works from anywhere inside a project. Without one, commands that
need an account fail with ConfigError; ``default_config()`` gives the
single-account setup used by ``--dry-run`` and ``kinds``.
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from deployer.core.errors import ConfigError
from deployer.core.models.account import KubernetesCredentials
from deployer.core.models.config import DeployerConfig

logger = logging.getLogger(__name__)

CONFIG_FILE = "deployer.yml"


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Walk up from ``start_dir`` (default: cwd) looking for deployer.yml."""
    current = (start_dir or Path.cwd()).resolve()

    for _ in range(20):
        candidate = current / CONFIG_FILE
        if candidate.is_file():
            return candidate
        if current.parent == current:
            break
        current = current.parent

    return None


def load_config(path: Path | None = None) -> DeployerConfig:
    """Load and validate deployer.yml.

    Args:
        path: Explicit config path. If None, searches upward.

    Raises:
        ConfigError: Missing file, unreadable file, bad YAML, or a
            document that doesn't match the schema.
    """
    if path is None:
        path = find_config_file()

    if path is None:
        raise ConfigError(f"No {CONFIG_FILE} found. Create one, or pass --config.")

    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    logger.debug("Loading deployer config from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    try:
        config = DeployerConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid deployer configuration in {path}: {e}") from e

    logger.info(
        "Loaded %d account(s) and %d kind override(s) from %s",
        len(config.accounts), len(config.kinds), path,
    )
    return config


def default_config() -> DeployerConfig:
    """One ``default`` account on the current kubectl context."""
    return DeployerConfig(
        default_account="default",
        accounts=[KubernetesCredentials(name="default")],
    )


def config_root(config_path: Path | None) -> Path:
    """Directory relative paths in the config resolve against."""
    if config_path is None:
        return Path.cwd()
    return config_path.parent.resolve()
