"""Configuration for lockfile parsing and the command line."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import yaml

from npm_lockfile.exceptions import ConfigError

DEFAULT_INSTALL_PREFIX = "node_modules/"
DEFAULT_LOCAL_REFERENCE_PREFIX = "file:"

CONFIG_FILENAMES = (".npm-lockfile.yaml", "npm-lockfile.yaml")

OUTPUT_FORMATS = ("json", "table")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


@dataclass
class LockfileConfig:
    """Settings for the lockfile parser and CLI."""

    # Key prefix of installed packages in the flat "packages" map
    install_prefix: str = DEFAULT_INSTALL_PREFIX

    # Legacy-tree versions starting with this are local path references
    local_reference_prefix: str = DEFAULT_LOCAL_REFERENCE_PREFIX

    # Replace local references in the legacy tree with "packages" versions
    reconcile: bool = True

    # CLI settings
    log_level: str = "WARNING"
    output_format: str = "table"

    @classmethod
    def from_dict(cls, data: dict) -> "LockfileConfig":
        """Create config from dictionary.

        Raises:
            ConfigError: If a value has the wrong type or is not one of the
                accepted choices.
        """
        reconcile = data.get("reconcile", True)
        if not isinstance(reconcile, bool):
            raise ConfigError(f"reconcile must be true or false, got {reconcile!r}")

        log_level = data.get("log_level") or os.environ.get("NPM_LOCKFILE_LOG_LEVEL", "WARNING")
        if str(log_level).upper() not in LOG_LEVELS:
            raise ConfigError(
                f"Unsupported log_level: {log_level}. Use one of {', '.join(LOG_LEVELS)}."
            )

        output_format = data.get("output_format") or os.environ.get("NPM_LOCKFILE_FORMAT", "table")
        if output_format not in OUTPUT_FORMATS:
            raise ConfigError(f"Unsupported output_format: {output_format}. Use 'json' or 'table'.")

        return cls(
            install_prefix=data.get("install_prefix", DEFAULT_INSTALL_PREFIX),
            local_reference_prefix=data.get(
                "local_reference_prefix", DEFAULT_LOCAL_REFERENCE_PREFIX
            ),
            reconcile=reconcile,
            log_level=str(log_level).upper(),
            output_format=output_format,
        )

    def to_dict(self) -> dict:
        """Convert config to dictionary."""
        return {
            "install_prefix": self.install_prefix,
            "local_reference_prefix": self.local_reference_prefix,
            "reconcile": self.reconcile,
            "log_level": self.log_level,
            "output_format": self.output_format,
        }


def find_config_file(root: Optional[Path] = None) -> Optional[Path]:
    """Return the first config file present in ``root`` (default: cwd)."""
    root = root or Path.cwd()
    for filename in CONFIG_FILENAMES:
        candidate = root / filename
        if candidate.is_file():
            return candidate
    return None


def load_config(path: Optional[Path] = None) -> LockfileConfig:
    """Load configuration from a YAML file.

    Args:
        path: Explicit config file. When omitted, ``.npm-lockfile.yaml`` or
            ``npm-lockfile.yaml`` in the working directory is used if present.

    Returns:
        The loaded config, or defaults when no file exists.

    Raises:
        ConfigError: If the file is not valid YAML or not a mapping.
    """
    if path is None:
        path = find_config_file()
        if path is None:
            return LockfileConfig.from_dict({})

    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a mapping, got {type(data).__name__}")

    return LockfileConfig.from_dict(data)
