"""Configuration loading for iac-doctor."""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

logger = logging.getLogger(__name__)

CONFIG_FILENAMES = (".iac-doctor.yaml", "iac-doctor.yaml")

OUTPUT_FORMATS = ("table", "json", "yaml")


class ConfigError(Exception):
    """Raised when a configuration file cannot be read or is invalid."""


@dataclass
class DoctorConfig:
    """Settings shared by the command-line front end."""

    provider: Optional[str] = None
    resource_type: Optional[str] = None
    format: str = "table"
    fail_under: Optional[int] = None  # minimum passing score
    disabled_rules: list[str] = field(default_factory=list)
    log_level: str = "WARNING"

    @classmethod
    def from_dict(cls, data: dict) -> "DoctorConfig":
        """Create config from dictionary.

        Environment variables fill in the provider and log level when the
        dictionary leaves them out.

        Raises:
            ConfigError: If a value has the wrong type or is out of range.
        """
        output_format = data.get("format", "table")
        if output_format not in OUTPUT_FORMATS:
            raise ConfigError(
                f"Unknown format '{output_format}', expected one of {', '.join(OUTPUT_FORMATS)}"
            )

        fail_under = data.get("fail_under")
        if fail_under is not None:
            if isinstance(fail_under, bool) or not isinstance(fail_under, int):
                raise ConfigError(f"fail_under must be an integer, got {fail_under!r}")
            if not 0 <= fail_under <= 100:
                raise ConfigError(f"fail_under must be between 0 and 100, got {fail_under}")

        disabled_rules = data.get("disabled_rules") or []
        if not isinstance(disabled_rules, list):
            raise ConfigError("disabled_rules must be a list of rule IDs")

        return cls(
            provider=data.get("provider") or os.environ.get("IAC_DOCTOR_PROVIDER"),
            resource_type=data.get("resource_type"),
            format=output_format,
            fail_under=fail_under,
            disabled_rules=[str(rule_id) for rule_id in disabled_rules],
            log_level=str(
                data.get("log_level") or os.environ.get("IAC_DOCTOR_LOG_LEVEL") or "WARNING"
            ).upper(),
        )


def find_config_file(root: Optional[Path] = None) -> Optional[Path]:
    """Find the first config file in a directory.

    Args:
        root: Directory to look in. Defaults to the current directory.

    Returns:
        Path to the config file, or None if there is none.
    """
    root = root or Path.cwd()
    for name in CONFIG_FILENAMES:
        candidate = root / name
        if candidate.is_file():
            return candidate
    return None


def load_config(path: Optional[Path] = None) -> DoctorConfig:
    """Load configuration from a file.

    Args:
        path: Explicit config file. When omitted the current directory is
            searched; a missing file yields the defaults.

    Returns:
        DoctorConfig instance.

    Raises:
        ConfigError: If the file cannot be read or does not hold a mapping.
    """
    if path is None:
        path = find_config_file()
        if path is None:
            return DoctorConfig.from_dict({})

    try:
        content = Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e

    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")

    logger.debug(f"Loaded config from {path}")
    return DoctorConfig.from_dict(data)
