"""
Configuration management for USB Inspector.

Handles loading, validation, and access to inspector configuration.
"""

from __future__ import annotations

import logging
import os
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

import yaml


# Default configuration paths
DEFAULT_CONFIG_PATH = Path.home() / ".config" / "usb-inspector" / "inspector.yaml"

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


@dataclass
class LoggingConfig:
    """Logging settings."""

    level: str = "info"
    file: str | None = None

    def __post_init__(self) -> None:
        # Environment overrides the file
        env_level = os.environ.get("USB_INSPECTOR_LOG_LEVEL")
        if env_level:
            self.level = env_level.lower()


@dataclass
class LookupConfig:
    """Parent device lookup settings."""

    timeout: float = 10.0
    max_concurrent: int = 5


@dataclass
class OutputConfig:
    """CLI output settings."""

    format: str = "table"
    show_invalid: bool = True


@dataclass
class InspectorConfig:
    """Main configuration container."""

    logging: LoggingConfig = field(default_factory=LoggingConfig)
    lookup: LookupConfig = field(default_factory=LookupConfig)
    output: OutputConfig = field(default_factory=OutputConfig)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> InspectorConfig:
        """Create configuration from dictionary."""
        return cls(
            logging=LoggingConfig(**(data.get("logging") or {})),
            lookup=LookupConfig(**(data.get("lookup") or {})),
            output=OutputConfig(**(data.get("output") or {})),
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def load_config(path: str | Path | None = None) -> InspectorConfig:
    """
    Load configuration from YAML file.

    Args:
        path: Path to configuration file. If None, uses default paths.

    Returns:
        InspectorConfig instance with loaded settings.

    Raises:
        FileNotFoundError: If an explicit config file is not found.
        yaml.YAMLError: If config file is invalid YAML.
    """
    if path is None:
        candidates = [
            Path("config/inspector.yaml"),
            Path("inspector.yaml"),
            DEFAULT_CONFIG_PATH,
        ]
        for candidate in candidates:
            if candidate.exists():
                path = candidate
                break

    if path is None:
        return InspectorConfig()

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    with open(path) as f:
        data = yaml.safe_load(f) or {}

    return InspectorConfig.from_dict(data)


def validate_config(config: InspectorConfig) -> list[str]:
    """
    Validate configuration and return list of errors.

    Args:
        config: Configuration to validate.

    Returns:
        List of error messages. Empty list if valid.
    """
    errors: list[str] = []

    valid_log_levels = {"debug", "info", "warning", "error"}
    if config.logging.level not in valid_log_levels:
        errors.append(f"Invalid log level: {config.logging.level}")

    if config.lookup.timeout <= 0:
        errors.append(f"Invalid lookup timeout: {config.lookup.timeout}")

    if config.lookup.max_concurrent < 1:
        errors.append(f"Invalid max_concurrent: {config.lookup.max_concurrent}")

    valid_formats = {"table", "json"}
    if config.output.format not in valid_formats:
        errors.append(f"Invalid output format: {config.output.format}")

    return errors


def setup_logging(config: InspectorConfig, verbose: bool = False) -> None:
    """Configure logging based on config."""
    level_name = "debug" if verbose else config.logging.level
    level = getattr(logging, level_name.upper(), logging.INFO)

    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if config.logging.file:
        log_path = Path(config.logging.file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path))

    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
        handlers=handlers,
        force=True,
    )
