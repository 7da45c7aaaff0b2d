"""Configuration loading utilities."""

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from stockprofit.errors import ConfigError
from stockprofit.models.config import ProfitConfig

CONFIG_DIR = Path(__file__).parent

logger = logging.getLogger(__name__)


def load_config(name: str, config_dir: Path | None = None) -> dict[str, Any]:
    """Load a YAML configuration file from the config directory.

    Args:
        name: Config file name without extension (e.g., 'stockprofit')
        config_dir: Directory to look in (default: this package directory)

    Returns:
        Parsed configuration dictionary

    Raises:
        FileNotFoundError: If the config file doesn't exist
        yaml.YAMLError: If the config file is invalid YAML
    """
    base_dir = config_dir or CONFIG_DIR
    config_path = base_dir / f"{name}.yaml"
    if not config_path.exists():
        sample_path = base_dir / f"{name}.sample.yaml"
        raise FileNotFoundError(
            f"Configuration file not found: {config_path}\n"
            f"Please copy {sample_path} to {config_path} and fill in your values."
        )

    return load_config_file(config_path)


def load_config_file(path: Path | str) -> dict[str, Any]:
    """Load a YAML configuration file from an explicit path."""
    with open(path, encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def load_profit_config(path: Path | str | None = None) -> ProfitConfig:
    """Load the job configuration, falling back to defaults when absent.

    Raises:
        ConfigError: If the file is invalid YAML or holds invalid values
    """
    try:
        data = load_config_file(path) if path else load_config("stockprofit")
    except FileNotFoundError as e:
        logger.info(f"Using default configuration: {e}")
        return ProfitConfig()
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid configuration file: {e}") from e

    try:
        return ProfitConfig.from_yaml(data)
    except (ValidationError, TypeError) as e:
        raise ConfigError(f"Invalid configuration values: {e}") from e
