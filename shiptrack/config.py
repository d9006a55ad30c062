"""
ShipTrack Config - YAML configuration with environment variable substitution

Example config.yaml:
    provider:
      api_key: ${SHIP24_API_KEY}
      timeout: 20

    eta:
      rules_path: /etc/shiptrack/eta_rules.csv
      preload_rules: true

    log_level: INFO
"""

import logging
import os
import re
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .models import DEFAULT_RULE_PRIORITY

logger = logging.getLogger(__name__)


DEFAULT_RULES_PATH = Path(__file__).parent / "data" / "eta_rules.csv"
DEFAULT_PROVIDER_URL = "https://api.ship24.com/public/v1"

_ENV_PATTERN = re.compile(r"\$\{(\w+)\}")


class ConfigError(ValueError):
    """Raised when the configuration is invalid"""
    pass


class ProviderConfig(BaseModel):
    """Tracking provider (Ship24) settings"""
    api_key: str = ""
    base_url: str = DEFAULT_PROVIDER_URL
    timeout: float = 30.0

    model_config = ConfigDict(extra="ignore")


class EtaConfig(BaseModel):
    """ETA rule table settings"""
    rules_path: str = str(DEFAULT_RULES_PATH)
    default_priority: int = DEFAULT_RULE_PRIORITY
    # Load the rule table when the app starts instead of on first lookup
    preload_rules: bool = False

    model_config = ConfigDict(extra="ignore")


class ShipTrackConfig(BaseModel):
    """Top-level application configuration"""
    provider: ProviderConfig = Field(default_factory=ProviderConfig)
    eta: EtaConfig = Field(default_factory=EtaConfig)
    log_level: str = "INFO"

    model_config = ConfigDict(extra="ignore")

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {value}")
        return level

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "ShipTrackConfig":
        """Validate a raw config mapping"""
        try:
            return cls.model_validate(data or {})
        except ValidationError as e:
            raise ConfigError(f"Invalid configuration: {e}")


def _read_yaml(path: str) -> Dict[str, Any]:
    """Read YAML config file with ${VAR} environment variable substitution."""
    with open(path, "r", encoding="utf-8") as f:
        raw = f.read()

    def _replace_env(match):
        var_name = match.group(1)
        value = os.environ.get(var_name)
        if value is None:
            raise ValueError(
                f"Environment variable '{var_name}' not set "
                f"(referenced in config file '{path}')"
            )
        return value

    resolved = _ENV_PATTERN.sub(_replace_env, raw)
    try:
        data = yaml.safe_load(resolved)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}")

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")
    return data


def load_config(path: str) -> ShipTrackConfig:
    """
    Load and validate a config file.

    Args:
        path: Path to YAML config

    Returns:
        ShipTrackConfig

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If a referenced environment variable is not set
        ConfigError: If the YAML or its values are invalid
    """
    logger.info(f"Loading config from {path}")
    return ShipTrackConfig.from_dict(_read_yaml(path))
