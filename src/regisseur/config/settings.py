"""
Configuration management for Régisseur.

Hybrid configuration system using a YAML file and environment variables.
Priority: Environment variables > YAML config > Pydantic defaults
"""

import os
from pathlib import Path
from typing import Optional

import yaml
from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_PREFIX = "REGISSEUR_"


class Settings(BaseSettings):
    """
    Engine configuration schema.

    Loads configuration from:
    1. Environment variables prefixed with REGISSEUR_ (highest priority)
    2. YAML configuration file
    3. Pydantic defaults (lowest priority)
    """

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Shutdown
    grace_period: float = Field(
        default=2.0,
        ge=0,
        description="Seconds to pause after the exit signal closes",
    )
    reverse_stop_order: bool = Field(
        default=False,
        description="Stop servers in reverse registration order",
    )

    # Per-call timeouts (None = wait forever)
    load_timeout: Optional[float] = Field(default=None, gt=0)
    defer_timeout: Optional[float] = Field(default=None, gt=0)
    start_timeout: Optional[float] = Field(default=None, gt=0)
    stop_timeout: Optional[float] = Field(default=None, gt=0)

    # Logging
    log_level: str = Field(default="info")
    log_dir: Optional[str] = Field(default=None)
    verbose: int = Field(default=1, ge=0, le=3)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        allowed = ["debug", "info", "warning", "error", "critical"]
        v_lower = v.lower()
        if v_lower not in allowed:
            raise ValueError(f"Invalid log_level. Must be one of: {allowed}")
        return v_lower


def load_config(
    config_file: Optional[str] = None,
    env_file: Optional[str] = None,
) -> Settings:
    """
    Load configuration from a YAML file and environment variables.

    Args:
        config_file: Optional YAML config path
        env_file: Optional .env path loaded into the environment first

    Returns:
        Settings instance

    Raises:
        ValidationError: If a value fails validation
    """
    if env_file and Path(env_file).exists():
        load_dotenv(env_file, override=True)

    merged_config = {}
    if config_file:
        config_path = Path(config_file)
        if config_path.exists():
            with open(config_path, "r") as f:
                loaded = yaml.safe_load(f)
                if loaded:
                    merged_config = loaded

    # Environment wins over YAML
    overrides = {
        key: value
        for key, value in merged_config.items()
        if f"{ENV_PREFIX}{key.upper()}" not in os.environ
    }

    return Settings(**overrides)


# Global settings singleton (lazy initialization)
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """
    Get or initialize global settings singleton.

    Reads REGISSEUR_CONFIG_FILE for an optional YAML file.
    """
    global _settings
    if _settings is None:
        _settings = load_config(os.getenv(f"{ENV_PREFIX}CONFIG_FILE"))
    return _settings


def override_settings(new_settings: Settings) -> None:
    """
    Override global settings (for testing).

    Args:
        new_settings: New Settings instance to use
    """
    global _settings
    _settings = new_settings


def reset_settings() -> None:
    """Reset settings to force re-initialization (for testing)."""
    global _settings
    _settings = None
