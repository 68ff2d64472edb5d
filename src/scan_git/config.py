"""Configuration for the scan-git CLI."""

import json
import os
from pathlib import Path
from typing import Optional, Union

from pydantic import BaseModel, ValidationError, field_validator

from scan_git.core.errors import ConfigError

CONFIG_ENV_VAR = "SCAN_GIT_CONFIG"


class ScanGitConfig(BaseModel):
    """Settings shared by every CLI command."""

    detect_parents: bool = True
    log_level: str = "WARNING"
    short_sha_length: int = 8
    date_format: str = "%Y-%m-%d %H:%M:%S %z"

    @field_validator("log_level")
    @classmethod
    def _normalise_level(cls, value: str) -> str:
        value = value.upper()
        if value not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"unknown log level: {value}")
        return value

    @field_validator("short_sha_length")
    @classmethod
    def _check_sha_length(cls, value: int) -> int:
        if not 4 <= value <= 40:
            raise ValueError("short_sha_length must be between 4 and 40")
        return value


def load_config(config_path: Optional[Union[str, Path]] = None) -> ScanGitConfig:
    """Load configuration from a JSON file.

    The file is taken from ``config_path`` or the ``SCAN_GIT_CONFIG``
    environment variable; without either, defaults are used. ``LOG_LEVEL``
    overrides the file's ``log_level``.

    Raises:
        ConfigError: If the file is missing, unreadable or invalid
    """
    if config_path is None:
        config_path = os.getenv(CONFIG_ENV_VAR)

    data = {}
    if config_path:
        path = Path(config_path)
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigError(f"Cannot read config file {path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"Config file {path} must hold a JSON object")

    env_level = os.getenv("LOG_LEVEL")
    if env_level:
        data["log_level"] = env_level

    try:
        return ScanGitConfig(**data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e
