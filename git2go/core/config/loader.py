"""
Settings loader — reads the optional git2go YAML file into a Settings model.

Resolution order:
    explicit path (``--config``)  >  GIT2GO_CONFIG  >  ~/.git2go/config.yml  >  defaults

A missing default file is not an error; a missing explicit file is.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "GIT2GO_CONFIG"
DEFAULT_CONFIG_PATH = Path("~/.git2go/config.yml")


class ConfigError(Exception):
    """Raised when git2go settings are invalid or missing."""


class Settings(BaseModel):
    """User-tunable settings. Every field has a working default."""

    editor: str = "nano"
    package: str = "git"
    key_type: Literal["rsa", "ecdsa", "ed25519"] = "rsa"
    key_file: str = "id_rsa"
    log_dir: Path = Field(default=Path("~/.git2go/logs"), validate_default=True)
    command_timeout: int = Field(default=600, gt=0)

    @field_validator("editor", "package", "key_file")
    @classmethod
    def _not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be empty")
        return v

    @field_validator("log_dir")
    @classmethod
    def _expand(cls, v: Path) -> Path:
        return v.expanduser()


def find_config_file(explicit: Path | None = None) -> Path | None:
    """Locate the settings file.

    Returns:
        The path to load, or None when no file applies (use defaults).
    """
    if explicit is not None:
        return explicit

    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path).expanduser()

    default = DEFAULT_CONFIG_PATH.expanduser()
    return default if default.is_file() else None


def load_settings(path: Path | None = None) -> Settings:
    """Load and validate git2go settings.

    Args:
        path: Explicit settings file. If None, searches the default locations.

    Returns:
        Validated Settings model.

    Raises:
        ConfigError: If the file is missing (when requested) or invalid.
    """
    path = find_config_file(path)
    if path is None:
        logger.debug("No settings file found, using defaults")
        return Settings()

    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    logger.debug("Loading settings from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return Settings()

    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    # Accept both a flat file and one nested under "git2go:"
    settings_data = data.get("git2go", data)

    try:
        settings = Settings.model_validate(settings_data)
    except ValidationError as e:
        raise ConfigError(f"Invalid settings in {path}: {e}") from e

    logger.info("Loaded settings from %s", path)
    return settings
