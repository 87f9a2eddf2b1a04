"""
Configuration loader — reads vaultdev.yml into VaultSettings.

The file is optional: without it every setting keeps its default.
It reads YAML, validates against the Pydantic schema, and returns a
typed settings object.
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml

from vaultdev.core.errors import ConfigError
from vaultdev.core.models.settings import VaultSettings

logger = logging.getLogger(__name__)

# Default config filename
SETTINGS_FILE = "vaultdev.yml"

__all__ = ["SETTINGS_FILE", "ConfigError", "find_settings_file", "load_settings"]


def find_settings_file(root: Path | None = None) -> Path | None:
    """Return ``<root>/vaultdev.yml`` if it exists.

    Unlike a project file, the settings file is not searched for in
    parent directories: the working directory is the project.
    """
    candidate = (root or Path.cwd()) / SETTINGS_FILE
    return candidate if candidate.is_file() else None


def load_settings(path: Path | None = None, root: Path | None = None) -> VaultSettings:
    """Load and validate settings.

    Args:
        path: Explicit path to a settings file. Must exist when given.
        root: Working directory to look in when ``path`` is None.

    Returns:
        Validated VaultSettings (defaults when no file is found).

    Raises:
        ConfigError: If the file is missing, unreadable or invalid.
    """
    if path is None:
        path = find_settings_file(root)
        if path is None:
            logger.debug("No %s found — using defaults", SETTINGS_FILE)
            return VaultSettings()

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
        return VaultSettings()

    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    # The YAML may wrap everything under a "vault" key or be flat
    settings_data = data.get("vault", data)

    try:
        settings = VaultSettings.model_validate(settings_data)
    except Exception as e:
        raise ConfigError(f"Invalid settings in {path}: {e}") from e

    logger.info("Loaded settings for %s from %s", settings.hostname, path)
    return settings
