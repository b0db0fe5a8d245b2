"""Configuration file loading and CLI overrides for runtime tunables.

Values are applied onto ``Constants`` with CLI flags taking precedence over
the YAML file. The whitelist is fixed and cannot be changed here.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Dict, Optional

import yaml

from constants import Constants

logger = logging.getLogger(__name__)

CONFIG_SECTION = "ltspin"


class ConfigError(Exception):
    """Raised when a configuration file cannot be loaded or holds invalid values."""


def find_config(target_dir: str, explicit: Optional[str] = None) -> Optional[str]:
    """Return the config path to load: the explicit one, else the project default if present."""
    if explicit:
        return explicit
    default = os.path.join(target_dir, Constants.CONFIG_FILE)
    return default if os.path.isfile(default) else None


def load_config(config_path: Optional[str]) -> Dict[str, Any]:
    """Load a YAML config file.

    Settings may sit under a top-level ``ltspin:`` key or at the top level.

    Raises:
        ConfigError: missing file, invalid YAML or a non-mapping document.
    """
    if not config_path:
        return {}
    if not os.path.isfile(config_path):
        raise ConfigError(f"Config file not found: {config_path}")

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Failed to load config {config_path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Config {config_path} must be a mapping")
    settings = data.get(CONFIG_SECTION, data)
    if not isinstance(settings, dict):
        raise ConfigError(f"'{CONFIG_SECTION}' in {config_path} must be a mapping")
    return settings


def _positive_int(key: str, value: Any) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"'{key}' must be an integer, got {value!r}") from e
    if number < 1:
        raise ConfigError(f"'{key}' must be at least 1, got {number}")
    return number


def apply_config(settings: Dict[str, Any]) -> None:
    """Apply recognised settings onto ``Constants``; unknown keys are ignored."""
    for key, value in settings.items():
        if key == "registry_url":
            url = str(value).strip()
            Constants.REGISTRY_URL_NPM = url if url.endswith("/") else url + "/"
        elif key == "request_timeout":
            Constants.REQUEST_TIMEOUT = _positive_int(key, value)
        elif key == "http_retry_max":
            Constants.HTTP_RETRY_MAX = _positive_int(key, value)
        elif key == "pin_style":
            style = str(value).lower()
            if style not in Constants.PIN_STYLES:
                raise ConfigError(f"'pin_style' must be one of {', '.join(Constants.PIN_STYLES)}")
            Constants.DIRECT_PIN_STYLE = style
        elif key == "install_args":
            if not isinstance(value, dict):
                raise ConfigError("'install_args' must map package managers to argument lists")
            for manager, extra in value.items():
                if manager not in Constants.INSTALL_ARGS:
                    raise ConfigError(f"Unknown package manager in install_args: {manager}")
                if isinstance(extra, str):
                    extra = extra.split()
                Constants.INSTALL_ARGS[manager] = [str(arg) for arg in (extra or [])]
        else:
            logger.warning("Ignoring unknown config key: %s", key)


def apply_cli_overrides(args) -> None:
    """Apply CLI flags with highest precedence."""
    if getattr(args, "PIN_STYLE", None):
        Constants.DIRECT_PIN_STYLE = args.PIN_STYLE
