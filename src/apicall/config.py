"""Configuration management with XDG paths and catalog path resolution.

This module handles everything apicall reads from outside the catalog itself:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.apicall/`` on macOS and Windows. See :func:`get_config_dir`.
* **Global config** -- a single :class:`~apicall.models.GlobalConfig` JSON
  file storing the default catalog and HTTP settings.
* **Catalog discovery** -- :func:`resolve_catalog_path` walks the
  precedence chain (explicit path, environment, working directory, global
  config, user config directory, bundled catalog) to pick the catalog file.
* **Request settings** -- :func:`resolve_request_config` merges the global
  config with the ``APICALL_TIMEOUT`` environment override.
"""

from __future__ import annotations

import json
import logging
import os
import platform
from pathlib import Path
from typing import Optional, Union

from apicall.exceptions import ConfigError
from apicall.models import GlobalConfig, RequestConfig

logger = logging.getLogger(__name__)

_APP_NAME = "apicall"
_CONFIG_FILENAME = "config.json"
CATALOG_FILENAME = "apis.txt"
CATALOG_ENV_VAR = "APICALL_CATALOG"
TIMEOUT_ENV_VAR = "APICALL_TIMEOUT"

BUNDLED_CATALOG = Path(__file__).parent / CATALOG_FILENAME
"""Catalog shipped with the package, used when nothing else is configured."""


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports XDG Base Directory spec (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _fallback_base_dir() -> Path:
    """Fallback base directory for non-XDG platforms (macOS, Windows)."""
    return Path.home() / f".{_APP_NAME}"


def get_config_dir() -> Path:
    """Return the configuration directory.

    On Linux/BSD: ``$XDG_CONFIG_HOME/apicall/`` (default ``~/.config/apicall/``).
    On macOS/Windows: ``~/.apicall/``.

    The directory is not created; apicall only ever reads from it.
    """
    if _is_xdg_platform():
        env_value = os.environ.get("XDG_CONFIG_HOME", "")
        base = Path(env_value) if env_value else Path.home() / ".config"
        return base / _APP_NAME
    return _fallback_base_dir()


# --- Global config ---


def _global_config_path() -> Path:
    """Path to the global config file."""
    return get_config_dir() / _CONFIG_FILENAME


def load_global_config() -> GlobalConfig:
    """Load the global configuration from the config directory.

    Returns:
        The deserialised :class:`~apicall.models.GlobalConfig`. If the file
        does not exist, a default instance is returned.

    Raises:
        ConfigError: If the file exists but contains invalid JSON or fails
            Pydantic validation.
    """
    path = _global_config_path()
    if not path.is_file():
        return GlobalConfig()
    try:
        text = path.read_text(encoding="utf-8")
        data = json.loads(text)
        return GlobalConfig.model_validate(data)
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid global config at {path}: {exc}") from exc


# --- Precedence resolution ---


def resolve_catalog_path(explicit: Optional[Union[str, Path]] = None) -> Path:
    """Pick the catalog file to load.

    Precedence (high to low):
        1. *explicit* (``--config`` flag or ``config_path`` argument)
        2. ``APICALL_CATALOG`` environment variable
        3. ``./apis.txt`` in the current working directory
        4. ``catalog`` in the global config file
        5. ``<config_dir>/apis.txt`` if it exists
        6. The catalog bundled with the package

    Levels 1, 2 and 4 are returned even when the file does not exist, so that
    a typo surfaces as a :class:`~apicall.exceptions.CatalogError` rather than
    silently falling through to another catalog.

    Returns:
        The catalog path, with ``~`` expanded.
    """
    if explicit:
        return Path(explicit).expanduser()

    env_path = os.environ.get(CATALOG_ENV_VAR)
    if env_path:
        return Path(env_path).expanduser()

    local = Path.cwd() / CATALOG_FILENAME
    if local.is_file():
        return local

    configured = load_global_config().catalog
    if configured:
        return Path(configured).expanduser()

    user_catalog = get_config_dir() / CATALOG_FILENAME
    if user_catalog.is_file():
        return user_catalog

    return BUNDLED_CATALOG


def resolve_request_config() -> RequestConfig:
    """Return HTTP settings from the global config, with env overrides.

    ``APICALL_TIMEOUT`` overrides ``request.timeout``.

    Raises:
        ConfigError: If ``APICALL_TIMEOUT`` is not a positive number.
    """
    request = load_global_config().request
    env_timeout = os.environ.get(TIMEOUT_ENV_VAR)
    if env_timeout:
        try:
            timeout = float(env_timeout)
        except ValueError:
            raise ConfigError(
                f"{TIMEOUT_ENV_VAR} must be a number of seconds, got '{env_timeout}'"
            ) from None
        if timeout <= 0:
            raise ConfigError(f"{TIMEOUT_ENV_VAR} must be positive, got '{env_timeout}'")
        request = request.model_copy(update={"timeout": timeout})
    logger.debug("Request settings: timeout=%s verify_ssl=%s", request.timeout, request.verify_ssl)
    return request
