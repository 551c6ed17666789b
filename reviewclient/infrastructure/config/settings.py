"""Provides functions for loading and accessing configuration settings.

Supports loading from a YAML configuration file (~/.reviewclient/config.yaml),
a .env file and environment variables. Typed accessors turn the raw values
into the immutable objects the client is built from; the client itself
never reads configuration.
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv

from reviewclient.domain.models.common import (
    DEFAULT_DEADLINE_MS,
    DEFAULT_POLICY,
    PREWARM_DEADLINE_MS,
    PREWARM_DELAY_MS,
    BackoffPolicy,
    Milliseconds,
)
from reviewclient.infrastructure.endpoint.resolver import (
    DEFAULT_LOCAL_URL,
    DEFAULT_PRODUCTION_URL,
    Endpoints,
)

logger = logging.getLogger(__name__)

# --- Configuration Constants ---
DEFAULT_CONFIG_DIR = Path.home() / ".reviewclient"
DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "config.yaml"
ENV_FILE_NAME = ".env"
ENV_PREFIX = "REVIEWCLIENT_"
DEFAULT_SITE_HOST = "localhost"

# --- Global Configuration Store ---
_config: Dict[str, Any] = {}
_test_config: Dict[str, Any] = {}
_loaded = False


def _flatten(data: Dict[str, Any], prefix: str = "") -> Dict[str, Any]:
    """Flattens nested YAML mappings into dotted keys ('api': {'timeout_ms'} -> 'api.timeout_ms')."""
    flat: Dict[str, Any] = {}
    for key, value in data.items():
        dotted = f"{prefix}{key}"
        if isinstance(value, dict):
            flat.update(_flatten(value, prefix=f"{dotted}."))
        else:
            flat[dotted] = value
    return flat


def env_var_name(key: str) -> str:
    """Maps a dotted config key to its environment variable ('api.timeout_ms' -> 'REVIEWCLIENT_API_TIMEOUT_MS')."""
    return f"{ENV_PREFIX}{key.upper().replace('.', '_')}"


def _read_yaml(config_file: Path) -> Dict[str, Any]:
    """Returns the flattened contents of the YAML file, or {} when unusable."""
    if not config_file.is_file():
        logger.debug(f"No YAML config at {config_file}; using defaults.")
        return {}
    try:
        data = yaml.safe_load(config_file.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as e:
        logger.error(f"Ignoring unreadable YAML config {config_file}: {e}")
        return {}
    if data is None:
        return {}
    if not isinstance(data, dict):
        logger.warning(f"Ignoring YAML config {config_file}: top level is {type(data).__name__}, not a mapping.")
        return {}
    logger.info(f"Read {config_file}")
    return _flatten(data)


def load_configuration(config_file: Path = DEFAULT_CONFIG_FILE, env_file: Optional[Path] = None) -> None:
    """Reads the YAML file and the .env file into the process, once.

    Variables from .env never replace variables already set in the real
    environment. Later calls are no-ops.

    Args:
        config_file: YAML file with nested sections (``api:``, ``prewarm:`` ...).
        env_file: .env file to load; when None the nearest one upwards from
            the working directory is used, if any.
    """
    global _config, _loaded
    if _loaded:
        return

    _config = _read_yaml(config_file)

    dotenv_path = env_file or find_dotenv_path()
    if dotenv_path and load_dotenv(dotenv_path=dotenv_path, override=False):
        logger.info(f"Read environment overrides from {dotenv_path}")

    _loaded = True


def _coerce(value: str) -> Any:
    """Converts common string forms from the environment to Python values."""
    if value.lower() == "true":
        return True
    if value.lower() == "false":
        return False
    try:
        return float(value) if "." in value else int(value)
    except ValueError:
        return value


def get_config(key: str, default: Any = None) -> Any:
    """Looks up a dotted key such as ``api.timeout_ms``.

    Testing overrides win, then ``REVIEWCLIENT_API_TIMEOUT_MS`` from the
    environment (or .env), then the YAML file, then ``default``.
    """
    if key in _test_config:
        return _test_config[key]
    if not _loaded:
        load_configuration()

    raw = os.environ.get(env_var_name(key))
    if raw is not None:
        return _coerce(raw)
    return _config.get(key, default)


def find_dotenv_path() -> Optional[Path]:
    """Searches for the .env file upwards from the current directory."""
    cwd = Path.cwd()
    for path in [cwd] + list(cwd.parents):
        env_path = path / ENV_FILE_NAME
        if env_path.is_file():
            return env_path
    return None


def _get_int(key: str, default: int) -> int:
    value = get_config(key, default)
    try:
        return int(value)
    except (TypeError, ValueError):
        logger.warning(f"Config key '{key}' has non-integer value {value!r}. Using default {default}.")
        return default

# --- Convenience Functions ---

def get_site_host() -> str:
    """Host name used to choose between the local and production backend."""
    return str(get_config("site.host", DEFAULT_SITE_HOST))


def get_endpoints() -> Endpoints:
    """Local and production backend addresses."""
    return Endpoints(
        local_url=str(get_config("api.local_url", DEFAULT_LOCAL_URL)),
        production_url=str(get_config("api.production_url", DEFAULT_PRODUCTION_URL)),
    )


def get_backoff_policy() -> BackoffPolicy:
    """Retry policy for review operations. Invalid values raise ValueError."""
    return BackoffPolicy(
        max_attempts=_get_int("api.max_attempts", DEFAULT_POLICY.max_attempts),
        base_delay_ms=_get_int("api.base_delay_ms", DEFAULT_POLICY.base_delay_ms),
    )


def get_request_timeout_ms() -> Milliseconds:
    return Milliseconds(_get_int("api.timeout_ms", DEFAULT_DEADLINE_MS))


def get_prewarm_timeout_ms() -> Milliseconds:
    return Milliseconds(_get_int("prewarm.timeout_ms", PREWARM_DEADLINE_MS))


def get_prewarm_delay_ms() -> Milliseconds:
    return Milliseconds(_get_int("prewarm.delay_ms", PREWARM_DELAY_MS))


def set_config_for_testing(config_dict: Dict[str, Any]) -> None:
    """Set configuration values for testing purposes.

    These values override any other source until clear_test_config is called.
    """
    _test_config.update(config_dict)
    logger.debug(f"Set testing configuration: {config_dict}")


def clear_test_config() -> None:
    """Clear all testing configuration values."""
    _test_config.clear()
    logger.debug("Cleared testing configuration")
