"""Provides functions for loading and accessing configuration settings.

Supports loading from a YAML configuration file (~/.emporch/config.yaml),
a .env file and environment variables.
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml
from dotenv import load_dotenv

from emporch.domain.models.common import MAX_RECORDS, BackoffPolicy

logger = logging.getLogger(__name__)

# --- Configuration Constants ---
DEFAULT_CONFIG_DIR = Path.home() / ".emporch"
DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "config.yaml"
ENV_FILE_NAME = ".env"
ENV_PREFIX = "EMPORCH_"

DEFAULTS: Dict[str, Any] = {
    "upstream.base_url": "http://localhost:8112/api/v1/employee",
    "upstream.timeout_seconds": 10.0,
    "retry.max_retries": 4,
    "retry.initial_backoff_seconds": 1.0,
    "retry.backoff_factor": 2.0,
    "retry.max_backoff_seconds": 120.0,
    "employees.max_records": MAX_RECORDS,
    "logging.level": "INFO",
    "logging.format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    "logging.file": None,
    "logging.file_max_bytes": 1_000_000,
    "logging.file_backup_count": 3,
}

# --- Global Configuration Store ---
_config: Dict[str, Any] = {}
_overrides: Dict[str, Any] = {}  # set_config, e.g. from CLI flags
_test_config: Dict[str, Any] = {}
_loaded = False


def _flatten(data: Mapping[str, Any], prefix: str = "") -> Dict[str, Any]:
    """Turns nested YAML mappings into dotted keys ('retry': {'max_retries': 2} -> 'retry.max_retries')."""
    flat: Dict[str, Any] = {}
    for key, value in data.items():
        dotted = f"{prefix}{key}"
        if isinstance(value, Mapping):
            flat.update(_flatten(value, f"{dotted}."))
        else:
            flat[dotted] = value
    return flat


def env_var_name(key: str) -> str:
    """Environment variable backing a dotted key, e.g. 'retry.max_retries' -> 'EMPORCH_RETRY_MAX_RETRIES'."""
    return f"{ENV_PREFIX}{key.upper().replace('.', '_')}"


def load_configuration(config_file: Optional[Path] = None, env_file: Optional[Path] = None) -> None:
    """Loads configuration from environment, .env file, and YAML file.

    Priority order (highest to lowest):
    1. Environment Variables
    2. .env file
    3. YAML configuration file
    4. Default values

    Args:
        config_file: Path to the YAML configuration file (defaults to DEFAULT_CONFIG_FILE).
        env_file: Path to the .env file (searches upwards from cwd if None).
    """
    global _loaded
    if _loaded:
        logger.debug("Configuration already loaded.")
        return

    config_file = config_file or DEFAULT_CONFIG_FILE

    # 1. YAML file (lowest priority)
    if config_file.exists():
        try:
            with open(config_file, "r") as f:
                yaml_config = yaml.safe_load(f)
            if isinstance(yaml_config, dict):
                _config.update(_flatten(yaml_config))
                logger.info(f"Loaded configuration from YAML: {config_file}")
            elif yaml_config is not None:
                logger.warning(f"YAML config file {config_file} did not contain a dictionary.")
        except (OSError, yaml.YAMLError) as e:
            logger.error(f"Failed to load or parse YAML config {config_file}: {e}")
    else:
        logger.debug(f"YAML config file not found: {config_file}")

    # 2. .env file; override=False keeps real environment variables on top
    dotenv_path = env_file or find_dotenv_path()
    if dotenv_path:
        if load_dotenv(dotenv_path=dotenv_path, override=False):
            logger.info(f"Loaded environment variables from: {dotenv_path}")
    else:
        logger.debug("Skipping .env file loading (no file found).")

    # 3. Environment variables are read on demand in get_config
    _loaded = True
    logger.info("Configuration loading process completed.")


def _coerce(value: str) -> Any:
    if value.lower() == "true":
        return True
    if value.lower() == "false":
        return False
    try:
        if "." in value:
            return float(value)
        return int(value)
    except ValueError:
        return value


def get_config(key: str, default: Any = None) -> Any:
    """
    Get a configuration value by key.

    Priority:
    1. Test configuration
    2. Runtime overrides (set_config)
    3. Environment variable (EMPORCH_ prefixed)
    4. YAML config
    5. Given default, then the built-in default

    Args:
        key: The dotted configuration key
        default: Default value if the key is not found

    Returns:
        The configuration value
    """
    if key in _test_config:
        return _test_config[key]

    if key in _overrides:
        return _overrides[key]

    env_key = env_var_name(key)
    if env_key in os.environ:
        return _coerce(os.environ[env_key])

    if key in _config:
        return _config[key]

    if default is not None:
        return default
    return DEFAULTS.get(key)


def find_dotenv_path() -> Optional[Path]:
    """Searches for the .env file upwards from the current directory."""
    cwd = Path.cwd()
    for path in [cwd] + list(cwd.parents):
        env_path = path / ENV_FILE_NAME
        if env_path.is_file():
            return env_path
    return None


def set_config(key: str, value: Any) -> None:
    """Sets a configuration value for the rest of the process.

    Args:
        key: Configuration key (e.g., 'upstream.base_url')
        value: Value to set
    """
    logger.debug(f"Setting config: {key} = {value}")
    _overrides[key] = value


# --- Convenience Functions ---

def get_upstream_base_url() -> str:
    return str(get_config("upstream.base_url"))


def get_upstream_timeout() -> float:
    return float(get_config("upstream.timeout_seconds"))


def get_max_records() -> int:
    return int(get_config("employees.max_records"))


def get_backoff_policy() -> BackoffPolicy:
    """Retry settings for rate-limited upstream calls."""
    return BackoffPolicy(
        max_retries=int(get_config("retry.max_retries")),
        initial_delay=float(get_config("retry.initial_backoff_seconds")),
        factor=float(get_config("retry.backoff_factor")),
        max_delay=float(get_config("retry.max_backoff_seconds")),
    )


def set_config_for_testing(config_dict: Dict[str, Any]) -> None:
    """
    Set configuration values for testing purposes.
    These values will override any existing configuration.

    Args:
        config_dict: Dictionary of configuration values to set
    """
    _test_config.update(config_dict)
    logger.debug(f"Set testing configuration: {config_dict}")


def clear_test_config() -> None:
    """Clear all testing configuration values."""
    _test_config.clear()
    logger.debug("Cleared testing configuration")


def reset_configuration() -> None:
    """Forget loaded configuration so the next load_configuration() reads again."""
    global _loaded
    _config.clear()
    _overrides.clear()
    _loaded = False
