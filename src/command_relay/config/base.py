"""Shared configuration utilities and constants.

This module provides the foundation for consistent configuration handling:
every setting is resolved with the priority CLI > environment > default.
"""

import os
from typing import Any, Optional, TypeVar

# Type variable for config classes
T = TypeVar("T")

# === Environment Variable Prefix ===

ENV_PREFIX_RELAY = "RELAY_"


class EnvVars:
    """Centralized environment variable names for consistent access."""

    # === Presence ===
    ONLINE_WINDOW_SECONDS = f"{ENV_PREFIX_RELAY}ONLINE_WINDOW_SECONDS"
    EVICTION_WINDOW_SECONDS = f"{ENV_PREFIX_RELAY}EVICTION_WINDOW_SECONDS"
    SWEEP_INTERVAL_SECONDS = f"{ENV_PREFIX_RELAY}SWEEP_INTERVAL_SECONDS"

    # === Registration ===
    DEVICE_CODE_PREFIX = f"{ENV_PREFIX_RELAY}DEVICE_CODE_PREFIX"
    DEVICE_CODE_MIN_LENGTH = f"{ENV_PREFIX_RELAY}DEVICE_CODE_MIN_LENGTH"

    # === API ===
    API_HOST = f"{ENV_PREFIX_RELAY}API_HOST"
    API_PORT = f"{ENV_PREFIX_RELAY}API_PORT"
    API_TITLE = f"{ENV_PREFIX_RELAY}API_TITLE"
    API_VERSION = f"{ENV_PREFIX_RELAY}API_VERSION"

    # === Metrics ===
    METRICS_ENABLED = f"{ENV_PREFIX_RELAY}METRICS_ENABLED"

    # === Logging ===
    LOG_LEVEL = f"{ENV_PREFIX_RELAY}LOG_LEVEL"
    LOG_FORMAT = f"{ENV_PREFIX_RELAY}LOG_FORMAT"


def get_env_value(
    env_var: str,
    default: T,
    type_converter: type = str,
) -> T:
    """
    Get a value from an environment variable with type conversion.

    Args:
        env_var: Environment variable name
        default: Default value if not found
        type_converter: Type to convert to (str, int, float, bool)

    Returns:
        The environment value converted to the specified type, or the default
    """
    env_value = os.getenv(env_var)

    if env_value is not None:
        if type_converter == bool:
            return env_value.lower() in ("true", "1", "yes", "on")  # type: ignore
        return type_converter(env_value)

    return default


def get_config_value(
    cli_arg: Optional[Any],
    env_var: str,
    default: T,
    type_converter: type = str,
) -> T:
    """
    Get a configuration value with priority: CLI > Environment > Default.

    Args:
        cli_arg: CLI argument value (highest priority)
        env_var: Environment variable name
        default: Default value (lowest priority)
        type_converter: Type to convert to (str, int, float, bool)

    Returns:
        The resolved configuration value
    """
    if cli_arg is not None:
        return cli_arg

    return get_env_value(env_var, default, type_converter)
