"""Configuration module for Command Relay.

Usage:
    from command_relay.config import Config
    from command_relay.config.base import EnvVars, get_config_value

All environment variables use the ``RELAY_`` prefix.
"""

from .base import (
    ENV_PREFIX_RELAY,
    EnvVars,
    get_config_value,
    get_env_value,
)
from .server import Config, ConfigError

__all__ = [
    "Config",
    "ConfigError",
    "EnvVars",
    "get_config_value",
    "get_env_value",
    "ENV_PREFIX_RELAY",
]
