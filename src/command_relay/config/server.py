"""Server configuration resolved from CLI arguments, environment variables, and defaults."""

from dataclasses import dataclass
from typing import Optional

from .base import EnvVars, get_config_value


class ConfigError(ValueError):
    """Raised when configuration values are inconsistent."""

    pass


@dataclass
class Config:
    """Application configuration."""

    # === Presence ===
    online_window_seconds: float = 300.0
    eviction_window_seconds: float = 3600.0
    sweep_interval_seconds: float = 300.0

    # === Registration ===
    device_code_prefix: str = "PC"
    device_code_min_length: int = 8

    # === API ===
    api_host: str = "0.0.0.0"
    api_port: int = 5000
    api_title: str = "Command Relay"
    api_version: str = "1.0.0"

    # === Prometheus ===
    metrics_enabled: bool = True

    # === Logging ===
    log_level: str = "INFO"
    log_format: str = "json"  # json|text

    @classmethod
    def from_args_and_env(cls, cli_args: Optional[dict] = None) -> "Config":
        """
        Load configuration from CLI arguments, environment variables, and defaults.

        Priority: CLI args > Environment variables > Defaults

        Args:
            cli_args: Dictionary of CLI arguments keyed by field name

        Returns:
            Config instance
        """
        args = cli_args or {}
        config = cls()

        config.online_window_seconds = get_config_value(
            args.get("online_window_seconds"), EnvVars.ONLINE_WINDOW_SECONDS,
            config.online_window_seconds, float
        )
        config.eviction_window_seconds = get_config_value(
            args.get("eviction_window_seconds"), EnvVars.EVICTION_WINDOW_SECONDS,
            config.eviction_window_seconds, float
        )
        config.sweep_interval_seconds = get_config_value(
            args.get("sweep_interval_seconds"), EnvVars.SWEEP_INTERVAL_SECONDS,
            config.sweep_interval_seconds, float
        )

        config.device_code_prefix = get_config_value(
            args.get("device_code_prefix"), EnvVars.DEVICE_CODE_PREFIX,
            config.device_code_prefix
        )
        config.device_code_min_length = get_config_value(
            args.get("device_code_min_length"), EnvVars.DEVICE_CODE_MIN_LENGTH,
            config.device_code_min_length, int
        )

        config.api_host = get_config_value(
            args.get("api_host"), EnvVars.API_HOST, config.api_host
        )
        config.api_port = get_config_value(
            args.get("api_port"), EnvVars.API_PORT, config.api_port, int
        )
        config.api_title = get_config_value(
            args.get("api_title"), EnvVars.API_TITLE, config.api_title
        )
        config.api_version = get_config_value(
            args.get("api_version"), EnvVars.API_VERSION, config.api_version
        )

        config.metrics_enabled = get_config_value(
            args.get("metrics_enabled"), EnvVars.METRICS_ENABLED, config.metrics_enabled, bool
        )

        config.log_level = get_config_value(
            args.get("log_level"), EnvVars.LOG_LEVEL, config.log_level
        )
        config.log_format = get_config_value(
            args.get("log_format"), EnvVars.LOG_FORMAT, config.log_format
        )

        config.validate()
        return config

    def validate(self) -> None:
        """
        Check that the presence windows are usable.

        Raises:
            ConfigError: If a duration is not positive or the windows overlap
        """
        for name in ("online_window_seconds", "eviction_window_seconds", "sweep_interval_seconds"):
            if getattr(self, name) <= 0:
                raise ConfigError(f"{name} must be positive")

        if self.online_window_seconds >= self.eviction_window_seconds:
            raise ConfigError("online_window_seconds must be shorter than eviction_window_seconds")

        if not self.device_code_prefix:
            raise ConfigError("device_code_prefix must not be empty")

    def display(self) -> str:
        """
        Display configuration in human-readable format.

        Returns:
            Formatted configuration string
        """
        lines = [
            "Configuration:",
            "  Presence:",
            f"    Online Window: {self.online_window_seconds}s",
            f"    Eviction Window: {self.eviction_window_seconds}s",
            f"    Sweep Interval: {self.sweep_interval_seconds}s",
            "  Registration:",
            f"    Device Code Prefix: {self.device_code_prefix}",
            f"    Device Code Min Length: {self.device_code_min_length}",
            "  API:",
            f"    Host: {self.api_host}",
            f"    Port: {self.api_port}",
            f"    Metrics: {'Enabled' if self.metrics_enabled else 'Disabled'}",
            "  Logging:",
            f"    Level: {self.log_level}",
            f"    Format: {self.log_format}",
        ]

        return "\n".join(lines)
