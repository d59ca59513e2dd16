"""Command-line interface for Command Relay."""

import asyncio
import logging
import signal
import sys

import click

from .config import Config, ConfigError
from .utils.logging import setup_logging

logger = logging.getLogger(__name__)


@click.group()
def cli():
    """Command Relay - Command queue and presence tracking for polling agents."""
    pass


@cli.command()
@click.option(
    "--api-host",
    type=str,
    help="API server host (default: 0.0.0.0)",
)
@click.option(
    "--api-port",
    type=int,
    help="API server port (default: 5000)",
)
@click.option(
    "--online-window",
    "online_window_seconds",
    type=float,
    help="Seconds without contact before a device is reported offline (default: 300)",
)
@click.option(
    "--eviction-window",
    "eviction_window_seconds",
    type=float,
    help="Seconds without contact before a device is evicted (default: 3600)",
)
@click.option(
    "--sweep-interval",
    "sweep_interval_seconds",
    type=float,
    help="Seconds between expiry sweeps (default: 300)",
)
@click.option(
    "--device-code-prefix",
    type=str,
    help="Required prefix of device codes (default: PC)",
)
@click.option(
    "--device-code-min-length",
    type=int,
    help="Minimum length of device codes (default: 8)",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Logging level (default: INFO)",
)
@click.option(
    "--log-format",
    type=click.Choice(["text", "json"], case_sensitive=False),
    help="Log format (default: json)",
)
@click.option(
    "--metrics/--no-metrics",
    "metrics_enabled",
    default=None,
    help="Enable/disable Prometheus metrics (default: enabled)",
)
def server(**kwargs):
    """Start the Command Relay server."""
    from .__main__ import Application

    # Filter out None values (unspecified options)
    cli_args = {k: v for k, v in kwargs.items() if v is not None}

    try:
        config = Config.from_args_and_env(cli_args)
    except (ConfigError, ValueError) as e:
        raise click.BadParameter(str(e))

    setup_logging(level=config.log_level, format_type=config.log_format)

    app = Application(config)

    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)

    def signal_handler(sig, frame):
        logger.info(f"Received signal {sig}")
        loop.create_task(app.stop())

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    try:
        loop.run_until_complete(app.run())
    except KeyboardInterrupt:
        logger.info("Keyboard interrupt")
    finally:
        loop.close()

    sys.exit(0)


@cli.command()
@click.option(
    "--online-window",
    "online_window_seconds",
    type=float,
    help="Seconds without contact before a device is reported offline",
)
@click.option(
    "--eviction-window",
    "eviction_window_seconds",
    type=float,
    help="Seconds without contact before a device is evicted",
)
@click.option(
    "--sweep-interval",
    "sweep_interval_seconds",
    type=float,
    help="Seconds between expiry sweeps",
)
def config(**kwargs):
    """Show the resolved configuration."""
    cli_args = {k: v for k, v in kwargs.items() if v is not None}

    try:
        resolved = Config.from_args_and_env(cli_args)
    except (ConfigError, ValueError) as e:
        raise click.BadParameter(str(e))

    click.echo(resolved.display())


if __name__ == "__main__":
    cli()
