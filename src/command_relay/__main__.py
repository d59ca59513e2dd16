"""Main application entry point."""

import asyncio
import logging
from typing import Optional
import uvicorn

from .config import Config
from .core import CommandQueueStore, ControlPlane, DeviceDirectory, ExpirySweeper
from .metrics import get_metrics
from .api.app import create_app
from .api.dependencies import set_control_plane_instance, set_sweeper_instance

logger = logging.getLogger(__name__)

METRICS_REFRESH_SECONDS = 30


class Application:
    """Main application controller."""

    def __init__(self, config: Config):
        """
        Initialize application.

        Args:
            config: Application configuration
        """
        self.config = config
        self.control_plane: Optional[ControlPlane] = None
        self.sweeper: Optional[ExpirySweeper] = None
        self.metrics_task: Optional[asyncio.Task] = None
        self.api_server_task: Optional[asyncio.Task] = None
        self.running = False

    def build(self) -> ControlPlane:
        """Create the coordination core and register it with the API layer."""
        directory = DeviceDirectory(
            online_window_seconds=self.config.online_window_seconds,
            device_code_prefix=self.config.device_code_prefix,
            device_code_min_length=self.config.device_code_min_length,
        )
        queues = CommandQueueStore(directory)
        metrics = get_metrics() if self.config.metrics_enabled else None
        self.control_plane = ControlPlane(directory, queues, metrics=metrics)
        self.sweeper = ExpirySweeper(
            directory,
            queues,
            eviction_window_seconds=self.config.eviction_window_seconds,
            interval_seconds=self.config.sweep_interval_seconds,
            metrics=metrics,
        )

        set_control_plane_instance(self.control_plane)
        set_sweeper_instance(self.sweeper)
        return self.control_plane

    async def start(self) -> None:
        """Start the application."""
        logger.info("Starting Command Relay")
        logger.info(f"\n{self.config.display()}")

        self.build()

        logger.info("Starting expiry sweeper...")
        self.sweeper.start()

        logger.info(f"Starting API server on {self.config.api_host}:{self.config.api_port}")
        self.api_server_task = asyncio.create_task(self._run_api_server())

        if self.config.metrics_enabled:
            logger.info(f"Starting metrics update task (every {METRICS_REFRESH_SECONDS} seconds)")
            self.metrics_task = asyncio.create_task(self._metrics_loop())

        self.running = True
        logger.info("Application started successfully")

    async def stop(self) -> None:
        """Stop the application."""
        logger.info("Stopping Command Relay...")
        self.running = False

        for task in (self.api_server_task, self.metrics_task):
            if task and not task.done():
                task.cancel()
                try:
                    await task
                except asyncio.CancelledError:
                    pass

        if self.sweeper:
            await self.sweeper.stop()

        set_control_plane_instance(None)
        set_sweeper_instance(None)

        logger.info("Application stopped")

    async def _run_api_server(self) -> None:
        """Run the FastAPI server."""
        try:
            app = create_app(
                title=self.config.api_title,
                version=self.config.api_version,
                enable_metrics=self.config.metrics_enabled,
            )

            config = uvicorn.Config(
                app,
                host=self.config.api_host,
                port=self.config.api_port,
                log_level=self.config.log_level.lower(),
                access_log=True,
            )

            server = uvicorn.Server(config)
            await server.serve()

        except asyncio.CancelledError:
            logger.info("API server shutting down...")
            raise
        except Exception as e:
            logger.error(f"API server error: {e}", exc_info=True)
            if self.config.metrics_enabled:
                metrics = get_metrics()
                metrics.record_error("api_server", "server_failed")
        finally:
            self.running = False

    def update_metrics(self) -> None:
        """Push the current device and queue counts into the state gauges."""
        if not self.control_plane:
            return
        stats = self.control_plane.stats()
        get_metrics().update_state(
            registered=stats.devices_registered,
            online=stats.devices_online,
            pending=stats.commands_pending,
        )

    async def _metrics_loop(self) -> None:
        """Background task for periodic metrics updates."""
        self.update_metrics()

        while self.running:
            try:
                await asyncio.sleep(METRICS_REFRESH_SECONDS)
                self.update_metrics()
            except asyncio.CancelledError:
                break
            except Exception as e:
                logger.error(f"Error in metrics loop: {e}", exc_info=True)
                get_metrics().record_error("metrics_updater", "update_loop_failed")

    async def run(self) -> None:
        """Run the application until interrupted."""
        try:
            await self.start()

            while self.running:
                await asyncio.sleep(1)

        except KeyboardInterrupt:
            logger.info("Received keyboard interrupt")
        except Exception as e:
            logger.error(f"Application error: {e}", exc_info=True)
        finally:
            await self.stop()


def main() -> None:
    """Main entry point - delegates to CLI."""
    from .cli import cli
    cli()


if __name__ == "__main__":
    main()
