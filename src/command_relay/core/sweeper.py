"""Expiry sweep reclaiming devices that stopped polling."""

import asyncio
import logging
import time
from typing import Optional

from ..metrics import MetricsCollector
from .directory import DeviceDirectory
from .queue_store import CommandQueueStore

logger = logging.getLogger(__name__)


class ExpirySweeper:
    """Periodically evicts devices idle for longer than the eviction window."""

    def __init__(
        self,
        directory: DeviceDirectory,
        queues: CommandQueueStore,
        eviction_window_seconds: float = 3600.0,
        interval_seconds: float = 300.0,
        metrics: Optional[MetricsCollector] = None,
    ):
        """
        Initialize the sweeper.

        Args:
            directory: Device directory to scan
            queues: Queue store whose queues are dropped alongside evicted devices
            eviction_window_seconds: Silence after which a device is evicted
            interval_seconds: Time between sweep runs
            metrics: Optional metrics collector
        """
        self.directory = directory
        self.queues = queues
        self.eviction_window_seconds = eviction_window_seconds
        self.interval_seconds = interval_seconds
        self.metrics = metrics
        self._task: Optional[asyncio.Task] = None

    def sweep(self) -> list[str]:
        """
        Run a single sweep.

        Returns:
            Device codes evicted during this run
        """
        started = time.monotonic()
        evicted = []

        for device_id in self.directory.list_all():
            # Idleness is re-read under the lock: a poll may have landed since the snapshot
            with self.directory.lock:
                idle = self.directory.idle_seconds(device_id)
                if idle is None or idle <= self.eviction_window_seconds:
                    continue
                self.directory.evict(device_id)
                dropped = self.queues.drop_all(device_id)

            evicted.append(device_id)
            logger.info(
                f"Removed offline device: {device_id}",
                extra={"idle_seconds": round(idle, 1), "dropped_commands": dropped},
            )

        if self.metrics:
            self.metrics.record_sweep(time.monotonic() - started, len(evicted))

        logger.debug(f"Sweep complete: {len(evicted)} device(s) evicted")
        return evicted

    async def _sweep_loop(self) -> None:
        """Background task running a sweep every interval."""
        logger.info(f"Expiry sweeper started (every {self.interval_seconds}s)")

        while True:
            try:
                await asyncio.sleep(self.interval_seconds)
                self.sweep()
            except asyncio.CancelledError:
                break
            except Exception as e:
                logger.error(f"Error in expiry sweep: {e}", exc_info=True)
                if self.metrics:
                    self.metrics.record_error("sweeper", "sweep_failed")

        logger.info("Expiry sweeper exiting")

    def start(self) -> None:
        """Start the background sweep task."""
        if self._task is None or self._task.done():
            self._task = asyncio.create_task(self._sweep_loop())

    async def stop(self) -> None:
        """Stop the background sweep task."""
        if self._task and not self._task.done():
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()
