"""
Control plane facade exposing the operations used by the HTTP transport.
"""
import logging
from typing import Any, Optional

from ..metrics import MetricsCollector
from .directory import DeviceDirectory
from .errors import DeviceNotFoundError, DeviceUnknownError, InvalidFormatError
from .models import CommandEnvelope, ControlPlaneStats, DeviceRecord, DeviceStatusInfo
from .queue_store import CommandQueueStore

logger = logging.getLogger(__name__)

REGISTRATION_PREFIX = "REGISTRATION:"


def parse_registration(content: Optional[str]) -> str:
    """
    Extract the device code from raw registration content.

    Args:
        content: Content of the form ``REGISTRATION:<device code>``

    Returns:
        The device code with surrounding whitespace removed

    Raises:
        InvalidFormatError: If the registration prefix is missing
    """
    if not content or not content.startswith(REGISTRATION_PREFIX):
        raise InvalidFormatError("Invalid registration format")
    return content[len(REGISTRATION_PREFIX):].strip()


class ControlPlane:
    """
    Coordinates the device directory and per-device command queues.

    A device's directory entry and its queue are created and destroyed
    together under the shared lock.
    """

    def __init__(
        self,
        directory: DeviceDirectory,
        queues: CommandQueueStore,
        metrics: Optional[MetricsCollector] = None,
    ):
        """
        Initialize the control plane.

        Args:
            directory: Device directory
            queues: Command queue store bound to the same directory
            metrics: Optional metrics collector
        """
        if queues.directory is not directory:
            raise ValueError("Command queue store must be bound to the same directory")
        self.directory = directory
        self.queues = queues
        self.metrics = metrics

    def register(self, content: Optional[str]) -> DeviceRecord:
        """
        Register a device from raw registration content.

        Raises:
            InvalidFormatError: If the content or the device code is malformed
        """
        try:
            device_id = parse_registration(content)
            return self.register_device(device_id)
        except InvalidFormatError as e:
            logger.warning(f"Registration rejected: {e}")
            if self.metrics:
                self.metrics.record_registration("rejected")
            raise

    def register_device(self, device_id: str) -> DeviceRecord:
        """Register a device code and open its command queue."""
        with self.directory.lock:
            record = self.directory.register(device_id)
            self.queues.open(device_id)

        if self.metrics:
            self.metrics.record_registration("accepted")
        return record

    def list_registered(self) -> list[str]:
        return self.directory.list_all()

    def enqueue(self, device_id: str, payload: Any) -> str:
        """
        Queue a command for a device.

        Returns:
            The envelope id of the queued command

        Raises:
            DeviceUnknownError: If the device is not registered
        """
        try:
            envelope_id = self.queues.enqueue(device_id, payload)
        except DeviceUnknownError:
            logger.warning(f"Command rejected for unknown device: {device_id}")
            if self.metrics:
                self.metrics.record_error("control_plane", "device_unknown")
            raise

        logger.info(f"Command queued for {device_id}", extra={"envelope_id": envelope_id})
        if self.metrics:
            self.metrics.record_enqueue()
        return envelope_id

    def poll(self, device_id: str) -> list[CommandEnvelope]:
        """
        Mark a device as seen and hand over all of its pending commands.

        Unknown or evicted devices receive an empty list.
        """
        with self.directory.lock:
            try:
                self.directory.touch(device_id)
            except DeviceNotFoundError:
                logger.debug(f"Poll from unregistered device: {device_id}")
                if self.metrics:
                    self.metrics.record_poll("unknown", 0)
                return []
            commands = self.queues.drain_all(device_id)

        if commands:
            logger.info(f"Delivering {len(commands)} command(s) to {device_id}")
        if self.metrics:
            self.metrics.record_poll("known", len(commands))
        return commands

    def get_status(self, device_id: str) -> DeviceStatusInfo:
        """
        Get the derived status of a device.

        Raises:
            DeviceNotFoundError: If the device was never registered or has been evicted
        """
        info = self.directory.status_of(device_id)
        if info is None:
            raise DeviceNotFoundError(device_id)
        return info

    def stats(self) -> ControlPlaneStats:
        with self.directory.lock:
            return ControlPlaneStats(
                devices_registered=self.directory.count(),
                devices_online=self.directory.count_online(),
                commands_pending=self.queues.total_pending(),
            )
