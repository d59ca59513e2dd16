"""
Per-device command queues drained by polling agents.
"""
import logging
from typing import Any

from .directory import DeviceDirectory
from .errors import DeviceUnknownError
from .models import CommandEnvelope

logger = logging.getLogger(__name__)


class CommandQueueStore:
    """
    Holds one unbounded FIFO queue of pending commands per registered device.

    All operations run under the directory's lock, so an enqueue racing a
    drain on the same device always lands strictly before or strictly after
    the drain's snapshot.
    """

    def __init__(self, directory: DeviceDirectory):
        """
        Initialize the store.

        Args:
            directory: Directory used to validate device codes
        """
        self.directory = directory
        self.lock = directory.lock
        self._queues: dict[str, list[CommandEnvelope]] = {}

    def open(self, device_id: str) -> None:
        """
        Create an empty queue for a device if it does not have one yet.

        This is the only place queues are created.
        """
        with self.lock:
            self._queues.setdefault(device_id, [])

    def enqueue(self, device_id: str, payload: Any) -> str:
        """
        Append a command to a device's queue.

        Args:
            device_id: Target device code
            payload: Opaque command content

        Returns:
            The generated envelope id

        Raises:
            DeviceUnknownError: If the device is not registered or has no open queue
        """
        with self.lock:
            queue = self._queues.get(device_id)
            if queue is None or not self.directory.contains(device_id):
                raise DeviceUnknownError(device_id)

            envelope = CommandEnvelope(payload=payload, enqueued_at=self.directory.clock())
            queue.append(envelope)
            depth = len(queue)

        logger.debug(
            f"Command queued for {device_id} at position {depth}",
            extra={"envelope_id": envelope.id},
        )
        return envelope.id

    def drain_all(self, device_id: str) -> list[CommandEnvelope]:
        """
        Return and clear every pending command for a device.

        Unknown devices yield an empty list rather than an error.
        """
        with self.lock:
            pending = self._queues.get(device_id)
            if not pending:
                return []
            self._queues[device_id] = []

        logger.debug(f"Drained {len(pending)} command(s) for {device_id}")
        return pending

    def drop_all(self, device_id: str) -> int:
        """
        Remove a device's queue entirely.

        Returns:
            Number of pending commands that were discarded
        """
        with self.lock:
            dropped = self._queues.pop(device_id, None)
        return len(dropped) if dropped else 0

    def has_queue(self, device_id: str) -> bool:
        with self.lock:
            return device_id in self._queues

    def pending_count(self, device_id: str) -> int:
        with self.lock:
            return len(self._queues.get(device_id, ()))

    def total_pending(self) -> int:
        with self.lock:
            return sum(len(queue) for queue in self._queues.values())
