"""
Device directory tracking registration and liveness of remote agents.
"""
import logging
import threading
from datetime import datetime, timedelta
from typing import Callable, Optional

from .errors import DeviceNotFoundError, InvalidFormatError
from .models import DeviceRecord, DeviceStatus, DeviceStatusInfo, utcnow

logger = logging.getLogger(__name__)

DEFAULT_DEVICE_CODE_PREFIX = "PC"
DEFAULT_DEVICE_CODE_MIN_LENGTH = 8


class DeviceDirectory:
    """
    In-memory registry of devices keyed by device code.

    Status is never stored: it is derived from ``last_seen`` and the
    current time each time it is requested. The directory owns the lock
    that guards all shared coordination state; the command queue store
    borrows it so that directory and queue mutations are atomic together.
    """

    def __init__(
        self,
        online_window_seconds: float = 300.0,
        device_code_prefix: str = DEFAULT_DEVICE_CODE_PREFIX,
        device_code_min_length: int = DEFAULT_DEVICE_CODE_MIN_LENGTH,
        clock: Callable[[], datetime] = utcnow,
    ):
        """
        Initialize the directory.

        Args:
            online_window_seconds: Silence after which a device is reported offline
            device_code_prefix: Tag every device code must start with
            device_code_min_length: Minimum length of a device code
            clock: Callable returning the current aware UTC datetime
        """
        self.online_window = timedelta(seconds=online_window_seconds)
        self.device_code_prefix = device_code_prefix
        self.device_code_min_length = device_code_min_length
        self.clock = clock
        self.lock = threading.RLock()
        self._devices: dict[str, DeviceRecord] = {}

    def is_valid_device_id(self, device_id: Optional[str]) -> bool:
        """Check a device code against the identifier format."""
        if not device_id:
            return False
        return (
            device_id.startswith(self.device_code_prefix)
            and len(device_id) >= self.device_code_min_length
        )

    def register(self, device_id: str) -> DeviceRecord:
        """
        Register a device or refresh an existing registration.

        Only the directory entry is created here. The device cannot receive
        commands until its queue is opened with CommandQueueStore.open;
        ControlPlane.register_device does both under the shared lock.

        Args:
            device_id: Device code announced by the agent

        Returns:
            The device record

        Raises:
            InvalidFormatError: If the device code fails the format check
        """
        if not self.is_valid_device_id(device_id):
            raise InvalidFormatError(f"Invalid device code: {device_id!r}")

        with self.lock:
            now = self.clock()
            record = self._devices.get(device_id)
            if record is None:
                record = DeviceRecord(device_id=device_id, last_seen=now, registered_at=now)
                self._devices[device_id] = record
                logger.info(f"New device registered: {device_id}")
            else:
                record.last_seen = now
                logger.debug(f"Device re-registered: {device_id}")
            return record

    def touch(self, device_id: str) -> DeviceRecord:
        """
        Refresh the last-seen timestamp of a registered device.

        Raises:
            DeviceNotFoundError: If the device is not registered
        """
        with self.lock:
            record = self._devices.get(device_id)
            if record is None:
                raise DeviceNotFoundError(device_id)
            record.last_seen = self.clock()
            return record

    def status_of(self, device_id: str) -> Optional[DeviceStatusInfo]:
        """
        Compute the current status of a device.

        Returns:
            Status info, or None if the device was never registered or has been evicted
        """
        with self.lock:
            record = self._devices.get(device_id)
            if record is None:
                return None
            last_seen = record.last_seen
            now = self.clock()

        status = DeviceStatus.ONLINE if now - last_seen < self.online_window else DeviceStatus.OFFLINE
        return DeviceStatusInfo(device_id=device_id, status=status, last_seen=last_seen)

    def list_all(self) -> list[str]:
        """Snapshot of all registered device codes."""
        with self.lock:
            return list(self._devices)

    def evict(self, device_id: str) -> bool:
        """
        Remove a device record unconditionally.

        Returns:
            True if a record was removed
        """
        with self.lock:
            return self._devices.pop(device_id, None) is not None

    def contains(self, device_id: str) -> bool:
        with self.lock:
            return device_id in self._devices

    def idle_seconds(self, device_id: str) -> Optional[float]:
        """Seconds since the device was last heard from, None if unknown."""
        with self.lock:
            record = self._devices.get(device_id)
            if record is None:
                return None
            return (self.clock() - record.last_seen).total_seconds()

    def count(self) -> int:
        with self.lock:
            return len(self._devices)

    def count_online(self) -> int:
        """Number of devices heard from within the online window."""
        with self.lock:
            now = self.clock()
            return sum(
                1 for record in self._devices.values()
                if now - record.last_seen < self.online_window
            )
