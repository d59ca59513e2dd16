"""
Data models for the device directory and command queues.
"""
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


def utcnow() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def new_envelope_id() -> str:
    """Generate a short opaque envelope identifier."""
    return uuid.uuid4().hex[:12]


class DeviceStatus(str, Enum):
    """Liveness of a device, derived from its last contact."""
    ONLINE = "online"
    OFFLINE = "offline"


@dataclass
class DeviceRecord:
    """A registered device and the time it was last heard from."""

    device_id: str
    last_seen: datetime
    registered_at: datetime


@dataclass
class DeviceStatusInfo:
    """Point-in-time status of a device."""

    device_id: str
    status: DeviceStatus
    last_seen: datetime

    @property
    def online(self) -> bool:
        return self.status == DeviceStatus.ONLINE

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for API response."""
        return {
            "device_id": self.device_id,
            "status": self.status.value,
            "last_seen": self.last_seen.isoformat(),
        }


@dataclass
class CommandEnvelope:
    """A command waiting to be picked up by its device.

    The payload is opaque and is never inspected.
    """

    payload: Any
    id: str = field(default_factory=new_envelope_id)
    enqueued_at: datetime = field(default_factory=utcnow)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "id": self.id,
            "command": self.payload,
            "enqueued_at": self.enqueued_at.isoformat(),
        }


@dataclass
class ControlPlaneStats:
    """Counters describing the current in-memory state."""

    devices_registered: int
    devices_online: int
    commands_pending: int

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for API response."""
        return {
            "devices_registered": self.devices_registered,
            "devices_online": self.devices_online,
            "commands_pending": self.commands_pending,
        }
