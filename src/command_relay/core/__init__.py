"""
In-memory coordination core for Command Relay.

Tracks registered devices, holds their pending commands, and reclaims
devices that stop polling.
"""

from .control_plane import ControlPlane, parse_registration
from .directory import DeviceDirectory
from .errors import (
    ControlPlaneError,
    DeviceNotFoundError,
    DeviceUnknownError,
    InvalidFormatError,
)
from .models import (
    CommandEnvelope,
    ControlPlaneStats,
    DeviceRecord,
    DeviceStatus,
    DeviceStatusInfo,
)
from .queue_store import CommandQueueStore
from .sweeper import ExpirySweeper

__all__ = [
    "CommandEnvelope",
    "CommandQueueStore",
    "ControlPlane",
    "ControlPlaneError",
    "ControlPlaneStats",
    "DeviceDirectory",
    "DeviceNotFoundError",
    "DeviceRecord",
    "DeviceStatus",
    "DeviceStatusInfo",
    "DeviceUnknownError",
    "ExpirySweeper",
    "InvalidFormatError",
    "parse_registration",
]
