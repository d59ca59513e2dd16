"""Exceptions raised by the coordination core."""


class ControlPlaneError(Exception):
    """Base class for all control plane errors."""

    pass


class InvalidFormatError(ControlPlaneError):
    """Raised when registration content or a device code is malformed."""

    pass


class DeviceUnknownError(ControlPlaneError):
    """Raised when a command targets a device that is not registered."""

    def __init__(self, device_id: str):
        self.device_id = device_id
        super().__init__(f"Device not registered: {device_id}")


class DeviceNotFoundError(ControlPlaneError):
    """Raised when no record exists for a device."""

    def __init__(self, device_id: str):
        self.device_id = device_id
        super().__init__(f"Device not found: {device_id}")
