"""FastAPI dependency injection for control plane access."""

from typing import Optional

from ..core import ControlPlane, ExpirySweeper

# Global ControlPlane instance (set during app startup)
_control_plane_instance: Optional[ControlPlane] = None

# Global ExpirySweeper instance (set during app startup)
_sweeper_instance: Optional[ExpirySweeper] = None


def set_control_plane_instance(control_plane: Optional[ControlPlane]) -> None:
    """
    Set the global ControlPlane instance.

    This is called during application startup to make the control plane
    available to all API routes.

    Args:
        control_plane: The ControlPlane instance
    """
    global _control_plane_instance
    _control_plane_instance = control_plane


def set_sweeper_instance(sweeper: Optional[ExpirySweeper]) -> None:
    """
    Set the global ExpirySweeper instance.

    Args:
        sweeper: The ExpirySweeper instance
    """
    global _sweeper_instance
    _sweeper_instance = sweeper


def get_control_plane() -> ControlPlane:
    """
    Dependency to get the ControlPlane instance.

    Returns:
        ControlPlane instance

    Raises:
        RuntimeError: If the ControlPlane instance has not been set

    Example:
        ```python
        @router.get("/devices")
        def list_devices(control_plane: ControlPlane = Depends(get_control_plane)):
            return control_plane.list_registered()
        ```
    """
    if _control_plane_instance is None:
        raise RuntimeError("ControlPlane instance not initialized")
    return _control_plane_instance


def get_sweeper() -> Optional[ExpirySweeper]:
    """Dependency to get the ExpirySweeper instance, if one is running."""
    return _sweeper_instance
