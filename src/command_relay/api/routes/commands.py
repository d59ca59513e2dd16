"""Command endpoints used by the console to queue work for devices."""

from fastapi import APIRouter, Depends, HTTPException, status

from ...core import ControlPlane, DeviceUnknownError
from ..dependencies import get_control_plane
from ..schemas import EnqueueCommandRequest, EnqueueCommandResponse, ErrorResponse

router = APIRouter()


@router.post(
    "/commands",
    response_model=EnqueueCommandResponse,
    responses={404: {"model": ErrorResponse, "description": "Device not registered"}},
    summary="Queue a command",
    description="Queue an opaque command for a registered device to pick up on its next poll",
)
async def enqueue_command(
    request: EnqueueCommandRequest,
    control_plane: ControlPlane = Depends(get_control_plane),
) -> EnqueueCommandResponse:
    """
    Queue a command for a device.

    Args:
        request: Target device and opaque command payload
        control_plane: Control plane instance

    Returns:
        Response with the generated command id

    Raises:
        HTTPException: 404 if the device is not registered
    """
    try:
        command_id = control_plane.enqueue(request.device_id, request.command)
    except DeviceUnknownError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Device not found: {request.device_id}",
        )

    return EnqueueCommandResponse(
        success=True,
        message="Command queued",
        command_id=command_id,
    )
