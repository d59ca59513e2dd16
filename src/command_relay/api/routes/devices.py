"""Device endpoints for listing, status, and command polling."""

from fastapi import APIRouter, Depends, HTTPException, status

from ...core import ControlPlane, DeviceNotFoundError
from ..dependencies import get_control_plane
from ..schemas import (
    CommandEnvelopeSchema,
    DeviceListResponse,
    DeviceStatusResponse,
    ErrorResponse,
    PollCommandsResponse,
)

router = APIRouter()


@router.get(
    "/devices",
    response_model=DeviceListResponse,
    summary="List registered devices",
    description="List every device currently known, online or offline",
)
async def list_devices(
    control_plane: ControlPlane = Depends(get_control_plane),
) -> DeviceListResponse:
    devices = control_plane.list_registered()
    return DeviceListResponse(devices=devices, total=len(devices))


@router.get(
    "/devices/{device_id}/status",
    response_model=DeviceStatusResponse,
    responses={404: {"model": ErrorResponse, "description": "Device not registered or evicted"}},
    summary="Get device status",
    description="Report whether a device is online and when it was last seen",
)
async def get_device_status(
    device_id: str,
    control_plane: ControlPlane = Depends(get_control_plane),
) -> DeviceStatusResponse:
    """
    Get the derived status of a device.

    Raises:
        HTTPException: 404 if the device was never registered or has been evicted
    """
    try:
        info = control_plane.get_status(device_id)
    except DeviceNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Device not found: {device_id}",
        )

    return DeviceStatusResponse(**info.to_dict())


@router.get(
    "/devices/{device_id}/commands",
    response_model=PollCommandsResponse,
    summary="Poll pending commands",
    description=(
        "Called by agents: marks the device as seen and returns every pending "
        "command in enqueue order. Unknown devices receive an empty list."
    ),
)
async def poll_commands(
    device_id: str,
    control_plane: ControlPlane = Depends(get_control_plane),
) -> PollCommandsResponse:
    envelopes = control_plane.poll(device_id)
    return PollCommandsResponse(
        commands=[CommandEnvelopeSchema(**envelope.to_dict()) for envelope in envelopes]
    )
