"""Registration webhook called by agents announcing themselves."""

from fastapi import APIRouter, Depends, HTTPException, status

from ...core import ControlPlane, InvalidFormatError
from ..dependencies import get_control_plane
from ..schemas import ErrorResponse, RegistrationRequest, RegistrationResponse

router = APIRouter()


@router.post(
    "/webhook/register",
    response_model=RegistrationResponse,
    responses={400: {"model": ErrorResponse, "description": "Malformed registration content"}},
    summary="Register a device",
    description="Register (or refresh) a device from 'REGISTRATION:<device code>' content",
)
async def register_device(
    request: RegistrationRequest,
    control_plane: ControlPlane = Depends(get_control_plane),
) -> RegistrationResponse:
    """
    Register a device announced by an agent.

    Raises:
        HTTPException: 400 if the registration content or device code is malformed
    """
    try:
        record = control_plane.register(request.content)
    except InvalidFormatError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )

    return RegistrationResponse(
        success=True,
        message="Device registered",
        device_id=record.device_id,
    )
