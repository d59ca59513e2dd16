"""Health check endpoints."""

import time
from typing import Optional

from fastapi import APIRouter, Depends

from ...core import ControlPlane, ExpirySweeper
from ..dependencies import get_control_plane, get_sweeper
from ..schemas import HealthCheckResponse

router = APIRouter()

# Track application start time
_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthCheckResponse,
    summary="Overall health check",
    description="Report uptime, device counts, pending commands, and sweeper state",
)
async def health_check(
    control_plane: ControlPlane = Depends(get_control_plane),
    sweeper: Optional[ExpirySweeper] = Depends(get_sweeper),
) -> HealthCheckResponse:
    stats = control_plane.stats()
    sweeper_running = sweeper.running if sweeper else False

    return HealthCheckResponse(
        status="healthy" if sweeper_running else "degraded",
        uptime_seconds=time.time() - _start_time,
        devices_registered=stats.devices_registered,
        devices_online=stats.devices_online,
        commands_pending=stats.commands_pending,
        sweeper_running=sweeper_running,
    )
