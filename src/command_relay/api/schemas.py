"""Pydantic schemas for API request and response validation."""

from datetime import datetime
from typing import Any, List, Literal, Optional
from pydantic import BaseModel, Field


# ============================================================================
# Common/Shared Schemas
# ============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""

    error: str = Field(..., description="Error message")
    detail: Optional[Any] = Field(None, description="Additional error details")


# ============================================================================
# Registration Schemas
# ============================================================================

class RegistrationRequest(BaseModel):
    """Raw registration announcement sent by an agent."""

    content: Optional[str] = Field(
        None,
        description="Registration content of the form 'REGISTRATION:<device code>'",
        examples=["REGISTRATION:PCAB12345"],
    )


class RegistrationResponse(BaseModel):
    """Response model for a registration."""

    success: bool
    message: str
    device_id: Optional[str] = None


# ============================================================================
# Device Schemas
# ============================================================================

class DeviceListResponse(BaseModel):
    """Response model for the registered device list."""

    devices: List[str]
    total: int


class DeviceStatusResponse(BaseModel):
    """Response model for a device status query."""

    found: bool = True
    device_id: str
    status: Literal["online", "offline"]
    last_seen: datetime


# ============================================================================
# Command Schemas
# ============================================================================

class EnqueueCommandRequest(BaseModel):
    """Request model for queuing a command."""

    device_id: str = Field(..., min_length=1, description="Target device code")
    command: Any = Field(..., description="Opaque command payload delivered as-is")


class EnqueueCommandResponse(BaseModel):
    """Response model for a queued command."""

    success: bool
    message: str
    command_id: str


class CommandEnvelopeSchema(BaseModel):
    """A command delivered to a polling device."""

    id: str
    command: Any
    enqueued_at: datetime


class PollCommandsResponse(BaseModel):
    """Response model for a device poll."""

    commands: List[CommandEnvelopeSchema]


# ============================================================================
# Health Schemas
# ============================================================================

class HealthCheckResponse(BaseModel):
    """Response model for the health check."""

    status: str
    uptime_seconds: float
    devices_registered: int
    devices_online: int
    commands_pending: int
    sweeper_running: bool
