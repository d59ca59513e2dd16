"""FastAPI application factory and configuration."""

import logging
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from prometheus_fastapi_instrumentator import Instrumentator
from starlette.exceptions import HTTPException as StarletteHTTPException

from .schemas import ErrorResponse

logger = logging.getLogger(__name__)


def create_app(
    title: str = "Command Relay",
    version: str = "1.0.0",
    enable_metrics: bool = True,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        title: API title for OpenAPI documentation
        version: API version
        enable_metrics: Whether to enable Prometheus metrics

    Returns:
        Configured FastAPI application
    """
    app = FastAPI(
        title=title,
        version=version,
        description="""
# Command Relay

Control plane for agents that cannot accept inbound connections. Agents
register, then poll for the commands a console has queued for them.

## Flow

1. Agent announces itself: `POST /webhook/register` with `{"content": "REGISTRATION:PCAB12345"}`
2. Console lists devices: `GET /api/v1/devices`
3. Console queues a command: `POST /api/v1/commands` with `{"device_id": "PCAB12345", "command": "..."}`
4. Agent polls: `GET /api/v1/devices/PCAB12345/commands` returns every pending command once

## Presence

A device is `online` while it has been heard from within the online window
(default 5 minutes) and `offline` afterwards. Devices silent for longer than
the eviction window (default 1 hour) are removed together with their pending
commands and must register again.

## Storage

State is held in memory only and is rebuilt from agent traffic after a restart.

## Endpoint paths

Only the registration webhook keeps its legacy path. Agents and consoles built
against the earlier relay must switch to the versioned paths:

| Legacy | Current |
|---|---|
| `GET /api/check-registrations` | `GET /api/v1/devices` |
| `POST /api/send-command` (`deviceCode`) | `POST /api/v1/commands` (`device_id`) |
| `GET /api/poll-commands/{deviceCode}` | `GET /api/v1/devices/{device_id}/commands` |
| `GET /api/device-status/{deviceCode}` | `GET /api/v1/devices/{device_id}/status` |

Errors are returned as `{"error": "...", "detail": ...}`.
        """,
        license_info={
            "name": "MIT",
        },
        openapi_tags=[
            {
                "name": "health",
                "description": "Health check endpoints for monitoring system status",
            },
            {
                "name": "registration",
                "description": "Agent registration webhook",
            },
            {
                "name": "devices",
                "description": "Registered devices, status, and command polling",
            },
            {
                "name": "commands",
                "description": "Queue commands for devices",
            },
        ],
    )

    # =========================================================================
    # CORS Middleware
    # =========================================================================
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # =========================================================================
    # Exception Handlers
    # =========================================================================

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        """Render HTTP errors raised by routes as ErrorResponse."""
        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(error=str(exc.detail)).model_dump(),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Handle request validation errors."""
        errors = []
        for error in exc.errors():
            error_dict = {
                "loc": list(error.get("loc", [])),
                "msg": str(error.get("msg", "")),
                "type": str(error.get("type", "")),
            }
            if "input" in error:
                error_dict["input"] = str(error["input"])
            errors.append(error_dict)

        logger.warning(f"Validation error on {request.url}: {len(errors)} error(s)")
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content=ErrorResponse(error="Validation error", detail=errors).model_dump(),
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        """Handle unexpected exceptions."""
        logger.error(f"Unexpected error on {request.url}: {exc}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=ErrorResponse(
                error="Internal server error",
                detail=str(exc) if logger.isEnabledFor(logging.DEBUG) else None,
            ).model_dump(),
        )

    # =========================================================================
    # Import and Include Routers
    # =========================================================================

    from .routes import commands, devices, health, registration

    app.include_router(registration.router, tags=["registration"])
    app.include_router(health.router, prefix="/api/v1", tags=["health"])
    app.include_router(devices.router, prefix="/api/v1", tags=["devices"])
    app.include_router(commands.router, prefix="/api/v1", tags=["commands"])

    # =========================================================================
    # Prometheus Metrics
    # =========================================================================

    if enable_metrics:
        instrumentator = Instrumentator(
            should_group_status_codes=True,
            should_ignore_untemplated=True,
            should_respect_env_var=False,
            should_instrument_requests_inprogress=True,
            excluded_handlers=["/metrics"],
            inprogress_name="relay_http_inprogress",
            inprogress_labels=True,
        )
        instrumentator.instrument(app).expose(app, endpoint="/metrics")
        logger.info("Prometheus metrics enabled at /metrics")

    logger.info(f"FastAPI application created: {title} v{version}")

    return app
