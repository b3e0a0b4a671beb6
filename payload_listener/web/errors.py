from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from payload_listener.exceptions import ListenerError


class ErrorResponse(BaseModel):
    """Standard error response"""

    error: str = Field(..., description="Machine readable error code")
    message: str = Field(..., description="Human readable error message")
    details: dict[str, Any] = Field(default_factory=dict)
    timestamp: datetime
    path: str


def install_exception_handlers(app: FastAPI) -> None:
    """Install handlers that translate ListenerError to JSON responses."""

    @app.exception_handler(ListenerError)
    async def _handle_listener_error(request: Request, exc: ListenerError):
        payload = ErrorResponse(
            error=exc.error_code,
            message=exc.message,
            details=exc.details,
            timestamp=datetime.now(UTC),
            path=str(request.url.path),
        )
        return JSONResponse(
            status_code=getattr(exc, "status_code", 500),
            content=payload.model_dump(mode="json"),
        )
