"""
Structured exceptions and error responses for the Gantt scheduler.

The scheduling core never raises for malformed task data; these exceptions
belong to the request layer, where a missing task or an impossible edit is a
client error worth reporting.
"""

from typing import Any, Dict, Optional, List
from fastapi import Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from gantt.logging_config import get_logger

logger = get_logger("error")


# =============================================================================
# Error Response Schema
# =============================================================================

class ErrorDetail(BaseModel):
    """Detail of a single error."""
    loc: Optional[List[str]] = None  # Location of error (e.g., ["body", "task_id"])
    msg: str
    type: str


class ErrorResponse(BaseModel):
    """Structured error response format."""
    error: str  # Error code (e.g., "not_found", "self_dependency")
    message: str
    details: Optional[List[ErrorDetail]] = None


# =============================================================================
# Custom Exceptions
# =============================================================================

class GanttException(Exception):
    """Base exception for all scheduler errors."""

    def __init__(
        self,
        message: str,
        error_code: str = "internal_error",
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: Optional[List[Dict[str, Any]]] = None,
    ):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.details = details
        super().__init__(message)


class TaskNotFoundError(GanttException):
    """The referenced task is not part of the supplied task set."""

    def __init__(self, task_id: str):
        super().__init__(
            message=f"Task with ID {task_id} not found",
            error_code="not_found",
            status_code=status.HTTP_404_NOT_FOUND,
            details=[{
                "loc": ["body", "task_id"],
                "msg": f"No task with ID {task_id} in the submitted tasks",
                "type": "not_found",
            }],
        )
        self.task_id = task_id


class SelfDependencyError(GanttException):
    """Task cannot depend on itself."""

    def __init__(self, task_id: str):
        super().__init__(
            message="A task cannot depend on itself",
            error_code="self_dependency",
            status_code=status.HTTP_400_BAD_REQUEST,
        )
        self.task_id = task_id


class ValidationError(GanttException):
    """Request validation error."""

    def __init__(self, message: str, details: Optional[List[Dict[str, Any]]] = None):
        super().__init__(
            message=message,
            error_code="validation_error",
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            details=details,
        )


# =============================================================================
# Exception Handlers
# =============================================================================

async def gantt_exception_handler(request: Request, exc: GanttException) -> JSONResponse:
    """Handle GanttException and return structured response."""
    logger.warning(f"{exc.error_code}: {exc.message} ({request.method} {request.url.path})")
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": exc.error_code,
            "message": exc.message,
            "details": exc.details,
        },
    )


def register_exception_handlers(app):
    """Register all exception handlers with the FastAPI app."""
    app.add_exception_handler(GanttException, gantt_exception_handler)
