"""
Error Handler Middleware - Global exception handling for the API.

Catches exceptions and returns consistent error responses:

    {"success": false, "error": "...", "error_code": "...", "timestamp": "..."}

Upstream failures (GitHub, LLM) are reported with a generic message; the
original cause is only logged server-side.
"""

import logging
import traceback
from datetime import datetime

from fastapi import Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from review_assistant.core.config import get_settings


logger = logging.getLogger(__name__)


class AppException(Exception):
    """Base exception for application errors."""

    def __init__(
        self,
        message: str,
        error_code: str = "INTERNAL_ERROR",
        status_code: int = 500,
        details: dict = None
    ):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class UnauthorizedError(AppException):
    """Raised when no authenticated identity is attached to the request."""

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(
            message=message,
            error_code="UNAUTHORIZED",
            status_code=401
        )


class UpstreamServiceError(AppException):
    """Raised when a remote API (GitHub or the LLM provider) fails."""

    def __init__(self, message: str, service: str = "upstream", status_code: int = 502):
        super().__init__(
            message=message,
            error_code="UPSTREAM_ERROR",
            status_code=status_code,
            details={"service": service}
        )


class GitHubAPIError(UpstreamServiceError):
    """Raised when the GitHub REST API returns an error or is unreachable."""

    def __init__(self, message: str, http_status: int = None):
        super().__init__(message=message, service="github")
        self.http_status = http_status
        self.details["http_status"] = http_status


class LLMError(UpstreamServiceError):
    """Raised when the text-generation API call fails."""

    def __init__(self, message: str):
        super().__init__(message=message, service="llm")


class FileConflictError(AppException):
    """Raised when a file write is rejected because its version marker is stale."""

    def __init__(self, path: str):
        super().__init__(
            message=f"File was modified remotely: {path}",
            error_code="FILE_CONFLICT",
            status_code=409,
            details={"path": path}
        )


class TreeTooLargeError(AppException):
    """Raised when a repository tree exceeds the configured depth or file limit."""

    def __init__(self, message: str, limit: str):
        super().__init__(
            message=message,
            error_code="TREE_TOO_LARGE",
            status_code=413,
            details={"limit": limit}
        )


class AnalysisNotFoundError(AppException):
    """Raised when a stored analysis does not exist for the caller."""

    def __init__(self, analysis_id: int):
        super().__init__(
            message=f"Analysis not found: {analysis_id}",
            error_code="ANALYSIS_NOT_FOUND",
            status_code=404,
            details={"analysis_id": analysis_id}
        )


def create_error_response(
    message: str,
    error_code: str = "INTERNAL_ERROR",
    status_code: int = 500,
    details: dict = None,
    always_include_details: bool = False
) -> JSONResponse:
    """Create a standardized error response."""
    settings = get_settings()

    content = {
        "success": False,
        "error": message,
        "error_code": error_code,
        "timestamp": datetime.utcnow().isoformat()
    }

    # Include details in debug mode
    if details and (settings.debug or always_include_details):
        content["details"] = details

    return JSONResponse(
        status_code=status_code,
        content=content
    )


async def app_exception_handler(
    request: Request,
    exc: AppException
) -> JSONResponse:
    """Handle application-specific exceptions."""
    if isinstance(exc, UpstreamServiceError):
        logger.error(
            "Upstream failure on %s %s: %s",
            request.method, request.url.path, exc.message
        )
        return create_error_response(
            message=f"{exc.details.get('service', 'upstream')} request failed",
            error_code=exc.error_code,
            status_code=exc.status_code,
            details=exc.details
        )

    return create_error_response(
        message=exc.message,
        error_code=exc.error_code,
        status_code=exc.status_code,
        details=exc.details
    )


async def http_exception_handler(
    request: Request,
    exc: StarletteHTTPException
) -> JSONResponse:
    """Handle HTTP exceptions."""
    return create_error_response(
        message=str(exc.detail),
        error_code="HTTP_ERROR",
        status_code=exc.status_code
    )


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError
) -> JSONResponse:
    """Handle request validation errors."""
    errors = []
    for error in exc.errors():
        loc = " -> ".join(str(l) for l in error["loc"])
        errors.append(f"{loc}: {error['msg']}")

    return create_error_response(
        message="Validation error",
        error_code="VALIDATION_ERROR",
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        details={"errors": errors},
        always_include_details=True
    )


async def generic_exception_handler(
    request: Request,
    exc: Exception
) -> JSONResponse:
    """Handle unexpected exceptions."""
    settings = get_settings()

    traceback_str = "".join(
        traceback.format_exception(type(exc), exc, exc.__traceback__)
    )
    logger.error("Unexpected error: %s", traceback_str)

    details = None
    if settings.debug:
        details = {
            "exception_type": type(exc).__name__,
            "traceback": traceback_str
        }

    return create_error_response(
        message="An unexpected error occurred",
        error_code="INTERNAL_ERROR",
        status_code=500,
        details=details
    )
