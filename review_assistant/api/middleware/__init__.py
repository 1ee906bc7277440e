"""
API Middleware - Request/response processing middleware.
"""

from review_assistant.api.middleware.error_handler import (
    AppException,
    UnauthorizedError,
    UpstreamServiceError,
    GitHubAPIError,
    LLMError,
    FileConflictError,
    TreeTooLargeError,
    AnalysisNotFoundError,
    app_exception_handler,
    http_exception_handler,
    validation_exception_handler,
    generic_exception_handler,
)

__all__ = [
    "AppException",
    "UnauthorizedError",
    "UpstreamServiceError",
    "GitHubAPIError",
    "LLMError",
    "FileConflictError",
    "TreeTooLargeError",
    "AnalysisNotFoundError",
    "app_exception_handler",
    "http_exception_handler",
    "validation_exception_handler",
    "generic_exception_handler",
]
