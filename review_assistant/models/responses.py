"""
API Response Models - Pydantic models for API responses.
"""

from typing import Optional, List, Dict, Any
from pydantic import BaseModel, Field
from datetime import datetime

from review_assistant.models.schemas import (
    AnalysisResult,
    CamelModel,
    CodeChange,
    TreeNode,
    UserProfile,
)


class HealthResponse(BaseModel):
    """Health check response."""
    status: str = "healthy"
    version: str
    environment: str
    timestamp: datetime = Field(default_factory=datetime.utcnow)


class ReadinessResponse(BaseModel):
    """Readiness report; ``checks`` maps each dependency to its state."""
    ready: bool
    checks: Dict[str, bool] = Field(default_factory=dict)
    timestamp: datetime = Field(default_factory=datetime.utcnow)


class AuthStatusResponse(CamelModel):
    authenticated: bool
    user: Optional[UserProfile] = None


class TreeResponse(CamelModel):
    """Top-level entries of a fetched repository tree."""
    files: List[TreeNode] = Field(default_factory=list)


class ChatResponse(CamelModel):
    """
    Response from the chat endpoint.

    Example:
        {
            "message": "OVERVIEW: ...",
            "analysis": {"overview": "...", "analysis": "...", ...},
            "codeChange": null
        }
    """
    message: str
    analysis: Optional[AnalysisResult] = None
    code_change: Optional[CodeChange] = None


class SelectRepositoryResponse(CamelModel):
    repo_name: str
    files: List[Dict[str, Any]] = Field(default_factory=list)


class SuccessResponse(BaseModel):
    success: bool = True


class ErrorResponse(BaseModel):
    """
    Standard error response.

    Example:
        {
            "success": false,
            "error": "Unauthorized",
            "error_code": "UNAUTHORIZED"
        }
    """
    success: bool = False
    error: str
    error_code: Optional[str] = None
    details: Optional[Dict[str, Any]] = None
    timestamp: datetime = Field(default_factory=datetime.utcnow)
