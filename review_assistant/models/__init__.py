"""
Data Models for the Repository Review Assistant
===============================================

Organized into three categories:
- schemas: Core domain models used across the application
- requests: API request validation models
- responses: API response models
"""

from review_assistant.models.schemas import (
    AnalysisResult,
    AnalysisStatus,
    ChatMessage,
    ChatRole,
    CodeChange,
    NodeKind,
    Repository,
    StoredAnalysis,
    SuggestedChange,
    TreeNode,
    UserProfile,
)

from review_assistant.models.requests import (
    AnalyzeRequest,
    BatchAnalysisRequest,
    ChatAction,
    ChatContext,
    ChatRequest,
    FileInput,
    SelectRepositoryRequest,
    UpdateFileRequest,
)

from review_assistant.models.responses import (
    AuthStatusResponse,
    ChatResponse,
    ErrorResponse,
    HealthResponse,
    ReadinessResponse,
    SelectRepositoryResponse,
    SuccessResponse,
    TreeResponse,
)

__all__ = [
    # Schemas
    "AnalysisResult",
    "AnalysisStatus",
    "ChatMessage",
    "ChatRole",
    "CodeChange",
    "NodeKind",
    "Repository",
    "StoredAnalysis",
    "SuggestedChange",
    "TreeNode",
    "UserProfile",
    # Requests
    "AnalyzeRequest",
    "BatchAnalysisRequest",
    "ChatAction",
    "ChatContext",
    "ChatRequest",
    "FileInput",
    "SelectRepositoryRequest",
    "UpdateFileRequest",
    # Responses
    "AuthStatusResponse",
    "ChatResponse",
    "ErrorResponse",
    "HealthResponse",
    "ReadinessResponse",
    "SelectRepositoryResponse",
    "SuccessResponse",
    "TreeResponse",
]
