"""
API Routes - FastAPI route modules.
"""

from review_assistant.api.routes.health import router as health_router
from review_assistant.api.routes.auth import router as auth_router
from review_assistant.api.routes.repositories import router as repositories_router
from review_assistant.api.routes.analysis import router as analysis_router

__all__ = [
    "health_router",
    "auth_router",
    "repositories_router",
    "analysis_router",
]
