"""
Health Endpoints - Liveness, readiness and version info.

- GET /health   version and environment
- GET /ready    database reachable, GitHub OAuth and LLM credentials present
- GET /live     process is up
"""

import logging
from datetime import datetime

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from review_assistant.core.config import Settings, get_settings
from review_assistant.core.dependencies import get_database, get_llm_service
from review_assistant.db.database import Database
from review_assistant.models.responses import HealthResponse, ReadinessResponse
from review_assistant.services.llm_service import LLMService


logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])


@router.get("/health", response_model=HealthResponse, summary="Health Check")
async def health_check(settings: Settings = Depends(get_settings)) -> HealthResponse:
    return HealthResponse(
        version=settings.app_version,
        environment=settings.environment,
    )


@router.get(
    "/ready",
    response_model=ReadinessResponse,
    summary="Readiness Check",
    responses={503: {"model": ReadinessResponse}},
)
def readiness_check(
    settings: Settings = Depends(get_settings),
    database: Database = Depends(get_database),
    llm: LLMService = Depends(get_llm_service),
):
    """
    Report whether sign-in, reviews and storage can work.

    Answers 503 while any check fails so load balancers hold traffic back.
    """
    checks = {
        "database": database.ping(),
        "github_oauth": bool(settings.github_client_id and settings.github_client_secret),
        "llm": llm.is_configured,
    }
    report = ReadinessResponse(ready=all(checks.values()), checks=checks)
    if not report.ready:
        logger.warning("Not ready: %s", [name for name, ok in checks.items() if not ok])
        return JSONResponse(status_code=503, content=report.model_dump(mode="json"))
    return report


@router.get("/live", summary="Liveness Check")
async def liveness_check() -> dict:
    return {"status": "alive", "timestamp": datetime.utcnow().isoformat()}
