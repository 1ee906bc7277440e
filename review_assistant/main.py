"""
Repository Review Assistant - FastAPI Application Entry Point

Usage:
    uvicorn review_assistant.main:app --reload

Or:
    python -m review_assistant.main
"""

import logging
import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from review_assistant.core.config import get_settings
from review_assistant.core.dependencies import get_database
from review_assistant.api.routes import (
    analysis_router,
    auth_router,
    health_router,
    repositories_router,
)
from review_assistant.api.middleware.error_handler import (
    AppException,
    app_exception_handler,
    http_exception_handler,
    validation_exception_handler,
    generic_exception_handler,
)


logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger("review_assistant")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    - Startup: create database tables
    - Shutdown: release database connections
    """
    settings = get_settings()
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Environment: {settings.environment}")
    if not settings.anthropic_api_key:
        logger.warning("ANTHROPIC_API_KEY is not set; analysis requests will fail")

    database = get_database()

    yield

    logger.info("Shutting down application...")
    database.dispose()


def create_app() -> FastAPI:
    """
    Application factory function.

    Creates and configures the FastAPI application.
    """
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="""
## Repository Review Assistant API

Sign in with GitHub, browse a repository, get AI code reviews and apply
suggested edits back to GitHub.

### Quick Start
1. GET `/auth/github` to sign in
2. GET `/api/repositories` to pick a repository
3. POST `/api/analyze` to fetch its files
4. POST `/api/chat` to review or discuss a file
5. POST `/api/repositories/update` to commit a change
        """,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # Configure CORS (cookies need an explicit origin list)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    # Register exception handlers
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

    # Register routers
    app.include_router(auth_router)
    app.include_router(health_router, prefix=settings.api_prefix)
    app.include_router(repositories_router, prefix=settings.api_prefix)
    app.include_router(analysis_router, prefix=settings.api_prefix)

    @app.get("/", tags=["Root"])
    async def root():
        """Root endpoint with API information."""
        return {
            "name": settings.app_name,
            "version": settings.app_version,
            "docs": "/docs",
            "health": f"{settings.api_prefix}/health"
        }

    return app


app = create_app()


def main():
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "review_assistant.main:app",
        host=settings.server_host,
        port=settings.server_port,
        reload=settings.debug,
        log_level="debug" if settings.debug else "info"
    )


if __name__ == "__main__":
    main()
