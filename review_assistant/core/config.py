"""
Application Configuration - Environment settings and constants.

Loads configuration from environment variables with sensible defaults.
Uses Pydantic Settings for validation and type safety.

Required for a working deployment:
    GITHUB_CLIENT_ID, GITHUB_CLIENT_SECRET, ANTHROPIC_API_KEY
"""

from typing import List
from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Usage:
        from review_assistant.core.config import get_settings
        settings = get_settings()
    """

    # Application
    app_name: str = "Repository Review Assistant"
    app_version: str = "1.0.0"
    debug: bool = False
    environment: str = "development"
    api_prefix: str = "/api"

    # HTTP Server Configuration
    server_host: str = "0.0.0.0"
    server_port: int = 3001
    frontend_url: str = "http://localhost:5173"
    backend_url: str = "http://localhost:3001"
    allowed_origins: List[str] = ["http://localhost:5173"]

    # GitHub OAuth + REST
    github_client_id: str = ""
    github_client_secret: str = ""
    github_api_url: str = "https://api.github.com"
    github_oauth_url: str = "https://github.com/login/oauth"
    github_oauth_scope: str = "user:email repo"
    github_timeout_seconds: float = 30.0
    github_max_concurrency: int = 8

    # Tree fetch guards
    tree_max_depth: int = 20
    tree_max_files: int = 2000

    # LLM Configuration
    anthropic_api_key: str = ""
    llm_model: str = "claude-3-5-sonnet-latest"
    llm_max_tokens: int = 2000
    llm_batch_max_tokens: int = 1000
    llm_timeout_seconds: float = 120.0
    analysis_max_concurrency: int = 4

    # Persistence
    database_url: str = "sqlite:///./data/review_assistant.db"

    # Sessions
    session_cookie_name: str = "session"
    session_ttl_hours: int = 24
    oauth_state_cookie_name: str = "oauth_state"
    cookie_secure: bool = False

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()
