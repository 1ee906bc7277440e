"""
Dependencies - Dependency injection for services and components.

Process-wide objects (database, stores, LLM client) are created once and
cached. GitHub clients are per request, built from the caller's token.
Tests replace any of these through ``app.dependency_overrides``.
"""

from functools import lru_cache
from typing import Callable, Iterator, Optional

from fastapi import Depends, Request

from review_assistant.core.auth import AuthContext, require_authenticated
from review_assistant.core.config import get_settings
from review_assistant.db.database import Database
from review_assistant.db.store import AnalysisStore, UserStore
from review_assistant.services.analysis_service import AnalysisService, AnalysisServiceConfig
from review_assistant.services.auth_service import AuthService
from review_assistant.services.github_client import (
    GitHubClient,
    GitHubClientConfig,
    GitHubOAuthClient,
)
from review_assistant.services.llm_service import LLMService, LLMServiceConfig
from review_assistant.services.repo_service import RepoService, RepoServiceConfig


GitHubClientFactory = Callable[[str], GitHubClient]


@lru_cache()
def get_database() -> Database:
    """Get database instance (tables created on first use)."""
    settings = get_settings()
    database = Database(settings.database_url)
    database.create_all()
    return database


@lru_cache()
def get_user_store() -> UserStore:
    settings = get_settings()
    return UserStore(get_database(), session_ttl_hours=settings.session_ttl_hours)


@lru_cache()
def get_analysis_store() -> AnalysisStore:
    return AnalysisStore(get_database())


@lru_cache()
def get_llm_service() -> LLMService:
    """Get LLM service instance."""
    settings = get_settings()
    config = LLMServiceConfig(
        api_key=settings.anthropic_api_key,
        model=settings.llm_model,
        max_tokens=settings.llm_max_tokens,
        timeout_seconds=settings.llm_timeout_seconds,
    )
    return LLMService(config=config)


@lru_cache()
def _github_client_config() -> GitHubClientConfig:
    settings = get_settings()
    return GitHubClientConfig(
        api_url=settings.github_api_url,
        oauth_url=settings.github_oauth_url,
        timeout_seconds=settings.github_timeout_seconds,
    )


def get_github_client_factory() -> GitHubClientFactory:
    """Return a callable building a GitHub client for an access token."""
    config = _github_client_config()

    def factory(access_token: str) -> GitHubClient:
        return GitHubClient(access_token, config=config)

    return factory


@lru_cache()
def get_oauth_client() -> GitHubOAuthClient:
    settings = get_settings()
    return GitHubOAuthClient(
        client_id=settings.github_client_id,
        client_secret=settings.github_client_secret,
        redirect_uri=f"{settings.backend_url}/auth/github/callback",
        scope=settings.github_oauth_scope,
        config=_github_client_config(),
    )


def get_auth_service(
    oauth: GitHubOAuthClient = Depends(get_oauth_client),
    users: UserStore = Depends(get_user_store),
    client_factory: GitHubClientFactory = Depends(get_github_client_factory),
) -> AuthService:
    return AuthService(oauth=oauth, users=users, client_factory=client_factory)


def get_optional_auth_context(
    request: Request,
    users: UserStore = Depends(get_user_store),
) -> Optional[AuthContext]:
    """Resolve the session cookie, if any, into an AuthContext."""
    settings = get_settings()
    return users.resolve_session(request.cookies.get(settings.session_cookie_name))


def get_auth_context(
    identity: Optional[AuthContext] = Depends(get_optional_auth_context),
) -> AuthContext:
    """Require a signed-in user; raises UnauthorizedError otherwise."""
    return require_authenticated(identity)


def get_repo_service(
    identity: AuthContext = Depends(get_auth_context),
    client_factory: GitHubClientFactory = Depends(get_github_client_factory),
) -> Iterator[RepoService]:
    """Repository service bound to the caller's GitHub token."""
    settings = get_settings()
    client = client_factory(identity.access_token)
    config = RepoServiceConfig(
        max_depth=settings.tree_max_depth,
        max_files=settings.tree_max_files,
        max_concurrency=settings.github_max_concurrency,
    )
    try:
        yield RepoService(client, config=config)
    finally:
        client.close()


def get_analysis_service(
    llm: LLMService = Depends(get_llm_service),
    store: AnalysisStore = Depends(get_analysis_store),
) -> AnalysisService:
    settings = get_settings()
    config = AnalysisServiceConfig(
        max_concurrency=settings.analysis_max_concurrency,
        batch_max_tokens=settings.llm_batch_max_tokens,
    )
    return AnalysisService(llm=llm, store=store, config=config)
