"""
Services Layer for the Repository Review Assistant
==================================================

Services handle the core business logic and external integrations:

- GitHubClient: GitHub REST API (contents, repositories, OAuth)
- RepoService: Tree fetching and file updates
- LLMService: Text generation (Anthropic Messages API)
- AnalysisService: Reviews, chat and persisted batch analyses
- AuthService: Sign-in and sessions

DEPENDENCY FLOW:
----------------
    GitHubClient ──► RepoService
         │
         └──► AuthService ◄── UserStore

    LLMService ──┐
                 ├──► AnalysisService
    AnalysisStore┘
"""

from review_assistant.services.github_client import GitHubClient, GitHubOAuthClient
from review_assistant.services.llm_service import LLMService
from review_assistant.services.repo_service import RepoService
from review_assistant.services.analysis_service import AnalysisService
from review_assistant.services.auth_service import AuthService

__all__ = [
    "GitHubClient",
    "GitHubOAuthClient",
    "LLMService",
    "RepoService",
    "AnalysisService",
    "AuthService",
]
