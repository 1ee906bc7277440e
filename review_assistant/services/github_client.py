"""
GitHub Client - Thin wrapper over the GitHub REST API.

Handles:
- Repository contents (list directory, read file, write file)
- Repositories of the authenticated user
- The user profile and e-mail addresses
- The OAuth web flow (authorize URL, code exchange)

HTTP is done with ``requests``; the public coroutine methods run the blocking
call in a worker thread so they can be awaited from request handlers.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union
from urllib.parse import quote, urlencode

import requests

from review_assistant.api.middleware.error_handler import GitHubAPIError


logger = logging.getLogger(__name__)


@dataclass
class GitHubClientConfig:
    """Configuration for the GitHub client."""
    api_url: str = "https://api.github.com"
    oauth_url: str = "https://github.com/login/oauth"
    timeout_seconds: float = 30.0
    api_version: str = "2022-11-28"


class GitHubClient:
    """
    REST client bound to one user's access token.

    Every failure (network error, timeout, non-2xx) surfaces as
    ``GitHubAPIError`` carrying the HTTP status when there was one.
    """

    def __init__(
        self,
        access_token: str,
        config: Optional[GitHubClientConfig] = None,
        session: Optional[requests.Session] = None,
    ):
        self.config = config or GitHubClientConfig()
        self.session = session or requests.Session()
        self.session.headers.update({
            "Accept": "application/vnd.github+json",
            "Authorization": f"Bearer {access_token}",
            "X-GitHub-Api-Version": self.config.api_version,
        })

    # ------------------------------------------------------------------
    # Contents
    # ------------------------------------------------------------------

    async def get_contents(
        self, owner: str, repo: str, path: str = "", ref: Optional[str] = None
    ) -> Union[Dict[str, Any], List[Dict[str, Any]]]:
        """
        Read a path of a repository.

        Returns a list of entries for a directory, or a single object (with
        base64 ``content`` and ``sha``) for a file.
        """
        params = {"ref": ref} if ref else None
        return await asyncio.to_thread(
            self._request, "GET", self._contents_url(owner, repo, path), params=params
        )

    async def put_contents(
        self,
        owner: str,
        repo: str,
        path: str,
        message: str,
        content_b64: str,
        sha: str,
        branch: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Create a commit replacing ``path``; GitHub rejects a stale ``sha``."""
        body = {"message": message, "content": content_b64, "sha": sha}
        if branch:
            body["branch"] = branch
        return await asyncio.to_thread(
            self._request, "PUT", self._contents_url(owner, repo, path), json=body
        )

    # ------------------------------------------------------------------
    # User + repositories
    # ------------------------------------------------------------------

    async def list_user_repos(
        self,
        sort: str = "updated",
        per_page: int = 100,
        affiliation: str = "owner,collaborator",
    ) -> List[Dict[str, Any]]:
        params = {"sort": sort, "per_page": per_page, "affiliation": affiliation}
        return await asyncio.to_thread(
            self._request, "GET", f"{self.config.api_url}/user/repos", params=params
        )

    async def get_authenticated_user(self) -> Dict[str, Any]:
        return await asyncio.to_thread(self._request, "GET", f"{self.config.api_url}/user")

    async def get_user_emails(self) -> List[Dict[str, Any]]:
        return await asyncio.to_thread(
            self._request, "GET", f"{self.config.api_url}/user/emails"
        )

    def close(self) -> None:
        self.session.close()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _contents_url(self, owner: str, repo: str, path: str) -> str:
        base = f"{self.config.api_url}/repos/{quote(owner)}/{quote(repo)}/contents"
        path = path.strip("/")
        return f"{base}/{quote(path, safe='/')}" if path else base

    def _request(self, method: str, url: str, **kwargs) -> Any:
        try:
            response = self.session.request(
                method, url, timeout=self.config.timeout_seconds, **kwargs
            )
        except requests.RequestException as e:
            raise GitHubAPIError(f"GitHub request failed: {method} {url}: {e}") from e

        if response.status_code >= 400:
            raise GitHubAPIError(
                f"GitHub returned {response.status_code} for {method} {url}: "
                f"{_error_message(response)}",
                http_status=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            raise GitHubAPIError(f"Malformed GitHub response for {method} {url}") from e


class GitHubOAuthClient:
    """OAuth web-flow helper (authorize redirect + code exchange)."""

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        redirect_uri: str,
        scope: str = "user:email repo",
        config: Optional[GitHubClientConfig] = None,
    ):
        self.client_id = client_id
        self.client_secret = client_secret
        self.redirect_uri = redirect_uri
        self.scope = scope
        self.config = config or GitHubClientConfig()

    def authorize_url(self, state: str) -> str:
        query = urlencode({
            "client_id": self.client_id,
            "redirect_uri": self.redirect_uri,
            "scope": self.scope,
            "state": state,
        })
        return f"{self.config.oauth_url}/authorize?{query}"

    async def exchange_code(self, code: str) -> str:
        """Exchange an authorization code for an access token."""
        return await asyncio.to_thread(self._exchange_code, code)

    def _exchange_code(self, code: str) -> str:
        try:
            response = requests.post(
                f"{self.config.oauth_url}/access_token",
                data={
                    "client_id": self.client_id,
                    "client_secret": self.client_secret,
                    "code": code,
                    "redirect_uri": self.redirect_uri,
                },
                headers={"Accept": "application/json"},
                timeout=self.config.timeout_seconds,
            )
        except requests.RequestException as e:
            raise GitHubAPIError(f"OAuth code exchange failed: {e}") from e

        if response.status_code >= 400:
            raise GitHubAPIError(
                f"OAuth code exchange returned {response.status_code}",
                http_status=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise GitHubAPIError("OAuth code exchange returned invalid JSON") from e
        if not isinstance(payload, dict):
            payload = {}
        token = payload.get("access_token")
        if not token:
            # GitHub reports bad codes with 200 + {"error": ...}
            raise GitHubAPIError(
                f"OAuth code exchange rejected: {payload.get('error', 'no token')}"
            )
        return token


def _error_message(response: requests.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        return response.reason or ""
    if isinstance(data, dict):
        return data.get("message", response.reason or "")
    return response.reason or ""
