"""
Auth Service - GitHub OAuth sign-in and session tokens.

FLOW:
1. /auth/github            -> redirect to GitHub with a random state
2. /auth/github/callback   -> exchange code, load profile, upsert user
3. A session token is issued and stored in a cookie
4. Later requests resolve the cookie into an AuthContext
"""

import asyncio
import logging
import secrets
from typing import Callable, Optional, Tuple

from review_assistant.api.middleware.error_handler import GitHubAPIError
from review_assistant.core.auth import AuthContext
from review_assistant.db.store import UserStore
from review_assistant.models.schemas import UserProfile
from review_assistant.services.github_client import GitHubClient, GitHubOAuthClient


logger = logging.getLogger(__name__)


class AuthService:
    """Signs users in with GitHub and manages their sessions."""

    def __init__(
        self,
        oauth: GitHubOAuthClient,
        users: UserStore,
        client_factory: Callable[[str], GitHubClient],
    ):
        self.oauth = oauth
        self.users = users
        self.client_factory = client_factory

    def start_login(self) -> Tuple[str, str]:
        """Return the GitHub authorize URL and the state it carries."""
        state = secrets.token_urlsafe(16)
        return self.oauth.authorize_url(state), state

    async def complete_login(self, code: str) -> Tuple[str, UserProfile]:
        """
        Finish the OAuth flow.

        Returns:
            (session_token, user_profile)

        Raises:
            GitHubAPIError: If the code exchange or profile lookup fails.
        """
        access_token = await self.oauth.exchange_code(code)
        client = self.client_factory(access_token)
        try:
            profile = await client.get_authenticated_user()
            email = profile.get("email") or await self._primary_email(client)
        finally:
            client.close()

        user = await asyncio.to_thread(
            self.users.upsert_user,
            github_id=str(profile["id"]),
            access_token=access_token,
            name=profile.get("name") or profile.get("login"),
            email=email,
        )
        session_token = await asyncio.to_thread(self.users.create_session, user.id)
        logger.info("User %s signed in", user.id)
        return session_token, user

    async def _primary_email(self, client: GitHubClient) -> Optional[str]:
        try:
            emails = await client.get_user_emails()
        except GitHubAPIError as e:
            logger.warning("Could not read user e-mails: %s", e)
            return None
        for entry in emails:
            if entry.get("primary"):
                return entry.get("email")
        return emails[0].get("email") if emails else None

    def resolve(self, session_token: Optional[str]) -> Optional[AuthContext]:
        return self.users.resolve_session(session_token)

    def logout(self, session_token: Optional[str]) -> bool:
        if not session_token:
            return False
        return self.users.delete_session(session_token)
