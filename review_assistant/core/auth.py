"""
Authentication Context - The typed identity threaded through protected handlers.
"""

from dataclasses import dataclass
from typing import Optional

from review_assistant.api.middleware.error_handler import UnauthorizedError


@dataclass(frozen=True)
class AuthContext:
    """Identity of the signed-in user for one request."""
    user_id: int
    github_id: str
    access_token: str
    name: Optional[str] = None
    email: Optional[str] = None

    def __repr__(self) -> str:
        return f"AuthContext(user_id={self.user_id}, github_id={self.github_id!r})"


def require_authenticated(identity: Optional[AuthContext]) -> AuthContext:
    """Pass the identity through, or raise UnauthorizedError when there is none."""
    if identity is None:
        raise UnauthorizedError()
    return identity
