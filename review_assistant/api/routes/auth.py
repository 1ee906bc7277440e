"""
Auth Endpoints - GitHub sign-in, session status and logout.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, RedirectResponse

from review_assistant.core.auth import AuthContext
from review_assistant.core.config import Settings, get_settings
from review_assistant.core.dependencies import get_auth_service, get_optional_auth_context
from review_assistant.models.responses import AuthStatusResponse, SuccessResponse
from review_assistant.models.schemas import UserProfile
from review_assistant.services.auth_service import AuthService


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])

_STATE_COOKIE_MAX_AGE = 600


@router.get(
    "/status",
    response_model=AuthStatusResponse,
    summary="Authentication Status",
    responses={401: {"model": AuthStatusResponse}},
)
async def auth_status(
    identity: Optional[AuthContext] = Depends(get_optional_auth_context),
):
    """Report whether the request carries a valid session."""
    if identity is None:
        return JSONResponse(status_code=401, content={"authenticated": False})

    return AuthStatusResponse(
        authenticated=True,
        user=UserProfile(
            id=identity.user_id,
            github_id=identity.github_id,
            name=identity.name,
            email=identity.email,
        ),
    )


@router.get("/github", summary="Sign in with GitHub")
async def github_login(
    auth_service: AuthService = Depends(get_auth_service),
    settings: Settings = Depends(get_settings),
) -> RedirectResponse:
    """Redirect to GitHub's consent page."""
    url, state = auth_service.start_login()
    response = RedirectResponse(url)
    response.set_cookie(
        settings.oauth_state_cookie_name,
        state,
        max_age=_STATE_COOKIE_MAX_AGE,
        httponly=True,
        secure=settings.cookie_secure,
        samesite="lax",
    )
    return response


@router.get("/github/callback", summary="GitHub OAuth Callback")
async def github_callback(
    request: Request,
    code: Optional[str] = None,
    state: Optional[str] = None,
    error: Optional[str] = None,
    auth_service: AuthService = Depends(get_auth_service),
    settings: Settings = Depends(get_settings),
) -> RedirectResponse:
    """
    Complete sign-in.

    Success redirects to the frontend with a session cookie; any failure
    redirects to the frontend's login page.
    """
    failure = RedirectResponse(f"{settings.frontend_url}/login")
    failure.delete_cookie(settings.oauth_state_cookie_name)

    expected_state = request.cookies.get(settings.oauth_state_cookie_name)
    if error or not code or not state or state != expected_state:
        logger.warning("Rejected OAuth callback (error=%s, state ok=%s)", error, state == expected_state)
        return failure

    try:
        session_token, _ = await auth_service.complete_login(code)
    except Exception:
        logger.exception("GitHub sign-in failed")
        return failure

    response = RedirectResponse(settings.frontend_url)
    response.delete_cookie(settings.oauth_state_cookie_name)
    response.set_cookie(
        settings.session_cookie_name,
        session_token,
        max_age=settings.session_ttl_hours * 3600,
        httponly=True,
        secure=settings.cookie_secure,
        samesite="none" if settings.cookie_secure else "lax",
    )
    return response


@router.post("/logout", response_model=SuccessResponse, summary="Sign out")
def logout(
    request: Request,
    auth_service: AuthService = Depends(get_auth_service),
    settings: Settings = Depends(get_settings),
):
    """Delete the current session and clear its cookie."""
    auth_service.logout(request.cookies.get(settings.session_cookie_name))
    response = JSONResponse(content={"success": True})
    response.delete_cookie(settings.session_cookie_name)
    return response
