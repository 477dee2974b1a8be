"""Google OAuth routes.

Page-style flow: every outcome is a redirect. The callback completes
identity resolution and session establishment before redirecting.
"""

import logging

from fastapi import APIRouter, Request, status
from fastapi.responses import RedirectResponse

from chatauth.auth.dependencies import GoogleClientDep, SessionManagerDep
from chatauth.auth.service import AuthServiceDep
from chatauth.core.constants import CommonResponses, Routes
from chatauth.core.deps import SessionDep, SettingsDep
from chatauth.core.exceptions import ProviderError
from chatauth.user.exceptions import EmailExistsError

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix=Routes.GOOGLE.prefix,
    tags=[Routes.GOOGLE.tag],
    responses={**CommonResponses.REDIRECT},
)


@router.get("")
async def google_login(
    session_manager: SessionManagerDep,
    google_client: GoogleClientDep,
):
    """Redirect to Google's consent screen (profile and email scopes)."""
    state = session_manager.new_oauth_state()
    redirect = RedirectResponse(
        url=google_client.authorization_url(state),
        status_code=status.HTTP_302_FOUND,
    )
    session_manager.remember_oauth_state(redirect, state)
    return redirect


@router.get("/callback")
async def google_callback(
    request: Request,
    session: SessionDep,
    settings: SettingsDep,
    auth_service: AuthServiceDep,
    session_manager: SessionManagerDep,
    google_client: GoogleClientDep,
    code: str | None = None,
    state: str | None = None,
    error: str | None = None,
):
    """Finish Google login and redirect to the success or failure URL."""

    def redirect_to(url: str) -> RedirectResponse:
        redirect = RedirectResponse(url=url, status_code=status.HTTP_302_FOUND)
        session_manager.clear_oauth_state(redirect)
        return redirect

    if not session_manager.verify_oauth_state(request, state):
        logger.warning("Google callback with missing or mismatched state")
        return redirect_to(settings.oauth_failure_url)

    if error or not code:
        logger.info("Google login not completed: %s", error or "no code")
        return redirect_to(settings.oauth_failure_url)

    try:
        identity = await google_client.fetch_identity(code)
        user = auth_service.resolve_or_create(identity)
    except (ProviderError, EmailExistsError) as e:
        logger.warning(
            "Google login failed: %s - %s",
            e.error_type,
            e.message,
            extra={"error_type": e.error_type, "auth_method": "google"},
        )
        return redirect_to(settings.oauth_failure_url)

    redirect = redirect_to(settings.oauth_success_url)
    session_manager.establish(session, request, redirect, user)
    return redirect
