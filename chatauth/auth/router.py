"""Auth domain router.

Local credential routes (register, login, logout) and the profile of the
signed-in user. Handlers stay thin: credentials go to AuthService, session
state to SessionManager.
"""

import logging

from fastapi import APIRouter, Request, Response, status
from fastapi.responses import HTMLResponse, RedirectResponse
from sqlalchemy.exc import SQLAlchemyError

from chatauth.auth.dependencies import CurrentUserDep, SessionManagerDep
from chatauth.auth.schemas import AuthMessage, AuthRegister, EmailPasswordLoginRequest
from chatauth.auth.service import AuthServiceDep
from chatauth.core.constants import CommonResponses, Routes, Templates
from chatauth.core.deps import SessionDep
from chatauth.core.exceptions import InternalError
from chatauth.user.schemas import UserPublicRead

logger = logging.getLogger(__name__)

router = APIRouter(prefix=Routes.AUTH.prefix, tags=[Routes.AUTH.tag])


@router.post(
    "/register",
    response_model=AuthMessage,
    status_code=status.HTTP_201_CREATED,
    responses={**CommonResponses.BAD_REQUEST},
)
async def register(
    register_data: AuthRegister,
    request: Request,
    response: Response,
    session: SessionDep,
    auth_service: AuthServiceDep,
    session_manager: SessionManagerDep,
):
    """Register a local user and sign them in.

    Registration implies login: the response already carries the
    session cookie.
    """
    user = await auth_service.register(register_data.email, register_data.password)

    try:
        session_manager.establish(session, request, response, user)
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(
            "Session establishment failed after registration",
            extra={"user_id": user.id},
            exc_info=e,
        )
        raise InternalError("Error logging in after registration") from e

    return AuthMessage(message="User registered and logged in successfully")


@router.post(
    "/login",
    response_model=UserPublicRead,
    responses={**CommonResponses.UNAUTHORIZED},
)
async def login(
    payload: EmailPasswordLoginRequest,
    request: Request,
    response: Response,
    session: SessionDep,
    auth_service: AuthServiceDep,
    session_manager: SessionManagerDep,
):
    """Login with email/password and set the session cookie."""
    user = await auth_service.verify_credentials(payload.email, payload.password)
    session_manager.establish(session, request, response, user)
    return user


@router.get(
    "/profile",
    response_model=UserPublicRead,
    responses={
        **CommonResponses.UNAUTHORIZED,
        200: {"content": {"text/html": {}}},
    },
)
async def profile(request: Request, response: Response, user: CurrentUserDep):
    """Get the signed-in user.

    Browsers asking for HTML get a rendered profile fragment instead of JSON.
    """
    if _prefers_html(request):
        fragment: HTMLResponse = Templates.TemplateResponse(
            request, "profile.html", {"user": user}
        )
        # Carry the refreshed session cookie onto the rendered response.
        fragment.headers.raw.extend(response.headers.raw)
        return fragment
    return user


@router.get("/logout", responses={**CommonResponses.REDIRECT})
async def logout(
    request: Request,
    session: SessionDep,
    session_manager: SessionManagerDep,
):
    """End the session and return to the landing page.

    Works the same whether or not a session exists.
    """
    redirect = RedirectResponse(url="/", status_code=status.HTTP_302_FOUND)
    session_manager.destroy(session, request, redirect)
    return redirect


def _prefers_html(request: Request) -> bool:
    accept = request.headers.get("accept", "")
    return "text/html" in accept and "application/json" not in accept
