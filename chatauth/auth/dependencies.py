"""Auth domain dependencies.

Session-backed authentication dependencies for FastAPI routes and type
aliases for injecting the current user and the auth collaborators.
"""

from typing import Annotated

from fastapi import Depends, Request, Response

from chatauth.auth.exceptions import NotAuthenticatedError
from chatauth.auth.google import GoogleOAuthClient
from chatauth.auth.sessions import SessionManager
from chatauth.core.deps import SessionDep
from chatauth.user.models import User


def get_session_manager(request: Request) -> SessionManager:
    return request.app.state.session_manager


def get_google_client(request: Request) -> GoogleOAuthClient:
    return request.app.state.google_client


SessionManagerDep = Annotated[SessionManager, Depends(get_session_manager)]
GoogleClientDep = Annotated[GoogleOAuthClient, Depends(get_google_client)]


def get_optional_user(
    request: Request,
    response: Response,
    session: SessionDep,
    session_manager: SessionManagerDep,
) -> User | None:
    """Restore the user from the session cookie, or None if anonymous.

    Session resolution failures never raise; they downgrade to anonymous.
    """
    return session_manager.resolve(session, request, response)


OptionalUserDep = Annotated[User | None, Depends(get_optional_user)]


def get_current_user(user: OptionalUserDep) -> User:
    """Require an authenticated session.

    Raises:
        NotAuthenticatedError: If the request is anonymous
    """
    if user is None:
        raise NotAuthenticatedError()
    return user


CurrentUserDep = Annotated[User, Depends(get_current_user)]

