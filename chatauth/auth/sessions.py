"""Server-side session management.

A session moves Anonymous -> Authenticated -> Anonymous. State lives in
the ``auth_sessions`` table; the client holds only an itsdangerous-signed
reference to a row. Each request re-reads the user from the store, so a
session never serves a stale or deleted profile.
"""

import hmac
import logging
import secrets
from datetime import timedelta

from itsdangerous import BadSignature, URLSafeSerializer, URLSafeTimedSerializer
from sqlmodel import Session
from starlette.requests import Request
from starlette.responses import Response

from chatauth.auth.models import AuthSession
from chatauth.core.constants import Cookies
from chatauth.core.mixins import as_utc, utc_now
from chatauth.core.settings import Settings
from chatauth.user.models import User
from chatauth.user.store import UserStore

logger = logging.getLogger(__name__)

SESSION_SALT = "chatauth-session-v1"
OAUTH_STATE_SALT = "chatauth-oauth-state-v1"
OAUTH_STATE_TTL = timedelta(minutes=10)


class SessionManager:
    """Issues, restores and destroys authenticated sessions."""

    def __init__(self, settings: Settings):
        self.ttl = settings.session_ttl
        self.secure = settings.is_secure_cookie
        self._signer = URLSafeSerializer(
            settings.session_secret_key, salt=SESSION_SALT
        )
        self._state_signer = URLSafeTimedSerializer(
            settings.session_secret_key, salt=OAUTH_STATE_SALT
        )

    def establish(
        self, db: Session, request: Request, response: Response, user: User
    ) -> AuthSession:
        """Start an authenticated session for user and set its cookie.

        Any session the request already carries is destroyed first so a
        pre-login session id is never promoted to an authenticated one.
        """
        self._delete_row(db, self._session_id(request))

        auth_session = AuthSession(
            id=secrets.token_urlsafe(32),
            user_id=user.id,
            expires_at=utc_now() + self.ttl,
        )
        db.add(auth_session)
        db.commit()

        self._set_session_cookie(response, auth_session.id)
        logger.info("Session established", extra={"user_id": user.id})
        return auth_session

    def resolve(
        self, db: Session, request: Request, response: Response
    ) -> User | None:
        """Return the user behind the request's session, or None.

        Unsigned, unknown or expired sessions and sessions whose user no
        longer exists all resolve to anonymous. A live session has its
        expiry slid forward and its cookie re-issued.
        """
        session_id = self._session_id(request)
        if session_id is None:
            return None

        auth_session = db.get(AuthSession, session_id)
        if auth_session is None:
            return None

        now = utc_now()
        if as_utc(auth_session.expires_at) <= now:
            self._delete_row(db, session_id)
            return None

        user = UserStore(db).get(auth_session.user_id)
        if user is None:
            logger.info("Session user no longer exists; treating as anonymous")
            self._delete_row(db, session_id)
            return None

        auth_session.expires_at = now + self.ttl
        db.add(auth_session)
        db.commit()
        self._set_session_cookie(response, session_id)
        return user

    def destroy(self, db: Session, request: Request, response: Response) -> None:
        """End the request's session, if any, and clear the cookie.

        Safe to call on an anonymous request.
        """
        self._delete_row(db, self._session_id(request))
        response.delete_cookie(
            key=Cookies.SESSION,
            path="/",
            httponly=True,
            secure=self.secure,
            samesite="lax",
        )

    @staticmethod
    def new_oauth_state() -> str:
        return secrets.token_urlsafe(32)

    def remember_oauth_state(self, response: Response, state: str) -> None:
        """Keep a signed copy of the OAuth state in a short-lived cookie.

        The provider echoes the state back to the callback, where it is
        compared with this copy.
        """
        response.set_cookie(
            key=Cookies.OAUTH_STATE,
            value=self._state_signer.dumps(state),
            max_age=int(OAUTH_STATE_TTL.total_seconds()),
            path="/",
            httponly=True,
            secure=self.secure,
            samesite="lax",
        )

    def clear_oauth_state(self, response: Response) -> None:
        response.delete_cookie(
            key=Cookies.OAUTH_STATE,
            path="/",
            httponly=True,
            secure=self.secure,
            samesite="lax",
        )

    def verify_oauth_state(self, request: Request, state: str | None) -> bool:
        """Check the state returned by the provider against the issued one."""
        raw = request.cookies.get(Cookies.OAUTH_STATE)
        if not raw or not state:
            return False
        try:
            expected = self._state_signer.loads(
                raw, max_age=int(OAUTH_STATE_TTL.total_seconds())
            )
        except BadSignature:
            return False
        return hmac.compare_digest(str(expected), state)

    def _session_id(self, request: Request) -> str | None:
        raw = request.cookies.get(Cookies.SESSION)
        if not raw:
            return None
        try:
            session_id = self._signer.loads(raw)
        except BadSignature:
            return None
        return session_id if isinstance(session_id, str) else None

    def _set_session_cookie(self, response: Response, session_id: str) -> None:
        response.set_cookie(
            key=Cookies.SESSION,
            value=self._signer.dumps(session_id),
            max_age=int(self.ttl.total_seconds()),
            path="/",
            httponly=True,
            secure=self.secure,
            samesite="lax",
        )

    @staticmethod
    def _delete_row(db: Session, session_id: str | None) -> None:
        if session_id is None:
            return
        auth_session = db.get(AuthSession, session_id)
        if auth_session is not None:
            db.delete(auth_session)
            db.commit()
