"""Authentication service.

Business rules for the three ways a user becomes known to the service:
local credential verification, local registration, and federated
(Google) identity resolution. Route handlers stay thin and delegate here;
session handling is left to SessionManager.
"""

import logging
from typing import Annotated

from fastapi import Depends

from chatauth.auth.exceptions import InvalidCredentialsError
from chatauth.auth.google import GoogleIdentity
from chatauth.auth.passwords import (
    hash_password_async,
    verify_against_dummy_async,
    verify_password_async,
)
from chatauth.core.deps import SettingsDep
from chatauth.user.exceptions import DuplicateIdentityError, EmailExistsError
from chatauth.user.models import User
from chatauth.user.store import UserStore, UserStoreDep

logger = logging.getLogger(__name__)


class AuthService:
    """Verifies, registers and resolves users against the user store."""

    def __init__(
        self,
        store: UserStore,
        bcrypt_rounds: int = 12,
        profile_capture: str = "full",
    ):
        self.store = store
        self.bcrypt_rounds = bcrypt_rounds
        self.profile_capture = profile_capture

    async def verify_credentials(self, email: str, password: str) -> User:
        """Return the user owning email/password.

        Raises:
            InvalidCredentialsError: For an unknown email, a federated-only
                account, or a wrong password, always with the same message
        """
        user = self.store.get_by_email(email)

        if user is None or user.password_hash is None:
            # Burn the same bcrypt cost so timing does not reveal the account.
            await verify_against_dummy_async(password, self.bcrypt_rounds)
            raise InvalidCredentialsError()

        if not await verify_password_async(password, user.password_hash):
            raise InvalidCredentialsError()

        logger.info(
            "Credentials verified",
            extra={"user_id": user.id, "auth_method": "password"},
        )
        return user

    async def register(self, email: str, password: str) -> User:
        """Create a local user.

        Raises:
            EmailExistsError: If the email is already registered
            PasswordPolicyError: If the password exceeds bcrypt's limit
        """
        if self.store.get_by_email(email) is not None:
            raise EmailExistsError()

        password_hash = await hash_password_async(password, self.bcrypt_rounds)

        # The unique constraint still decides a concurrent registration.
        return self.store.add(User(email=email, password_hash=password_hash))

    def resolve_or_create(self, identity: GoogleIdentity) -> User:
        """Find or create the user for a federated identity.

        Idempotent per external id: an existing record is returned as-is,
        and losing a concurrent create is resolved by one more lookup.

        Raises:
            EmailExistsError: If the email belongs to an account not linked
                to this identity (accounts are never merged)
        """
        user = self.store.get_by_external_id(identity.external_id)
        if user is not None:
            return user

        if self.store.get_by_email(identity.email) is not None:
            logger.info(
                "Federated login for an email owned by another account",
                extra={"auth_method": "google"},
            )
            raise EmailExistsError(
                "An account with this email already exists; "
                "sign in with your password"
            )

        try:
            return self.store.add(self._user_from_identity(identity))
        except DuplicateIdentityError:
            user = self.store.get_by_external_id(identity.external_id)
            if user is None:
                raise
            logger.info(
                "Concurrent federated signup resolved to existing user",
                extra={"user_id": user.id, "auth_method": "google"},
            )
            return user

    def _user_from_identity(self, identity: GoogleIdentity) -> User:
        user = User(
            external_id=identity.external_id,
            email=identity.email,
            display_name=identity.display_name,
        )
        if self.profile_capture == "full":
            user.first_name = identity.first_name
            user.last_name = identity.last_name
            user.avatar_url = identity.avatar_url
        return user


def get_auth_service(store: UserStoreDep, settings: SettingsDep) -> AuthService:
    return AuthService(
        store,
        bcrypt_rounds=settings.bcrypt_rounds,
        profile_capture=settings.profile_capture,
    )


AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]
