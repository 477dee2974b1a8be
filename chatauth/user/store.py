"""User record store.

Thin repository over a SQLModel session. Every write is a single-record
commit; uniqueness of email and external_id is enforced by the database
and translated into domain exceptions here.
"""

import logging
import uuid
from typing import Annotated

from fastapi import Depends
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from chatauth.core.deps import SessionDep
from chatauth.user.exceptions import DuplicateIdentityError, EmailExistsError
from chatauth.user.models import User

logger = logging.getLogger(__name__)


class UserStore:
    def __init__(self, session: Session):
        self.session = session

    def get(self, user_id: uuid.UUID) -> User | None:
        return self.session.get(User, user_id)

    def get_by_email(self, email: str) -> User | None:
        return self.session.exec(select(User).where(User.email == email)).first()

    def get_by_external_id(self, external_id: str) -> User | None:
        return self.session.exec(
            select(User).where(User.external_id == external_id)
        ).first()

    def add(self, user: User) -> User:
        """Insert a new user record.

        Raises:
            DuplicateIdentityError: If user.external_id is already taken
            EmailExistsError: If user.email is already taken
        """
        try:
            self.session.add(user)
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            raise self._classify_conflict(user) from e

        self.session.refresh(user)
        logger.info("Created user", extra={"user_id": user.id})
        return user

    def _classify_conflict(
        self, user: User
    ) -> DuplicateIdentityError | EmailExistsError:
        # IntegrityError does not portably name the violated constraint.
        if user.external_id and self.get_by_external_id(user.external_id):
            return DuplicateIdentityError()
        return EmailExistsError()


def get_user_store(session: SessionDep) -> UserStore:
    return UserStore(session)


UserStoreDep = Annotated[UserStore, Depends(get_user_store)]
