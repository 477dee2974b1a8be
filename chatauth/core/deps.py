"""Centralized dependency type aliases for FastAPI routes.

Import shared dependencies from this single module:
    from chatauth.core.deps import SessionDep, SettingsDep
"""

from typing import Annotated

from fastapi import Depends
from sqlmodel import Session

from chatauth.core.settings import Settings, get_settings
from chatauth.db.engine import get_session

# Database session
SessionDep = Annotated[Session, Depends(get_session)]

# Application settings
SettingsDep = Annotated[Settings, Depends(get_settings)]
