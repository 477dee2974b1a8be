"""
Model package.

`SQLModel.metadata` is populated only when the table models are imported,
so this module must import every `table=True` model before `init_db`
creates the schema.
"""

from chatauth.auth.models import AuthSession  # noqa: F401
from chatauth.user.models import User  # noqa: F401
