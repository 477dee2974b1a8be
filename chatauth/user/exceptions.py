"""User domain exceptions.

Raised by the user store when a uniqueness constraint rejects a write.
"""

from chatauth.core.exceptions import ConflictError, ValidationError


class EmailExistsError(ValidationError):
    """Raised when a write would duplicate an existing email."""

    error_type = "email_exists"

    def __init__(self, message: str = "User already exists"):
        super().__init__(message)


class DuplicateIdentityError(ConflictError):
    """Raised when a write would duplicate an existing external identity.

    Transient: the federated resolver retries its lookup when this fires.
    """

    error_type = "duplicate_identity"

    def __init__(self, message: str = "External identity already linked"):
        super().__init__(message)
