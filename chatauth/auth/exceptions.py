"""Auth domain exceptions.

Authentication related exceptions. Messages stay deliberately vague so a
response never confirms whether a given email is registered.
"""

from chatauth.core.exceptions import AppException, ValidationError


# Authentication errors (401)
class AuthenticationError(AppException):
    """Base class for authentication failures."""

    status_code = 401
    error_type = "authentication_error"

    def __init__(self, message: str = "Authentication failed"):
        super().__init__(message)


class InvalidCredentialsError(AuthenticationError):
    """Raised when email/password combination is invalid."""

    error_type = "invalid_credentials"

    def __init__(self, message: str = "Incorrect email or password"):
        super().__init__(message)


class NotAuthenticatedError(AuthenticationError):
    """Raised when a protected route is called without a live session."""

    error_type = "not_authenticated"

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message)


# Validation errors (400) - auth specific
class PasswordPolicyError(ValidationError):
    """Raised when password does not meet policy requirements."""

    error_type = "password_policy_error"

    def __init__(self, message: str = "Password does not meet requirements"):
        super().__init__(message)
