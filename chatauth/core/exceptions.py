"""Service-wide exception hierarchy.

Every error a route can surface is an AppException subclass carrying its
HTTP status and a stable ``type`` string. Handlers in
``chatauth.core.exception_handlers`` turn them into ``{"type", "message"}``
JSON bodies; the OAuth callback instead catches them and redirects.
"""


class AppException(Exception):
    """Base class for errors with a client-facing status and type."""

    status_code: int = 500
    error_type: str = "internal_error"

    def __init__(self, message: str = "An unexpected error occurred"):
        self.message = message
        super().__init__(message)

    def payload(self) -> dict[str, str]:
        return {"type": self.error_type, "message": self.message}


# 400
class ValidationError(AppException):
    """Input was well-formed but rejected by a business rule."""

    status_code = 400
    error_type = "validation_error"

    def __init__(self, message: str = "Validation failed"):
        super().__init__(message)


# 409
class ConflictError(AppException):
    """A write lost to a concurrent write of the same record."""

    status_code = 409
    error_type = "conflict"

    def __init__(self, message: str = "Resource conflict"):
        super().__init__(message)


# 502
class ProviderError(AppException):
    """The identity provider was unreachable, refused, or answered garbage."""

    status_code = 502
    error_type = "provider_error"

    def __init__(
        self, message: str = "Authentication provider returned an invalid response"
    ):
        super().__init__(message)


# 500
class InternalError(AppException):
    status_code = 500
    error_type = "internal_error"

    def __init__(self, message: str = "An internal error occurred"):
        super().__init__(message)
