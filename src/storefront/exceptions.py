"""Errors raised by the service layer and mapped to HTTP responses."""


class StorefrontError(Exception):
    """Base error carrying the HTTP status and client-visible message."""

    status_code = 500
    message = "Internal server error"

    def __init__(self, message: str | None = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class DuplicateUsername(StorefrontError):
    status_code = 400
    message = "Username already exists"


class InvalidCredentials(StorefrontError):
    """Unknown user or wrong password; the two are never told apart."""

    status_code = 401
    message = "Invalid credentials"


class NotAuthenticated(StorefrontError):
    status_code = 401
    message = "Not authenticated"


class StorageError(StorefrontError):
    status_code = 500
    message = "Database error"
