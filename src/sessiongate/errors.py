from abc import ABC


class UserError(ABC, Exception):
    """Base class for user-related errors.

    All errors that inherit from UserError will have their messages
    displayed to the user. These errors should not contain any
    sensitive information.
    """


class AuthenticationError(UserError):
    """Raised when a request has no live session."""

    def __init__(self, message: str = "Authentication required") -> None:
        super().__init__(message)


class InvalidCredentialsError(AuthenticationError):
    """Raised when login fails, whether the account is missing or the password is wrong."""

    def __init__(self, message: str = "Invalid email or password") -> None:
        super().__init__(message)


class RegistrationError(UserError):
    """Raised when an otherwise valid registration cannot be persisted."""

    def __init__(self, message: str = "Registration failed") -> None:
        super().__init__(message)


class ValidationError(UserError):
    """Raised when user input fails validation."""


class InfrastructureError(Exception):
    """Base class for backend failures. Messages are never shown to the user."""


class StoreUnavailableError(InfrastructureError):
    """Raised when a backend operation cannot be acknowledged."""


class StoreTimeoutError(StoreUnavailableError):
    """Raised when a backend operation exceeds its deadline."""


class CorruptSessionError(InfrastructureError):
    """Raised when a stored session cannot be decoded."""


class DuplicateUserError(InfrastructureError):
    """Raised by a user repository on a unique-key violation."""
