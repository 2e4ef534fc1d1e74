"""Domain errors raised by account operations."""

from eventhub.utils.errors import DomainError
from eventhub.utils.errors import ErrorCode


class EmailAlreadyRegisteredError(DomainError):
    """Raised when registering an email that already has an account."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.EMAIL_ALREADY_REGISTERED,
            message="Email already registered",
        )


class InvalidCredentialsError(DomainError):
    """Raised for an unknown email or a wrong password."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.INVALID_CREDENTIALS,
            message="Invalid credentials",
        )
