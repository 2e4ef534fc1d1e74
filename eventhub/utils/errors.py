"""Domain error codes shared by the eventhub apps."""

from dataclasses import dataclass
from enum import Enum


class ErrorCode(Enum):
    """Domain error codes."""

    EVENT_NOT_FOUND = "EVENT_NOT_FOUND"
    NOT_EVENT_CREATOR = "NOT_EVENT_CREATOR"
    ALREADY_ATTENDING = "ALREADY_ATTENDING"
    INVALID_DATE_RANGE = "INVALID_DATE_RANGE"
    EMAIL_ALREADY_REGISTERED = "EMAIL_ALREADY_REGISTERED"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    UPLOAD_FAILED = "UPLOAD_FAILED"


@dataclass
class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode
    message: str

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"
