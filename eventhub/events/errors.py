"""Domain errors for event operations."""

from eventhub.utils.errors import DomainError
from eventhub.utils.errors import ErrorCode


class EventNotFoundError(DomainError):
    """Raised when an event is not found."""

    def __init__(self, event_id: object) -> None:
        super().__init__(
            code=ErrorCode.EVENT_NOT_FOUND,
            message="Event not found",
        )
        self.event_id = event_id


class NotEventCreatorError(DomainError):
    """Raised when someone other than the creator edits or deletes an event."""

    def __init__(self, event_id: object) -> None:
        super().__init__(
            code=ErrorCode.NOT_EVENT_CREATOR,
            message="Not authorized",
        )
        self.event_id = event_id


class AlreadyAttendingError(DomainError):
    """Raised when a user joins an event they already attend."""

    def __init__(self, event_id: object) -> None:
        super().__init__(
            code=ErrorCode.ALREADY_ATTENDING,
            message="Already joined",
        )
        self.event_id = event_id


class InvalidDateRangeError(DomainError):
    """Raised when a listing's start date falls after its end date."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.INVALID_DATE_RANGE,
            message="startDate must be before endDate",
        )
