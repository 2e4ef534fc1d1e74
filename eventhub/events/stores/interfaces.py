"""Store interfaces (repository pattern).

The registry depends on this interface only. Attendee membership is reachable
solely through ``add_attendee`` / ``remove_attendee`` / ``list_attendees``.
"""

from __future__ import annotations

from abc import ABC
from abc import abstractmethod
from typing import TYPE_CHECKING
from typing import Any

if TYPE_CHECKING:
    from uuid import UUID

    from eventhub.events.domain import EventQuery
    from eventhub.events.models import Event
    from eventhub.users.models import User


class EventStore(ABC):
    """Interface for event persistence operations."""

    @abstractmethod
    def list_events(self, query: EventQuery) -> tuple[int, list[Event]]:
        """Return the total match count and the requested page, read consistently.

        Listed events carry ``attendee_count`` and prefetched creator/attendees.
        """
        ...

    @abstractmethod
    def get_event(self, event_id: UUID) -> Event | None:
        """Return an event with creator and attendees loaded, or None."""
        ...

    @abstractmethod
    def lock_event(self, event_id: UUID) -> Event | None:
        """Lock the event row for the surrounding transaction and return it, or None."""
        ...

    @abstractmethod
    def create_event(self, creator: User, data: dict[str, Any]) -> Event:
        """Persist a new event with an empty attendee set."""
        ...

    @abstractmethod
    def update_event(self, event: Event, changes: dict[str, Any]) -> Event:
        """Apply the given field changes; untouched fields keep their values."""
        ...

    @abstractmethod
    def delete_event(self, event: Event) -> None:
        """Delete the event and every attendee association."""
        ...

    @abstractmethod
    def add_attendee(self, event: Event, user: User) -> bool:
        """Add the user if absent. Return False when they were already a member."""
        ...

    @abstractmethod
    def remove_attendee(self, event: Event, user: User) -> bool:
        """Remove the user if present. Return False when they were not a member."""
        ...

    @abstractmethod
    def list_attendees(self, event: Event) -> list[User]:
        """Return the event's attendees in join order."""
        ...
