"""Event registry: the rules for creating, changing and attending events.

- Only the creator may update or delete an event; NotFound is reported before
  Forbidden.
- Join fails with AlreadyAttending when the caller is already a member; leave
  is a no-op for non-members.
- Every mutation commits before its broadcast is sent (``on_commit``), and
  update/join/leave/delete lock the event row so one event's changes commit
  one at a time. Those four also hold the hub's per-event ordering lock until
  their broadcast is out, so broadcasts follow commit order.
"""

from __future__ import annotations

import logging
from functools import partial
from typing import TYPE_CHECKING
from typing import Any
from uuid import UUID

from django.db import transaction

from eventhub.events.domain import EventPage
from eventhub.events.errors import AlreadyAttendingError
from eventhub.events.errors import EventNotFoundError
from eventhub.events.errors import InvalidDateRangeError
from eventhub.events.errors import NotEventCreatorError
from eventhub.realtime.events.event_changes import publish_event_created
from eventhub.realtime.events.event_changes import publish_event_deleted
from eventhub.realtime.events.event_changes import publish_event_updated

if TYPE_CHECKING:
    from eventhub.events.domain import EventQuery
    from eventhub.events.models import Event
    from eventhub.events.stores.interfaces import EventStore
    from eventhub.realtime.hub import NotificationHub
    from eventhub.users.models import User

logger = logging.getLogger(__name__)


def parse_event_id(event_id: object) -> UUID:
    """Parse an event id; anything that is not a UUID cannot name an event."""
    if isinstance(event_id, UUID):
        return event_id
    try:
        return UUID(str(event_id))
    except ValueError as exc:
        raise EventNotFoundError(event_id) from exc


class EventRegistry:
    """Service for event operations."""

    def __init__(self, store: EventStore, hub: NotificationHub) -> None:
        self._store = store
        self._hub = hub

    def list_events(self, query: EventQuery) -> EventPage:
        """Return one page of events matching the query.

        Raises:
            InvalidDateRangeError: If the start date is after the end date.
        """
        if query.has_date_range_conflict:
            raise InvalidDateRangeError
        total, events = self._store.list_events(query)
        return EventPage(total=total, page=query.page, limit=query.limit, events=events)

    def get_event(self, event_id: object) -> Event:
        """Return an event with its creator and attendees.

        Raises:
            EventNotFoundError: If the event does not exist.
        """
        pk = parse_event_id(event_id)
        event = self._store.get_event(pk)
        if event is None:
            raise EventNotFoundError(pk)
        return event

    def create_event(self, user: User, data: dict[str, Any]) -> Event:
        with transaction.atomic():
            event = self._store.create_event(creator=user, data=data)
            transaction.on_commit(partial(publish_event_created, self._hub, event))
        logger.info("User %s created event %s", user.pk, event.pk)
        return event

    def update_event(self, user: User, event_id: object, changes: dict[str, Any]) -> Event:
        """Apply a partial update.

        Raises:
            EventNotFoundError: If the event does not exist.
            NotEventCreatorError: If the caller did not create the event.
        """
        pk = parse_event_id(event_id)
        with self._hub.ordered(pk), transaction.atomic():
            event = self._lock_owned(user, pk)
            self._store.update_event(event, changes)
            event = self._store.get_event(pk)
            transaction.on_commit(partial(publish_event_updated, self._hub, event))
        logger.info("User %s updated event %s (%s)", user.pk, pk, ", ".join(changes))
        return event

    def delete_event(self, user: User, event_id: object) -> None:
        """Delete an event and its attendee list.

        Raises:
            EventNotFoundError: If the event does not exist.
            NotEventCreatorError: If the caller did not create the event.
        """
        pk = parse_event_id(event_id)
        with self._hub.ordered(pk), transaction.atomic():
            event = self._lock_owned(user, pk)
            self._store.delete_event(event)
            transaction.on_commit(partial(publish_event_deleted, self._hub, pk))
        logger.info("User %s deleted event %s", user.pk, pk)

    def join_event(self, user: User, event_id: object) -> Event:
        """Add the caller to the attendee set.

        Raises:
            EventNotFoundError: If the event does not exist.
            AlreadyAttendingError: If the caller already attends.
        """
        pk = parse_event_id(event_id)
        with self._hub.ordered(pk), transaction.atomic():
            event = self._lock(pk)
            if not self._store.add_attendee(event, user):
                raise AlreadyAttendingError(pk)
            event = self._store.get_event(pk)
            transaction.on_commit(partial(publish_event_updated, self._hub, event))
        logger.info("User %s joined event %s", user.pk, pk)
        return event

    def leave_event(self, user: User, event_id: object) -> Event:
        """Remove the caller from the attendee set; a no-op for non-members.

        Raises:
            EventNotFoundError: If the event does not exist.
        """
        pk = parse_event_id(event_id)
        with self._hub.ordered(pk), transaction.atomic():
            event = self._lock(pk)
            removed = self._store.remove_attendee(event, user)
            event = self._store.get_event(pk)
            transaction.on_commit(partial(publish_event_updated, self._hub, event))
        if removed:
            logger.info("User %s left event %s", user.pk, pk)
        return event

    def _lock(self, pk: UUID) -> Event:
        event = self._store.lock_event(pk)
        if event is None:
            raise EventNotFoundError(pk)
        return event

    def _lock_owned(self, user: User, pk: UUID) -> Event:
        event = self._lock(pk)
        if event.creator_id != user.pk:
            raise NotEventCreatorError(pk)
        return event
