"""Django ORM implementation of the EventStore."""

from __future__ import annotations

from typing import TYPE_CHECKING
from typing import Any

from django.contrib.auth import get_user_model
from django.db import transaction
from django.db.models import Count
from django.db.models import Prefetch

from eventhub.events.domain import SortField
from eventhub.events.domain import SortOrder
from eventhub.events.filters import EventFilter
from eventhub.events.models import Event
from eventhub.events.models import EventAttendee
from eventhub.events.stores.interfaces import EventStore

if TYPE_CHECKING:
    from uuid import UUID

    from django.db.models import QuerySet

    from eventhub.events.domain import EventQuery
    from eventhub.users.models import User

EDITABLE_FIELDS = frozenset(
    {
        "title",
        "description",
        "date",
        "location",
        "category",
        "cover_url",
        "images_url",
    },
)

_SORT_COLUMNS = {
    SortField.DATE: "date",
    SortField.TITLE: "title",
    SortField.ATTENDEE_COUNT: "attendee_count",
}


def _with_people() -> QuerySet[Event]:
    users = get_user_model().objects.order_by("id")
    return Event.objects.select_related("creator").prefetch_related(
        Prefetch("attendees", queryset=users),
    )


def _filter_data(query: EventQuery) -> dict[str, str]:
    data = {
        "category": query.category,
        "start_date": query.start_date.isoformat() if query.start_date else None,
        "end_date": query.end_date.isoformat() if query.end_date else None,
        "search": query.search,
    }
    return {key: value for key, value in data.items() if value}


class DjangoEventStore(EventStore):
    """Event store backed by the Django ORM."""

    def list_events(self, query: EventQuery) -> tuple[int, list[Event]]:
        queryset = _with_people().annotate(
            attendee_count=Count("attendee_links", distinct=True),
        )
        filterset = EventFilter(data=_filter_data(query), queryset=queryset)
        if not filterset.is_valid():
            msg = f"Invalid event filter: {filterset.errors.as_json()}"
            raise ValueError(msg)

        prefix = "-" if query.sort_order is SortOrder.DESC else ""
        column = _SORT_COLUMNS[query.sort_by]
        ordered = filterset.qs.order_by(f"{prefix}{column}", "id")

        with transaction.atomic():
            total = ordered.count()
            events = list(ordered[query.offset : query.offset + query.limit])
        return total, events

    def get_event(self, event_id: UUID) -> Event | None:
        return _with_people().filter(pk=event_id).first()

    def lock_event(self, event_id: UUID) -> Event | None:
        return Event.objects.select_for_update().filter(pk=event_id).first()

    def create_event(self, creator: User, data: dict[str, Any]) -> Event:
        fields = {key: value for key, value in data.items() if key in EDITABLE_FIELDS}
        event = Event.objects.create(creator=creator, **fields)
        return self.get_event(event.pk)

    def update_event(self, event: Event, changes: dict[str, Any]) -> Event:
        # creator and created_at are never written after creation.
        fields = [key for key in changes if key in EDITABLE_FIELDS]
        for key in fields:
            setattr(event, key, changes[key])
        if fields:
            event.save(update_fields=fields)
        return event

    def delete_event(self, event: Event) -> None:
        # EventAttendee rows go with it through on_delete=CASCADE.
        event.delete()

    def add_attendee(self, event: Event, user: User) -> bool:
        _, created = EventAttendee.objects.get_or_create(event=event, user=user)
        return created

    def remove_attendee(self, event: Event, user: User) -> bool:
        deleted, _ = EventAttendee.objects.filter(event=event, user=user).delete()
        return deleted > 0

    def list_attendees(self, event: Event) -> list[User]:
        links = (
            EventAttendee.objects.filter(event=event)
            .select_related("user")
            .order_by("joined_at", "id")
        )
        return [link.user for link in links]
