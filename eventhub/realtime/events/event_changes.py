from __future__ import annotations

from typing import TYPE_CHECKING
from typing import Any

from eventhub.events.api.serializers import EventSerializer
from eventhub.realtime.hub import EVENT_DELETED
from eventhub.realtime.hub import EVENT_UPDATED
from eventhub.realtime.hub import NEW_EVENT

if TYPE_CHECKING:  # import for type checking only
    from eventhub.events.models import Event
    from eventhub.realtime.hub import NotificationHub


def build_event_payload(event: Event) -> dict[str, Any]:
    """Full event with creator summary and attendee list, as the API returns it."""
    return dict(EventSerializer(event).data)


def publish_event_created(hub: NotificationHub, event: Event) -> None:
    hub.broadcast_global(NEW_EVENT, build_event_payload(event), event_id=event.pk)


def publish_event_updated(hub: NotificationHub, event: Event) -> None:
    hub.broadcast_to_room(event.pk, EVENT_UPDATED, build_event_payload(event))


def publish_event_deleted(hub: NotificationHub, event_id: object) -> None:
    # Clients only need the id to drop the event from their lists.
    hub.broadcast_global(EVENT_DELETED, str(event_id), event_id=event_id)
