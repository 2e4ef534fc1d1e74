from eventhub.events.stores.django_store import DjangoEventStore
from eventhub.events.stores.interfaces import EventStore

__all__ = ["DjangoEventStore", "EventStore"]
