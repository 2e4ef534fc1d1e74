import uuid
from contextlib import contextmanager
from datetime import timedelta

import pytest
from django.utils.dateparse import parse_datetime

from eventhub.events.domain import EventQuery
from eventhub.events.errors import AlreadyAttendingError
from eventhub.events.errors import EventNotFoundError
from eventhub.events.errors import InvalidDateRangeError
from eventhub.events.errors import NotEventCreatorError
from eventhub.events.models import Event
from eventhub.events.models import EventAttendee
from eventhub.events.services import EventRegistry
from eventhub.events.services import parse_event_id
from eventhub.events.stores import DjangoEventStore
from eventhub.realtime.hub import EVENT_DELETED
from eventhub.realtime.hub import EVENT_UPDATED
from eventhub.realtime.hub import NEW_EVENT
from eventhub.realtime.hub import NotificationHub
from eventhub.realtime.hub import room_for_event

pytestmark = pytest.mark.django_db

DATE = parse_datetime("2030-05-01T18:00:00Z")


@pytest.fixture
def registry(notification_hub):
    return EventRegistry(DjangoEventStore(), notification_hub)


@pytest.fixture
def create_data():
    return {
        "title": "Python Meetup",
        "description": "Talks and pizza",
        "date": DATE,
        "location": "Berlin",
        "category": "tech",
        "cover_url": "https://img.example.com/cover.png",
        "images_url": [],
    }


def test_parse_event_id_treats_garbage_as_missing():
    event_id = uuid.uuid4()

    assert parse_event_id(str(event_id)) == event_id
    assert parse_event_id(event_id) is event_id
    with pytest.raises(EventNotFoundError):
        parse_event_id("not-a-uuid")


def test_create_broadcasts_new_event_after_commit(
    registry,
    user,
    create_data,
    socket_server,
    django_capture_on_commit_callbacks,
):
    with django_capture_on_commit_callbacks(execute=False) as callbacks:
        event = registry.create_event(user, create_data)
        assert socket_server.emitted == []

    assert event.creator_id == user.pk
    assert list(event.attendees.all()) == []
    assert len(callbacks) == 1

    callbacks[0]()
    name, payload, room = socket_server.emitted[0]
    assert (name, room) == (NEW_EVENT, None)
    assert payload["id"] == str(event.pk)
    assert payload["creator"] == {"id": user.pk, "name": user.name, "email": user.email}
    assert payload["attendees"] == []


def test_update_by_non_creator_is_forbidden_and_changes_nothing(
    registry,
    make_event,
    other_user,
    socket_server,
    django_capture_on_commit_callbacks,
):
    event = make_event()

    with django_capture_on_commit_callbacks(execute=True) as callbacks:
        with pytest.raises(NotEventCreatorError):
            registry.update_event(other_user, event.pk, {"title": "Hijacked"})

    event.refresh_from_db()
    assert event.title == "Python Meetup"
    assert callbacks == []
    assert socket_server.emitted == []


def test_missing_event_is_reported_before_ownership(registry, other_user):
    with pytest.raises(EventNotFoundError):
        registry.update_event(other_user, uuid.uuid4(), {"title": "x"})
    with pytest.raises(EventNotFoundError):
        registry.delete_event(other_user, "nope")


def test_update_applies_only_given_fields_and_notifies_room(
    registry,
    make_event,
    user,
    socket_server,
    django_capture_on_commit_callbacks,
):
    event = make_event()

    with django_capture_on_commit_callbacks(execute=True):
        updated = registry.update_event(user, str(event.pk), {"location": "Munich"})

    assert updated.location == "Munich"
    assert updated.title == "Python Meetup"
    assert updated.creator_id == user.pk
    name, payload, room = socket_server.emitted[-1]
    assert (name, room) == (EVENT_UPDATED, room_for_event(event.pk))
    assert payload["location"] == "Munich"


def test_delete_removes_event_and_broadcasts_id(
    registry,
    make_event,
    user,
    other_user,
    socket_server,
    django_capture_on_commit_callbacks,
):
    event = make_event()
    EventAttendee.objects.create(event=event, user=other_user)

    with django_capture_on_commit_callbacks(execute=True):
        registry.delete_event(user, event.pk)

    assert not Event.objects.filter(pk=event.pk).exists()
    assert not EventAttendee.objects.exists()
    assert socket_server.emitted == [(EVENT_DELETED, str(event.pk), None)]


def test_join_twice_conflicts_and_keeps_one_row(
    registry,
    make_event,
    other_user,
    socket_server,
    django_capture_on_commit_callbacks,
):
    event = make_event()

    with django_capture_on_commit_callbacks(execute=True):
        joined = registry.join_event(other_user, event.pk)
    assert [a.pk for a in joined.attendees.all()] == [other_user.pk]
    emitted_after_join = len(socket_server.emitted)

    with django_capture_on_commit_callbacks(execute=True) as callbacks:
        with pytest.raises(AlreadyAttendingError):
            registry.join_event(other_user, event.pk)

    assert callbacks == []
    assert len(socket_server.emitted) == emitted_after_join
    assert EventAttendee.objects.filter(event=event, user=other_user).count() == 1


def test_creator_may_attend_own_event(registry, make_event, user):
    event = make_event()

    joined = registry.join_event(user, event.pk)

    assert [a.pk for a in joined.attendees.all()] == [user.pk]


def test_leave_as_non_member_is_a_no_op(
    registry,
    make_event,
    other_user,
    socket_server,
    django_capture_on_commit_callbacks,
):
    event = make_event()

    with django_capture_on_commit_callbacks(execute=True):
        left = registry.leave_event(other_user, event.pk)

    assert list(left.attendees.all()) == []
    name, _, room = socket_server.emitted[-1]
    assert (name, room) == (EVENT_UPDATED, room_for_event(event.pk))


def test_leave_missing_event_is_not_found(registry, other_user):
    with pytest.raises(EventNotFoundError):
        registry.leave_event(other_user, uuid.uuid4())


def test_join_missing_event_is_not_found(registry, other_user):
    with pytest.raises(EventNotFoundError):
        registry.join_event(other_user, uuid.uuid4())


def test_list_rejects_inverted_date_range(registry):
    query = EventQuery(start_date=DATE, end_date=DATE - timedelta(days=1))

    with pytest.raises(InvalidDateRangeError):
        registry.list_events(query)


def test_list_returns_page_with_totals(registry, make_event):
    for day in range(3):
        make_event(title=f"Event {day}", date=DATE + timedelta(days=day))

    page = registry.list_events(EventQuery(page=1, limit=2))

    assert page.total == 3
    assert page.total_pages == 2
    assert page.has_next_page
    assert not page.has_prev_page
    assert [e.title for e in page.events] == ["Event 0", "Event 1"]


class RecordingHub(NotificationHub):
    """Notes when the ordering lock is taken and released around each emit."""

    def __init__(self, server) -> None:
        super().__init__(server)
        self.steps: list[str] = []

    @contextmanager
    def ordered(self, event_id):
        with super().ordered(event_id):
            self.steps.append("lock")
            yield
            self.steps.append("unlock")

    def _emit(self, name, payload, *, room, ordering_key):
        self.steps.append("emit")
        super()._emit(name, payload, room=room, ordering_key=ordering_key)


@pytest.mark.django_db(transaction=True)
@pytest.mark.parametrize("operation", ["update", "join", "leave", "delete"])
def test_broadcast_leaves_before_ordering_lock_is_released(
    operation,
    make_event,
    user,
    socket_server,
):
    hub = RecordingHub(socket_server)
    registry = EventRegistry(DjangoEventStore(), hub)
    event = make_event()

    if operation == "update":
        registry.update_event(user, event.pk, {"title": "Renamed"})
    elif operation == "join":
        registry.join_event(user, event.pk)
    elif operation == "leave":
        registry.leave_event(user, event.pk)
    else:
        registry.delete_event(user, event.pk)

    assert hub.steps == ["lock", "emit", "unlock"]
