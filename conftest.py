from __future__ import annotations

import pytest
from django.core.cache import cache
from django.utils.dateparse import parse_datetime
from rest_framework.test import APIClient

from eventhub.events.models import Event
from eventhub.realtime import hub as hub_module
from eventhub.realtime.hub import NotificationHub
from eventhub.users.models import User
from tests.fakes import FakeSocketServer

TEST_PASSWORD = "Secret#123"  # noqa: S105


@pytest.fixture(autouse=True)
def _clear_cache():
    """Login throttle counters live in the cache; start every test clean."""
    cache.clear()
    yield
    cache.clear()


@pytest.fixture(autouse=True)
def _media_storage(settings, tmp_path):
    settings.MEDIA_ROOT = str(tmp_path / "media")


@pytest.fixture
def socket_server() -> FakeSocketServer:
    return FakeSocketServer()


@pytest.fixture(autouse=True)
def notification_hub(socket_server, monkeypatch) -> NotificationHub:
    """Process hub wired to the fake server, so no test touches real sockets."""
    hub = NotificationHub(socket_server)
    monkeypatch.setattr(hub_module, "_hub", hub)
    return hub


@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    def _make_user(name: str | None = None, email: str | None = None) -> User:
        counter["n"] += 1
        name = name or f"User {counter['n']}"
        email = email or f"user{counter['n']}@example.com"
        return User.objects.create_user(email=email, password=TEST_PASSWORD, name=name)

    return _make_user


@pytest.fixture
def user(make_user) -> User:
    return make_user(name="Alice", email="alice@example.com")


@pytest.fixture
def other_user(make_user) -> User:
    return make_user(name="Bob", email="bob@example.com")


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture
def auth_client(user) -> APIClient:
    client = APIClient()
    client.force_authenticate(user=user)
    return client


@pytest.fixture
def other_client(other_user) -> APIClient:
    client = APIClient()
    client.force_authenticate(user=other_user)
    return client


@pytest.fixture
def event_data() -> dict:
    """A valid create payload in the API's camelCase shape."""
    return {
        "title": "Python Meetup",
        "description": "Talks and pizza",
        "date": "2030-05-01T18:00:00Z",
        "location": "Berlin",
        "category": "tech",
        "coverUrl": "https://img.example.com/cover.png",
        "imagesUrl": ["https://img.example.com/1.png"],
    }


@pytest.fixture
def make_event(db, user):
    def _make_event(creator: User | None = None, **fields) -> Event:
        values = {
            "title": "Python Meetup",
            "description": "Talks and pizza",
            "date": parse_datetime("2030-05-01T18:00:00Z"),
            "location": "Berlin",
            "category": "tech",
            "cover_url": "https://img.example.com/cover.png",
            "images_url": [],
        }
        values.update(fields)
        return Event.objects.create(creator=creator or user, **values)

    return _make_event
