import uuid

import pytest
from asgiref.sync import async_to_sync
from rest_framework.exceptions import AuthenticationFailed

from eventhub.realtime import socketio as realtime_socketio
from eventhub.realtime.hub import room_for_event
from eventhub.realtime.socketio import JOIN_EVENT
from eventhub.realtime.socketio import _extract_token
from eventhub.realtime.socketio import attach_handlers
from eventhub.realtime.socketio import user_id_for_token
from eventhub.users.tokens import issue_access_token


@pytest.fixture
def handlers(socket_server):
    attach_handlers(socket_server)
    return socket_server.handlers


def _environ(query: bytes = b"") -> dict:
    return {"asgi.scope": {"type": "websocket", "query_string": query}}


class TestExtractToken:
    def test_reads_query_string_from_asgi_scope(self):
        assert _extract_token(_environ(b"EIO=4&token=abc.def"), None) == "abc.def"

    def test_reads_wsgi_style_query_string(self):
        assert _extract_token({"QUERY_STRING": "token=xyz"}, None) == "xyz"

    def test_falls_back_to_auth_payload(self):
        assert _extract_token(_environ(), {"token": "from-auth"}) == "from-auth"

    def test_missing_token(self):
        assert _extract_token(_environ(b"EIO=4"), {"other": 1}) is None


def test_handlers_are_registered(handlers):
    assert set(handlers) == {"connect", JOIN_EVENT, "disconnect"}


def test_anonymous_connect_is_accepted(handlers, socket_server):
    async_to_sync(handlers["connect"])("sid-1", _environ(), None)

    assert socket_server.sessions["sid-1"] == {"user_id": None}


def test_connect_with_valid_token_tags_session(handlers, socket_server, monkeypatch):
    async def fake_lookup(token):
        assert token == "good"  # noqa: S105
        return 42

    monkeypatch.setattr(realtime_socketio, "_get_user_id_from_access_token", fake_lookup)

    async_to_sync(handlers["connect"])("sid-1", _environ(b"token=good"), None)

    assert socket_server.sessions["sid-1"] == {"user_id": 42}


def test_connect_with_bad_token_stays_anonymous(handlers, socket_server, monkeypatch):
    async def fake_lookup(token):
        msg = "Token is invalid"
        raise AuthenticationFailed(msg)

    monkeypatch.setattr(realtime_socketio, "_get_user_id_from_access_token", fake_lookup)

    async_to_sync(handlers["connect"])("sid-1", _environ(), {"token": "bad"})

    assert socket_server.sessions["sid-1"] == {"user_id": None}


def test_join_event_subscribes_to_room(handlers, notification_hub):
    event_id = uuid.uuid4()

    async_to_sync(handlers[JOIN_EVENT])("sid-1", str(event_id).upper())

    assert notification_hub.rooms_for("sid-1") == frozenset({room_for_event(event_id)})


def test_join_event_accepts_object_payload(handlers, notification_hub):
    event_id = uuid.uuid4()

    async_to_sync(handlers[JOIN_EVENT])("sid-1", {"eventId": str(event_id)})

    assert notification_hub.subscribers(event_id) == frozenset({"sid-1"})


@pytest.mark.parametrize("payload", [None, "", "not-a-uuid", {"foo": "bar"}])
def test_join_event_ignores_unusable_ids(handlers, notification_hub, payload):
    async_to_sync(handlers[JOIN_EVENT])("sid-1", payload)

    assert notification_hub.room_count() == 0


def test_disconnect_forgets_connection(handlers, notification_hub):
    event_id = uuid.uuid4()
    async_to_sync(handlers[JOIN_EVENT])("sid-1", str(event_id))

    async_to_sync(handlers["disconnect"])("sid-1", "client disconnect")

    assert notification_hub.rooms_for("sid-1") == frozenset()


@pytest.mark.django_db
def test_user_id_for_token_resolves_user(user):
    assert user_id_for_token(issue_access_token(user)) == user.pk


@pytest.mark.django_db
def test_user_id_for_token_rejects_garbage():
    with pytest.raises(AuthenticationFailed):
        user_id_for_token("not-a-jwt")
