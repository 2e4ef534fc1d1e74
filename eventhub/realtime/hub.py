"""Notification hub: event rooms and best-effort broadcasts over Socket.IO.

Each event has a room named ``event:<id>``. Clients enter it by sending
``joinEvent`` with the event id. Joining a room is unrelated to attending the
event, and no authentication is needed. ``newEvent`` and ``eventDeleted`` go to
every connected client. ``eventUpdated`` goes to the event's room only.

Delivery is fire-and-forget: at most once per connected client, no replay for
clients that were offline.
"""

from __future__ import annotations

import logging
import threading
import zlib
from collections import defaultdict
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import socketio
from asgiref.sync import async_to_sync
from django.conf import settings

logger = logging.getLogger(__name__)

NEW_EVENT = "newEvent"
EVENT_UPDATED = "eventUpdated"
EVENT_DELETED = "eventDeleted"

_ROOM_PREFIX = "event:"
_EMIT_LOCK_STRIPES = 64


def room_for_event(event_id: object) -> str:
    return f"{_ROOM_PREFIX}{event_id}"


def build_socketio_server() -> socketio.AsyncServer:
    redis_url = getattr(settings, "SOCKETIO_REDIS_URL", "")
    client_manager = socketio.AsyncRedisManager(redis_url) if redis_url else None
    return socketio.AsyncServer(
        async_mode="asgi",
        client_manager=client_manager,
        cors_allowed_origins=getattr(settings, "SOCKETIO_CORS_ALLOWED_ORIGINS", "*"),
        logger=False,
        engineio_logger=False,
    )


class NotificationHub:
    """Owns room membership for this process and emits through the server.

    The room map mirrors what was entered on the Socket.IO server; delivery
    itself uses the server's rooms so a Redis client manager can fan out to
    other worker processes.
    """

    def __init__(self, server: Any) -> None:
        self.server = server
        self._rooms: dict[str, set[str]] = defaultdict(set)
        self._rooms_lock = threading.Lock()
        # Reentrant: a broadcast may run while its thread holds ordered().
        self._emit_locks = [threading.RLock() for _ in range(_EMIT_LOCK_STRIPES)]

    async def subscribe(self, sid: str, event_id: object) -> str:
        room = room_for_event(event_id)
        await self.server.enter_room(sid, room)
        with self._rooms_lock:
            self._rooms[room].add(sid)
        logger.debug("Connection %s subscribed to %s", sid, room)
        return room

    def forget(self, sid: str) -> None:
        """Drop a closed connection from every room it was in."""
        with self._rooms_lock:
            for room in [room for room, sids in self._rooms.items() if sid in sids]:
                members = self._rooms[room]
                members.discard(sid)
                if not members:
                    del self._rooms[room]

    def subscribers(self, event_id: object) -> frozenset[str]:
        with self._rooms_lock:
            return frozenset(self._rooms.get(room_for_event(event_id), ()))

    def rooms_for(self, sid: str) -> frozenset[str]:
        with self._rooms_lock:
            return frozenset(room for room, sids in self._rooms.items() if sid in sids)

    def room_count(self) -> int:
        with self._rooms_lock:
            return len(self._rooms)

    def broadcast_global(
        self,
        name: str,
        payload: Any,
        *,
        event_id: object | None = None,
    ) -> None:
        """Send to every connected client.

        ``event_id`` orders this broadcast with the room broadcasts of the same
        event.
        """
        self._emit(name, payload, room=None, ordering_key=event_id)

    def broadcast_to_room(self, event_id: object, name: str, payload: Any) -> None:
        self._emit(name, payload, room=room_for_event(event_id), ordering_key=event_id)

    @contextmanager
    def ordered(self, event_id: object) -> Iterator[None]:
        """Hold the event's emit lock across a change and its broadcast.

        The registry wraps lock, write, commit and the ``on_commit`` emit in this
        block, so a later commit for the same event cannot broadcast first. A
        caller's outer transaction defers ``on_commit`` past the block, and then
        only issue order is kept.
        """
        with self._emit_lock(event_id):
            yield

    def _emit_lock(self, ordering_key: object | None) -> threading.RLock:
        stripe = zlib.crc32(str(ordering_key).encode()) % _EMIT_LOCK_STRIPES
        return self._emit_locks[stripe]

    def _emit(
        self,
        name: str,
        payload: Any,
        *,
        room: str | None,
        ordering_key: object | None,
    ) -> None:
        with self._emit_lock(ordering_key):
            try:
                async_to_sync(self.server.emit)(name, payload, room=room)
            except Exception:
                # The write is already committed; drop the notification.
                logger.exception(
                    "Broadcast of %s to %s failed",
                    name,
                    room or "all clients",
                )


_hub: NotificationHub | None = None
_hub_lock = threading.Lock()


def get_notification_hub() -> NotificationHub:
    """Return this process's hub, creating it and its server on first use."""
    global _hub  # noqa: PLW0603
    if _hub is None:
        with _hub_lock:
            if _hub is None:
                _hub = NotificationHub(build_socketio_server())
    return _hub
