"""In-memory stand-in for ``socketio.AsyncServer`` used by hub and handler tests."""

from __future__ import annotations

from collections import defaultdict
from typing import Any


class FakeSocketServer:
    """Records rooms, sessions and emissions instead of talking to clients.

    ``inbox[sid]`` lists ``(event_name, payload)`` in the order delivered to
    that connection.
    """

    def __init__(self) -> None:
        self.connected: set[str] = set()
        self.rooms: dict[str, set[str]] = defaultdict(set)
        self.sessions: dict[str, dict[str, Any]] = {}
        self.handlers: dict[str, Any] = {}
        self.inbox: dict[str, list[tuple[str, Any]]] = defaultdict(list)
        self.emitted: list[tuple[str, Any, str | None]] = []
        self.fail_with: Exception | None = None

    def connect(self, sid: str) -> str:
        self.connected.add(sid)
        return sid

    def disconnect(self, sid: str) -> None:
        self.connected.discard(sid)
        for members in self.rooms.values():
            members.discard(sid)

    def on(self, event: str, handler=None, namespace=None):
        self.handlers[event] = handler
        return handler

    async def enter_room(self, sid: str, room: str, namespace=None) -> None:
        self.connected.add(sid)
        self.rooms[room].add(sid)

    async def save_session(self, sid: str, session: dict[str, Any], namespace=None):
        self.sessions[sid] = dict(session)

    async def get_session(self, sid: str, namespace=None) -> dict[str, Any]:
        return self.sessions.get(sid, {})

    async def emit(self, event: str, data: Any = None, to=None, room=None, **kwargs):
        if self.fail_with is not None:
            raise self.fail_with
        target = to or room
        self.emitted.append((event, data, target))
        recipients = self.rooms.get(target, set()) if target else self.connected
        for sid in sorted(recipients):
            self.inbox[sid].append((event, data))

    def received(self, sid: str, event: str | None = None) -> list[Any]:
        return [
            payload
            for name, payload in self.inbox.get(sid, [])
            if event is None or name == event
        ]
