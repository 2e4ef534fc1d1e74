"""Socket.IO connection handlers for live event updates.

Frontend convention:
- Socket.IO path: /socket.io/
- Auth: optional `query.token` or `auth.token` (JWT access token). It is only
  used to tag the connection's session; anonymous clients may subscribe too.
- Client -> server: `joinEvent` with the event id string.
- Server -> client: `newEvent`, `eventUpdated`, `eventDeleted`.
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import parse_qs
from uuid import UUID

import socketio
from channels.db import database_sync_to_async
from django.conf import settings
from rest_framework.exceptions import AuthenticationFailed
from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework_simplejwt.exceptions import TokenError

from eventhub.realtime.hub import get_notification_hub

logger = logging.getLogger(__name__)

JOIN_EVENT = "joinEvent"


def user_id_for_token(token: str) -> int:
    """Resolve an access token to its user id.

    Raises:
        AuthenticationFailed: If the token is malformed or expired, or its user
            is unknown or inactive.
    """
    jwt_auth = JWTAuthentication()
    validated = jwt_auth.get_validated_token(token)
    user = jwt_auth.get_user(validated)
    return int(user.pk)


_get_user_id_from_access_token = database_sync_to_async(user_id_for_token)


def _extract_token(environ: dict[str, Any], auth: Any | None) -> str | None:
    """Extract JWT token from Socket.IO environ/auth.

    Handles python-socketio environ shapes across ASGI/WSGI servers.
    """

    scope: Any = environ
    if isinstance(environ, dict) and "asgi.scope" in environ:
        inner = environ.get("asgi.scope")
        if isinstance(inner, dict):
            scope = inner

    query_string: str | bytes = ""
    if isinstance(scope, dict) and "query_string" in scope:
        query_string = scope.get("query_string", b"")
    elif isinstance(scope, dict) and "QUERY_STRING" in scope:
        query_string = scope.get("QUERY_STRING", "")

    if isinstance(query_string, (bytes, bytearray)):
        query_string = query_string.decode(errors="ignore")

    token = parse_qs(str(query_string)).get("token", [None])[0]
    if isinstance(token, str) and token:
        return token

    # Allow `auth: { token }` as fallback.
    if isinstance(auth, dict):
        auth_token = auth.get("token")
        if isinstance(auth_token, str) and auth_token:
            return auth_token

    return None


def _canonical_event_id(data: Any) -> str | None:
    if isinstance(data, dict):
        data = data.get("eventId") or data.get("id")
    if data is None:
        return None
    try:
        return str(UUID(str(data)))
    except ValueError:
        return None


def attach_handlers(server: socketio.AsyncServer) -> socketio.AsyncServer:
    """Register the connection handlers on ``server``."""

    async def connect(sid: str, environ: dict[str, Any], auth: Any | None = None):
        user_id = None
        token = _extract_token(environ, auth)
        if token:
            try:
                user_id = await _get_user_id_from_access_token(token)
            except (TokenError, AuthenticationFailed):
                # Rooms are public; a bad token just leaves the connection anonymous.
                logger.debug("Ignoring invalid token on connection %s", sid)
        await server.save_session(sid, {"user_id": user_id})
        logger.debug("Connection %s opened (user %s)", sid, user_id)

    async def join_event(sid: str, data: Any):
        event_id = _canonical_event_id(data)
        if event_id is None:
            logger.debug("Connection %s sent joinEvent without an event id", sid)
            return
        await get_notification_hub().subscribe(sid, event_id)

    async def disconnect(sid: str, reason: Any = None):
        get_notification_hub().forget(sid)
        logger.debug("Connection %s closed (%s)", sid, reason)

    server.on("connect", connect)
    server.on(JOIN_EVENT, join_event)
    server.on("disconnect", disconnect)
    return server


def build_asgi_app(other_asgi_app: Any) -> socketio.ASGIApp:
    """Mount the hub's Socket.IO server in front of the Django ASGI app."""
    server = attach_handlers(get_notification_hub().server)
    return socketio.ASGIApp(
        server,
        other_asgi_app=other_asgi_app,
        socketio_path=getattr(settings, "SOCKETIO_PATH", "socket.io"),
    )
