"""Socket.IO server shared by every realtime feature.

Clients connect at ``/ws/socket.io`` and may pass a JWT access token as
``?token=`` or in the ``auth`` payload. Without one they are anonymous and
can only join ``public``. With one they are placed in ``user_<id>``, and
admins additionally in ``admin``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any
from urllib.parse import parse_qs

import socketio
from asgiref.sync import async_to_sync
from channels.db import database_sync_to_async
from django.conf import settings

from campus_events.core.exceptions import InvalidToken
from campus_events.core.exceptions import TokenExpired
from campus_events.users.authentication import BearerJWTAuthentication

logger = logging.getLogger(__name__)

ROOM_PUBLIC = "public"
ROOM_ADMIN = "admin"

ANONYMOUS_SESSION = {"user_id": None, "is_admin": False}

sio = socketio.AsyncServer(
    async_mode="asgi",
    cors_allowed_origins=settings.SOCKETIO_CORS_ALLOWED_ORIGINS or "*",
    logger=False,
    engineio_logger=False,
)


@dataclass(frozen=True)
class UserRealtimeContext:
    user_id: int
    is_admin: bool

    @property
    def session(self) -> dict[str, Any]:
        return {"user_id": self.user_id, "is_admin": self.is_admin}

    @property
    def rooms(self) -> list[str]:
        rooms = [room_for_user(self.user_id)]
        if self.is_admin:
            rooms.append(ROOM_ADMIN)
        return rooms


def room_for_user(user_id: int) -> str:
    return f"user_{int(user_id)}"


@database_sync_to_async
def _get_user_context_from_access_token(token: str) -> UserRealtimeContext:
    auth = BearerJWTAuthentication()
    user = auth.get_user(auth.get_validated_token(token))
    return UserRealtimeContext(user_id=int(user.pk), is_admin=bool(user.is_admin))


def _query_string(environ: Any) -> str:
    # ASGI servers nest the scope; WSGI-style environs carry QUERY_STRING.
    if not isinstance(environ, dict):
        return ""
    scope = environ.get("asgi.scope")
    if isinstance(scope, dict):
        raw = scope.get("query_string", b"")
    else:
        raw = environ.get("query_string", environ.get("QUERY_STRING", ""))
    if isinstance(raw, (bytes, bytearray)):
        return raw.decode(errors="ignore")
    return str(raw or "")


def _extract_token(environ: Any, auth: Any | None) -> str | None:
    """Return the bearer token from the query string, else from ``auth``."""

    for candidate in parse_qs(_query_string(environ)).get("token", []):
        if candidate:
            return candidate
    if isinstance(auth, dict):
        token = auth.get("token")
        if isinstance(token, str) and token:
            return token
    return None


def _may_join(room: str | None, session: Any) -> bool:
    if room == ROOM_PUBLIC:
        return True
    is_admin = isinstance(session, dict) and bool(session.get("is_admin"))
    return room == ROOM_ADMIN and is_admin


@sio.event
async def connect(sid: str, environ: dict[str, Any], auth: Any | None = None):
    token = _extract_token(environ, auth)
    if token is None:
        await sio.save_session(sid, dict(ANONYMOUS_SESSION))
        return

    try:
        ctx = await _get_user_context_from_access_token(token)
    except TokenExpired as exc:
        msg = "jwt_expired"
        raise ConnectionRefusedError(msg) from exc
    except InvalidToken as exc:
        msg = "unauthorized"
        raise ConnectionRefusedError(msg) from exc
    except Exception as exc:
        logger.exception("Socket.IO connect failed for %s", sid)
        msg = "server_error"
        raise ConnectionRefusedError(msg) from exc

    await sio.save_session(sid, ctx.session)
    for room in ctx.rooms:
        await sio.enter_room(sid, room)
    logger.debug("Socket %s connected as user %s", sid, ctx.user_id)


@sio.event
async def disconnect(sid: str, *args):
    logger.debug("Socket %s disconnected", sid)


def _room_from(data: Any) -> str | None:
    if isinstance(data, dict):
        data = data.get("room")
    if isinstance(data, str):
        return data.strip() or None
    return None


@sio.on("join-room")
async def join_room(sid: str, data: Any):
    room = _room_from(data)
    if _may_join(room, await sio.get_session(sid)):
        await sio.enter_room(sid, room)
        logger.info("Socket %s joined room %s", sid, room)
        return {"ok": True, "room": room}

    await sio.emit("room-error", {"room": room, "error": "forbidden"}, to=sid)
    return {"ok": False, "room": room, "error": "forbidden"}


@sio.on("leave-room")
async def leave_room(sid: str, data: Any):
    room = _room_from(data)
    if room:
        await sio.leave_room(sid, room)
    return {"ok": True, "room": room}


# Sync helpers for Django code (views, services, on_commit callbacks).


def emit_event_to_room(room: str, event: str, payload: dict[str, Any]) -> None:
    async_to_sync(sio.emit)(event, payload, room=room)


def emit_event_to_all(event: str, payload: dict[str, Any]) -> None:
    async_to_sync(sio.emit)(event, payload)


def emit_event_to_user(user_id: int, event: str, payload: dict[str, Any]) -> None:
    emit_event_to_room(room_for_user(user_id), event, payload)
