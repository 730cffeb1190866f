# =============================================================================
# app/websocket/manager.py - Room Connection Manager
# =============================================================================
# Owns realtime room membership and relays events to room members.
#
# Usage:
#   from app.websocket import room_manager
#
#   # Track a client
#   connection = ClientConnection(websocket)
#   await room_manager.register(connection)
#
#   # Join / leave a title's room
#   await room_manager.join(connection, RoomKey(ContentType.MOVIE, "42"))
#
#   # Relay a comment to everyone else in its room
#   await room_manager.publish(connection, RoomEventType.NEW_COMMENT, comment)
#
#   # Drop the client from every room
#   await room_manager.disconnect(connection)
# =============================================================================

import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, Set
from uuid import uuid4

from fastapi import WebSocket

from core.models.room import RoomEventType, RoomKey

logger = logging.getLogger(__name__)

# Called after a successful local publish: relay(room, event, payload)
RelayHook = Callable[[str, RoomEventType, Dict[str, Any]], Awaitable[Any]]


class ClientConnection:
    """
    One live client. Wraps the WebSocket with a stable id.

    Rooms hold these handles, never the raw socket.
    """

    def __init__(self, websocket: WebSocket, connection_id: str | None = None):
        self.websocket = websocket
        self.id = connection_id or uuid4().hex

    async def send(self, message: dict) -> None:
        await self.websocket.send_json(message)

    def __repr__(self) -> str:
        return f"ClientConnection({self.id})"


class RoomManager:
    """
    Registry of live connections grouped into per-title rooms.

    A room ("movie_42") exists only while it has members. All membership
    changes happen under a single lock, so there is at most one mutation in
    flight. Publishing snapshots the member set under the lock and sends
    outside it; a client joining at that instant may miss the event.

    Delivery is fire-and-forget: a member whose send fails is treated as
    gone and removed from every room.
    """

    def __init__(self, relay: RelayHook | None = None):
        # room key -> connections in that room
        self.rooms: Dict[str, Set[ClientConnection]] = {}
        # connection -> room keys it joined (for disconnect cleanup)
        self.memberships: Dict[ClientConnection, Set[str]] = {}
        self.relay = relay
        self._lock = asyncio.Lock()

    # -------------------------------------------------------------------------
    # Connection lifecycle
    # -------------------------------------------------------------------------

    async def register(self, connection: ClientConnection) -> None:
        """Start tracking a connection that has not joined any room yet."""
        async with self._lock:
            self.memberships.setdefault(connection, set())

        logger.info(
            f"Client connected: {connection.id}. "
            f"Total connections: {len(self.memberships)}"
        )

    async def disconnect(self, connection: ClientConnection) -> list[str]:
        """
        Remove a connection from every room it joined.

        Returns:
            list[str]: Room keys the connection was removed from
        """
        async with self._lock:
            rooms = self._forget(connection)

        logger.info(
            f"Client disconnected: {connection.id} (left {len(rooms)} rooms). "
            f"Total connections: {len(self.memberships)}"
        )
        return rooms

    # -------------------------------------------------------------------------
    # Membership
    # -------------------------------------------------------------------------

    async def join(self, connection: ClientConnection, room: RoomKey) -> bool:
        """
        Add a connection to a room. Joining twice is harmless.

        Returns:
            bool: True if the connection was not already a member
        """
        key = str(room)
        async with self._lock:
            members = self.rooms.setdefault(key, set())
            added = connection not in members
            members.add(connection)
            self.memberships.setdefault(connection, set()).add(key)

        if added:
            logger.info(f"Client {connection.id} joined room: {key}")
        return added

    async def leave(self, connection: ClientConnection, room: RoomKey) -> bool:
        """
        Remove a connection from a room. No-op if it is not a member.

        Returns:
            bool: True if the connection was a member
        """
        key = str(room)
        async with self._lock:
            removed = self._remove_member(key, connection)
            if connection in self.memberships:
                self.memberships[connection].discard(key)

        if removed:
            logger.info(f"Client {connection.id} left room: {key}")
        return removed

    # -------------------------------------------------------------------------
    # Broadcasting
    # -------------------------------------------------------------------------

    async def publish(
        self,
        origin: ClientConnection,
        event: RoomEventType,
        payload: Dict[str, Any],
    ) -> int:
        """
        Relay a client's event to the rest of its room.

        The room comes from payload["contentType"] / payload["contentId"].
        The origin never receives its own event. Payloads without a valid
        room are dropped.

        Returns:
            int: Number of local members the event was sent to
        """
        try:
            room = RoomKey.from_payload(payload)
        except ValueError as e:
            logger.warning(f"Dropping {event.value} from {origin.id}: {e}")
            return 0

        sent_count = await self.deliver(str(room), event, payload, exclude=origin)

        if self.relay is not None:
            await self.relay(str(room), event, payload)

        return sent_count

    async def deliver(
        self,
        room: str,
        event: RoomEventType,
        payload: Dict[str, Any],
        exclude: ClientConnection | None = None,
    ) -> int:
        """
        Send an event to every local member of a room except `exclude`.

        Returns:
            int: Number of clients the message was sent to
        """
        async with self._lock:
            members = [c for c in self.rooms.get(room, ()) if c is not exclude]

        if not members:
            logger.debug(f"No other members in room {room}, skipping {event.value}")
            return 0

        message = {"type": event.value, "data": payload}
        dead_connections: list[ClientConnection] = []
        sent_count = 0

        for connection in members:
            try:
                await connection.send(message)
                sent_count += 1
            except Exception as e:
                logger.warning(f"Failed to send to {connection.id}: {e}")
                dead_connections.append(connection)

        # Clean up any dead connections
        if dead_connections:
            async with self._lock:
                for connection in dead_connections:
                    self._forget(connection)
            logger.info(f"Cleaned up {len(dead_connections)} dead connections")

        logger.debug(f"Relayed {event.value} to room {room}: sent to {sent_count} clients")
        return sent_count

    # -------------------------------------------------------------------------
    # Introspection
    # -------------------------------------------------------------------------

    def get_connection_count(self, room: str | None = None) -> int:
        """
        Get the number of active connections.

        Args:
            room: If provided, count members of that room. Otherwise total.
        """
        if room:
            return len(self.rooms.get(room, set()))
        return len(self.memberships)

    def get_active_rooms(self) -> list[str]:
        """Room keys with at least one member."""
        return list(self.rooms.keys())

    # -------------------------------------------------------------------------
    # Internals (caller holds the lock)
    # -------------------------------------------------------------------------

    def _remove_member(self, key: str, connection: ClientConnection) -> bool:
        members = self.rooms.get(key)
        if not members or connection not in members:
            return False
        members.discard(connection)
        # Clean up empty rooms
        if not members:
            del self.rooms[key]
        return True

    def _forget(self, connection: ClientConnection) -> list[str]:
        rooms = sorted(self.memberships.pop(connection, set()))
        for key in rooms:
            self._remove_member(key, connection)
        return rooms


# Shared instance used by the app (tests build their own RoomManager)
room_manager = RoomManager()
