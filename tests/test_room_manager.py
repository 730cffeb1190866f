# =============================================================================
# tests/test_room_manager.py - Room Registry Tests
# =============================================================================
# Tests for RoomManager membership and relaying, using fake connections
# that record what they are sent. Coroutines are driven with asyncio.run.
# =============================================================================

import asyncio
from unittest.mock import AsyncMock

import pytest

from app.websocket.manager import ClientConnection, RoomManager
from core.models.comment import ContentType
from core.models.room import RoomEventType, RoomKey

MOVIE_42 = RoomKey(ContentType.MOVIE, "42")
TV_7 = RoomKey(ContentType.TV, "7")


class FakeConnection(ClientConnection):
    """Connection that records messages instead of writing to a socket."""

    def __init__(self, name: str, broken: bool = False):
        super().__init__(websocket=None, connection_id=name)
        self.received: list[dict] = []
        self.broken = broken

    async def send(self, message: dict) -> None:
        if self.broken:
            raise RuntimeError("socket closed")
        self.received.append(message)


def run(coro):
    return asyncio.run(coro)


@pytest.fixture
def manager():
    return RoomManager()


@pytest.fixture
def clients():
    return FakeConnection("A"), FakeConnection("B"), FakeConnection("C")


def comment_payload(content_type="movie", content_id="42", **extra):
    return {
        "id": "550e8400-e29b-41d4-a716-446655440000",
        "contentType": content_type,
        "contentId": content_id,
        "username": "neo",
        "comment": "Whoa.",
        "likes": 0,
        **extra,
    }


# =============================================================================
# Membership
# =============================================================================

class TestMembership:
    """Join / leave / disconnect."""

    def test_join_creates_room(self, manager, clients):
        a, _, _ = clients

        assert run(manager.join(a, MOVIE_42)) is True
        assert manager.get_active_rooms() == ["movie_42"]
        assert manager.get_connection_count("movie_42") == 1

    def test_join_is_idempotent(self, manager, clients):
        a, _, _ = clients

        async def scenario():
            await manager.join(a, MOVIE_42)
            return await manager.join(a, MOVIE_42)

        assert run(scenario()) is False
        assert manager.get_connection_count("movie_42") == 1
        assert manager.memberships.get(a, set()) == {"movie_42"}

    def test_leave_removes_empty_room(self, manager, clients):
        a, _, _ = clients

        async def scenario():
            await manager.join(a, MOVIE_42)
            return await manager.leave(a, MOVIE_42)

        assert run(scenario()) is True
        assert manager.get_active_rooms() == []
        assert manager.memberships.get(a, set()) == set()

    def test_leave_when_not_member_is_noop(self, manager, clients):
        a, b, _ = clients

        async def scenario():
            await manager.join(a, MOVIE_42)
            return await manager.leave(b, MOVIE_42)

        assert run(scenario()) is False
        assert manager.get_connection_count("movie_42") == 1

    def test_disconnect_leaves_every_room(self, manager, clients):
        a, b, _ = clients

        async def scenario():
            await manager.register(a)
            await manager.register(b)
            await manager.join(a, MOVIE_42)
            await manager.join(a, TV_7)
            await manager.join(b, MOVIE_42)
            return await manager.disconnect(a)

        assert run(scenario()) == ["movie_42", "tv_7"]
        assert manager.get_active_rooms() == ["movie_42"]
        assert manager.get_connection_count() == 1

    def test_disconnect_unknown_connection(self, manager, clients):
        a, _, _ = clients
        assert run(manager.disconnect(a)) == []

    def test_register_counts_connections(self, manager, clients):
        async def scenario():
            for client in clients:
                await manager.register(client)

        run(scenario())

        assert manager.get_connection_count() == 3
        assert manager.get_active_rooms() == []

    def test_concurrent_joins_are_all_applied(self, manager):
        connections = [FakeConnection(f"c{i}") for i in range(50)]

        async def scenario():
            await asyncio.gather(*(manager.join(c, MOVIE_42) for c in connections))

        run(scenario())

        assert manager.get_connection_count("movie_42") == 50


# =============================================================================
# Publishing
# =============================================================================

class TestPublish:
    """Relaying events to the rest of a room."""

    def test_delivered_to_room_except_sender(self, manager, clients):
        a, b, c = clients
        payload = comment_payload()

        async def scenario():
            await manager.join(a, MOVIE_42)
            await manager.join(b, MOVIE_42)
            await manager.join(c, TV_7)
            return await manager.publish(a, RoomEventType.NEW_COMMENT, payload)

        assert run(scenario()) == 1
        assert b.received == [{"type": "new_comment", "data": payload}]
        assert a.received == []
        assert c.received == []

    def test_comment_liked_event(self, manager, clients):
        a, b, _ = clients
        payload = comment_payload(likes=1)

        async def scenario():
            await manager.join(a, MOVIE_42)
            await manager.join(b, MOVIE_42)
            await manager.publish(a, RoomEventType.COMMENT_LIKED, payload)

        run(scenario())

        assert b.received == [{"type": "comment_liked", "data": payload}]

    def test_sender_need_not_be_member(self, manager, clients):
        a, b, _ = clients

        async def scenario():
            await manager.join(b, MOVIE_42)
            return await manager.publish(a, RoomEventType.NEW_COMMENT, comment_payload())

        assert run(scenario()) == 1
        assert len(b.received) == 1

    def test_not_delivered_after_leave(self, manager, clients):
        a, b, _ = clients

        async def scenario():
            await manager.join(a, MOVIE_42)
            await manager.join(b, MOVIE_42)
            await manager.leave(b, MOVIE_42)
            return await manager.publish(a, RoomEventType.NEW_COMMENT, comment_payload())

        assert run(scenario()) == 0
        assert b.received == []

    def test_not_delivered_after_disconnect(self, manager, clients):
        a, b, _ = clients

        async def scenario():
            await manager.join(a, MOVIE_42)
            await manager.join(b, MOVIE_42)
            await manager.disconnect(b)
            return await manager.publish(a, RoomEventType.NEW_COMMENT, comment_payload())

        assert run(scenario()) == 0
        assert b.received == []

    def test_numeric_content_id_reaches_room(self, manager, clients):
        a, b, _ = clients

        async def scenario():
            await manager.join(b, MOVIE_42)
            return await manager.publish(a, RoomEventType.NEW_COMMENT, comment_payload(content_id=42))

        assert run(scenario()) == 1

    @pytest.mark.parametrize("payload", [
        {"comment": "no room"},
        comment_payload(content_type="anime"),
    ])
    def test_payload_without_room_is_dropped(self, manager, clients, payload):
        a, b, _ = clients

        async def scenario():
            await manager.join(b, MOVIE_42)
            return await manager.publish(a, RoomEventType.NEW_COMMENT, payload)

        assert run(scenario()) == 0
        assert b.received == []

    def test_dead_member_is_removed(self, manager, clients):
        a, b, _ = clients
        dead = FakeConnection("dead", broken=True)

        async def scenario():
            await manager.join(b, MOVIE_42)
            await manager.join(dead, MOVIE_42)
            await manager.join(dead, TV_7)
            return await manager.publish(a, RoomEventType.NEW_COMMENT, comment_payload())

        assert run(scenario()) == 1
        assert len(b.received) == 1
        assert manager.memberships.get(dead, set()) == set()
        assert manager.get_active_rooms() == ["movie_42"]

    def test_relay_hook_called_after_local_delivery(self, clients):
        a, b, _ = clients
        relay = AsyncMock()
        manager = RoomManager(relay=relay)
        payload = comment_payload()

        async def scenario():
            await manager.join(b, MOVIE_42)
            await manager.publish(a, RoomEventType.NEW_COMMENT, payload)

        run(scenario())

        relay.assert_awaited_once_with("movie_42", RoomEventType.NEW_COMMENT, payload)

    def test_relay_hook_skipped_for_dropped_payload(self, clients):
        a, _, _ = clients
        relay = AsyncMock()
        manager = RoomManager(relay=relay)

        run(manager.publish(a, RoomEventType.NEW_COMMENT, {"comment": "no room"}))

        relay.assert_not_awaited()

    def test_deliver_without_exclusion(self, manager, clients):
        a, b, _ = clients

        async def scenario():
            await manager.join(a, MOVIE_42)
            await manager.join(b, MOVIE_42)
            return await manager.deliver("movie_42", RoomEventType.NEW_COMMENT, comment_payload())

        assert run(scenario()) == 2
