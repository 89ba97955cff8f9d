"""Realtime channel manager: user rooms of open WebSockets and best-effort event delivery."""
import asyncio
import json
import logging
from typing import Any, Protocol, Set

from fastapi.encoders import jsonable_encoder

from chefbook.auth.identity import verify_token
from chefbook.models.message import Message

logger = logging.getLogger(__name__)


class Connection(Protocol):
    async def send_text(self, data: str) -> None: ...


def encode_event(event: str, data: dict[str, Any]) -> str:
    return json.dumps(jsonable_encoder({"event": event, "data": data}))


def new_message_payload(message: Message) -> dict[str, Any]:
    return {
        "messageId": message.id,
        "senderId": message.sender_id,
        "content": message.content,
        "timestamp": message.timestamp,
        "bookingId": message.booking_id,
    }


class RealtimeChannelManager:
    """
    Maps user_id -> set of connections (the user's room) and connection -> user_id.
    Rooms are filled on authenticate and pruned on disconnect or failed send.
    Delivery never raises: a user without connections simply misses the push and
    reads the persisted record later.
    """

    def __init__(self) -> None:
        self._rooms: dict[int, Set[Connection]] = {}
        self._bound: dict[Connection, int] = {}
        self._tasks: Set[asyncio.Task] = set()

    def bind(self, connection: Connection, user_id: int) -> None:
        previous = self._bound.get(connection)
        if previous is not None and previous != user_id:
            self._leave(previous, connection)
        self._bound[connection] = user_id
        self._rooms.setdefault(user_id, set()).add(connection)

    def authenticate(self, connection: Connection, token: object) -> int | None:
        """Bind the connection to the token's user. On failure log and leave it as it was."""
        user_id = verify_token(token)
        if user_id is None:
            logger.warning("Realtime authentication failed")
            return None
        self.bind(connection, user_id)
        logger.info(f"User {user_id} authenticated on realtime connection")
        return user_id

    def user_for(self, connection: Connection) -> int | None:
        return self._bound.get(connection)

    def is_online(self, user_id: int) -> bool:
        return bool(self._rooms.get(user_id))

    def connections_for(self, user_id: int) -> Set[Connection]:
        return set(self._rooms.get(user_id, ()))

    def _leave(self, user_id: int, connection: Connection) -> None:
        if user_id in self._rooms:
            self._rooms[user_id].discard(connection)
            if not self._rooms[user_id]:
                del self._rooms[user_id]

    def disconnect(self, connection: Connection) -> None:
        user_id = self._bound.pop(connection, None)
        if user_id is not None:
            self._leave(user_id, connection)
            logger.info(f"User {user_id} realtime connection closed")

    async def send_to(self, connection: Connection, event: str, data: dict[str, Any]) -> bool:
        """Send one event to one connection (acks, errors). Returns False if the send failed."""
        try:
            await connection.send_text(encode_event(event, data))
            return True
        except Exception as e:
            logger.warning(f"Dropping realtime connection after failed {event!r} send: {e}")
            self.disconnect(connection)
            return False

    async def deliver(self, user_id: int, event: str, data: dict[str, Any]) -> int:
        """Push an event to every connection in the user's room. Returns how many received it."""
        if user_id not in self._rooms:
            return 0
        text = encode_event(event, data)
        dead = set()
        delivered = 0
        for connection in list(self._rooms[user_id]):
            try:
                await connection.send_text(text)
                delivered += 1
            except Exception as e:
                logger.warning(f"Realtime delivery of {event!r} to user {user_id} failed: {e}")
                dead.add(connection)
        for connection in dead:
            self._bound.pop(connection, None)
            self._leave(user_id, connection)
        return delivered

    async def deliver_many(self, user_ids: list[int], event: str, data: dict[str, Any]) -> None:
        await asyncio.gather(*[self.deliver(uid, event, data) for uid in user_ids])

    def dispatch(self, user_ids: int | list[int], event: str, data: dict[str, Any]) -> asyncio.Task:
        """Fire-and-forget delivery; the caller never waits on recipients."""
        targets = [user_ids] if isinstance(user_ids, int) else list(user_ids)
        task = asyncio.create_task(self.deliver_many(targets, event, data))
        self._tasks.add(task)
        task.add_done_callback(self._task_done)
        return task

    def _task_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.error(f"Realtime dispatch failed: {task.exception()!r}")

    def notify_new_message(self, message: Message) -> asyncio.Task:
        return self.dispatch(message.receiver_id, "new_message", new_message_payload(message))

    def relay_typing(self, from_user_id: int, to_user_id: int) -> asyncio.Task:
        return self.dispatch(to_user_id, "user_typing", {"userId": from_user_id})

    async def drain(self) -> None:
        """Wait for in-flight dispatches (shutdown, tests)."""
        if self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)


realtime_manager = RealtimeChannelManager()
