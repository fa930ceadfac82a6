"""WebSocket broadcast hub for live task and notebook change notifications.

A single control loop owns the registry of connected clients. Register,
unregister and broadcast requests are all handed to that loop through one
asyncio queue, so the client set is only ever mutated by the loop task and
events are applied strictly in arrival order.

Delivery is best-effort. Each client has a bounded send queue; when a message
targets a client whose queue is already full, the hub evicts that client
(closes its queue and drops it from the registry) instead of waiting. The
application layer is not told that delivery failed: the browser sees its
socket close, reconnects and refetches.
"""

from __future__ import annotations

import asyncio
import json
from dataclasses import dataclass
from enum import Enum
from typing import Any

from tonish.exceptions import HubNotRunningError
from tonish.logging import get_logger

logger = get_logger(__name__)

SEND_BUFFER_SIZE = 256

_REGISTER = "register"
_UNREGISTER = "unregister"
_BROADCAST = "broadcast"


class MessageType(str, Enum):
    """Change notification kinds pushed to clients."""

    TASK_UPDATE = "task_update"
    TASK_CREATE = "task_create"
    TASK_DELETE = "task_delete"
    NOTEBOOK_UPDATE = "notebook_update"
    NOTEBOOK_CREATE = "notebook_create"
    NOTEBOOK_DELETE = "notebook_delete"


@dataclass
class Message:
    """A transient change notification.

    user_id 0 addresses every connected client; any other value addresses
    only the clients connected with that user id.
    """

    type: str
    data: Any = None
    user_id: int = 0

    @property
    def type_name(self) -> str:
        return self.type.value if isinstance(self.type, Enum) else str(self.type)

    def to_json(self) -> bytes:
        """Serialize to the wire format, omitting user_id when it is zero.

        Raises TypeError or ValueError when data is not JSON-serializable.
        """
        body: dict[str, Any] = {"type": self.type_name, "data": self.data}
        if self.user_id:
            body["user_id"] = self.user_id
        return json.dumps(body, allow_nan=False).encode("utf-8")


def is_recipient(message_user_id: int, client_user_id: int) -> bool:
    """Targeting rule: global messages reach everyone, others only their user."""
    return message_user_id == 0 or client_user_id == message_user_id


class Client:
    """Server-side handle for one WebSocket connection.

    The hub writes serialized payloads into `send`; the connection's writer
    task drains it. A None item is the close marker and is always the last
    item ever placed on the queue. Capacity is enforced by offer() so the
    close marker fits even when the queue is full.
    """

    def __init__(
        self,
        connection: Any,
        user_id: int = 0,
        buffer_size: int = SEND_BUFFER_SIZE,
    ) -> None:
        self.connection = connection
        self.user_id = user_id
        self.buffer_size = buffer_size
        self.send: asyncio.Queue[bytes | None] = asyncio.Queue()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def offer(self, payload: bytes) -> bool:
        """Enqueue without waiting. Returns False if the queue is full or closed."""
        if self._closed or self.send.qsize() >= self.buffer_size:
            return False
        self.send.put_nowait(payload)
        return True

    def close(self) -> None:
        """Close the send queue. A second call is a no-op."""
        if self._closed:
            return
        self._closed = True
        self.send.put_nowait(None)

    async def receive(self) -> bytes | None:
        """Wait for the next payload; None once the queue is closed and drained."""
        payload = await self.send.get()
        if payload is None:
            # Leave the marker in place for any later caller.
            self.send.put_nowait(None)
        return payload

    def __repr__(self) -> str:
        return f"Client(user_id={self.user_id}, closed={self._closed})"


class Hub:
    """Owns the set of connected clients and fans messages out to them.

    Usage:
        hub = Hub()
        await hub.start()
        client = hub.new_client(websocket, user_id=3)
        await hub.register(client)
        hub.broadcast_to_user(3, MessageType.TASK_UPDATE, task.to_dict())
        ...
        await hub.stop()

    register() and unregister() return only after the control loop has
    applied them, which makes them usable as ordering barriers. broadcast()
    never blocks the caller and never raises.
    """

    def __init__(self, send_buffer_size: int = SEND_BUFFER_SIZE) -> None:
        self.send_buffer_size = send_buffer_size
        self._clients: set[Client] = set()
        self._events: asyncio.Queue[tuple[str, Any, asyncio.Future | None]] = (
            asyncio.Queue()
        )
        self._running = False
        self._task: asyncio.Task | None = None  # type: ignore[type-arg]

    @property
    def running(self) -> bool:
        return self._running

    @property
    def client_count(self) -> int:
        """Number of registered clients.

        Safe to read from any coroutine on the hub's event loop; the set is
        only mutated between awaits of the control loop.
        """
        return len(self._clients)

    def new_client(self, connection: Any, user_id: int = 0) -> Client:
        """Build a client whose queue capacity matches this hub's setting."""
        return Client(connection, user_id=user_id, buffer_size=self.send_buffer_size)

    # ──────────────────────────────────────────────
    # Lifecycle
    # ──────────────────────────────────────────────

    async def start(self) -> None:
        """Launch the control loop as a background task."""
        if self._running:
            logger.warning("hub_already_running")
            return
        self._running = True
        self._task = asyncio.create_task(self._run(), name="broadcast-hub")
        logger.info("hub_started", send_buffer_size=self.send_buffer_size)

    async def stop(self) -> None:
        """Stop the control loop and close every client's send queue.

        Pending registrations are released and their clients closed; pending
        broadcasts are dropped.
        """
        self._running = False
        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None

        while not self._events.empty():
            kind, item, ack = self._events.get_nowait()
            if kind == _REGISTER:
                item.close()
            if ack is not None and not ack.done():
                ack.set_result(None)

        closed = len(self._clients)
        for client in self._clients:
            client.close()
        self._clients.clear()
        logger.info("hub_stopped", closed_clients=closed)

    # ──────────────────────────────────────────────
    # Entry points
    # ──────────────────────────────────────────────

    async def register(self, client: Client) -> None:
        """Add a client to the active set.

        Once this returns, the client is eligible for every later broadcast
        that matches its user id. Registering the same client twice is not
        supported.
        """
        await self._submit(_REGISTER, client)

    async def unregister(self, client: Client) -> None:
        """Remove a client and close its send queue.

        Unregistering a client that is not registered (never was, already
        removed, or evicted) is a no-op.
        """
        if not self._running:
            # Nothing else mutates the set while the loop is down.
            self._clients.discard(client)
            client.close()
            return
        await self._submit(_UNREGISTER, client)

    def broadcast(self, message: Message) -> None:
        """Hand a message to the control loop for fan-out. Fire-and-forget."""
        if not self._running:
            logger.debug("hub_broadcast_dropped", message_type=message.type_name, reason="not_running")
            return
        self._events.put_nowait((_BROADCAST, message, None))

    def broadcast_to_user(self, user_id: int, message_type: str, data: Any) -> None:
        """Broadcast to the clients of one user (user_id 0 means everyone)."""
        self.broadcast(Message(type=message_type, data=data, user_id=user_id))

    async def _submit(self, kind: str, client: Client) -> None:
        if not self._running:
            raise HubNotRunningError("Hub is not running. Call start() first.")
        ack = asyncio.get_running_loop().create_future()
        self._events.put_nowait((kind, client, ack))
        await ack

    # ──────────────────────────────────────────────
    # Control loop
    # ──────────────────────────────────────────────

    async def _run(self) -> None:
        """Apply queued events one at a time, each fully, in arrival order."""
        while True:
            kind, item, ack = await self._events.get()
            try:
                if kind == _REGISTER:
                    self._add(item)
                elif kind == _UNREGISTER:
                    self._remove(item)
                else:
                    self._fan_out(item)
            except Exception:
                logger.warning("hub_event_error", kind=kind, exc_info=True)
            finally:
                if ack is not None and not ack.done():
                    ack.set_result(None)

    def _add(self, client: Client) -> None:
        self._clients.add(client)
        logger.info(
            "ws_client_registered",
            user_id=client.user_id,
            total=len(self._clients),
        )

    def _remove(self, client: Client) -> None:
        if client not in self._clients:
            return
        self._clients.discard(client)
        client.close()
        logger.info(
            "ws_client_unregistered",
            user_id=client.user_id,
            total=len(self._clients),
        )

    def _fan_out(self, message: Message) -> None:
        try:
            payload = message.to_json()
        except (TypeError, ValueError):
            logger.error(
                "hub_message_serialize_failed",
                message_type=message.type_name,
                user_id=message.user_id,
                exc_info=True,
            )
            return

        delivered = 0
        evicted: list[Client] = []
        for client in self._clients:
            if not is_recipient(message.user_id, client.user_id):
                continue
            if client.offer(payload):
                delivered += 1
            else:
                evicted.append(client)

        for client in evicted:
            self._clients.discard(client)
            client.close()
            logger.warning(
                "ws_client_evicted",
                user_id=client.user_id,
                reason="send_queue_full",
                total=len(self._clients),
            )

        logger.debug(
            "hub_broadcast",
            message_type=message.type_name,
            user_id=message.user_id,
            delivered=delivered,
            evicted=len(evicted),
        )
