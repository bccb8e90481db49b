"""Broadcast hub: fans store mutations out to every live WebSocket subscriber.

Each subscriber owns a bounded outbound queue drained by its own sender task,
so a broadcast only enqueues and never waits on a socket. A subscriber whose
queue overflows or whose send fails is closed and dropped on its own.
"""
from __future__ import annotations

import asyncio
import itertools
import logging
from enum import Enum
from typing import Set

from fastapi import WebSocket, status
from fastapi.websockets import WebSocketState

from .schemas import TodoEvent

logger = logging.getLogger(__name__)

_ids = itertools.count(1)


class SubscriberState(str, Enum):
    CONNECTING = "connecting"
    ACTIVE = "active"
    CLOSED = "closed"


class Subscriber:
    """A single WebSocket session registered with the hub."""

    def __init__(self, websocket: WebSocket, queue_size: int) -> None:
        self.id = next(_ids)
        self.websocket = websocket
        self.state = SubscriberState.CONNECTING
        self._queue: asyncio.Queue[str] = asyncio.Queue(maxsize=queue_size)

    def offer(self, message: str) -> bool:
        """Enqueue a message without waiting. Return False when the queue is full."""
        try:
            self._queue.put_nowait(message)
        except asyncio.QueueFull:
            return False
        return True

    async def pump(self) -> None:
        """Send queued messages until cancelled or the socket fails."""
        while True:
            message = await self._queue.get()
            await self.websocket.send_text(message)

    async def close(self, code: int = status.WS_1000_NORMAL_CLOSURE) -> None:
        self.state = SubscriberState.CLOSED
        if (
            self.websocket.application_state != WebSocketState.CONNECTED
            or self.websocket.client_state != WebSocketState.CONNECTED
        ):
            return
        try:
            await self.websocket.close(code=code)
        except (RuntimeError, OSError):
            # Peer went away between the state check and the close frame
            logger.debug("Close frame for subscriber %s not sent", self.id)

    def __repr__(self) -> str:
        return f"<Subscriber {self.id} {self.state.value}>"


# PUBLIC_INTERFACE
class BroadcastHub:
    """
    Registry of active subscribers.

    The subscriber set has its own asyncio lock, separate from the store's
    lock. Broadcasts iterate over a snapshot, so joins and leaves during a
    sweep are safe.
    """

    def __init__(self, queue_size: int = 64) -> None:
        self._queue_size = queue_size
        self._subscribers: Set[Subscriber] = set()
        self._lock = asyncio.Lock()

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    async def register(self, websocket: WebSocket) -> Subscriber:
        """Complete the upgrade handshake, then add the session to the active set."""
        subscriber = Subscriber(websocket, self._queue_size)
        await websocket.accept()
        async with self._lock:
            subscriber.state = SubscriberState.ACTIVE
            self._subscribers.add(subscriber)
        logger.info("Subscriber %s connected (%d active)", subscriber.id, self.subscriber_count)
        return subscriber

    async def unregister(self, subscriber: Subscriber) -> None:
        """Remove a subscriber from the active set. Safe to call more than once."""
        async with self._lock:
            present = subscriber in self._subscribers
            self._subscribers.discard(subscriber)
            subscriber.state = SubscriberState.CLOSED
        if present:
            logger.info("Subscriber %s disconnected (%d active)", subscriber.id, self.subscriber_count)

    async def broadcast(self, event: TodoEvent) -> int:
        """
        Enqueue ``event`` for every active subscriber.

        Returns:
            Number of subscribers the event was queued for.
        """
        message = event.model_dump_json()
        async with self._lock:
            snapshot = [s for s in self._subscribers if s.state is SubscriberState.ACTIVE]

        delivered = 0
        overflowed: list[Subscriber] = []
        for subscriber in snapshot:
            if subscriber.offer(message):
                delivered += 1
            else:
                overflowed.append(subscriber)

        for subscriber in overflowed:
            logger.warning("Subscriber %s is not keeping up; closing it", subscriber.id)
            await self.unregister(subscriber)
            await subscriber.close(code=status.WS_1008_POLICY_VIOLATION)
        return delivered

    async def close_all(self) -> None:
        """Close every subscriber, e.g. on server shutdown."""
        async with self._lock:
            subscribers = list(self._subscribers)
            self._subscribers.clear()
        for subscriber in subscribers:
            await subscriber.close(code=status.WS_1001_GOING_AWAY)
        if subscribers:
            logger.info("Closed %d subscriber(s) on shutdown", len(subscribers))


# PUBLIC_INTERFACE
async def publish(hub: BroadcastHub, event: TodoEvent) -> None:
    """Background-task entrypoint used by the HTTP handlers."""
    count = await hub.broadcast(event)
    logger.debug("Broadcast %s for todo %s to %d subscriber(s)", event.event.value, event.todo.id, count)

