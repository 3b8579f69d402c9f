"""
In-process fan-out of clinic events to websocket listeners.

A connection is any object exposing ``async send_event(event_dict)``.
Listeners carry no identity: every registered connection receives every
broadcast. Nothing is buffered, so a listener only sees events that are
broadcast while it is registered.
"""
from __future__ import annotations

import asyncio
import logging
import threading
from dataclasses import asdict, dataclass, field
from typing import Any, Protocol

from asgiref.sync import async_to_sync

logger = logging.getLogger(__name__)

EVENT_WELCOME = "WELCOME"
EVENT_NEW_APPOINTMENT = "NEW_APPOINTMENT"

WELCOME_MESSAGE = "Welcome to SmartHealthcare Real-Time Updates!"


class Connection(Protocol):
    async def send_event(self, event: dict[str, Any]) -> None: ...


@dataclass(frozen=True)
class BroadcastEvent:
    type: str
    message: str
    data: dict[str, Any] = field(default_factory=dict)

    def as_dict(self) -> dict[str, Any]:
        return asdict(self)


def welcome_event() -> BroadcastEvent:
    return BroadcastEvent(type=EVENT_WELCOME, message=WELCOME_MESSAGE)


class ConnectionRegistry:
    """Set of live connections, safe to touch from threads and the loop."""

    def __init__(self):
        self._connections: set = set()
        self._lock = threading.Lock()

    def add(self, connection) -> None:
        with self._lock:
            self._connections.add(connection)

    def discard(self, connection) -> bool:
        with self._lock:
            if connection in self._connections:
                self._connections.remove(connection)
                return True
            return False

    def snapshot(self) -> list:
        with self._lock:
            return list(self._connections)

    def __len__(self) -> int:
        with self._lock:
            return len(self._connections)

    def __contains__(self, connection) -> bool:
        with self._lock:
            return connection in self._connections


class EventBroadcaster:
    def __init__(self, registry: ConnectionRegistry | None = None):
        self.registry = registry if registry is not None else ConnectionRegistry()

    def register(self, connection: Connection) -> None:
        self.registry.add(connection)
        logger.info("Listener connected (%d open)", len(self.registry))

    def unregister(self, connection: Connection) -> None:
        if self.registry.discard(connection):
            logger.info("Listener disconnected (%d open)", len(self.registry))

    async def on_connect(self, connection: Connection) -> None:
        """Greet a new listener, then start delivering broadcasts to it."""
        await connection.send_event(welcome_event().as_dict())
        self.register(connection)

    async def broadcast(self, event: BroadcastEvent) -> int:
        """Deliver ``event`` to every registered connection.

        A connection whose send fails is dropped from the registry; the
        others still receive the event. Returns the number delivered.
        """
        targets = self.registry.snapshot()
        if not targets:
            return 0
        payload = event.as_dict()
        results = await asyncio.gather(
            *(conn.send_event(payload) for conn in targets),
            return_exceptions=True,
        )
        delivered = 0
        for conn, result in zip(targets, results):
            if isinstance(result, BaseException):
                logger.warning("Dropping listener after failed send: %r", result)
                self.unregister(conn)
            else:
                delivered += 1
        logger.debug("Broadcast %s to %d/%d listeners", event.type, delivered, len(targets))
        return delivered

    def broadcast_sync(self, event: BroadcastEvent) -> int:
        """Entry point for synchronous request handlers."""
        return async_to_sync(self.broadcast)(event)


broadcaster = EventBroadcaster()
