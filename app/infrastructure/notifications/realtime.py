"""Helpers to broadcast realtime events to connected clients."""

from __future__ import annotations

import asyncio
import copy
import logging
from typing import Any

from anyio import from_thread

from app.application.realtime import user_channel

from .manager import ConnectionManager, connection_manager

logger = logging.getLogger(__name__)


class RealtimeEventPublisher:
    """Deliver ``{"type": event, "data": payload}`` messages to websocket rooms.

    Emission is fire-and-forget: it is scheduled on the running event loop
    when called from async code, or handed to the loop through
    ``anyio.from_thread`` when called from a worker thread. Failures are
    logged and never raised to the caller.
    """

    def __init__(self, manager: ConnectionManager) -> None:
        self._manager = manager
        self._pending: set[asyncio.Task[None]] = set()

    def emit_to_user(self, user_id: int, event: str, payload: Any) -> None:
        if not user_id:
            return
        self.emit_to_room(user_channel(user_id), event, payload)

    def emit_to_room(self, room: str, event: str, payload: Any) -> None:
        message = {"type": event, "data": copy.deepcopy(payload)}
        try:
            self._schedule_send(room, message)
        except Exception:
            logger.warning("Could not emit '%s' to room %s", event, room, exc_info=True)

    def _schedule_send(self, room: str, message: dict[str, Any]) -> None:
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            # Worker thread started by anyio (sync route or background task).
            # Only the task creation crosses into the loop; the worker does
            # not wait for the sockets.
            from_thread.run_sync(self._start_broadcast, room, message)
        else:
            self._start_broadcast(room, message)

    def _start_broadcast(self, room: str, message: dict[str, Any]) -> None:
        task = asyncio.get_running_loop().create_task(self._manager.broadcast(room, message))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)


realtime_publisher = RealtimeEventPublisher(connection_manager)


def get_realtime_channel() -> RealtimeEventPublisher:
    """FastAPI dependency returning the process-wide realtime publisher."""

    return realtime_publisher


__all__ = [
    "RealtimeEventPublisher",
    "get_realtime_channel",
    "realtime_publisher",
]
