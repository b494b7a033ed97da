"""Connection management helpers for realtime websockets."""

from __future__ import annotations

from collections import defaultdict
from typing import Any, DefaultDict, Set

import logging

from fastapi import WebSocket

logger = logging.getLogger(__name__)


class ConnectionManager:
    """Track which websockets listen to which named channel or room.

    User channels and task chat rooms share one namespace: a user channel is
    simply the room named after the user id.
    """

    def __init__(self) -> None:
        self._rooms: DefaultDict[str, Set[WebSocket]] = defaultdict(set)

    async def connect(self, websocket: WebSocket, *rooms: str) -> None:
        """Accept the websocket connection and subscribe it to ``rooms``."""

        await websocket.accept()
        for room in rooms:
            self.join(room, websocket)

    def join(self, room: str, websocket: WebSocket) -> None:
        self._rooms[room].add(websocket)

    def leave(self, room: str, websocket: WebSocket) -> None:
        connections = self._rooms.get(room)
        if connections is None:
            return
        connections.discard(websocket)
        if not connections:
            self._rooms.pop(room, None)

    def disconnect(self, websocket: WebSocket) -> None:
        """Remove ``websocket`` from every room it joined."""

        for room in [name for name, sockets in self._rooms.items() if websocket in sockets]:
            self.leave(room, websocket)

    def members(self, room: str) -> int:
        return len(self._rooms.get(room, ()))

    async def broadcast(self, room: str, message: dict[str, Any]) -> None:
        """Send ``message`` to every active connection subscribed to ``room``."""

        for connection in list(self._rooms.get(room, set())):
            try:
                await connection.send_json(message)
            except Exception:
                logger.debug("Dropping dead websocket from room %s", room, exc_info=True)
                self.disconnect(connection)


connection_manager = ConnectionManager()


__all__ = ["ConnectionManager", "connection_manager"]
