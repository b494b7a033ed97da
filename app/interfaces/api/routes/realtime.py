"""Websocket endpoint for unread counters and live task chats."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, HTTPException, WebSocket, WebSocketDisconnect
from sqlalchemy.orm import Session

from app.application.access import can_access_task_chat
from app.application.realtime import (
    EVENT_UNREAD_COUNT_UPDATED,
    task_chat_room,
    user_channel,
)
from app.domain.entities import User
from app.infrastructure.database import SessionLocal
from app.infrastructure.notifications import connection_manager
from app.infrastructure.repositories import NotificationRepository, TaskRepository
from app.interfaces.api.dependencies import resolve_current_user

router = APIRouter(prefix="/realtime", tags=["realtime"])
logger = logging.getLogger(__name__)

_POLICY_VIOLATION = 1008
_INTERNAL_ERROR = 1011


def _may_join_task_chat(session: Session, user: User, task_id: Any) -> bool:
    if not isinstance(task_id, int) or isinstance(task_id, bool) or task_id < 1:
        return False
    loaded = TaskRepository(session).get_with_project(task_id)
    if loaded is None:
        return False
    task, project = loaded
    return can_access_task_chat(task, project, user)


@router.websocket("/ws")
async def realtime_websocket(websocket: WebSocket) -> None:
    """Stream ``unread_count_updated`` and ``new_chat_message`` events to a user.

    Clients authenticate with ``?token=``. They may send ``ping``,
    ``join_task_chat`` and ``leave_task_chat`` messages; joining a task chat
    requires the same access as reading it through the REST API.
    """

    token = websocket.query_params.get("token")
    if not token:
        await websocket.close(code=_POLICY_VIOLATION)
        return

    session = SessionLocal()
    try:
        user = resolve_current_user(token, session)
        if not user.is_active:
            raise HTTPException(status_code=400, detail="Inactive user")
        counts = NotificationRepository(session).count_unread_by_category(user.id)
    except HTTPException:
        await websocket.close(code=_POLICY_VIOLATION)
        return
    except Exception:
        logger.exception("Could not open realtime connection")
        await websocket.close(code=_INTERNAL_ERROR)
        return
    finally:
        session.close()

    await connection_manager.connect(websocket, user_channel(user.id))
    try:
        await websocket.send_json(
            {"type": EVENT_UNREAD_COUNT_UPDATED, "data": counts.as_event_payload()}
        )
        while True:
            try:
                message = await websocket.receive_json()
            except WebSocketDisconnect:
                raise
            except ValueError:
                continue

            if not isinstance(message, dict):
                continue

            message_type = message.get("type")
            if message_type == "ping":
                await websocket.send_json({"type": "pong"})
                continue

            task_id = message.get("task_id")
            if message_type == "join_task_chat":
                with SessionLocal() as join_session:
                    allowed = _may_join_task_chat(join_session, user, task_id)
                if not allowed:
                    await websocket.send_json(
                        {"type": "error", "data": {"task_id": task_id, "detail": "Forbidden"}}
                    )
                    continue
                connection_manager.join(task_chat_room(task_id), websocket)
                await websocket.send_json({"type": "joined_task_chat", "data": {"task_id": task_id}})
                continue

            if message_type == "leave_task_chat" and isinstance(task_id, int):
                connection_manager.leave(task_chat_room(task_id), websocket)
                continue
    except WebSocketDisconnect:
        connection_manager.disconnect(websocket)
    except Exception:
        connection_manager.disconnect(websocket)
        raise
