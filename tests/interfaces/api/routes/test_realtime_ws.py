"""Tests for the realtime websocket endpoint."""

from __future__ import annotations

import pytest

pytest.importorskip("fastapi")
from fastapi.testclient import TestClient
from starlette.websockets import WebSocketDisconnect

from app.application.use_cases.auth import issue_access_token
from app.infrastructure.notifications import connection_manager
from main import create_app


@pytest.fixture()
def client():
    with TestClient(create_app()) as test_client:
        yield test_client


def _ws_url(user) -> str:
    return f"/realtime/ws?token={issue_access_token(user)}"


def test_connection_without_valid_token_is_refused(client) -> None:
    with pytest.raises(WebSocketDisconnect) as exc_info:
        with client.websocket_connect("/realtime/ws?token=not-a-token"):
            pass

    assert exc_info.value.code == 1008


def test_initial_counts_and_ping(client, chat_scenario) -> None:
    with client.websocket_connect(_ws_url(chat_scenario["users"]["assignee"])) as websocket:
        assert websocket.receive_json() == {
            "type": "unread_count_updated",
            "data": {"systemCount": 0, "chatCount": 0},
        }
        websocket.send_json({"type": "ping"})
        assert websocket.receive_json() == {"type": "pong"}

    assert connection_manager.members("9") == 0


def test_outsider_cannot_join_task_chat(client, chat_scenario) -> None:
    with client.websocket_connect(_ws_url(chat_scenario["users"]["outsider"])) as websocket:
        websocket.receive_json()
        websocket.send_json({"type": "join_task_chat", "task_id": 42})

        reply = websocket.receive_json()

    assert reply["type"] == "error"
    assert reply["data"]["task_id"] == 42


def test_joined_member_receives_messages_and_counts(client, chat_scenario) -> None:
    users = chat_scenario["users"]

    with client.websocket_connect(_ws_url(users["lead"])) as websocket:
        websocket.receive_json()
        websocket.send_json({"type": "join_task_chat", "task_id": 42})
        assert websocket.receive_json() == {
            "type": "joined_task_chat",
            "data": {"task_id": 42},
        }

        response = client.post(
            "/tasks/42/messages",
            json={"content": "hola"},
            headers={"Authorization": f"Bearer {issue_access_token(users['collaborator'])}"},
        )
        assert response.status_code == 201

        chat_event = websocket.receive_json()
        count_event = websocket.receive_json()

    assert chat_event["type"] == "new_chat_message"
    assert chat_event["data"]["id"] == response.json()["id"]
    assert chat_event["data"]["content"] == "hola"
    assert chat_event["data"]["sender"]["id"] == 7
    assert count_event == {
        "type": "unread_count_updated",
        "data": {"systemCount": 0, "chatCount": 1},
    }
