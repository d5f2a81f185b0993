"""
End to end tests of the WebSocket endpoint and the HTTP routes
"""

import pytest
from fastapi import WebSocketDisconnect
from fastapi.testclient import TestClient

from pong.game.engine import GameEngine
from pong.main import create_app


@pytest.fixture
def engine():
    return GameEngine()


@pytest.fixture
def client(engine):
    with TestClient(create_app(engine)) as client:
        yield client


def receive_until(ws, message_type, limit=1000):
    for _ in range(limit):
        message = ws.receive_json()
        if message["type"] == message_type:
            return message
    raise AssertionError(f"no {message_type} message received")


def leave(ws, limit=1000):
    """Ask to leave and read until the server closes the socket"""
    ws.send_json({"type": "leave"})
    with pytest.raises(WebSocketDisconnect):
        for _ in range(limit):
            ws.receive_json()


class TestHttp:
    def test_health(self, client):
        response = client.get("/api/health")
        assert response.status_code == 200
        assert response.json() == {"ok": True}

    def test_rooms_listing(self, client):
        assert client.get("/api/rooms").json() == []

        with client.websocket_connect("/ws") as ws:
            init = ws.receive_json()
            rooms = client.get("/api/rooms").json()

        assert rooms == [{
            "room_id": init["room_id"],
            "players": 1,
            "status": "waiting",
            "scores": {"player1": 0},
        }]


class TestWebSocket:
    def test_init_message(self, client):
        with client.websocket_connect("/ws") as ws:
            init = ws.receive_json()

        assert init["type"] == "init"
        assert init["side"] == "player1"
        assert init["is_player1"] is True
        assert init["canvas"] == {"width": 800, "height": 400}
        assert init["paddle"] == {"width": 15, "height": 80}
        assert init["player_id"]

    def test_two_clients_play_in_same_room(self, client):
        with client.websocket_connect("/ws") as ws1:
            init1 = ws1.receive_json()
            with client.websocket_connect("/ws") as ws2:
                init2 = ws2.receive_json()
                assert init2["room_id"] == init1["room_id"]
                assert init2["side"] == "player2"

                joined = ws1.receive_json()
                assert joined == {"type": "player_joined", "player_id": init2["player_id"], "side": "player2"}

                update = receive_until(ws1, "update")
                assert len(update["players"]) == 2
                assert set(update["ball"]) == {"x", "y", "vx", "vy"}

                ws2.send_json({"type": "move", "direction": "down"})
                moved = receive_until(ws1, "paddle_moved")
                assert moved == {"type": "paddle_moved", "player_id": init2["player_id"], "paddle_y": 168}

                leave(ws2)

            left = receive_until(ws1, "player_left")
            assert left["player_id"] == init2["player_id"]

    def test_invalid_message_gets_error(self, client):
        with client.websocket_connect("/ws") as ws:
            ws.receive_json()

            ws.send_json({"type": "move", "direction": "sideways"})
            assert ws.receive_json()["type"] == "error"

            ws.send_text("not json")
            assert ws.receive_json()["type"] == "error"

            ws.send_json({"type": "teleport"})
            assert ws.receive_json()["type"] == "error"

    def test_room_removed_when_last_player_leaves(self, client, engine):
        with client.websocket_connect("/ws") as ws:
            ws.receive_json()
            leave(ws)
            assert engine.room_manager.rooms == {}

    def test_restart_outside_game_over_is_ignored(self, client):
        with client.websocket_connect("/ws") as ws:
            ws.receive_json()
            ws.send_json({"type": "restart"})
            ws.send_json({"type": "move", "direction": "up"})
            ws.send_json({"type": "bogus"})
            assert ws.receive_json()["type"] == "error"
