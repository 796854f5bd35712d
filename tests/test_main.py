"""
Tests for the host shell: options, key translation, HTTP/WebSocket routes and
the tick step used by the game loop.
"""

import asyncio
import json

import pytest
from fastapi.testclient import TestClient

from snake_engine import main
from snake_engine.connection_manager import build_game_over_msg, build_state_msg
from snake_engine.errors import ConfigError
from snake_engine.game import GameEngine
from snake_engine.models import Direction


class FakeSocket:
    def __init__(self):
        self.sent = []

    async def send_text(self, message: str):
        self.sent.append(json.loads(message))


class BrokenSocket:
    async def send_text(self, message: str):
        raise RuntimeError("connection lost")


@pytest.fixture(autouse=True)
def fresh_game():
    main.game.reset()
    main.game_over_events.clear()
    main.manager.connections.clear()
    yield
    main.manager.connections.clear()


class TestLoadOptions:
    def test_defaults(self):
        assert main.load_options({}) == {"size": 20, "wrap": True, "port": 8765}

    def test_env_overrides(self):
        options = main.load_options({"SNAKE_BOARD_SIZE": "12", "SNAKE_WRAP": "false", "SNAKE_PORT": "9000"})
        assert options == {"size": 12, "wrap": False, "port": 9000}

    @pytest.mark.parametrize("env", [{"SNAKE_BOARD_SIZE": "big"}, {"SNAKE_BOARD_SIZE": "0"}, {"SNAKE_PORT": "x"}])
    def test_invalid_values_raise(self, env):
        with pytest.raises(ConfigError):
            main.load_options(env)


class TestDirectionFromKey:
    def test_arrow_keys(self):
        assert main.direction_from_key("ArrowUp") is Direction.UP
        assert main.direction_from_key("ArrowRight") is Direction.RIGHT
        assert main.direction_from_key("ArrowDown") is Direction.DOWN
        assert main.direction_from_key("ArrowLeft") is Direction.LEFT

    def test_other_keys_are_none(self):
        assert main.direction_from_key("Escape") is None
        assert main.direction_from_key("Enter") is None
        assert main.direction_from_key(None) is None

    def test_unhashable_keys_are_none(self):
        assert main.direction_from_key(["ArrowUp"]) is None
        assert main.direction_from_key({"key": "ArrowUp"}) is None


class TestMessages:
    def test_state_message(self):
        msg = json.loads(build_state_msg(GameEngine().snapshot()))
        assert msg["type"] == "state"
        assert msg["cells"] == [148]
        assert msg["food"] == 153
        assert msg["direction"] == "RIGHT"
        assert msg["score"] == 0

    def test_game_over_message(self):
        engine = GameEngine(size=1)
        engine.tick()
        msg = json.loads(build_game_over_msg(engine.snapshot()))
        assert msg == {"type": "game_over", "score": 0, "won": False}


class TestHttpRoutes:
    def test_lifespan_starts_and_stops_game_loop(self):
        with TestClient(main.app) as client:
            assert client.get("/state").status_code == 200

    def test_get_state(self):
        client = TestClient(main.app)
        response = client.get("/state")
        assert response.status_code == 200
        assert response.json()["status"] == "running"

    def test_post_reset(self):
        main.game.tick()
        client = TestClient(main.app)
        response = client.post("/reset")
        assert response.status_code == 200
        assert response.json()["head"] == main.game.snapshot().head
        assert response.json()["cells"] == [148]


class TestWebSocket:
    def test_key_input_and_reset(self):
        client = TestClient(main.app)
        with client.websocket_connect("/ws") as ws:
            first = ws.receive_json()
            assert first["type"] == "state"
            assert first["direction"] == "RIGHT"

            ws.send_text(json.dumps({"type": "key", "key": "ArrowDown"}))
            msg = ws.receive_json()
            assert msg["direction"] == "DOWN"
            assert main.game.direction is Direction.DOWN

            # ignored: malformed JSON, unknown key, Enter while running
            ws.send_text("not json")
            ws.send_text(json.dumps({"type": "key", "key": "q"}))
            ws.send_text(json.dumps({"type": "key", "key": "Enter"}))

            ws.send_text(json.dumps({"type": "reset"}))
            msg = ws.receive_json()
            assert msg["type"] == "state"
            assert msg["direction"] == "RIGHT"

    def test_unhashable_key_keeps_connection_open(self):
        """A non-string key is ignored and the socket still takes input."""
        client = TestClient(main.app)
        with client.websocket_connect("/ws") as ws:
            ws.receive_json()
            ws.send_text(json.dumps({"type": "key", "key": ["ArrowUp"]}))
            ws.send_text(json.dumps({"type": "key", "key": {"code": 38}}))
            ws.send_text(json.dumps({"type": "direction", "direction": "up"}))
            assert ws.receive_json()["direction"] == "UP"

    def test_direction_message(self):
        client = TestClient(main.app)
        with client.websocket_connect("/ws") as ws:
            ws.receive_json()
            ws.send_text(json.dumps({"type": "direction", "direction": "up"}))
            assert ws.receive_json()["direction"] == "UP"

    def test_enter_resets_after_game_over(self, monkeypatch):
        engine = GameEngine(size=1)
        engine.tick()
        monkeypatch.setattr(main, "game", engine)
        client = TestClient(main.app)
        with client.websocket_connect("/ws") as ws:
            assert ws.receive_json()["status"] == "game_over"
            ws.send_text(json.dumps({"type": "key", "key": "Enter"}))
            assert ws.receive_json()["status"] == "running"


class TestRunTick:
    def test_tick_broadcasts_state_and_returns_speed(self):
        sock = FakeSocket()
        main.manager.connections[sock] = "fake"

        delay = asyncio.run(main.run_tick())

        assert delay == pytest.approx(0.15)
        assert sock.sent[-1]["type"] == "state"
        assert sock.sent[-1]["cells"] == [149]

    def test_game_over_is_announced(self, monkeypatch):
        engine = GameEngine(size=1)
        engine.add_game_over_listener(main.game_over_events.append)
        monkeypatch.setattr(main, "game", engine)
        sock = FakeSocket()
        main.manager.connections[sock] = "fake"

        asyncio.run(main.run_tick())
        asyncio.run(main.run_tick())

        assert [m["type"] for m in sock.sent] == ["state", "game_over"]

    def test_broken_client_is_dropped(self):
        main.manager.connections[BrokenSocket()] = "broken"
        asyncio.run(main.run_tick())
        assert main.manager.connections == {}
