"""
Tests for the Battlesnake handlers and their HTTP transport.
"""

import pytest

import main
from config import EngineConfig
from server import create_app


@pytest.fixture
def client():
    app = create_app({"info": main.info, "start": main.start, "move": main.move, "end": main.end})
    app.config["TESTING"] = True
    return app.test_client()


class TestHandlers:
    """Tests for the handler functions."""

    def test_info(self):
        info = main.info()
        assert info["apiversion"] == "1"
        assert set(info) == {"apiversion", "author", "color", "head", "tail"}

    def test_move_returns_direction(self, open_state):
        assert main.move(open_state)["move"] in ("up", "down", "left", "right")

    def test_move_logs_turn_and_strategy(self, open_state, capsys):
        open_state["turn"] = 12
        main.move(open_state)
        assert "MOVE 12:" in capsys.readouterr().out

    def test_start_and_end(self, open_state, capsys):
        main.start(open_state)
        main.end(open_state)
        out = capsys.readouterr().out
        assert "GAME START" in out
        assert "GAME OVER" in out


    def test_bad_environment_falls_back_to_defaults(self, monkeypatch, caplog):
        monkeypatch.setenv("SNAKE_LOOKAHEAD_DEPTH", "deep")
        with caplog.at_level("WARNING"):
            config = main.load_engine_config()

        assert config == EngineConfig()
        assert "SNAKE_" in caplog.text

    def test_out_of_range_environment_falls_back_to_defaults(self, monkeypatch):
        monkeypatch.setenv("SNAKE_LOOKAHEAD_DEPTH", "9")
        assert main.load_engine_config() == EngineConfig()

    def test_environment_is_read(self, monkeypatch):
        monkeypatch.setenv("SNAKE_DEFAULT_MOVE", "left")
        assert main.load_engine_config().default_move == "left"


class TestServer:
    """Tests for the Flask endpoints."""

    def test_info_endpoint(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.get_json()["apiversion"] == "1"
        assert response.headers["server"] == "battlesnake/github/astar-snake-python"

    def test_move_endpoint(self, client, open_state):
        response = client.post("/move", json=open_state)
        assert response.status_code == 200
        assert response.get_json()["move"] in ("up", "down", "left", "right")

    def test_move_endpoint_with_garbage_body(self, client):
        response = client.post("/move", data="not json", content_type="text/plain")
        assert response.status_code == 200
        assert response.get_json() == {"move": "down"}

    def test_start_and_end_endpoints(self, client, open_state):
        assert client.post("/start", json=open_state).data == b"ok"
        assert client.post("/end", json=open_state).data == b"ok"
