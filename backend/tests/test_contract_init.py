"""Contract validation tests for /init."""
from fastapi.testclient import TestClient


def test_init_returns_200(client: TestClient):
    """GET /init must return 200."""
    response = client.get("/init")
    assert response.status_code == 200


def test_init_returns_protocol_version(client: TestClient):
    data = client.get("/init").json()
    assert data["protocolVersion"] == "1.0"


def test_init_returns_configuration(client: TestClient):
    """GET /init must include bet, paytable, symbols and paylines."""
    config = client.get("/init").json()["configuration"]

    assert config["betPerSpin"] == 10
    assert config["startingCredits"] == 100
    assert config["payTable"] == {"row": 30, "diagonal": 50, "jackpot": 100}
    assert config["symbols"] == ["cherry", "lemon", "bar", "seven"]
    assert config["paylines"] == [
        {"kind": "row", "row": 0},
        {"kind": "row", "row": 1},
        {"kind": "row", "row": 2},
        {"kind": "diagonalDownRight", "row": None},
        {"kind": "diagonalDownLeft", "row": None},
    ]


def test_init_returns_fresh_session_state(client: TestClient):
    state = client.get("/init").json()["state"]

    assert state["credits"] == 100
    assert state["betPerSpin"] == 10
    assert state["spinning"] is False
    assert state["spinsPlayed"] == 0
    assert state["grid"] is None
    assert state["outcome"] is None
    assert state["overlays"] == []
    assert state["reelPositions"] == [0, 0, 0]
