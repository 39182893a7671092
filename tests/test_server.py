"""Tests for the HTTP and WebSocket API."""

import pytest
from fastapi.testclient import TestClient

from worldsim.server.main import app, sessions


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


@pytest.fixture
def world_id(client):
    response = client.post("/api/worlds", json={"preset": "tess", "seedText": "719-SUNDER"})
    assert response.status_code == 200
    return response.json()["worldId"]


def test_health(client):
    response = client.get("/api")
    assert response.status_code == 200
    assert response.json()["status"] == "operational"


class TestCreateWorld:
    def test_create(self, client):
        response = client.post("/api/worlds", json={"preset": "we1914", "seedText": "1914-AUG"})
        assert response.status_code == 200
        data = response.json()
        assert data["worldId"].startswith("world-")
        assert data["preset"] == "we1914"
        assert data["seedText"] == "1914-AUG"
        assert data["tick"] == 0
        assert len(data["state"]["civilizations"]) == 6
        assert data["state"]["map"]["width"] == 42

    def test_random_seed(self, client):
        data = client.post("/api/worlds", json={}).json()
        assert data["preset"] == "tess"
        assert len(data["seedText"]) == 8

    def test_settings_applied(self, client):
        data = client.post("/api/worlds", json={"randomness": 0.0, "allianceGuarantee": False}).json()
        settings = data["state"]["settings"]
        assert settings["randomness"] == 0.0
        assert settings["allianceGuarantee"] is False

    def test_unknown_preset(self, client):
        response = client.post("/api/worlds", json={"preset": "atlantis"})
        assert response.status_code == 400
        assert "Unknown preset" in response.json()["detail"]

    def test_invalid_randomness(self, client):
        response = client.post("/api/worlds", json={"randomness": 2})
        assert response.status_code == 422


class TestReadAccess:
    def test_state(self, client, world_id):
        response = client.get(f"/api/worlds/{world_id}/state")
        assert response.status_code == 200
        assert response.json()["tick"] == 0

    def test_unknown_world(self, client):
        assert client.get("/api/worlds/world-missing/state").status_code == 404

    def test_hex(self, client, world_id):
        data = client.get(f"/api/worlds/{world_id}/hexes/0").json()
        assert data["id"] == 0
        assert data["type"] in ("land", "sea", "shoals")
        assert "colonizable" in data
        assert client.get(f"/api/worlds/{world_id}/hexes/99999").status_code == 404

    def test_civilization(self, client, world_id):
        data = client.get(f"/api/worlds/{world_id}/civilizations/SAL").json()
        assert data["name"] == "The Salanic Empire"
        assert data["pillars"]["religion"] == 75
        assert client.get(f"/api/worlds/{world_id}/civilizations/ZZZ").status_code == 404

    def test_relation(self, client, world_id):
        data = client.get(f"/api/worlds/{world_id}/relations/SAL/LYR").json()
        assert data["state"] == "peace"
        assert client.get(f"/api/worlds/{world_id}/relations/SAL/ZZZ").status_code == 404

    def test_collections(self, client, world_id):
        routes = client.get(f"/api/worlds/{world_id}/routes").json()
        assert routes and {"path", "blocked", "convoys"} <= set(routes[0])
        assert client.get(f"/api/worlds/{world_id}/wars").json() == []
        assert client.get(f"/api/worlds/{world_id}/colonizations").json() == []
        assert isinstance(client.get(f"/api/worlds/{world_id}/log?limit=5").json(), list)


class TestTick:
    def test_advance(self, client, world_id):
        response = client.post(f"/api/worlds/{world_id}/tick", json={"count": 3})
        assert response.status_code == 200
        data = response.json()
        assert data["tick"] == 3
        assert [r["tick"] for r in data["results"]] == [1, 2, 3]
        assert data["results"][2]["summary"]["tick"] == 3

    def test_count_bounds(self, client, world_id):
        assert client.post(f"/api/worlds/{world_id}/tick", json={"count": 0}).status_code == 422


class TestMutators:
    def test_set_attribute(self, client, world_id):
        response = client.put(
            f"/api/worlds/{world_id}/civilizations/SAL/attributes",
            json={"path": "pillars.religion", "value": 20},
        )
        assert response.status_code == 200
        assert response.json()["data"]["pillars"]["religion"] == 20

    def test_set_attribute_errors(self, client, world_id):
        url = f"/api/worlds/{world_id}/civilizations/SAL/attributes"
        assert client.put(url, json={"path": "derived.prosperity", "value": 20}).status_code == 400
        assert client.put(url, json={"path": "pillars.religion", "value": 120}).status_code == 400
        missing = f"/api/worlds/{world_id}/civilizations/ZZZ/attributes"
        assert client.put(missing, json={"path": "pillars.religion", "value": 20}).status_code == 404

    def test_settings(self, client, world_id):
        response = client.patch(
            f"/api/worlds/{world_id}/settings", json={"randomness": 0.5, "allyPressureThreshold": 40}
        )
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["randomness"] == 0.5
        assert data["ally_pressure_threshold"] == 40
        bad = client.patch(f"/api/worlds/{world_id}/settings", json={"randomness": 3})
        assert bad.status_code == 400

    def test_war_and_peace(self, client, world_id):
        url = f"/api/worlds/{world_id}"
        first = client.post(f"{url}/wars", json={"a": "SAL", "b": "LYR"}).json()
        assert first["changed"] is True
        assert first["data"]["state"] == "war"
        assert client.post(f"{url}/wars", json={"a": "LYR", "b": "SAL"}).json()["changed"] is False
        assert len(client.get(f"{url}/wars").json()) == 1

        peace = client.post(f"{url}/peace", json={"a": "SAL", "b": "LYR"}).json()
        assert peace["changed"] is True
        assert peace["data"]["state"] == "truce"

    def test_war_errors(self, client, world_id):
        url = f"/api/worlds/{world_id}/wars"
        assert client.post(url, json={"a": "SAL", "b": "SAL"}).status_code == 400
        assert client.post(url, json={"a": "SAL", "b": "ZZZ"}).status_code == 404

    def test_colonization(self, client, world_id):
        target = min(sessions.get(world_id).world.hex_map.colonizable)
        url = f"/api/worlds/{world_id}/colonizations"
        response = client.post(url, json={"civId": "THO", "hexId": target})
        assert response.status_code == 200
        assert response.json()["data"]["colonizations"][0]["hexId"] == target
        assert client.post(url, json={"civId": "THO", "hexId": target}).status_code == 400


class TestExportImport:
    def test_round_trip(self, client, world_id):
        client.post(f"/api/worlds/{world_id}/tick", json={"count": 5})
        exported = client.get(f"/api/worlds/{world_id}/export").json()["state"]

        response = client.post("/api/worlds/import", json={"state": exported})
        assert response.status_code == 200
        data = response.json()
        assert data["worldId"] != world_id
        assert data["tick"] == 5
        assert client.get(f"/api/worlds/{data['worldId']}/export").json()["state"] == exported

    def test_rejects_bad_document(self, client):
        response = client.post("/api/worlds/import", json={"state": {"width": 3}})
        assert response.status_code == 400


def test_delete(client, world_id):
    assert client.delete(f"/api/worlds/{world_id}").status_code == 200
    assert client.delete(f"/api/worlds/{world_id}").status_code == 404


class TestWebSocket:
    def test_connect_and_ping(self, client, world_id):
        with client.websocket_connect(f"/ws/worlds/{world_id}") as ws:
            hello = ws.receive_json()
            assert hello["type"] == "CONNECTED"
            assert hello["worldId"] == world_id
            ws.send_json({"type": "PING"})
            assert ws.receive_json() == {"type": "PONG"}

    def test_tick_broadcast(self, client, world_id):
        with client.websocket_connect(f"/ws/worlds/{world_id}") as ws:
            ws.receive_json()
            client.post(f"/api/worlds/{world_id}/tick", json={"count": 2})
            message = ws.receive_json()
            assert message["type"] == "TICK"
            assert message["tick"] == 2
            assert len(message["results"]) == 2
