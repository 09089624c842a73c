import pytest
from fastapi.testclient import TestClient

from app.main import app, get_registry
from assistant.core.prompt import FALLBACK_REPLY
from assistant.generation import ProviderError
from assistant.sessions import SessionRegistry

from conftest import FakeClient


@pytest.fixture
def backend():
    return FakeClient(reply="Low MOQ Price: $9.20")


@pytest.fixture
def client(backend):
    registry = SessionRegistry(client_factory=lambda: backend)
    app.dependency_overrides[get_registry] = lambda: registry
    yield TestClient(app)
    app.dependency_overrides.clear()


def _create(client, **body):
    response = client.post("/sessions", json=body)
    assert response.status_code == 201
    return response.json()


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_list_tools(client):
    tools = client.get("/tools").json()
    assert {"id": "pricing_advisor", "name": "Pricing & MOQ", "description": "Strategy for wholesale tiers", "icon": "💰"} in tools


def test_create_session_defaults(client):
    session = _create(client)
    assert session["tool"]["id"] == "listing_writer"
    assert session["pro"] is False
    assert session["messages"] == []


def test_create_session_unknown_tool(client):
    response = client.post("/sessions", json={"tool_id": "crm"})
    assert response.status_code == 422
    assert "crm" in response.json()["detail"]


def test_submit_message_round(client, backend):
    session = _create(client, tool_id="pricing_advisor", pro=True)
    sid = session["session_id"]

    response = client.post(f"/sessions/{sid}/messages", json={"content": "100 units, target $8/unit"})

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ok"
    assert body["reply"]["content"] == "Low MOQ Price: $9.20"
    roles = [m["role"] for m in body["session"]["messages"]]
    assert roles == ["user", "assistant"]
    assert "PRO user" in backend.calls[0]["prompt"]


def test_submit_blank_message(client, backend):
    sid = _create(client)["session_id"]
    body = client.post(f"/sessions/{sid}/messages", json={"content": "  "}).json()
    assert body["status"] == "skipped_empty"
    assert body["reply"] is None
    assert backend.calls == []


def test_generation_failure_is_not_an_http_error(client, backend):
    backend.error = ProviderError("quota exceeded")
    sid = _create(client)["session_id"]

    response = client.post(f"/sessions/{sid}/messages", json={"content": "hello"})

    assert response.status_code == 200
    assert response.json()["status"] == "failed"
    assert response.json()["reply"]["content"] == FALLBACK_REPLY


def test_select_tool_clears_messages(client):
    sid = _create(client)["session_id"]
    client.post(f"/sessions/{sid}/messages", json={"content": "hello"})

    response = client.put(f"/sessions/{sid}/tool", json={"tool_id": "audit"})

    assert response.status_code == 200
    assert response.json()["tool"]["id"] == "audit"
    assert response.json()["messages"] == []
    assert client.put(f"/sessions/{sid}/tool", json={"tool_id": "bogus"}).status_code == 422


def test_upgrade_plan(client, backend):
    sid = _create(client)["session_id"]
    assert client.put(f"/sessions/{sid}/plan", json={"pro": True}).json()["pro"] is True
    client.post(f"/sessions/{sid}/messages", json={"content": "hello"})
    assert "PRO user" in backend.calls[0]["prompt"]


def test_unknown_session(client):
    assert client.get("/sessions/missing").status_code == 404
    assert client.post("/sessions/missing/messages", json={"content": "x"}).status_code == 404
    assert client.delete("/sessions/missing").status_code == 404


def test_delete_session(client):
    sid = _create(client)["session_id"]
    assert client.delete(f"/sessions/{sid}").status_code == 204
    assert client.get(f"/sessions/{sid}").status_code == 404
