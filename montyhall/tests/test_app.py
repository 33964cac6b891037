"""
Tests for the FastAPI application.

Tests:
- OpenAPI schema generation
- HTTP status codes for rejections and unknown sessions
- WebSocket round updates and connection cleanup
"""

import pytest
from fastapi.openapi.utils import get_openapi
from fastapi.testclient import TestClient

from ..api.app import create_app
from ..api.service import APIService
from ..session import SessionManager
from .conftest import FixedPrize


def make_service(reveal_delay=0.0):
    return APIService(
        session_manager=SessionManager(rng_factory=lambda: FixedPrize(2)),
        reveal_delay=reveal_delay,
    )


@pytest.fixture
def app():
    return create_app(make_service())


@pytest.fixture
def client(app):
    with TestClient(app) as client:
        yield client


def new_session(client, **body):
    response = client.post("/api/v1/sessions", json=body)
    assert response.status_code == 200, response.text
    return response.json()["session_id"]


class TestOpenAPISchema:
    """Tests for OpenAPI schema generation."""

    def test_openapi_schema_generates(self, app):
        schema = get_openapi(title=app.title, version=app.version, routes=app.routes)

        assert "paths" in schema
        assert "schemas" in schema["components"]

    def test_response_models_in_schema(self, app):
        schema = get_openapi(title=app.title, version=app.version, routes=app.routes)
        schemas = schema["components"]["schemas"]

        for name in ["SessionResponse", "ActionResponse", "ErrorResponse", "RoundState"]:
            assert name in schemas, f"Missing schema: {name}"

    def test_round_routes_exist(self, app):
        schema = get_openapi(title=app.title, version=app.version, routes=app.routes)
        paths = schema["paths"]

        for op in ["configure", "start", "select", "open", "decide", "reset"]:
            assert f"/api/v1/sessions/{{session_id}}/{op}" in paths


class TestStatusCodes:
    """Rejections are 409, unknown sessions 404, bad session requests 400."""

    def test_full_round_over_http(self, client):
        session_id = new_session(client, variant="host_auto", door_count=5)

        assert client.post(f"/api/v1/sessions/{session_id}/start").status_code == 200
        response = client.post(f"/api/v1/sessions/{session_id}/select", json={"door": 0})
        assert response.status_code == 200
        assert response.json()["revealed"] == [1, 3, 4]

        response = client.post(f"/api/v1/sessions/{session_id}/decide", json={"stick": False})
        assert response.status_code == 200
        assert response.json()["round"]["won"] is True

    def test_decide_too_early_is_409(self, client):
        session_id = new_session(client)

        response = client.post(f"/api/v1/sessions/{session_id}/decide", json={"stick": True})
        assert response.status_code == 409
        body = response.json()
        assert body["error_code"] == "INVALID_PHASE"
        assert body["details"]["round"]["phase"] == "setup"

    def test_bad_door_is_409(self, client):
        session_id = new_session(client)
        client.post(f"/api/v1/sessions/{session_id}/start")

        response = client.post(f"/api/v1/sessions/{session_id}/select", json={"door": 3})
        assert response.status_code == 409
        assert response.json()["error_code"] == "INVALID_DOOR"

    def test_unknown_session_is_404(self, client):
        response = client.post("/api/v1/sessions/nope/start")
        assert response.status_code == 404
        assert response.json()["error_code"] == "SESSION_NOT_FOUND"

        assert client.get("/api/v1/sessions/nope").status_code == 404

    def test_unknown_variant_is_400(self, client):
        response = client.post("/api/v1/sessions", json={"variant": "deal_or_no_deal"})
        assert response.status_code == 400
        assert response.json()["error_code"] == "INVALID_VARIANT"

    @pytest.mark.parametrize("variant, doors", [
        ("user_manual_many", 4),
        ("host_auto", 2),
        ("host_auto", 11),
    ])
    def test_out_of_range_doors_is_400(self, client, variant, doors):
        response = client.post("/api/v1/sessions", json={"variant": variant, "door_count": doors})
        assert response.status_code == 400
        assert response.json()["error_code"] == "INVALID_CONFIGURATION"

    def test_end_session(self, client):
        session_id = new_session(client)

        response = client.delete(f"/api/v1/sessions/{session_id}")
        assert response.json() == {
            "success": True,
            "session_id": session_id,
            "status": "abandoned",
        }
        assert client.get("/api/v1/sessions").json()["count"] == 0

    def test_health(self, client):
        assert client.get("/health").json()["status"] == "healthy"


class TestWebSocket:
    """Tests for the session WebSocket."""

    def test_initial_state_and_ping(self, client):
        session_id = new_session(client)

        with client.websocket_connect(f"/api/v1/sessions/{session_id}/ws") as ws:
            message = ws.receive_json()
            assert message["type"] == "state_update"
            assert message["payload"]["phase"] == "setup"

            ws.send_text('{"type": "ping"}')
            assert ws.receive_json() == {"type": "pong"}

    def test_accepted_operation_is_pushed(self, client):
        session_id = new_session(client)

        with client.websocket_connect(f"/api/v1/sessions/{session_id}/ws") as ws:
            ws.receive_json()
            client.post(f"/api/v1/sessions/{session_id}/start")

            message = ws.receive_json()
            assert message["type"] == "state_update"
            assert message["payload"]["phase"] == "choosing"

    def test_paced_reveal_steps_are_pushed(self):
        app = create_app(make_service(reveal_delay=0.001))

        with TestClient(app) as client:
            session_id = new_session(client, variant="host_auto", door_count=5)
            client.post(f"/api/v1/sessions/{session_id}/start")

            with client.websocket_connect(f"/api/v1/sessions/{session_id}/ws") as ws:
                ws.receive_json()
                response = client.post(f"/api/v1/sessions/{session_id}/select", json={"door": 0})
                assert response.json()["staged"] is True

                steps = []
                while len(steps) < 3:
                    message = ws.receive_json()
                    if message["type"] == "reveal_step":
                        steps.append(message)

        assert [s["payload"]["opened_doors"] for s in steps] == [[1], [1, 3], [1, 3, 4]]
        assert steps[-1]["payload"]["phase"] == "decision"

    def test_closed_socket_is_forgotten(self, app, client):
        session_id = new_session(client)

        with client.websocket_connect(f"/api/v1/sessions/{session_id}/ws") as ws:
            ws.receive_json()
            assert session_id in app.state.ws_connections

        assert session_id not in app.state.ws_connections

    def test_ending_session_forgets_its_sockets(self, app, client):
        session_id = new_session(client)

        with client.websocket_connect(f"/api/v1/sessions/{session_id}/ws") as ws:
            ws.receive_json()
            client.delete(f"/api/v1/sessions/{session_id}")
            assert session_id not in app.state.ws_connections
