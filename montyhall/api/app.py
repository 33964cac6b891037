"""
FastAPI Application - REST API for a browser front end.

Endpoints:
    GET    /api/v1/variants                     List variants
    POST   /api/v1/sessions                     Create session
    GET    /api/v1/sessions                     List active sessions
    GET    /api/v1/sessions/{id}                Get session and round
    DELETE /api/v1/sessions/{id}                End session
    POST   /api/v1/sessions/{id}/configure      Set door count (setup only)
    POST   /api/v1/sessions/{id}/start          Draw the prize, start choosing
    POST   /api/v1/sessions/{id}/select         Pick a door
    POST   /api/v1/sessions/{id}/open           Open a door (manual variants)
    POST   /api/v1/sessions/{id}/decide         Stick or switch
    POST   /api/v1/sessions/{id}/reset          Back to setup
    WS     /api/v1/sessions/{id}/ws             Round updates, incl. paced reveals

Host Reveal Flow:
    With MONTYHALL_REVEAL_DELAY > 0, POST /select on a host_auto session
    returns at once in phase "revealing" with staged=true. Monty then opens
    one door per delay, pushing each step over the WebSocket. POST /reset
    during that time drops the rest of the reveal.

All responses are JSON with explicit Pydantic schemas.
"""

from typing import Optional, Union
import json
import logging
import os

# Environment configuration
MONTYHALL_ENV = os.getenv("MONTYHALL_ENV", "development")
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "*").split(",")
REVEAL_DELAY = float(os.getenv("MONTYHALL_REVEAL_DELAY", "1.0"))

logger = logging.getLogger(__name__)


def create_app(service=None):
    """
    Create the FastAPI application.

    Args:
        service: Optional APIService instance (creates new if not provided)

    Returns:
        FastAPI application instance
    """
    try:
        from fastapi import FastAPI, Query, WebSocket, WebSocketDisconnect
        from fastapi.middleware.cors import CORSMiddleware
        from fastapi.responses import JSONResponse
    except ImportError:
        raise ImportError(
            "FastAPI not installed. Install with: pip install fastapi uvicorn"
        )

    from .. import __version__
    from .service import APIService
    from .schemas import (
        # Request models
        CreateSessionRequest,
        ConfigureRequest,
        DoorRequest,
        DecideRequest,
        # Response models
        SessionResponse,
        ActionResponse,
        ErrorResponse,
        VariantListResponse,
        SessionListResponse,
        EndSessionResponse,
        HealthResponse,
        # Enums
        ErrorCode,
    )

    app = FastAPI(
        title="Monty Hall Engine API",
        description="""
The N-Door Monty Hall Challenge - pick a door, watch the goats, stick or switch.

## Variants

| Name | Who opens doors | Doors |
|------|-----------------|-------|
| `host_auto` | Monty opens N-2 goats | 3-10 |
| `user_manual` | You do; opening the car loses | 3-10 |
| `user_manual_many` | As `user_manual` | 7-10 |

## Error Codes

| Code | Description |
|------|-------------|
| `SESSION_NOT_FOUND` | Session does not exist |
| `INVALID_VARIANT` | Unknown variant name |
| `INVALID_CONFIGURATION` | Door count outside the variant's range |
| `INVALID_PHASE` | Operation not allowed right now |
| `INVALID_DOOR` | Door out of range, already open, or your own |
| `UNSUPPORTED_OPERATION` | Operation not part of this variant |

Rejected operations never change the round.
        """,
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    api_service = service or APIService(reveal_delay=REVEAL_DELAY)

    # WebSocket connections
    ws_connections: dict[str, list[WebSocket]] = {}

    # =========================================================================
    # Error helpers
    # =========================================================================

    def make_error_response(
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: Optional[dict] = None,
    ) -> JSONResponse:
        """Create a standardized error response."""
        return JSONResponse(
            status_code=status_code,
            content=ErrorResponse(
                error=message,
                error_code=error_code,
                details=details,
            ).model_dump(mode="json"),
        )

    def error_to_json(error: ErrorResponse) -> JSONResponse:
        """Unknown sessions are 404; engine rejections are 409."""
        status_code = 404 if error.error_code == ErrorCode.SESSION_NOT_FOUND else 409
        return make_error_response(error.error_code, error.error, status_code, error.details)

    def drop_connection(session_id: str, websocket: WebSocket):
        """Forget a socket; forget the session entry once it has none left."""
        connections = ws_connections.get(session_id)
        if connections is None:
            return
        if websocket in connections:
            connections.remove(websocket)
        if not connections:
            del ws_connections[session_id]

    async def broadcast_to_session(session_id: str, message: dict):
        """Broadcast a message to all WebSocket connections for a session."""
        dead_connections = []
        for ws in list(ws_connections.get(session_id, [])):
            try:
                await ws.send_json(message)
            except (WebSocketDisconnect, RuntimeError):
                dead_connections.append(ws)
        for ws in dead_connections:
            drop_connection(session_id, ws)

    async def respond(session_id: str, response) -> Union[ActionResponse, JSONResponse]:
        """Send errors as JSON errors; push accepted rounds to listeners."""
        if isinstance(response, ErrorResponse):
            return error_to_json(response)
        await broadcast_to_session(session_id, {
            "type": "state_update",
            "payload": response.round.model_dump(mode="json"),
        })
        return response

    # =========================================================================
    # Variants
    # =========================================================================

    @app.get(
        "/api/v1/variants",
        response_model=VariantListResponse,
        tags=["Variants"],
        summary="List playable variants",
    )
    async def list_variants() -> VariantListResponse:
        return api_service.list_variants()

    # =========================================================================
    # Session Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/sessions",
        response_model=SessionResponse,
        responses={400: {"model": ErrorResponse, "description": "Invalid variant or door count"}},
        tags=["Sessions"],
        summary="Create a new session",
    )
    async def create_session(body: CreateSessionRequest) -> Union[SessionResponse, JSONResponse]:
        """
        Open a session for one player.

        The round starts in setup; call `/start` to draw the prize.
        """
        try:
            return api_service.create_session(body)
        except ValueError as e:
            error_msg = str(e)
            if "variant" in error_msg.lower():
                return make_error_response(ErrorCode.INVALID_VARIANT, error_msg)
            return make_error_response(ErrorCode.INVALID_CONFIGURATION, error_msg)

    @app.get(
        "/api/v1/sessions",
        response_model=SessionListResponse,
        tags=["Sessions"],
        summary="List active sessions",
    )
    async def list_sessions() -> SessionListResponse:
        sessions = api_service.list_sessions()
        return SessionListResponse(sessions=sessions, count=len(sessions))

    @app.get(
        "/api/v1/sessions/{session_id}",
        response_model=SessionResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Sessions"],
        summary="Get session and current round",
    )
    async def get_session(session_id: str) -> Union[SessionResponse, JSONResponse]:
        response = api_service.get_session(session_id)
        if isinstance(response, ErrorResponse):
            return error_to_json(response)
        return response

    @app.delete(
        "/api/v1/sessions/{session_id}",
        response_model=EndSessionResponse,
        tags=["Sessions"],
        summary="End a session",
    )
    async def end_session(
        session_id: str,
        reason: str = Query("user_ended", description="Reason for ending"),
    ) -> EndSessionResponse:
        response = api_service.end_session(session_id, reason)
        for ws in ws_connections.pop(session_id, []):
            try:
                await ws.close()
            except RuntimeError:
                # Already closed by the client
                pass
        return response

    # =========================================================================
    # Round Endpoints
    # =========================================================================

    round_responses = {
        404: {"model": ErrorResponse, "description": "Session not found"},
        409: {"model": ErrorResponse, "description": "Rejected by the engine"},
    }

    @app.post(
        "/api/v1/sessions/{session_id}/configure",
        response_model=ActionResponse,
        responses=round_responses,
        tags=["Round"],
        summary="Set the door count for the next round",
    )
    async def configure(session_id: str, body: ConfigureRequest):
        return await respond(session_id, api_service.configure(session_id, body))

    @app.post(
        "/api/v1/sessions/{session_id}/start",
        response_model=ActionResponse,
        responses=round_responses,
        tags=["Round"],
        summary="Start a round",
    )
    async def start_round(session_id: str):
        return await respond(session_id, api_service.start_round(session_id))

    @app.post(
        "/api/v1/sessions/{session_id}/select",
        response_model=ActionResponse,
        responses=round_responses,
        tags=["Round"],
        summary="Pick a door",
    )
    async def select_door(session_id: str, body: DoorRequest):
        """
        Pick the player's door.

        On `host_auto` with a reveal delay, Monty's reveals continue in the
        background and arrive over the WebSocket.
        """
        async def on_step(result):
            await broadcast_to_session(session_id, {
                "type": "reveal_step",
                "payload": api_service.round_state(result.snapshot).model_dump(mode="json"),
                "messages": result.messages,
            })

        response = api_service.select_door_staged(session_id, body, on_step=on_step)
        return await respond(session_id, response)

    @app.post(
        "/api/v1/sessions/{session_id}/open",
        response_model=ActionResponse,
        responses=round_responses,
        tags=["Round"],
        summary="Open a door yourself (manual variants)",
    )
    async def open_door(session_id: str, body: DoorRequest):
        return await respond(session_id, api_service.open_door(session_id, body))

    @app.post(
        "/api/v1/sessions/{session_id}/decide",
        response_model=ActionResponse,
        responses=round_responses,
        tags=["Round"],
        summary="Stick or switch",
    )
    async def decide(session_id: str, body: DecideRequest):
        return await respond(session_id, api_service.decide(session_id, body))

    @app.post(
        "/api/v1/sessions/{session_id}/reset",
        response_model=ActionResponse,
        responses=round_responses,
        tags=["Round"],
        summary="Back to setup",
    )
    async def reset(session_id: str):
        return await respond(session_id, api_service.reset(session_id))

    # =========================================================================
    # WebSocket Endpoint
    # =========================================================================

    @app.websocket("/api/v1/sessions/{session_id}/ws")
    async def websocket_endpoint(websocket: WebSocket, session_id: str):
        """
        WebSocket for real-time updates.

        Messages from server:
        - state_update: Round changed
        - reveal_step: Monty opened a door (paced reveals)
        - error: Error occurred

        Messages from client:
        - ping: Keep-alive
        """
        await websocket.accept()

        if session_id not in ws_connections:
            ws_connections[session_id] = []
        ws_connections[session_id].append(websocket)

        try:
            response = api_service.get_session(session_id)
            if not isinstance(response, ErrorResponse):
                await websocket.send_json({
                    "type": "state_update",
                    "payload": response.round.model_dump(mode="json"),
                })

            while True:
                data = await websocket.receive_text()
                try:
                    message = json.loads(data)
                    if message.get("type") == "ping":
                        await websocket.send_json({"type": "pong"})
                except json.JSONDecodeError:
                    await websocket.send_json({
                        "type": "error",
                        "payload": {"message": "Invalid JSON"},
                    })

        except WebSocketDisconnect:
            logger.debug("WebSocket closed for session %s", session_id)
        finally:
            drop_connection(session_id, websocket)

    # =========================================================================
    # Health Check
    # =========================================================================

    @app.get(
        "/health",
        response_model=HealthResponse,
        tags=["System"],
        summary="Health check",
    )
    async def health_check() -> HealthResponse:
        """Health check endpoint for load balancers."""
        return HealthResponse(
            status="healthy",
            service="montyhall-engine",
            version=__version__,
        )

    @app.get("/", tags=["System"])
    async def root():
        """Root endpoint with API info."""
        return {
            "name": "Monty Hall Engine API",
            "version": __version__,
            "env": MONTYHALL_ENV,
            "docs": "/api/docs",
            "health": "/health",
        }

    app.state.ws_connections = ws_connections
    return app


# For running directly: uvicorn montyhall.api.app:app
app = None
try:
    app = create_app()
except ImportError:
    # FastAPI not installed
    pass
