"""
API Module - Browser front end interface.

Exposes the engine via REST API. The front end:
1. Lists variants and opens a session
2. Configures the door count and starts a round
3. Forwards door clicks and the stick/switch choice
4. Re-renders from the round returned by every call

All state is session-scoped. No accounts, no persistence.
"""

from .schemas import (
    # Requests
    CreateSessionRequest,
    ConfigureRequest,
    DoorRequest,
    DecideRequest,
    # Responses
    SessionResponse,
    ActionResponse,
    ErrorResponse,
    VariantListResponse,
    # Shared
    VariantInfo,
    RoundState,
)
from .service import APIService
from .app import create_app

__all__ = [
    # Requests
    "CreateSessionRequest",
    "ConfigureRequest",
    "DoorRequest",
    "DecideRequest",
    # Responses
    "SessionResponse",
    "ActionResponse",
    "ErrorResponse",
    "VariantListResponse",
    # Shared
    "VariantInfo",
    "RoundState",
    # Service
    "APIService",
    "create_app",
]
