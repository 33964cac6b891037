"""
Pydantic Schemas for API - Request/response models for OpenAPI.

These models define the contract between a front end and the engine.
Every response carries the round snapshot the front end renders from.

Error Codes:
- SESSION_NOT_FOUND: Session does not exist or has expired
- INVALID_VARIANT: No variant with that name
- INVALID_CONFIGURATION: Door count outside the variant's range
- INVALID_PHASE: Operation not allowed in the current phase
- INVALID_DOOR: Door out of range, already open, or the held door
- INVALID_DECISION: Decision was not stick/switch
- UNSUPPORTED_OPERATION: Operation not part of this variant
"""

from enum import Enum
from typing import Optional, Any
from pydantic import BaseModel, Field


# =============================================================================
# Enums
# =============================================================================

class SessionStatus(str, Enum):
    """Session status values."""
    ACTIVE = "active"
    GAME_OVER = "game_over"
    ABANDONED = "abandoned"


class RoundPhase(str, Enum):
    """Round phases, as sent over the wire."""
    SETUP = "setup"
    CHOOSING = "choosing"
    REVEALING = "revealing"
    USER_REVEALING = "user_revealing"
    DECISION = "decision"
    RESULT = "result"


class RevealPolicy(str, Enum):
    """Who opens the doors."""
    HOST_AUTO = "host_auto"
    USER_MANUAL = "user_manual"


class ErrorCode(str, Enum):
    """Structured error codes."""
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    INVALID_VARIANT = "INVALID_VARIANT"
    INVALID_CONFIGURATION = "INVALID_CONFIGURATION"
    INVALID_PHASE = "INVALID_PHASE"
    INVALID_DOOR = "INVALID_DOOR"
    INVALID_DECISION = "INVALID_DECISION"
    UNSUPPORTED_OPERATION = "UNSUPPORTED_OPERATION"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


# =============================================================================
# Shared Models
# =============================================================================

class VariantInfo(BaseModel):
    """A playable variant."""
    name: str
    title: str
    reveal_policy: RevealPolicy
    min_doors: int
    max_doors: int
    default_doors: int
    description: str = ""

    model_config = {"from_attributes": True}


class RoundState(BaseModel):
    """
    What the front end renders.

    prize_door and won stay null until phase is result.
    Door indexes are 0-based; labels are 1-based.
    """
    variant: str
    phase: RoundPhase
    door_count: int
    min_doors: int
    max_doors: int
    selected_door: Optional[int] = None
    prize_door: Optional[int] = None
    opened_doors: list[int] = Field(default_factory=list)
    closed_doors: list[int] = Field(default_factory=list)
    switch_target: Optional[int] = None
    final_choice: Optional[int] = None
    won: Optional[bool] = None
    status_message: str = ""
    stick_label: Optional[str] = Field(None, description="Button text, decision phase only")
    switch_label: Optional[str] = Field(None, description="Button text, decision phase only")


# =============================================================================
# Request Models
# =============================================================================

class CreateSessionRequest(BaseModel):
    """Request to open a new session."""
    variant: str = Field("host_auto", description="Variant name, see GET /api/v1/variants")
    door_count: Optional[int] = Field(
        None,
        description="Optional door count; out-of-range values are rejected as INVALID_CONFIGURATION",
    )
    player_name: str = "Player"


class ConfigureRequest(BaseModel):
    """Set the door count for the next round."""
    door_count: int


class DoorRequest(BaseModel):
    """Select or open a door (0-based index)."""
    door: int


class DecideRequest(BaseModel):
    """Stick with the held door, or switch."""
    stick: bool


# =============================================================================
# Response Models
# =============================================================================

class SessionResponse(BaseModel):
    """Session info with the current round."""
    session_id: str
    status: SessionStatus
    variant: VariantInfo
    player_name: str
    created_at: float
    round: RoundState
    revealing: bool = Field(False, description="True while a paced host reveal is running")
    api_version: str = "v1"


class ActionResponse(BaseModel):
    """Result of an accepted operation."""
    session_id: str
    success: bool = True
    messages: list[str] = Field(default_factory=list, description="Status lines, in order")
    revealed: list[int] = Field(default_factory=list, description="Doors opened by this call")
    round: RoundState
    staged: bool = Field(False, description="Host reveal continues in the background")
    api_version: str = "v1"


class ErrorResponse(BaseModel):
    """Standardized error response."""
    error: str = Field(..., description="Human-readable error message")
    error_code: ErrorCode
    details: Optional[dict[str, Any]] = Field(None, description="Includes the unchanged round")
    api_version: str = "v1"


class VariantListResponse(BaseModel):
    """All built-in variants."""
    variants: list[VariantInfo]
    default: str


class SessionListResponse(BaseModel):
    """Response listing active sessions."""
    sessions: list[str]
    count: int


class EndSessionResponse(BaseModel):
    """Response after ending a session."""
    success: bool
    session_id: str
    status: Optional[SessionStatus] = Field(None, description="Final status; null if there was no such session")


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    service: str
    version: str
