"""
Action System - Actions, payloads, and results.

Actions represent:
1. Setup actions (configure, start round, reset)
2. Player actions (select, open, decide)
3. Host actions (reveal the next planned door)

All state changes flow through actions.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .state import RoundSnapshot


class ActionType(Enum):
    """Types of actions in the system."""
    # Setup actions
    CONFIGURE = "configure"
    START_ROUND = "start_round"
    RESET = "reset"

    # Player actions
    SELECT_DOOR = "select_door"
    OPEN_DOOR = "open_door"
    DECIDE = "decide"

    # Host actions
    REVEAL_NEXT = "reveal_next"


class ErrorCode(str, Enum):
    """Why an action was rejected."""
    INVALID_CONFIGURATION = "INVALID_CONFIGURATION"
    INVALID_PHASE = "INVALID_PHASE"
    INVALID_DOOR = "INVALID_DOOR"
    INVALID_DECISION = "INVALID_DECISION"
    UNSUPPORTED_OPERATION = "UNSUPPORTED_OPERATION"
    NO_HANDLER = "NO_HANDLER"


@dataclass
class ActionPayload:
    """
    Payload for an action - contains the action parameters.

    Different action types use different fields.
    Validation happens in the reducer.
    """
    door: Any = None  # untyped on purpose; the reducer rejects bad values
    door_count: Any = None
    stick: bool | None = None

    # select_door under the host policy: leave reveals for reveal_next()
    staged: bool = False


@dataclass
class Action:
    """
    A complete action to be applied to a round.

    Actions are:
    - Logged to the round's history when accepted
    - Validated before application
    - Applied atomically by the reducer
    """
    action_type: ActionType
    payload: ActionPayload = field(default_factory=ActionPayload)

    @classmethod
    def configure(cls, door_count: Any) -> Action:
        return cls(ActionType.CONFIGURE, ActionPayload(door_count=door_count))

    @classmethod
    def start_round(cls) -> Action:
        return cls(ActionType.START_ROUND)

    @classmethod
    def reset(cls) -> Action:
        return cls(ActionType.RESET)

    @classmethod
    def select_door(cls, door: Any, staged: bool = False) -> Action:
        """Factory for the player's first pick."""
        return cls(ActionType.SELECT_DOOR, ActionPayload(door=door, staged=staged))

    @classmethod
    def open_door(cls, door: Any) -> Action:
        """Factory for a player-opened door (manual variants)."""
        return cls(ActionType.OPEN_DOOR, ActionPayload(door=door))

    @classmethod
    def decide(cls, stick: bool) -> Action:
        """Factory for the stick/switch decision."""
        return cls(ActionType.DECIDE, ActionPayload(stick=stick))

    @classmethod
    def reveal_next(cls) -> Action:
        return cls(ActionType.REVEAL_NEXT)


@dataclass
class ActionResult:
    """
    Result of applying an action.

    Contains:
    - Whether action succeeded
    - New round (if succeeded)
    - Errors (if failed)
    - Messages and opened doors, in order, for presentation
    """
    success: bool
    new_state: Any | None = None  # Round
    error: str | None = None
    error_code: ErrorCode | None = None

    # For presentation
    messages: list[str] = field(default_factory=list)
    revealed: list[int] = field(default_factory=list)  # doors opened by this action

    # Filled in by the engine
    snapshot: RoundSnapshot | None = None

    @classmethod
    def failure(cls, error: str, error_code: ErrorCode) -> ActionResult:
        """Create a failure result."""
        return cls(success=False, error=error, error_code=error_code)

    @classmethod
    def success_with_state(
        cls,
        state: Any,
        messages: list[str] | None = None,
        revealed: list[int] | None = None,
    ) -> ActionResult:
        """Create a success result with new state."""
        return cls(
            success=True,
            new_state=state,
            messages=messages or [],
            revealed=revealed or [],
        )
