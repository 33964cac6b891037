"""
Engine Core - Deterministic round state and the reveal/decision protocol.

The engine is the runtime that:
1. Holds the one live Round for a variant
2. Validates each action against the current phase
3. Applies actions via the reducer
4. Resolves stick/switch decisions and scores the outcome
5. Emits read-only snapshots
"""

from .state import Round, RoundPhase, RoundSnapshot
from .action import Action, ActionType, ActionPayload, ActionResult, ErrorCode
from .reducer import Reducer, apply_action
from .protocol import (
    draw_prize_door,
    plan_host_reveal,
    find_switch_target,
    resolve_decision,
    evaluate_outcome,
)
from .engine import GameEngine

__all__ = [
    "Round",
    "RoundPhase",
    "RoundSnapshot",
    "Action",
    "ActionType",
    "ActionPayload",
    "ActionResult",
    "ErrorCode",
    "Reducer",
    "apply_action",
    "draw_prize_door",
    "plan_host_reveal",
    "find_switch_target",
    "resolve_decision",
    "evaluate_outcome",
    "GameEngine",
]
