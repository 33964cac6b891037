"""
Round State - The canonical record of one play-through.

Design principles:
- Single owner: only the engine holds the live Round
- Copy-on-write: the reducer returns a new Round, never edits one in place
- Explicit sentinels: None means "unset"; door 0 is an ordinary door
- Read-only outward: presentation code only sees RoundSnapshot
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any

from ..rules import VariantRules, HOST_AUTO
from . import messages


class RoundPhase(Enum):
    """Protocol states of a round."""
    SETUP = "setup"
    CHOOSING = "choosing"
    REVEALING = "revealing"  # host opening doors
    USER_REVEALING = "user_revealing"  # player opening doors
    DECISION = "decision"
    RESULT = "result"


@dataclass
class Round:
    """
    Complete round state at a point in time.

    This is the canonical state that the engine operates on.
    All state changes go through the reducer.
    """
    variant: VariantRules = HOST_AUTO
    door_count: int = 3

    phase: RoundPhase = RoundPhase.SETUP
    prize_door: int | None = None

    selected_door: int | None = None
    opened_doors: tuple[int, ...] = ()
    switch_target: int | None = None
    final_choice: int | None = None
    won: bool | None = None

    # Host reveal steps not yet shown (staged reveals only)
    reveal_plan: tuple[int, ...] = ()

    status_message: str = messages.WELCOME

    # Accepted actions, in order
    action_history: list[Any] = field(default_factory=list)

    @property
    def held_door(self) -> int | None:
        """The player's live choice: final choice once made, else the selection."""
        if self.final_choice is not None:
            return self.final_choice
        return self.selected_door

    @property
    def decision_made(self) -> bool:
        return self.final_choice is not None

    @property
    def closed_doors(self) -> tuple[int, ...]:
        """Doors not yet opened, ascending."""
        opened = set(self.opened_doors)
        return tuple(d for d in range(self.door_count) if d not in opened)

    @property
    def closed_non_held_doors(self) -> tuple[int, ...]:
        """Closed doors other than the held one, ascending."""
        held = self.held_door
        return tuple(d for d in self.closed_doors if d != held)

    def in_range(self, door: Any) -> bool:
        if isinstance(door, bool) or not isinstance(door, int):
            return False
        return 0 <= door < self.door_count

    def _copy_with(self, **kwargs) -> Round:
        """Create a copy with some fields replaced (history is never shared)."""
        kwargs.setdefault("action_history", list(self.action_history))
        return replace(self, **kwargs)

    def cleared(self) -> Round:
        """Return a copy with every per-round field reset, keeping the configuration."""
        return self._copy_with(
            phase=RoundPhase.SETUP,
            prize_door=None,
            selected_door=None,
            opened_doors=(),
            switch_target=None,
            final_choice=None,
            won=None,
            reveal_plan=(),
            status_message=messages.WELCOME,
            action_history=[],
        )

    def snapshot(self) -> RoundSnapshot:
        """Build the read-only view handed to presentation code."""
        in_decision = self.phase == RoundPhase.DECISION
        return RoundSnapshot(
            variant=self.variant.name,
            phase=self.phase,
            door_count=self.door_count,
            min_doors=self.variant.min_doors,
            max_doors=self.variant.max_doors,
            selected_door=self.selected_door,
            # The answer stays hidden until the round is over
            prize_door=self.prize_door if self.phase == RoundPhase.RESULT else None,
            opened_doors=self.opened_doors,
            closed_doors=self.closed_doors,
            switch_target=self.switch_target,
            final_choice=self.final_choice,
            won=self.won if self.phase == RoundPhase.RESULT else None,
            status_message=self.status_message,
            stick_label=messages.stick_label(self.held_door) if in_decision else None,
            switch_label=messages.switch_label(self.switch_target) if in_decision else None,
        )


@dataclass(frozen=True)
class RoundSnapshot:
    """
    Read-only view of a Round.

    prize_door and won are None until phase is RESULT.
    """
    variant: str
    phase: RoundPhase
    door_count: int
    min_doors: int
    max_doors: int
    selected_door: int | None
    prize_door: int | None
    opened_doors: tuple[int, ...]
    closed_doors: tuple[int, ...]
    switch_target: int | None
    final_choice: int | None
    won: bool | None
    status_message: str
    stick_label: str | None = None
    switch_label: str | None = None

    @property
    def is_over(self) -> bool:
        return self.phase == RoundPhase.RESULT

    def to_dict(self) -> dict[str, Any]:
        """Plain-data form for serialization."""
        return {
            "variant": self.variant,
            "phase": self.phase.value,
            "door_count": self.door_count,
            "min_doors": self.min_doors,
            "max_doors": self.max_doors,
            "selected_door": self.selected_door,
            "prize_door": self.prize_door,
            "opened_doors": list(self.opened_doors),
            "closed_doors": list(self.closed_doors),
            "switch_target": self.switch_target,
            "final_choice": self.final_choice,
            "won": self.won,
            "status_message": self.status_message,
            "stick_label": self.stick_label,
            "switch_label": self.switch_label,
        }
