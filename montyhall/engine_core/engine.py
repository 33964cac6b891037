"""
Game Engine - Single owner of the live round.

The engine:
1. Holds exactly one Round
2. Turns operation calls into Actions
3. Runs them through the Reducer
4. Keeps the new Round only if the action was accepted
5. Hands out read-only snapshots

Rejected actions never change the round.
"""

from __future__ import annotations
import logging
import random

from ..rules import VariantRules, get_variant, validate_variant, DEFAULT_VARIANT
from .state import Round, RoundSnapshot, RoundPhase
from .action import Action, ActionResult
from .reducer import Reducer

logger = logging.getLogger(__name__)


class GameEngine:
    """
    Runs one play-through at a time for one variant.

    A VariantRules passed in directly is validated first; an invalid
    one raises VariantValidationError.

    Usage:
        engine = GameEngine("host_auto", seed=7)
        engine.configure(5)
        engine.start_round()
        engine.select_door(0)
        result = engine.decide(stick=False)
        print(result.snapshot.won)
    """

    def __init__(
        self,
        variant: VariantRules | str = DEFAULT_VARIANT,
        rng: random.Random | None = None,
        seed: int | None = None,
    ):
        if isinstance(variant, str):
            variant = get_variant(variant)
        else:
            # Custom rule-sets must keep at least one host reveal possible
            validate_variant(variant, raise_on_error=True)
        self.variant = variant
        self._reducer = Reducer(rng=rng or random.Random(seed))
        self._round = Round(variant=variant, door_count=variant.default_doors)
        # Bumped whenever a round starts or is reset; lets staged
        # reveals notice that the round they belong to is gone
        self.generation = 0

    @property
    def phase(self) -> RoundPhase:
        return self._round.phase

    @property
    def history(self) -> list[Action]:
        return list(self._round.action_history)

    def snapshot(self) -> RoundSnapshot:
        return self._round.snapshot()

    def apply(self, action: Action) -> ActionResult:
        """
        Apply an action to the live round.

        The result always carries the snapshot after the call,
        which is the unchanged round when the action was rejected.
        """
        result = self._reducer.apply(self._round, action)
        if result.success:
            was_over = self._round.phase == RoundPhase.RESULT
            self._round = result.new_state
            if not was_over and self._round.phase == RoundPhase.RESULT:
                logger.info(
                    "Round over: final=%s prize=%s won=%s",
                    self._round.final_choice, self._round.prize_door, self._round.won,
                )
            logger.debug(
                "%s accepted (%s): phase=%s",
                action.action_type.value, self.variant.name, self._round.phase.value,
            )
        else:
            logger.info(
                "%s rejected (%s): %s",
                action.action_type.value, result.error_code.value, result.error,
            )
        # Callers get the snapshot, not the record
        result.new_state = None
        result.snapshot = self._round.snapshot()
        return result

    # =========================================================================
    # Operations
    # =========================================================================

    def configure(self, door_count: int) -> ActionResult:
        return self.apply(Action.configure(door_count))

    def start_round(self) -> ActionResult:
        result = self.apply(Action.start_round())
        if result.success:
            self.generation += 1
            logger.info(
                "Round started: variant=%s doors=%d",
                self.variant.name, self._round.door_count,
            )
        return result

    def select_door(self, door: int, staged: bool = False) -> ActionResult:
        """
        Pick the player's door.

        Under the host policy the whole reveal runs in this call unless
        staged is set, in which case reveal_next() opens one door per call.
        """
        return self.apply(Action.select_door(door, staged=staged))

    def reveal_next(self) -> ActionResult:
        return self.apply(Action.reveal_next())

    def open_door(self, door: int) -> ActionResult:
        return self.apply(Action.open_door(door))

    def decide(self, stick: bool) -> ActionResult:
        return self.apply(Action.decide(stick))

    def reset_to_setup(self) -> ActionResult:
        result = self.apply(Action.reset())
        self.generation += 1
        return result
