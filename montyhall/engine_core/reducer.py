"""
Reducer - Applies actions to a round.

The reducer is the single point of state change.
All state changes must go through apply_action().

Design principles:
- (round, action) -> new round; the input round is never edited
- Validates before applying
- Returns ActionResult with success/failure
- Delegates the rules themselves to protocol
"""

from __future__ import annotations
from dataclasses import dataclass, field
import random

from ..rules import check_door_count
from .state import Round, RoundPhase
from .action import Action, ActionType, ActionResult, ErrorCode
from .protocol import (
    draw_prize_door,
    plan_host_reveal,
    find_switch_target,
    resolve_decision,
    evaluate_outcome,
)
from . import messages


# Phases in which each action may be applied
LEGAL_PHASES: dict[ActionType, frozenset[RoundPhase]] = {
    ActionType.CONFIGURE: frozenset({RoundPhase.SETUP}),
    ActionType.START_ROUND: frozenset({RoundPhase.SETUP}),
    ActionType.RESET: frozenset(RoundPhase),
    ActionType.SELECT_DOOR: frozenset({RoundPhase.CHOOSING}),
    ActionType.OPEN_DOOR: frozenset({RoundPhase.USER_REVEALING}),
    ActionType.DECIDE: frozenset({RoundPhase.DECISION}),
    ActionType.REVEAL_NEXT: frozenset({RoundPhase.REVEALING}),
}

HOST_ONLY = {ActionType.REVEAL_NEXT}
MANUAL_ONLY = {ActionType.OPEN_DOOR}


@dataclass
class Reducer:
    """
    Reducer applies actions to a round.

    Stateless apart from the random source used for prize draws.
    """
    rng: random.Random = field(default_factory=random.Random)

    def apply(self, state: Round, action: Action) -> ActionResult:
        """
        Apply an action to the round.

        Returns ActionResult with new round or error.
        """
        validation_error = self._validate_action(state, action)
        if validation_error:
            return validation_error

        handler = self._get_handler(action.action_type)
        if not handler:
            return ActionResult.failure(
                f"No handler for action type: {action.action_type}",
                ErrorCode.NO_HANDLER,
            )

        result = handler(state, action)
        if result.success and result.new_state:
            result.new_state.action_history.append(action)
        return result

    def _validate_action(self, state: Round, action: Action) -> ActionResult | None:
        """
        Check the action against the variant and the current phase.

        Returns a failure result if invalid, None if valid.
        """
        action_type = action.action_type
        host = state.variant.host_reveals

        if (host and action_type in MANUAL_ONLY) or (not host and action_type in HOST_ONLY):
            return ActionResult.failure(
                f"{action_type.value} is not part of the {state.variant.name} variant",
                ErrorCode.UNSUPPORTED_OPERATION,
            )

        legal = LEGAL_PHASES.get(action_type, frozenset())
        if state.phase not in legal:
            return ActionResult.failure(
                f"Cannot {action_type.value} during {state.phase.value}",
                ErrorCode.INVALID_PHASE,
            )

        return None

    def _get_handler(self, action_type: ActionType):
        """Get the handler function for an action type."""
        handlers = {
            ActionType.CONFIGURE: self._handle_configure,
            ActionType.START_ROUND: self._handle_start_round,
            ActionType.RESET: self._handle_reset,
            ActionType.SELECT_DOOR: self._handle_select_door,
            ActionType.OPEN_DOOR: self._handle_open_door,
            ActionType.DECIDE: self._handle_decide,
            ActionType.REVEAL_NEXT: self._handle_reveal_next,
        }
        return handlers.get(action_type)

    # =========================================================================
    # Setup
    # =========================================================================

    def _handle_configure(self, state: Round, action: Action) -> ActionResult:
        door_count = action.payload.door_count
        error = check_door_count(state.variant, door_count)
        if error:
            return ActionResult.failure(error, ErrorCode.INVALID_CONFIGURATION)

        new_state = state._copy_with(door_count=door_count)
        return ActionResult.success_with_state(
            new_state, messages=[f"Playing with {door_count} doors."]
        )

    def _handle_start_round(self, state: Round, action: Action) -> ActionResult:
        prize_door = draw_prize_door(self.rng, state.door_count)
        status = messages.round_started(state.door_count)
        new_state = state.cleared()._copy_with(
            phase=RoundPhase.CHOOSING,
            prize_door=prize_door,
            status_message=status,
        )
        return ActionResult.success_with_state(new_state, messages=[status])

    def _handle_reset(self, state: Round, action: Action) -> ActionResult:
        # Also abandons any unfinished host reveal plan
        return ActionResult.success_with_state(state.cleared(), messages=[messages.WELCOME])

    # =========================================================================
    # Selection & reveal
    # =========================================================================

    def _door_error(self, state: Round, door) -> ActionResult | None:
        """Reject doors that are out of range, held, or already open."""
        if not state.in_range(door):
            return ActionResult.failure(
                messages.out_of_range(door, state.door_count), ErrorCode.INVALID_DOOR
            )
        if door == state.held_door:
            return ActionResult.failure(messages.held_door_rejected(door), ErrorCode.INVALID_DOOR)
        if door in state.opened_doors:
            return ActionResult.failure(messages.already_open(door), ErrorCode.INVALID_DOOR)
        return None

    def _handle_select_door(self, state: Round, action: Action) -> ActionResult:
        door = action.payload.door
        error = self._door_error(state, door)
        if error:
            return error

        if not state.variant.host_reveals:
            status = messages.manual_selected(door)
            new_state = state._copy_with(
                selected_door=door,
                phase=RoundPhase.USER_REVEALING,
                status_message=status,
            )
            return ActionResult.success_with_state(new_state, messages=[status])

        plan = plan_host_reveal(state.door_count, door, state.prize_door)
        new_state = state._copy_with(
            selected_door=door,
            phase=RoundPhase.REVEALING,
            reveal_plan=plan,
            status_message=messages.HOST_REVEALING,
        )
        result_messages = [messages.host_selected(door), messages.HOST_REVEALING]
        revealed: list[int] = []

        if not action.payload.staged:
            while new_state.reveal_plan:
                new_state, opened, message = self._reveal_step(new_state)
                revealed.append(opened)
                result_messages.append(message)
            result_messages.append(new_state.status_message)

        return ActionResult.success_with_state(
            new_state, messages=result_messages, revealed=revealed
        )

    def _handle_reveal_next(self, state: Round, action: Action) -> ActionResult:
        new_state, opened, message = self._reveal_step(state)
        result_messages = [message]
        if new_state.phase == RoundPhase.DECISION:
            result_messages.append(new_state.status_message)
        return ActionResult.success_with_state(
            new_state, messages=result_messages, revealed=[opened]
        )

    def _reveal_step(self, state: Round) -> tuple[Round, int, str]:
        """Open the next planned host door; enter DECISION after the last."""
        door, rest = state.reveal_plan[0], state.reveal_plan[1:]
        opened_doors = state.opened_doors + (door,)
        step_message = messages.host_opened(door)

        if rest:
            new_state = state._copy_with(
                opened_doors=opened_doors,
                reveal_plan=rest,
                status_message=step_message,
            )
            return new_state, door, step_message

        switch_target = find_switch_target(state.door_count, state.selected_door, opened_doors)
        new_state = state._copy_with(
            opened_doors=opened_doors,
            reveal_plan=(),
            switch_target=switch_target,
            phase=RoundPhase.DECISION,
            status_message=messages.host_decision_prompt(state.selected_door, switch_target),
        )
        return new_state, door, step_message

    def _handle_open_door(self, state: Round, action: Action) -> ActionResult:
        door = action.payload.door
        error = self._door_error(state, door)
        if error:
            return error

        opened_doors = state.opened_doors + (door,)

        if not state.decision_made and door == state.prize_door:
            status = messages.instant_loss(door)
            new_state = state._copy_with(
                opened_doors=opened_doors,
                final_choice=door,
                won=False,
                phase=RoundPhase.RESULT,
                status_message=status,
            )
            return ActionResult.success_with_state(new_state, messages=[status], revealed=[door])

        new_state = state._copy_with(opened_doors=opened_doors)
        remaining = new_state.closed_non_held_doors

        if state.decision_made:
            if door == state.prize_door:
                step_message = f"{messages.door_label(door)} hides the car."
            else:
                step_message = messages.manual_goat(door, len(remaining))
            if remaining:
                new_state = new_state._copy_with(status_message=step_message)
                return ActionResult.success_with_state(
                    new_state, messages=[step_message], revealed=[door]
                )
            return self._finish(new_state, [step_message], revealed=[door])

        if len(remaining) == 1:
            switch_target = remaining[0]
            status = messages.manual_decision_prompt(state.held_door, switch_target)
            new_state = new_state._copy_with(
                switch_target=switch_target,
                phase=RoundPhase.DECISION,
                status_message=status,
            )
            return ActionResult.success_with_state(
                new_state,
                messages=[messages.manual_goat(door, len(remaining)), status],
                revealed=[door],
            )

        status = messages.manual_goat(door, len(remaining))
        new_state = new_state._copy_with(status_message=status)
        return ActionResult.success_with_state(new_state, messages=[status], revealed=[door])

    # =========================================================================
    # Decision & outcome
    # =========================================================================

    def _handle_decide(self, state: Round, action: Action) -> ActionResult:
        stick = action.payload.stick
        if not isinstance(stick, bool):
            return ActionResult.failure(
                f"Decision must be stick (True) or switch (False), got {stick!r}",
                ErrorCode.INVALID_DECISION,
            )

        final_choice = resolve_decision(state.held_door, state.switch_target, stick)
        new_state = state._copy_with(final_choice=final_choice)

        if state.variant.host_reveals:
            return self._finish(new_state, [messages.DRUMROLL])

        # The held door is now fixed; the rest get opened by the player
        new_state = new_state._copy_with(selected_door=final_choice)
        if new_state.closed_non_held_doors:
            status = messages.manual_open_remaining(final_choice)
            new_state = new_state._copy_with(
                phase=RoundPhase.USER_REVEALING,
                status_message=status,
            )
            return ActionResult.success_with_state(new_state, messages=[status])
        return self._finish(new_state, [messages.DRUMROLL])

    def _finish(
        self,
        state: Round,
        result_messages: list[str],
        revealed: list[int] | None = None,
    ) -> ActionResult:
        """Score the final choice and close the round."""
        won = evaluate_outcome(state.final_choice, state.prize_door)
        status = messages.outcome(won, state.final_choice)
        new_state = state._copy_with(
            won=won,
            phase=RoundPhase.RESULT,
            status_message=status,
        )
        return ActionResult.success_with_state(
            new_state, messages=result_messages + [status], revealed=revealed
        )


def apply_action(state: Round, action: Action, rng: random.Random | None = None) -> ActionResult:
    """
    Convenience function to apply an action.

    Creates a reducer and applies the action.
    """
    reducer = Reducer(rng=rng or random.Random())
    return reducer.apply(state, action)
