"""
Tests for the pure protocol rules.

Tests:
- Prize draw range and uniformity
- Host reveal planning
- Switch target resolution
- Decision and outcome
"""

import random
from collections import Counter

import pytest

from ..engine_core.protocol import (
    draw_prize_door,
    plan_host_reveal,
    find_switch_target,
    resolve_decision,
    evaluate_outcome,
)


class TestDrawPrizeDoor:
    """Tests for the prize draw."""

    @pytest.mark.parametrize("door_count", range(3, 11))
    def test_draw_stays_in_range(self, door_count):
        rng = random.Random(1)
        draws = {draw_prize_door(rng, door_count) for _ in range(500)}
        assert draws == set(range(door_count))

    def test_draw_is_roughly_uniform(self):
        """Every door gets close to 1/N of the draws."""
        rng = random.Random(42)
        counts = Counter(draw_prize_door(rng, 5) for _ in range(20000))
        for door in range(5):
            assert abs(counts[door] / 20000 - 0.2) < 0.02

    def test_draw_rejects_empty_range(self):
        with pytest.raises(ValueError):
            draw_prize_door(random.Random(), 0)


class TestPlanHostReveal:
    """Tests for which doors Monty opens."""

    def test_five_doors_player_misses(self):
        """Car at 2, player on 0: Monty opens 1, 3, 4."""
        assert plan_host_reveal(5, selected_door=0, prize_door=2) == (1, 3, 4)

    def test_player_holds_prize_leaves_highest_closed(self):
        """Candidates are 1..4; Monty opens the first three."""
        assert plan_host_reveal(5, selected_door=0, prize_door=0) == (1, 2, 3)

    def test_three_doors_opens_one(self):
        assert plan_host_reveal(3, selected_door=1, prize_door=2) == (0,)
        assert plan_host_reveal(3, selected_door=1, prize_door=1) == (0,)

    @pytest.mark.parametrize("door_count", range(3, 11))
    def test_plan_never_contains_prize_or_selection(self, door_count):
        for selected in range(door_count):
            for prize in range(door_count):
                plan = plan_host_reveal(door_count, selected, prize)
                assert len(plan) == door_count - 2
                assert prize not in plan
                assert selected not in plan
                assert list(plan) == sorted(plan)


class TestFindSwitchTarget:
    """Tests for the remaining-door lookup."""

    def test_single_remaining_door(self):
        assert find_switch_target(5, held_door=0, opened_doors=[1, 3, 4]) == 2

    def test_door_zero_is_a_real_answer(self):
        assert find_switch_target(3, held_door=2, opened_doors=[1]) == 0

    def test_more_than_one_remaining(self):
        assert find_switch_target(7, held_door=0, opened_doors=[1]) is None

    def test_nothing_remaining(self):
        assert find_switch_target(3, held_door=0, opened_doors=[1, 2]) is None


class TestDecisionAndOutcome:
    """Tests for the decision resolver and outcome evaluator."""

    def test_stick_keeps_held_door(self):
        assert resolve_decision(held_door=0, switch_target=2, stick=True) == 0

    def test_switch_takes_target(self):
        assert resolve_decision(held_door=0, switch_target=2, stick=False) == 2

    def test_switch_to_door_zero(self):
        assert resolve_decision(held_door=4, switch_target=0, stick=False) == 0

    def test_decision_needs_both_doors(self):
        with pytest.raises(ValueError):
            resolve_decision(held_door=0, switch_target=None, stick=False)

    def test_outcome(self):
        assert evaluate_outcome(2, 2) is True
        assert evaluate_outcome(0, 2) is False
