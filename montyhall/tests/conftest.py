"""
Pytest fixtures for Monty Hall tests.
"""

import random

import pytest

from ..engine_core import GameEngine, Round, RoundPhase
from ..rules import HOST_AUTO, USER_MANUAL


class FixedPrize(random.Random):
    """A Random whose prize draws come from a script (last value repeats)."""

    def __init__(self, *prizes: int):
        super().__init__(0)
        self.prizes = list(prizes)

    def randrange(self, *args, **kwargs):
        if len(self.prizes) > 1:
            return self.prizes.pop(0)
        return self.prizes[0]


@pytest.fixture
def make_engine():
    """Factory: an engine for a variant with N doors and a known prize, round started."""
    def _make(variant="host_auto", doors=3, prize=0, start=True) -> GameEngine:
        engine = GameEngine(variant, rng=FixedPrize(prize))
        result = engine.configure(doors)
        assert result.success, result.error
        if start:
            result = engine.start_round()
            assert result.success, result.error
        return engine
    return _make


@pytest.fixture
def host_round() -> Round:
    """A 5-door host round in CHOOSING with the car behind door 2."""
    return Round(
        variant=HOST_AUTO,
        door_count=5,
        phase=RoundPhase.CHOOSING,
        prize_door=2,
    )


@pytest.fixture
def manual_round() -> Round:
    """A 7-door manual round in CHOOSING with the car behind door 5."""
    return Round(
        variant=USER_MANUAL,
        door_count=7,
        phase=RoundPhase.CHOOSING,
        prize_door=5,
    )
