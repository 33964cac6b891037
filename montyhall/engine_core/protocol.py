"""
Protocol - Pure rules for drawing, revealing, deciding and scoring.

Nothing here touches a Round. The reducer calls these and applies
their answers, which keeps each rule testable on its own.
"""

from __future__ import annotations
import random
from typing import Iterable


def draw_prize_door(rng: random.Random, door_count: int) -> int:
    """Uniform draw over exactly [0, door_count)."""
    if door_count < 1:
        raise ValueError(f"door_count must be positive, got {door_count}")
    return rng.randrange(door_count)


def plan_host_reveal(door_count: int, selected_door: int, prize_door: int) -> tuple[int, ...]:
    """
    Doors the host opens, in the order he opens them.

    Candidates are every door except the player's and the prize,
    ascending. The host takes the first N-2, so when the player
    already holds the prize the highest candidate stays closed.
    """
    candidates = [
        d for d in range(door_count)
        if d != selected_door and d != prize_door
    ]
    return tuple(candidates[:door_count - 2])


def find_switch_target(door_count: int, held_door: int, opened_doors: Iterable[int]) -> int | None:
    """
    The single closed door other than the held one.

    Returns None unless exactly one such door exists.
    """
    opened = set(opened_doors)
    remaining = [
        d for d in range(door_count)
        if d != held_door and d not in opened
    ]
    if len(remaining) != 1:
        return None
    return remaining[0]


def resolve_decision(held_door: int, switch_target: int, stick: bool) -> int:
    """Stick keeps the held door; switch takes the switch target."""
    if held_door is None or switch_target is None:
        raise ValueError("A decision needs both a held door and a switch target")
    return held_door if stick else switch_target


def evaluate_outcome(final_choice: int, prize_door: int) -> bool:
    return final_choice == prize_door
