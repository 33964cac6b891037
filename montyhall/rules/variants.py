"""
Variant Rules - The named rule-sets the engine can run.

Three rule-sets exist:
- host_auto: Monty opens N-2 goat doors for the player
- user_manual: the player opens doors; revealing the car loses at once
- user_manual_many: as user_manual, restricted to 7-10 doors

The two manual variants share one state machine. Only their door
bounds differ.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum


# Absolute bounds; a variant may only narrow these
MIN_DOORS = 3
MAX_DOORS = 10


class RevealPolicy(Enum):
    """Who opens the non-held doors."""
    HOST_AUTO = "host_auto"
    USER_MANUAL = "user_manual"


@dataclass(frozen=True)
class VariantRules:
    """
    A complete rule-set for one variant.

    Immutable - shared freely between engines.
    """
    name: str
    title: str
    reveal_policy: RevealPolicy
    min_doors: int = MIN_DOORS
    max_doors: int = MAX_DOORS
    default_doors: int = MIN_DOORS
    description: str = ""

    @property
    def host_reveals(self) -> bool:
        return self.reveal_policy == RevealPolicy.HOST_AUTO

    def allows(self, door_count: int) -> bool:
        """Check if a door count is within this variant's bounds."""
        return self.min_doors <= door_count <= self.max_doors


HOST_AUTO = VariantRules(
    name="host_auto",
    title="The N-Door Monty Hall Challenge",
    reveal_policy=RevealPolicy.HOST_AUTO,
    description=(
        "Pick a door. Monty, who knows where the car is, opens N-2 of the "
        "other doors to show goats. Then stick or switch."
    ),
)

USER_MANUAL = VariantRules(
    name="user_manual",
    title="Open The Doors Yourself",
    reveal_policy=RevealPolicy.USER_MANUAL,
    description=(
        "Pick a door, then open the others yourself until only one remains. "
        "Reveal the car and you lose on the spot."
    ),
)

USER_MANUAL_MANY = VariantRules(
    name="user_manual_many",
    title="Open The Doors Yourself (7-10 doors)",
    reveal_policy=RevealPolicy.USER_MANUAL,
    min_doors=7,
    default_doors=7,
    description=USER_MANUAL.description,
)

VARIANTS: dict[str, VariantRules] = {
    v.name: v for v in (HOST_AUTO, USER_MANUAL, USER_MANUAL_MANY)
}

DEFAULT_VARIANT = HOST_AUTO.name


def get_variant(name: str) -> VariantRules:
    """
    Look up a built-in variant by name.

    Raises ValueError for unknown names.
    """
    try:
        return VARIANTS[name]
    except KeyError:
        known = ", ".join(sorted(VARIANTS))
        raise ValueError(f"Unknown variant: {name!r} (known: {known})") from None
