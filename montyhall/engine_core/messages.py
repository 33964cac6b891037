"""
Status messages shown to the player.

Doors are 0-based everywhere in the engine and 1-based in anything
a person reads. door_label() is the only place that conversion happens.
"""

from __future__ import annotations


WELCOME = "Welcome to the N-Door Monty Hall Challenge!"
HOST_REVEALING = "Monty is revealing goats..."
DRUMROLL = "And the winner is...!"


def door_label(door: int) -> str:
    if door is None:
        raise ValueError("door_label() needs a door index, got None")
    return f"Door {door + 1}"


def round_started(door_count: int) -> str:
    return f"Choose one of the {door_count} doors!"


def host_selected(door: int) -> str:
    return f"You chose {door_label(door)}. Now, let's see what Monty does..."


def host_opened(door: int) -> str:
    return f"Monty opened {door_label(door)} - it's a goat!"


def host_decision_prompt(selected: int, switch_target: int) -> str:
    return (
        f"You chose {door_label(selected)}. Only {door_label(switch_target)} remains "
        "unopened. Do you want to STICK with your original choice, or SWITCH?"
    )


def manual_selected(door: int) -> str:
    return (
        f"You chose {door_label(door)}. Now open the other doors one at a time, "
        "but don't reveal the car!"
    )


def manual_goat(door: int, remaining: int) -> str:
    noun = "door" if remaining == 1 else "doors"
    return f"{door_label(door)} hides a goat. {remaining} other {noun} still closed."


def manual_decision_prompt(held: int, switch_target: int) -> str:
    return (
        f"Only {door_label(held)} and {door_label(switch_target)} are left. "
        "Do you want to STICK with your original choice, or SWITCH?"
    )


def manual_open_remaining(final_choice: int) -> str:
    return f"You're going with {door_label(final_choice)}. Open the last door to see what you passed up."


def instant_loss(door: int) -> str:
    return f"Oh no! {door_label(door)} hides the car. You lose!"


def outcome(won: bool, final_choice: int) -> str:
    if won:
        return f"Congratulations! You won the car behind {door_label(final_choice)}!"
    return f"Better luck next time! You got a goat behind {door_label(final_choice)}."


def stick_label(door: int) -> str:
    return f"STICK with {door_label(door)}"


def switch_label(door: int) -> str:
    return f"SWITCH to {door_label(door)}"


# Rejections
def held_door_rejected(door: int) -> str:
    return f"{door_label(door)} is your door - open one of the others."


def already_open(door: int) -> str:
    return f"{door_label(door)} is already open."


def out_of_range(door, door_count: int) -> str:
    return f"Door index {door!r} is out of range for {door_count} doors."
