"""
Staged Reveal - Paces the host's reveal for presentation.

The engine decides which doors Monty opens, and in what order, without
any timing. This module only replays those steps with a delay between
them so a front end can show one goat at a time.

Two forms:
- StagedReveal: async, drives engine.reveal_next() one step at a time
- paced(): sync generator that replays already-computed messages
"""

from __future__ import annotations
import asyncio
import inspect
import logging
import time
from typing import Any, Callable, Iterable, Iterator

from ..engine_core import GameEngine, ActionResult, RoundPhase

logger = logging.getLogger(__name__)


class StagedReveal:
    """
    Runs a host reveal with a fixed delay between door openings.

    If the round is reset while the reveal is in flight, the
    remaining steps are dropped: run() notices the engine's
    generation changed and returns None. Cancelling the task has
    the same effect.
    """

    def __init__(
        self,
        engine: GameEngine,
        delay: float = 1.0,
        on_step: Callable[[ActionResult], Any] | None = None,
    ):
        self.engine = engine
        self.delay = delay
        self.on_step = on_step

    async def run(self, door: int) -> ActionResult | None:
        """
        Select a door and reveal the host's doors one by one.

        Returns the result of the last step, the rejection if the
        selection was refused, or None if the round was abandoned.
        """
        result = self.engine.select_door(door, staged=True)
        if not result.success:
            return result
        await self._notify(result)
        return await self.play_out(result)

    async def play_out(self, result: ActionResult | None = None) -> ActionResult | None:
        """
        Reveal the remaining planned doors of an already-made selection.

        Returns the last step's result (or the given one if nothing was
        left to reveal), or None if the round was abandoned.
        """
        generation = self.engine.generation
        while self.engine.phase == RoundPhase.REVEALING:
            await asyncio.sleep(self.delay)
            if self.engine.generation != generation:
                logger.info("Staged reveal abandoned: round was reset")
                return None
            result = self.engine.reveal_next()
            await self._notify(result)

        return result

    async def _notify(self, result: ActionResult):
        if self.on_step is None:
            return
        outcome = self.on_step(result)
        if inspect.isawaitable(outcome):
            await outcome


def paced(
    lines: Iterable[str],
    delay: float,
    sleep: Callable[[float], Any] = time.sleep,
) -> Iterator[str]:
    """Yield lines with a pause before each one after the first."""
    for i, line in enumerate(lines):
        if i and delay > 0:
            sleep(delay)
        yield line
