"""
Monty Hall - N-Door Game Engine

A deterministic, rules-driven engine for the generalized Monty Hall puzzle.
The engine owns a single round of play and provides:
- Variant rule-sets (host reveals, or the player reveals)
- A validated phase state machine
- Reveal planning, decision resolution and outcome evaluation
- Read-only snapshots for whatever presentation drives it
"""

__version__ = "0.1.0"
