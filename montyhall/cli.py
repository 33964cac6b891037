"""
Monty Hall CLI - Command-line interface for the engine.

Usage:
    montyhall play [--variant NAME] [--doors N]   Play in the terminal
    montyhall variants                            List variants
    montyhall serve [--host H] [--port P]         Run the HTTP API

Doors are typed 1-based, as they are shown.
"""

import argparse
import logging
import os
import sys

from .engine_core import GameEngine, RoundPhase, RoundSnapshot
from .rules import VARIANTS, DEFAULT_VARIANT
from .session import paced

LOG_LEVEL = os.getenv("MONTYHALL_LOG_LEVEL", "WARNING")
DEFAULT_VARIANT_NAME = os.getenv("MONTYHALL_DEFAULT_VARIANT", DEFAULT_VARIANT)

logger = logging.getLogger(__name__)


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Monty Hall - The N-Door Challenge",
        prog="montyhall",
    )
    parser.add_argument("--log-level", default=LOG_LEVEL, help="Logging level (default: %(default)s)")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Play command
    play_parser = subparsers.add_parser("play", help="Play in the terminal")
    play_parser.add_argument(
        "--variant", default=DEFAULT_VARIANT_NAME, choices=sorted(VARIANTS), help="Rule-set to play"
    )
    play_parser.add_argument("--doors", type=int, help="Number of doors")
    play_parser.add_argument("--seed", type=int, help="Seed the prize draw")
    play_parser.add_argument(
        "--delay", type=float, default=1.0, help="Seconds between Monty's reveals"
    )

    # Variants command
    subparsers.add_parser("variants", help="List variants")

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "play":
        cmd_play(args)
    elif args.command == "variants":
        cmd_variants(args)
    elif args.command == "serve":
        cmd_serve(args)
    else:
        parser.print_help()
        sys.exit(1)


def cmd_variants(args):
    """List variants."""
    for rules in VARIANTS.values():
        marker = " (default)" if rules.name == DEFAULT_VARIANT else ""
        print(f"{rules.name}{marker}: {rules.title}, {rules.min_doors}-{rules.max_doors} doors")
        print(f"  {rules.description}")


def cmd_serve(args):
    """Run the HTTP API with uvicorn."""
    import uvicorn

    uvicorn.run("montyhall.api.app:app", host=args.host, port=args.port)


def cmd_play(args):
    """Play rounds in the terminal until the player quits."""
    engine = GameEngine(args.variant, seed=args.seed)
    print(engine.snapshot().status_message)

    if args.doors is not None:
        result = engine.configure(args.doors)
        if not result.success:
            print(f"Error: {result.error}")
            sys.exit(1)

    try:
        while True:
            play_round(engine, delay=args.delay)
            if not ask_yes_no("Play again?"):
                break
            engine.reset_to_setup()
    except (EOFError, KeyboardInterrupt):
        print()


def play_round(engine: GameEngine, delay: float = 0.0, read=input, write=print) -> RoundSnapshot:
    """
    Drive one round from start to result through read/write callables.

    Returns the final snapshot.
    """
    result = engine.start_round()
    snapshot = result.snapshot
    write(snapshot.status_message)

    while snapshot.phase != RoundPhase.RESULT:
        write(render_doors(snapshot))

        if snapshot.phase == RoundPhase.CHOOSING:
            result = engine.select_door(read_door(read, "Pick a door: "))
        elif snapshot.phase == RoundPhase.USER_REVEALING:
            result = engine.open_door(read_door(read, "Open a door: "))
        elif snapshot.phase == RoundPhase.DECISION:
            result = engine.decide(read_decision(read, write, snapshot))

        if not result.success:
            write(result.error)
        else:
            for line in paced(result.messages, delay if result.revealed else 0.0):
                write(line)
        snapshot = result.snapshot

    write(render_doors(snapshot))
    return snapshot


def read_door(read, prompt: str):
    """Read a 1-based door number and return its 0-based index (or the raw text)."""
    text = read(prompt).strip()
    try:
        return int(text) - 1
    except ValueError:
        # The engine rejects it with a message
        return text


STICK_ANSWERS = ("k", "stick")
SWITCH_ANSWERS = ("s", "switch")


def read_decision(read, write, snapshot: RoundSnapshot) -> bool:
    """Ask stick or switch until the answer is one of them. True means stick."""
    prompt = f"[k] {snapshot.stick_label} / [s] {snapshot.switch_label}: "
    while True:
        answer = read(prompt).strip().lower()
        if answer in STICK_ANSWERS:
            return True
        if answer in SWITCH_ANSWERS:
            return False
        write(f"Please answer 'k' to stick or 's' to switch, not {answer!r}.")


def render_doors(snapshot: RoundSnapshot) -> str:
    """One line per round: [1] closed, (1) held, 1:goat open, 1:CAR at the end."""
    cells = []
    for door in range(snapshot.door_count):
        label = door + 1
        if door in snapshot.opened_doors or snapshot.phase == RoundPhase.RESULT:
            prize = "CAR" if door == snapshot.prize_door else "goat"
            cells.append(f"{label}:{prize}")
        elif door == snapshot.selected_door:
            cells.append(f"({label})")
        else:
            cells.append(f"[{label}]")
    return "  ".join(cells)


def ask_yes_no(question: str, read=input) -> bool:
    return read(f"{question} [y/N] ").strip().lower() in ("y", "yes")


if __name__ == "__main__":
    main()
