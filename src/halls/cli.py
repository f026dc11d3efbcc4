from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import List, Optional

from .config import WorldConfig, load_config
from .dungeon.builder import generate
from .dungeon.level import Level
from .engine.session import Session
from .errors import HallsError
from .events import ALL_EVENTS, Event
from .geometry import Point
from .logging_config import configure_logging
from .qa.replay import world_checksum
from .state.world import new_world

logger = logging.getLogger(__name__)

GLYPHS = {"wall": "#", "floor": ".", "door": "+", "coin": "$"}


def render_ascii(level: Level) -> str:
    """Plain-text dump of a level for debugging generation."""
    marks = {}
    for placed in level.items:
        marks[placed.point] = "!"
    for creature in level.creatures:
        marks[creature.position] = creature.glyph
    if level.upstairs is not None:
        marks[level.upstairs] = "<"
    if level.downstairs is not None:
        marks[level.downstairs] = ">"
    if level.entrance is not None:
        marks[level.entrance.point] = "E"
    if level.pedestal is not None:
        marks[level.pedestal.point] = "*"
    rows = []
    for y in range(level.height):
        row = []
        for x in range(level.width):
            p = Point(x, y)
            terrain = level.terrain_at(p)
            row.append(marks.get(p) or (GLYPHS[terrain.value] if terrain is not None else " "))
        rows.append("".join(row).rstrip())
    return "\n".join(rows)


def summarize_level(level: Level) -> dict:
    def pt(p):
        return None if p is None else [p.x, p.y]

    return {
        "depth": level.depth,
        "rooms": len(level.rooms),
        "floors": len(level.floors),
        "doors": len(level.doors),
        "coins": len(level.coins),
        "upstairs": pt(level.upstairs),
        "downstairs": pt(level.downstairs),
        "entrance": pt(level.entrance.point) if level.entrance else None,
        "pedestal": pt(level.pedestal.point) if level.pedestal else None,
        "creatures": [{"id": c.cid, "archetype": c.archetype, "position": pt(c.position)} for c in level.creatures],
        "items": [{"name": p.item.name, "position": pt(p.point)} for p in level.items],
    }


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="halls", description="Crystal Halls world-simulation tools")
    parser.add_argument("--config", type=Path, default=None, help="Path to a settings YAML file")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    gen = sub.add_parser("generate", help="Generate a dungeon and print a JSON summary")
    gen.add_argument("--seed", type=int, default=None)
    gen.add_argument("--levels", type=int, default=None)
    gen.add_argument("--ascii", action="store_true", help="Also print an ASCII map of every level")

    exp = sub.add_parser("explore", help="Auto-explore a fresh world headlessly")
    exp.add_argument("--seed", type=int, default=None)
    exp.add_argument("--levels", type=int, default=None)
    exp.add_argument("--steps", type=int, default=200)
    return parser


def _resolve_config(args: argparse.Namespace) -> WorldConfig:
    config = load_config(args.config)
    if args.seed is not None:
        config = replace(config, seed=args.seed)
    if args.levels is not None:
        config = replace(config, level_count=args.levels)
    return config


def cmd_generate(args: argparse.Namespace) -> int:
    config = _resolve_config(args)
    dungeon = generate(config.level_count, config.seed, config)
    data = {"seed": config.seed, "levels": [summarize_level(level) for level in dungeon]}
    # Print JSON summary so it can be diffed across runs
    print(json.dumps(data, indent=2, sort_keys=True))
    if args.ascii:
        for level in dungeon:
            print(f"\n-- depth {level.depth} --")
            print(render_ascii(level))
    return 0


def cmd_explore(args: argparse.Namespace) -> int:
    config = replace(_resolve_config(args), tick_seconds=0.0)
    world = new_world(config)
    session = Session(world, auto_explore=True, max_steps=args.steps)
    log: List[dict] = []

    def record(event: Event) -> None:
        log.append(event.to_dict())

    session.bus.subscribe(ALL_EVENTS, record)
    session.start()
    while session.running:
        before = session.step
        session.update(0.0)
        if session.step == before:
            break
    session.stop()
    summary = {
        "seed": config.seed,
        "steps": session.step,
        "depth": world.depth,
        "hp": world.warrior.hp,
        "gold": world.warrior.gold,
        "dead": world.dead,
        "viewed": len(world.level.viewed),
        "events": len(log),
        "checksum": world_checksum(world),
    }
    print(json.dumps(summary, indent=2, sort_keys=True))
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(debug=args.debug)
    try:
        if args.command == "generate":
            return cmd_generate(args)
        return cmd_explore(args)
    except HallsError as exc:
        logger.error("%s", exc)
        return 2


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
