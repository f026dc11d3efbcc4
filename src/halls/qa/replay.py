from __future__ import annotations

import hashlib
import json
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from ..config import WorldConfig
from ..events import Event
from ..state.actions import Action, action_from_dict, action_to_dict
from ..state.turn import apply_action
from ..state.world import World, new_world


def world_snapshot(world: World) -> Dict[str, Any]:
    return {
        "seed": world.seed,
        "depth": world.depth,
        "age": world.age,
        "dead": world.dead,
        "escaped": world.escaped,
        "warrior": world.warrior.to_dict(),
        "levels": [level.to_dict() for level in world.dungeon],
    }


def world_checksum(world: World) -> str:
    """SHA-256 over a canonical JSON snapshot of the whole world."""
    m = hashlib.sha256()
    m.update(json.dumps(world_snapshot(world), sort_keys=True, separators=(",", ":")).encode("utf-8"))
    return m.hexdigest()


@dataclass
class ReplayTrace:
    seed: int
    actions: List[Dict[str, Any]]
    checksum: str
    events: List[List[Dict[str, Any]]] = field(default_factory=list)


class ReplayHarness:
    """
    Records the actions applied to a freshly generated world and verifies that
    replaying them from the same seed reproduces every event and the final state.
    """

    def __init__(self, config: WorldConfig, seed: Optional[int] = None):
        self.config = config
        self.seed = config.seed if seed is None else seed
        self.world = new_world(config, self.seed)
        self._actions: List[Dict[str, Any]] = []
        self._events: List[List[Dict[str, Any]]] = []

    def apply(self, action: Action) -> List[Event]:
        _, events = apply_action(action, self.world)
        self._actions.append(action_to_dict(action))
        self._events.append([e.to_dict() for e in events])
        return events

    def snapshot(self) -> ReplayTrace:
        return ReplayTrace(
            seed=self.seed,
            actions=list(self._actions),
            checksum=world_checksum(self.world),
            events=[list(step) for step in self._events],
        )

    def reproduce(self, trace: ReplayTrace) -> Tuple[bool, Optional[Dict[str, Any]]]:
        """
        Replay the trace on a new world and compare.

        Returns (ok, mismatch_info). On mismatch, info names the step index or
        the checksum that differed.
        """
        repro = ReplayHarness(self.config, trace.seed)
        for idx, data in enumerate(trace.actions):
            got = [e.to_dict() for e in repro.apply(action_from_dict(data))]
            if idx < len(trace.events) and got != trace.events[idx]:
                return False, {"index": idx, "action": data, "expected": trace.events[idx], "got": got}
        ch = world_checksum(repro.world)
        if ch != trace.checksum:
            return False, {"error": "checksum", "expected": trace.checksum, "got": ch}
        return True, None

    @staticmethod
    def to_json(trace: ReplayTrace) -> str:
        return json.dumps(asdict(trace), separators=(",", ":"))

    @staticmethod
    def from_json(data: str) -> ReplayTrace:
        obj = json.loads(data)
        return ReplayTrace(
            seed=obj["seed"],
            actions=obj.get("actions", []),
            checksum=obj.get("checksum", ""),
            events=obj.get("events", []),
        )


__all__ = ["ReplayHarness", "ReplayTrace", "world_checksum", "world_snapshot"]
