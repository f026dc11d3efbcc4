from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Union

from ..geometry import Direction


@dataclass(frozen=True)
class Move:
    direction: Direction


@dataclass(frozen=True)
class Wait:
    pass


@dataclass(frozen=True)
class UseItem:
    index: int


Action = Union[Move, Wait, UseItem]


def action_to_dict(action: Action) -> Dict[str, Any]:
    if isinstance(action, Move):
        return {"type": "move", "direction": action.direction.name}
    if isinstance(action, UseItem):
        return {"type": "use", "index": action.index}
    if isinstance(action, Wait):
        return {"type": "wait"}
    raise TypeError(f"Unknown action: {action!r}")


def action_from_dict(data: Dict[str, Any]) -> Action:
    kind = data.get("type")
    if kind == "move":
        return Move(Direction[data["direction"]])
    if kind == "use":
        return UseItem(int(data["index"]))
    if kind == "wait":
        return Wait()
    raise ValueError(f"Unknown action type: {kind!r}")


__all__ = ["Action", "Move", "UseItem", "Wait", "action_from_dict", "action_to_dict"]
