from .actions import Action, Move, UseItem, Wait
from .explore import explore_step, travel_step
from .turn import apply_action, purge, use_item
from .world import (
    World,
    entity_at,
    find_path,
    illuminated_set,
    is_blocked,
    new_world,
    viewed_set,
    vision_power,
)

__all__ = [
    "Action",
    "Move",
    "UseItem",
    "Wait",
    "World",
    "apply_action",
    "entity_at",
    "explore_step",
    "find_path",
    "illuminated_set",
    "is_blocked",
    "new_world",
    "purge",
    "travel_step",
    "use_item",
    "viewed_set",
    "vision_power",
]
