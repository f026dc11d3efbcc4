from .builder import Dungeon, LevelBuilder, generate
from .corridors import connect_rooms, plan_edges
from .level import Entrance, Level, Pedestal, Terrain
from .pathfinding import connected_component, find, seek
from .rooms import Room, layout_rooms, sample_room_candidates

__all__ = [
    "Dungeon",
    "Entrance",
    "Level",
    "LevelBuilder",
    "Pedestal",
    "Room",
    "Terrain",
    "connect_rooms",
    "connected_component",
    "find",
    "generate",
    "layout_rooms",
    "plan_edges",
    "sample_room_candidates",
    "seek",
]
