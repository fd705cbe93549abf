"""Enumerations used throughout the navigation core."""

from __future__ import annotations

from enum import Enum, IntEnum, unique


@unique
class Tile(IntEnum):
    """Contents of a single grid cell."""

    VOID = 0    # no tile at all
    FLOOR = 1   # walkable tile that is not a pathfinding node
    NODE = 2    # markable path tile, becomes a graph vertex


@unique
class LogCategory(str, Enum):
    """Diagnostic channels, each with its own severity threshold."""

    TILE = "tile"
    ACTOR = "actor"
    GRAPH = "graph"
    PATH = "path"
    GAME = "game"
    FSM = "fsm"


@unique
class VisitCategory(IntEnum):
    """Why a cell shows up in a search trace."""

    FRONTIER_POP = 0
    RELAXED = 1
    FINAL_PATH = 2


@unique
class SearchStatus(IntEnum):
    """Lifecycle of a single pathfinding query."""

    IDLE = 0
    PREPARED = 1
    SEARCHING = 2
    FOUND = 3
    EXHAUSTED = 4
    INVALID = 5     # endpoints rejected before searching


@unique
class NodeSearchState(IntEnum):
    """Single-flight guard for the nearest-node BFS."""

    IDLE = 0
    IN_PROGRESS = 1


@unique
class FollowResult(IntEnum):
    """Outcome of one path-following step."""

    NO_PATH = 0
    MOVING = 1
    ARRIVED = 2     # reached the current path point, index advanced
    PATH_END = 3    # reached the final path point


@unique
class Domain(IntEnum):
    """RNG domains for deterministic randomness isolation."""

    TERRAIN = 0
    WAYPOINT = 1
    SPAWN = 2
