"""Immutable snapshot of the world for readers on other threads."""

from __future__ import annotations

from dataclasses import dataclass

from tilenav.core.models import Cell, Position


@dataclass(frozen=True, slots=True)
class ActorView:
    name: str
    role: str
    position: Position
    cell: Cell
    state: str
    stuck: bool
    speed: float
    next_cell: Cell | None = None


@dataclass(frozen=True, slots=True)
class WorldSnapshot:
    """Read-only view of one tick, safe to share across threads."""

    tick: int
    level: str
    actors: tuple[ActorView, ...]
    patrol_route: tuple[Cell, ...]
    patrol_waypoints: tuple[Cell, ...]
    remaining_groups: int
    player_destination: Cell | None = None
    finished: bool = False
