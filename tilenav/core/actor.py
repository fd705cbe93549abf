"""Actors: anything that an FSM moves around the level."""

from __future__ import annotations

from dataclasses import dataclass

from tilenav.core.models import Cell, Position


@dataclass(slots=True)
class Actor:
    """Mutable world-space state of a moving agent.

    The FSM states read and write this; transition conditions only read it.
    """

    name: str
    position: Position
    speed: float = 4.0
    stuck: bool = False
    input_blocked: bool = False
    # Navpoints of the last disturbed waypoint group, consumed by investigation.
    investigate_points: tuple[Cell, ...] = ()

    def move_towards(self, point: Position, dt: float) -> None:
        """Advance toward *point* by one tick's worth of movement."""
        self.position = self.position.move_towards(point, self.speed * dt)

    def teleport(self, point: Position) -> None:
        self.position = point

    def done_investigating(self) -> None:
        self.investigate_points = ()
