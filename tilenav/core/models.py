"""Core value types: Cell (grid space) and Position (world space)."""

from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Cell:
    """Immutable integer grid coordinate.

    ``z`` is carried for parity with layered tilemaps but is always zero for
    real cells; the only cell with a non-zero ``z`` is :data:`NULL_CELL`.
    """

    x: int = 0
    y: int = 0
    z: int = 0

    def __add__(self, other: Cell) -> Cell:
        return Cell(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: Cell) -> Cell:
        return Cell(self.x - other.x, self.y - other.y, self.z - other.z)

    def manhattan(self, other: Cell) -> int:
        return abs(self.x - other.x) + abs(self.y - other.y) + abs(self.z - other.z)

    def sqr_distance(self, other: Cell) -> int:
        dx, dy, dz = self.x - other.x, self.y - other.y, self.z - other.z
        return dx * dx + dy * dy + dz * dz

    def surrounding(self) -> tuple[Cell, Cell, Cell, Cell]:
        """The four cardinal cells, in graph-building order (+x, -x, +y, -y)."""
        x, y = self.x, self.y
        return (Cell(x + 1, y), Cell(x - 1, y), Cell(x, y + 1), Cell(x, y - 1))

    @property
    def is_null(self) -> bool:
        return self == NULL_CELL

    def __repr__(self) -> str:
        return f"({self.x}, {self.y})" if self.z == 0 else f"({self.x}, {self.y}, {self.z})"


# Returned by failed nearest-node searches; never a valid grid cell.
NULL_CELL = Cell(0, 0, -1)


@dataclass(frozen=True, slots=True)
class Position:
    """Immutable 2D world-space point."""

    x: float = 0.0
    y: float = 0.0

    def __add__(self, other: Position) -> Position:
        return Position(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Position) -> Position:
        return Position(self.x - other.x, self.y - other.y)

    def __mul__(self, scalar: float) -> Position:
        return Position(self.x * scalar, self.y * scalar)

    @property
    def sqr_magnitude(self) -> float:
        return self.x * self.x + self.y * self.y

    def move_towards(self, target: Position, max_delta: float) -> Position:
        """Step toward *target* by at most *max_delta*, never overshooting."""
        delta = target - self
        dist = math.sqrt(delta.sqr_magnitude)
        if dist <= max_delta or dist == 0.0:
            return target
        return self + delta * (max_delta / dist)

    def __repr__(self) -> str:
        return f"({self.x:.2f}, {self.y:.2f})"
