"""Tile grid: the spatial collaborator the navigation layer is built from."""

from __future__ import annotations

import math
from typing import Iterator, Protocol

from tilenav.core.enums import Tile
from tilenav.core.models import Cell, Position


class GridLike(Protocol):
    """What the navigation core needs to know about the world's tiles."""

    def has_cell(self, cell: Cell) -> bool: ...
    def is_markable(self, cell: Cell) -> bool: ...
    def cell_to_world_center(self, cell: Cell) -> Position: ...
    def world_position_to_cell(self, pos: Position) -> Cell: ...
    def all_cells(self) -> Iterator[Cell]: ...


class TileGrid:
    """2D tile grid backed by a flat list for cache-friendly access."""

    __slots__ = ("width", "height", "cell_size", "_tiles")

    def __init__(self, width: int, height: int, default: Tile = Tile.VOID, cell_size: float = 1.0) -> None:
        self.width = width
        self.height = height
        self.cell_size = cell_size
        self._tiles: list[Tile] = [default] * (width * height)

    # -- access --

    def _idx(self, x: int, y: int) -> int:
        return y * self.width + x

    def in_bounds(self, cell: Cell) -> bool:
        return cell.z == 0 and 0 <= cell.x < self.width and 0 <= cell.y < self.height

    def get(self, cell: Cell) -> Tile:
        if not self.in_bounds(cell):
            return Tile.VOID
        return self._tiles[self._idx(cell.x, cell.y)]

    def set(self, cell: Cell, tile: Tile) -> None:
        if self.in_bounds(cell):
            self._tiles[self._idx(cell.x, cell.y)] = tile

    def has_cell(self, cell: Cell) -> bool:
        return self.get(cell) != Tile.VOID

    def is_markable(self, cell: Cell) -> bool:
        return self.get(cell) == Tile.NODE

    def all_cells(self) -> Iterator[Cell]:
        """Every in-bounds cell, row by row."""
        for y in range(self.height):
            for x in range(self.width):
                yield Cell(x, y)

    @property
    def tiles(self) -> tuple[Tile, ...]:
        return tuple(self._tiles)

    # -- coordinate mapping --

    def cell_to_world_center(self, cell: Cell) -> Position:
        half = self.cell_size / 2.0
        return Position(cell.x * self.cell_size + half, cell.y * self.cell_size + half)

    def world_position_to_cell(self, pos: Position) -> Cell:
        return Cell(math.floor(pos.x / self.cell_size), math.floor(pos.y / self.cell_size))
