"""Core data models: cells, positions, tile grid, levels, actors."""

from tilenav.core.actor import Actor
from tilenav.core.enums import LogCategory, Tile, VisitCategory
from tilenav.core.grid import GridLike, TileGrid
from tilenav.core.level import DEFAULT_LEVEL, Level, LevelFormatError, load_level
from tilenav.core.models import NULL_CELL, Cell, Position

__all__ = [
    "Actor",
    "Cell",
    "DEFAULT_LEVEL",
    "GridLike",
    "Level",
    "LevelFormatError",
    "LogCategory",
    "NULL_CELL",
    "Position",
    "Tile",
    "TileGrid",
    "VisitCategory",
    "load_level",
]
