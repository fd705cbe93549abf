"""Level description: a tile grid plus the named navpoints placed on it.

ASCII format (one character per cell, row 0 at the top)::

    '#' or ' '   void (no tile)
    ','          floor tile, walkable but not a pathfinding node
    '.'          node tile
    '1'..'9'     patrol waypoint group (node); same digit = same group
    'E'          exit waypoint (node)
    'P'          player spawn (node)
    'T'          patroller spawn (node)
    'D'          player destination (node)

Within a group, and for E/T/D, cells are ordered by reading order.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path as FilePath

from tilenav.core.enums import Tile
from tilenav.core.grid import TileGrid
from tilenav.core.models import Cell


class LevelFormatError(ValueError):
    """Raised when level text cannot be parsed."""


_TILE_CHARS: dict[str, Tile] = {
    "#": Tile.VOID,
    " ": Tile.VOID,
    ",": Tile.FLOOR,
    ".": Tile.NODE,
}
_MARKERS = frozenset("EPTD123456789")


@dataclass(frozen=True, slots=True)
class Level:
    """Static level data; the grid is never mutated after loading."""

    grid: TileGrid
    waypoint_groups: tuple[tuple[Cell, ...], ...] = ()
    exit_waypoints: tuple[Cell, ...] = ()
    patroller_spawns: tuple[Cell, ...] = ()
    player_spawn: Cell | None = None
    player_destinations: tuple[Cell, ...] = ()
    name: str = "level"

    @property
    def patrol_waypoints(self) -> tuple[Cell, ...]:
        return tuple(c for group in self.waypoint_groups for c in group)

    @classmethod
    def from_ascii(cls, text: str, name: str = "level", cell_size: float = 1.0) -> Level:
        rows = text.splitlines()
        while rows and not rows[0].strip():
            rows.pop(0)
        while rows and not rows[-1].strip():
            rows.pop()
        if not rows:
            raise LevelFormatError("level has no rows")

        width = len(rows[0])
        for i, row in enumerate(rows):
            if len(row) != width:
                raise LevelFormatError(f"row {i} has length {len(row)}, expected {width}")

        grid = TileGrid(width, len(rows), cell_size=cell_size)
        groups: dict[str, list[Cell]] = {}
        exits: list[Cell] = []
        patrollers: list[Cell] = []
        destinations: list[Cell] = []
        player: Cell | None = None

        for y, row in enumerate(rows):
            for x, ch in enumerate(row):
                cell = Cell(x, y)
                if ch in _TILE_CHARS:
                    grid.set(cell, _TILE_CHARS[ch])
                    continue
                if ch not in _MARKERS:
                    raise LevelFormatError(f"unknown tile {ch!r} at {cell}")
                grid.set(cell, Tile.NODE)
                if ch.isdigit():
                    groups.setdefault(ch, []).append(cell)
                elif ch == "E":
                    exits.append(cell)
                elif ch == "T":
                    patrollers.append(cell)
                elif ch == "D":
                    destinations.append(cell)
                elif ch == "P":
                    if player is not None:
                        raise LevelFormatError(f"second player spawn at {cell}")
                    player = cell

        return cls(
            grid=grid,
            waypoint_groups=tuple(tuple(groups[k]) for k in sorted(groups)),
            exit_waypoints=tuple(exits),
            patroller_spawns=tuple(patrollers),
            player_spawn=player,
            player_destinations=tuple(destinations),
            name=name,
        )

    def to_ascii(self) -> str:
        """Render back to the ASCII format; when markers share a cell the
        first of group digit, E, T, P, D wins."""
        markers: dict[Cell, str] = {}
        for cell in self.player_destinations:
            markers[cell] = "D"
        if self.player_spawn is not None:
            markers[self.player_spawn] = "P"
        for cell in self.patroller_spawns:
            markers[cell] = "T"
        for cell in self.exit_waypoints:
            markers[cell] = "E"
        for i, group in enumerate(self.waypoint_groups):
            for cell in group:
                markers[cell] = str(i + 1)

        glyphs = {Tile.VOID: "#", Tile.FLOOR: ",", Tile.NODE: "."}
        rows = []
        for y in range(self.grid.height):
            rows.append("".join(
                markers.get(Cell(x, y), glyphs[self.grid.get(Cell(x, y))]) for x in range(self.grid.width)
            ))
        return "\n".join(rows) + "\n"


def load_level(path: str | FilePath, cell_size: float = 1.0) -> Level:
    """Read an ASCII level file."""
    p = FilePath(path)
    return Level.from_ascii(p.read_text(encoding="utf-8"), name=p.stem, cell_size=cell_size)


DEFAULT_LEVEL = """\
####################
#T.......,,,.....1.#
#.######.#,#.####..#
#.#    #.#,#.#  #..#
#.#    #...,.#  #.P#
#.######.###.####..#
#2..........D......#
#.####.#####.#####.#
#.#  #.#   #.#   #.#
#.####.#####.#####.#
#3.........E......4#
####################
"""
