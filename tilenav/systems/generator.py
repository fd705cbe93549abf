"""Deterministic demo level generator.

Layout: a void border around an interior of node tiles, with pillars
knocked out only at even/even interior cells.  Every odd row and odd
column therefore stays fully open, which keeps the node graph connected
at any density.
"""

from __future__ import annotations

from tilenav.core.enums import Domain, Tile
from tilenav.core.grid import TileGrid
from tilenav.core.level import Level
from tilenav.core.models import Cell
from tilenav.systems.rng import DeterministicRNG

MIN_SIZE = 5


def generate_level(
    width: int,
    height: int,
    seed: int = 42,
    pillar_density: float = 0.35,
    cell_size: float = 1.0,
) -> Level:
    """Build a level of the given size; same arguments, same level."""
    if width < MIN_SIZE or height < MIN_SIZE:
        raise ValueError(f"level must be at least {MIN_SIZE}x{MIN_SIZE}, got {width}x{height}")

    rng = DeterministicRNG(seed)
    grid = TileGrid(width, height, cell_size=cell_size)
    for y in range(1, height - 1):
        for x in range(1, width - 1):
            cell = Cell(x, y)
            pillar = x % 2 == 0 and y % 2 == 0 and rng.next_bool(Domain.TERRAIN, cell, pillar_density)
            grid.set(cell, Tile.VOID if pillar else Tile.NODE)

    right, bottom = width - 2, height - 2
    groups = (
        (Cell(1, 1), Cell(2, 1)),
        (Cell(right, 1), Cell(right - 1, 1)),
        (Cell(right, bottom), Cell(right - 1, bottom)),
        (Cell(1, bottom), Cell(2, bottom)),
    )
    exit_cell = Cell(width // 2, bottom)
    keep = [c for group in groups for c in group] + [exit_cell]
    for cell in keep:
        grid.set(cell, Tile.NODE)

    nodes = [c for c in grid.all_cells() if grid.is_markable(c) and c not in keep]
    patroller = rng.choice(Domain.SPAWN, Cell(0, 0), nodes)
    player = rng.choice(Domain.SPAWN, Cell(1, 0), [c for c in nodes if c != patroller])

    return Level(
        grid=grid,
        waypoint_groups=groups,
        exit_waypoints=(exit_cell,),
        patroller_spawns=(patroller,),
        player_spawn=player,
        player_destinations=(exit_cell,),
        name=f"generated-{seed}",
    )
