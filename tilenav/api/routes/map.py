"""GET /api/v1/map: static level data (fetch once)."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from tilenav.api.dependencies import get_engine_manager
from tilenav.api.schemas import CellSchema, MapResponse, NodesResponse
from tilenav.engine.manager import EngineManager

router = APIRouter()


def _rle(values: tuple[int, ...]) -> list[int]:
    """[value, count, value, count, ...]"""
    rle: list[int] = []
    if not values:
        return rle
    cur_val, cur_count = int(values[0]), 1
    for v in values[1:]:
        if int(v) == cur_val:
            cur_count += 1
        else:
            rle.extend((cur_val, cur_count))
            cur_val, cur_count = int(v), 1
    rle.extend((cur_val, cur_count))
    return rle


@router.get("/map", response_model=MapResponse)
def get_map(manager: EngineManager = Depends(get_engine_manager)) -> MapResponse:
    level = manager.loop.level
    grid = level.grid
    return MapResponse(
        name=level.name,
        width=grid.width,
        height=grid.height,
        cell_size=grid.cell_size,
        grid=_rle(grid.tiles),
        ascii=level.to_ascii(),
        waypoint_groups=[[CellSchema(x=c.x, y=c.y) for c in g] for g in level.waypoint_groups],
        exit_waypoints=[CellSchema(x=c.x, y=c.y) for c in level.exit_waypoints],
    )


@router.get("/map/nodes", response_model=NodesResponse)
def get_nodes(manager: EngineManager = Depends(get_engine_manager)) -> NodesResponse:
    nodes = manager.nodes()
    return NodesResponse(count=len(nodes), nodes=[CellSchema(x=c.x, y=c.y) for c in nodes])
