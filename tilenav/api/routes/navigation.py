"""Navigation queries: paths, routes, nearest node, search traces.

A missing path is a normal answer (``found=false``, no cells).  Endpoints
that are not graph nodes are rejected with 400, except for /nearest,
whose whole point is to start from an arbitrary cell.
"""

from __future__ import annotations

from typing import Iterable

from fastapi import APIRouter, Depends, HTTPException, Query

from tilenav.api.dependencies import get_engine_manager, require_node
from tilenav.api.schemas import (
    CellSchema,
    NearestResponse,
    PathResponse,
    RouteRequest,
    RouteResponse,
    SearchTraceResponse,
    SearchVisitSchema,
)
from tilenav.core.models import Cell
from tilenav.engine.manager import EngineManager

router = APIRouter()


def _cells(cells: Iterable[Cell]) -> list[CellSchema]:
    return [CellSchema(x=c.x, y=c.y) for c in cells]


@router.get("/path", response_model=PathResponse)
def get_path(
    sx: int = Query(..., description="Start cell x"),
    sy: int = Query(..., description="Start cell y"),
    ex: int = Query(..., description="End cell x"),
    ey: int = Query(..., description="End cell y"),
    manager: EngineManager = Depends(get_engine_manager),
) -> PathResponse:
    start, end = Cell(sx, sy), Cell(ex, ey)
    require_node(manager, start, "Start")
    require_node(manager, end, "End")
    path = manager.find_path(start, end)
    return PathResponse(
        start=CellSchema(x=sx, y=sy),
        end=CellSchema(x=ex, y=ey),
        found=not path.empty,
        length=len(path),
        cost=path.cost,
        cells=_cells(path),
    )


@router.post("/route", response_model=RouteResponse)
def post_route(
    request: RouteRequest,
    manager: EngineManager = Depends(get_engine_manager),
) -> RouteResponse:
    if not request.waypoints:
        raise HTTPException(status_code=400, detail="At least one waypoint is required.")
    waypoints = [Cell(w.x, w.y) for w in request.waypoints]
    for i, cell in enumerate(waypoints):
        require_node(manager, cell, f"Waypoint {i}")
    route = manager.find_route(waypoints, cyclic=request.cyclic)
    return RouteResponse(
        cyclic=request.cyclic,
        found=not route.empty,
        waypoints=_cells(route.waypoints),
        waypoint_indices=[route.waypoint_path_index(i) for i in range(len(route.waypoints))],
        cells=_cells(route.complete_path),
    )


@router.get("/nearest", response_model=NearestResponse)
def get_nearest(
    x: int = Query(...),
    y: int = Query(...),
    manager: EngineManager = Depends(get_engine_manager),
) -> NearestResponse:
    result = manager.closest_node(Cell(x, y))
    return NearestResponse(
        start=CellSchema(x=x, y=y),
        found=result.found,
        node=CellSchema(x=result.node.x, y=result.node.y) if result.found else None,
        evaluated=_cells(result.evaluated),
    )


@router.get("/search/trace", response_model=SearchTraceResponse)
def get_search_trace(
    sx: int = Query(...),
    sy: int = Query(...),
    ex: int = Query(...),
    ey: int = Query(...),
    manager: EngineManager = Depends(get_engine_manager),
) -> SearchTraceResponse:
    start, end = Cell(sx, sy), Cell(ex, ey)
    require_node(manager, start, "Start")
    require_node(manager, end, "End")
    path, visits = manager.trace_search(start, end)
    return SearchTraceResponse(
        start=CellSchema(x=sx, y=sy),
        end=CellSchema(x=ex, y=ey),
        found=not path.empty,
        cost=path.cost,
        path=_cells(path),
        visits=[SearchVisitSchema(x=v.cell.x, y=v.cell.y, category=v.category.name.lower()) for v in visits],
    )
