"""Pydantic request/response models for the REST API."""

from __future__ import annotations

from pydantic import BaseModel, Field


# --- Geometry ---

class CellSchema(BaseModel):
    x: int
    y: int


class PositionSchema(BaseModel):
    x: float
    y: float


# --- Map ---

class MapResponse(BaseModel):
    name: str
    width: int
    height: int
    cell_size: float = 1.0
    grid: list[int] = Field(default_factory=list, description="RLE encoded tiles: [value, count, ...]")
    ascii: str = ""
    waypoint_groups: list[list[CellSchema]] = Field(default_factory=list)
    exit_waypoints: list[CellSchema] = Field(default_factory=list)


class NodesResponse(BaseModel):
    count: int
    nodes: list[CellSchema] = Field(default_factory=list)


# --- Navigation ---

class PathResponse(BaseModel):
    start: CellSchema
    end: CellSchema
    found: bool
    length: int = 0
    cost: int = 0
    cells: list[CellSchema] = Field(default_factory=list)


class RouteRequest(BaseModel):
    waypoints: list[CellSchema] = Field(default_factory=list)
    cyclic: bool = False


class RouteResponse(BaseModel):
    cyclic: bool
    found: bool
    waypoints: list[CellSchema] = Field(default_factory=list)
    waypoint_indices: list[int] = Field(default_factory=list)
    cells: list[CellSchema] = Field(default_factory=list)


class NearestResponse(BaseModel):
    start: CellSchema
    found: bool
    node: CellSchema | None = None
    evaluated: list[CellSchema] = Field(default_factory=list)


class SearchVisitSchema(BaseModel):
    x: int
    y: int
    category: str


class SearchTraceResponse(BaseModel):
    start: CellSchema
    end: CellSchema
    found: bool
    cost: int = 0
    path: list[CellSchema] = Field(default_factory=list)
    visits: list[SearchVisitSchema] = Field(default_factory=list)


# --- State ---

class ActorSchema(BaseModel):
    name: str
    role: str
    position: PositionSchema
    cell: CellSchema
    state: str
    stuck: bool = False
    speed: float = 0.0
    next_cell: CellSchema | None = None


class WorldStateResponse(BaseModel):
    tick: int
    level: str
    running: bool = False
    paused: bool = False
    finished: bool = False
    actors: list[ActorSchema] = Field(default_factory=list)
    patrol_route: list[CellSchema] = Field(default_factory=list)
    patrol_waypoints: list[CellSchema] = Field(default_factory=list)
    remaining_groups: int = 0
    player_destination: CellSchema | None = None


class EventSchema(BaseModel):
    tick: int
    category: str
    message: str
    actor: str = ""


class EventsResponse(BaseModel):
    events: list[EventSchema] = Field(default_factory=list)


# --- Control ---

class ControlResponse(BaseModel):
    status: str
    message: str
    tick: int = 0


# --- Config ---

class NavigationConfigResponse(BaseModel):
    max_neighbours: int
    bfs_limit: int
    arrival_threshold: float
    record_search_visits: bool
    cell_size: float
    patroller_speed: float
    chase_speed: float
    player_speed: float
    max_ticks: int
    world_seed: int
    level_file: str | None = None
    generate_level: bool = False
    tick_rate: float
