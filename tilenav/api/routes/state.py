"""GET /api/v1/state and /events: dynamic actor and event data (polled by UI)."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query

from tilenav.api.dependencies import get_engine_manager
from tilenav.api.schemas import (
    ActorSchema,
    CellSchema,
    EventSchema,
    EventsResponse,
    PositionSchema,
    WorldStateResponse,
)
from tilenav.engine.manager import EngineManager
from tilenav.engine.snapshot import ActorView

router = APIRouter()


def _serialize_actor(a: ActorView) -> ActorSchema:
    return ActorSchema(
        name=a.name,
        role=a.role,
        position=PositionSchema(x=a.position.x, y=a.position.y),
        cell=CellSchema(x=a.cell.x, y=a.cell.y),
        state=a.state,
        stuck=a.stuck,
        speed=a.speed,
        next_cell=CellSchema(x=a.next_cell.x, y=a.next_cell.y) if a.next_cell else None,
    )


@router.get("/state", response_model=WorldStateResponse)
def get_state(manager: EngineManager = Depends(get_engine_manager)) -> WorldStateResponse:
    snapshot = manager.get_snapshot()
    if snapshot is None:
        raise HTTPException(status_code=503, detail="Engine not initialized yet.")
    dest = snapshot.player_destination
    return WorldStateResponse(
        tick=snapshot.tick,
        level=snapshot.level,
        running=manager.running,
        paused=manager.paused,
        finished=snapshot.finished,
        actors=[_serialize_actor(a) for a in snapshot.actors],
        patrol_route=[CellSchema(x=c.x, y=c.y) for c in snapshot.patrol_route],
        patrol_waypoints=[CellSchema(x=c.x, y=c.y) for c in snapshot.patrol_waypoints],
        remaining_groups=snapshot.remaining_groups,
        player_destination=CellSchema(x=dest.x, y=dest.y) if dest else None,
    )


@router.get("/events", response_model=EventsResponse)
def get_events(
    since_tick: int | None = Query(None, ge=0, description="Only events at or after this tick"),
    limit: int = Query(50, ge=1, le=1000),
    manager: EngineManager = Depends(get_engine_manager),
) -> EventsResponse:
    log = manager.event_log
    events = log.since_tick(since_tick)[-limit:] if since_tick is not None else log.latest(limit)
    return EventsResponse(
        events=[EventSchema(tick=e.tick, category=e.category, message=e.message, actor=e.actor) for e in events],
    )
