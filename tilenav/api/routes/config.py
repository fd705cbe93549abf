"""GET /api/v1/config: expose navigation configuration."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from tilenav.api.dependencies import get_engine_manager
from tilenav.api.schemas import NavigationConfigResponse
from tilenav.engine.manager import EngineManager

router = APIRouter()


@router.get("/config", response_model=NavigationConfigResponse)
def get_config(
    manager: EngineManager = Depends(get_engine_manager),
) -> NavigationConfigResponse:
    cfg = manager.config
    return NavigationConfigResponse(
        max_neighbours=cfg.max_neighbours,
        bfs_limit=cfg.bfs_limit,
        arrival_threshold=cfg.arrival_threshold,
        record_search_visits=cfg.record_search_visits,
        cell_size=cfg.cell_size,
        patroller_speed=cfg.patroller_speed,
        chase_speed=cfg.chase_speed,
        player_speed=cfg.player_speed,
        max_ticks=cfg.max_ticks,
        world_seed=cfg.world_seed,
        level_file=cfg.level_file,
        generate_level=cfg.generate_level,
        tick_rate=manager.tick_rate,
    )
