"""FastAPI application factory with lifespan management."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from tilenav.api.dependencies import set_engine_manager
from tilenav.api.routes import api_router
from tilenav.config import NavigationConfig
from tilenav.engine.manager import EngineManager
from tilenav.utils.logging import setup_logging

logger = logging.getLogger(__name__)


def create_app(config: NavigationConfig | None = None, autostart: bool = True) -> FastAPI:
    """Build and return the fully-configured FastAPI application."""
    if config is None:
        config = NavigationConfig()

    _config = config

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        setup_logging(_config.log_level)
        manager = EngineManager(_config)
        set_engine_manager(manager)
        if autostart:
            manager.start()
        logger.info("API server started (level=%s).", manager.loop.level.name)
        yield
        manager.stop()
        set_engine_manager(None)
        logger.info("API server shutting down.")

    app = FastAPI(
        title="Tile Navigation Engine",
        description=(
            "Grid pathfinding and FSM-driven patrol agents.\n\n"
            "## API Groups\n\n"
            "- **Map** - Static level data and the navigation graph's nodes\n"
            "- **Navigation** - Paths, routes, nearest-node lookups and A* search traces\n"
            "- **State** - Live actor positions, FSM states and the event feed\n"
            "- **Control** - Run lifecycle: start, pause, resume, step, stop, reset\n"
            "- **Config** - Read-only navigation configuration\n"
        ),
        version="0.1.0",
        lifespan=lifespan,
        openapi_tags=[
            {"name": "Map", "description": "Static level data. The tile layout does not change during a run."},
            {"name": "Navigation", "description": "On-demand path, route and nearest-node queries against the live navigation map."},
            {"name": "State", "description": "Live run state polled by clients: actors, patrol route, events."},
            {"name": "Control", "description": "Run lifecycle controls and waypoint group collection."},
            {"name": "Config", "description": "Read-only navigation configuration parameters."},
        ],
    )

    # CORS: allow any origin in dev
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router)
    return app
