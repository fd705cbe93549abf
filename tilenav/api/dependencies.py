"""FastAPI dependency injection: provides the EngineManager singleton."""

from __future__ import annotations

from fastapi import HTTPException

from tilenav.core.models import Cell
from tilenav.engine.manager import EngineManager

_engine_manager: EngineManager | None = None


def set_engine_manager(manager: EngineManager | None) -> None:
    global _engine_manager
    _engine_manager = manager


def get_engine_manager() -> EngineManager:
    if _engine_manager is None:
        raise HTTPException(status_code=503, detail="Engine not initialized yet.")
    return _engine_manager


def require_node(manager: EngineManager, cell: Cell, label: str) -> None:
    """400 unless *cell* is a node of the navigation graph."""
    if not manager.is_node(cell):
        raise HTTPException(status_code=400, detail=f"{label} {cell} is not a pathfinding node.")
