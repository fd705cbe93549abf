"""Engine layer: world loop, snapshots, background engine manager."""

from tilenav.engine.manager import EngineManager
from tilenav.engine.snapshot import ActorView, WorldSnapshot
from tilenav.engine.world_loop import Agent, WorldLoop, build_world, resolve_level

__all__ = ["ActorView", "Agent", "EngineManager", "WorldLoop", "WorldSnapshot", "build_world", "resolve_level"]
