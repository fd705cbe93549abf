"""Navigation configuration with sensible defaults."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class NavigationConfig:
    """Immutable configuration for a navigation run."""

    # Graph
    max_neighbours: int = 4                # -1 means unbounded
    record_search_visits: bool = True      # keep A* visit traces for /search/trace

    # Nearest-node search
    bfs_limit: int = 20                    # max cells dequeued before giving up

    # Movement
    arrival_threshold: float = 0.1         # compared squared against distance to next point
    cell_size: float = 1.0
    patroller_speed: float = 4.0
    chase_speed: float = 8.0               # patroller speed while investigating
    player_speed: float = 8.0

    # Timing
    tick_seconds: float = 0.05             # simulated seconds per tick
    max_ticks: int = 2000

    # World
    world_seed: int = 42
    level_file: str | None = None          # ASCII level; None = built-in or generated
    generate_level: bool = False
    grid_width: int = 24
    grid_height: int = 16
    pillar_density: float = 0.35

    # Logging
    log_level: str = "INFO"
    category_levels: tuple[tuple[str, str], ...] = ()   # e.g. (("graph", "WARNING"),)
    trace_file: str = "trace.json"
