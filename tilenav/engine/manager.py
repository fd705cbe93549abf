"""EngineManager: runs the WorldLoop on a background thread.

The API reads an atomically-swapped immutable WorldSnapshot.  Anything
that touches the navigation map (ticks, path and route queries, group
collection) goes through ``_world_lock``, so the graph and its caches are
only ever used by one thread at a time.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import TYPE_CHECKING

from tilenav.core.level import Level
from tilenav.core.models import Cell
from tilenav.engine.snapshot import WorldSnapshot
from tilenav.engine.world_loop import WorldLoop, build_world
from tilenav.navigation.nearest import NodeSearchResult
from tilenav.navigation.path import CyclicRoute, Path, Route
from tilenav.navigation.search import SearchVisit
from tilenav.utils.event_log import EventLog

if TYPE_CHECKING:
    from tilenav.config import NavigationConfig

logger = logging.getLogger(__name__)


class EngineManager:
    """Manages the navigation run lifecycle on a background thread.

    Provides thread-safe access to:
      - latest snapshot (atomic reference swap)
      - event log (lock-guarded buffer)
      - control commands (start / pause / resume / step / stop / reset)
      - navigation queries, serialized with ticking
    """

    def __init__(self, config: NavigationConfig, level: Level | None = None) -> None:
        self.config = config
        self._level = level
        self._tick_rate: float = config.tick_seconds

        self._loop: WorldLoop | None = None

        # Thread-safe shared state
        self._world_lock = threading.RLock()
        self._snapshot_lock = threading.Lock()
        self._latest_snapshot: WorldSnapshot | None = None
        self._event_log = EventLog()

        # Control
        self._thread: threading.Thread | None = None
        self._running = threading.Event()
        self._paused = threading.Event()
        self._step_requested = threading.Event()
        self._stop_requested = threading.Event()

        self._build()

    # -- public properties --

    @property
    def running(self) -> bool:
        return self._running.is_set()

    @property
    def paused(self) -> bool:
        return self._paused.is_set()

    @property
    def tick_rate(self) -> float:
        return self._tick_rate

    @tick_rate.setter
    def tick_rate(self, value: float) -> None:
        self._tick_rate = max(0.01, min(value, 2.0))

    @property
    def event_log(self) -> EventLog:
        return self._event_log

    @property
    def loop(self) -> WorldLoop:
        assert self._loop is not None
        return self._loop

    # -- snapshot access --

    def get_snapshot(self) -> WorldSnapshot | None:
        with self._snapshot_lock:
            return self._latest_snapshot

    # -- lifecycle --

    def start(self) -> None:
        if self._running.is_set():
            return
        self._stop_requested.clear()
        self._paused.clear()
        self._running.set()
        self._thread = threading.Thread(target=self._run_loop, name="engine-loop", daemon=True)
        self._thread.start()
        logger.info("EngineManager started (tick_rate=%.3fs)", self._tick_rate)

    def pause(self) -> None:
        self._paused.set()
        logger.info("EngineManager paused at tick %d", self._current_tick())

    def resume(self) -> None:
        self._paused.clear()
        logger.info("EngineManager resumed at tick %d", self._current_tick())

    def step(self) -> None:
        """Execute exactly one tick.

        With the background thread running the tick is handed to it;
        otherwise it runs on the calling thread.
        """
        if self._running.is_set():
            if not self._paused.is_set():
                self.pause()
            self._step_requested.set()
            return
        self._tick()

    def stop(self) -> None:
        self._stop_requested.set()
        self._paused.clear()
        self._running.clear()
        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=5.0)
        logger.info("EngineManager stopped.")

    def reset(self) -> None:
        """Stop, rebuild, and leave ready to start."""
        self.stop()
        self._event_log.clear()
        self._build()
        logger.info("EngineManager reset.")

    # -- navigation queries --

    def find_path(self, start: Cell, end: Cell) -> Path:
        with self._world_lock:
            return self.loop.navmap.find_path(start, end)

    def find_route(self, waypoints: list[Cell], cyclic: bool = False) -> Route | CyclicRoute:
        with self._world_lock:
            navmap = self.loop.navmap
            return navmap.find_cycle(waypoints) if cyclic else navmap.find_route(waypoints)

    def closest_node(self, cell: Cell) -> NodeSearchResult:
        with self._world_lock:
            return self.loop.navmap.closest_node_search(cell)

    def trace_search(self, start: Cell, end: Cell) -> tuple[Path, list[SearchVisit]]:
        with self._world_lock:
            return self.loop.navmap.trace_search(start, end)

    def is_node(self, cell: Cell) -> bool:
        with self._world_lock:
            return self.loop.navmap.is_pathfinding_node(cell)

    def nodes(self) -> list[Cell]:
        with self._world_lock:
            return self.loop.navmap.nodes

    def collect_group(self, index: int) -> bool:
        with self._world_lock:
            collected = self.loop.collect_group(index)
            self._publish_snapshot_and_events()
        return collected

    # -- internals --

    def _build(self) -> None:
        with self._world_lock:
            self._loop = build_world(self.config, self._level)
            self._publish_snapshot_and_events()

    def _tick(self) -> bool:
        with self._world_lock:
            can_continue = self.loop.tick_once()
            self._publish_snapshot_and_events()
        return can_continue

    def _run_loop(self) -> None:
        """Background thread main loop."""
        logger.info("Engine thread started.")

        while not self._stop_requested.is_set():
            if self._paused.is_set() and not self._step_requested.is_set():
                time.sleep(0.01)
                continue

            single_step = self._step_requested.is_set()
            if single_step:
                self._step_requested.clear()

            if not self._tick():
                logger.info("Run ended at tick %d.", self._current_tick())
                break

            if not single_step:
                time.sleep(self._tick_rate)

        self._running.clear()
        logger.info("Engine thread exited.")

    def _publish_snapshot_and_events(self) -> None:
        """Swap snapshot + push events from the last tick."""
        loop = self.loop
        snap = loop.create_snapshot()
        with self._snapshot_lock:
            self._latest_snapshot = snap
        for event in loop.tick_events:
            self._event_log.append(event)
        loop.tick_events.clear()

    def _current_tick(self) -> int:
        if self._loop:
            return self._loop.tick
        return 0
