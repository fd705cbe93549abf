"""Trace serialization: actor positions and states per tick, as JSON."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from tilenav.engine.world_loop import Agent

logger = logging.getLogger(__name__)


class TraceRecorder:
    """Accumulates per-tick actor snapshots and flushes them to a JSON file."""

    __slots__ = ("_path", "_ticks", "_seed", "_level")

    def __init__(self, path: str | Path, seed: int, level: str = "") -> None:
        self._path = Path(path)
        self._seed = seed
        self._level = level
        self._ticks: list[dict[str, Any]] = []

    @property
    def path(self) -> Path:
        return self._path

    @property
    def recorded_ticks(self) -> int:
        return len(self._ticks)

    def record_tick(self, tick: int, agents: list[Agent]) -> None:
        self._ticks.append(
            {
                "tick": tick,
                "actors": [
                    {
                        "name": a.actor.name,
                        "role": a.role,
                        "pos": [round(a.actor.position.x, 4), round(a.actor.position.y, 4)],
                        "state": a.state_name,
                        "stuck": a.actor.stuck,
                    }
                    for a in agents
                ],
            }
        )

    def flush(self) -> None:
        """Write accumulated data to disk."""
        trace = {
            "version": "1.0",
            "seed": self._seed,
            "level": self._level,
            "total_ticks": len(self._ticks),
            "ticks": self._ticks,
        }
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps(trace, indent=2), encoding="utf-8")
        logger.info("Trace saved to %s (%d ticks)", self._path, len(self._ticks))
