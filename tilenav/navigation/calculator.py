"""Memoizing facades over a :class:`PathfindingAlgorithm`.

Paths are cached by ordered endpoint pair, routes by the exact waypoint
sequence.  Route keys compare by value, so two separately built lists of
the same cells share one cache entry.  Both caches are dropped whenever the
graph's revision changes, so edits made through :class:`Graph` never serve
stale paths.
"""

from __future__ import annotations

from typing import Iterable

import xxhash

from tilenav.core.models import Cell
from tilenav.navigation.path import CyclicRoute, InvalidRouteError, Path, Route
from tilenav.navigation.search import PathfindingAlgorithm


class WaypointKey:
    """Hashable, value-equal key for an ordered waypoint sequence."""

    __slots__ = ("cells", "digest")

    def __init__(self, cells: Iterable[Cell]) -> None:
        self.cells: tuple[Cell, ...] = tuple(cells)
        payload = ";".join(f"{c.x},{c.y},{c.z}" for c in self.cells).encode()
        self.digest: int = xxhash.xxh64(payload).intdigest()

    def __len__(self) -> int:
        return len(self.cells)

    def __hash__(self) -> int:
        return self.digest

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, WaypointKey):
            return NotImplemented
        return self.digest == other.digest and self.cells == other.cells

    def __repr__(self) -> str:
        return f"WaypointKey({list(self.cells)}, {self.digest:016x})"


class PathCalculator:
    """Caches paths by (start, end); distinct orderings are distinct entries."""

    __slots__ = ("algorithm", "_cache", "_revision", "hits", "misses")

    def __init__(self, algorithm: PathfindingAlgorithm) -> None:
        self.algorithm = algorithm
        self._cache: dict[tuple[Cell, Cell], Path] = {}
        self._revision = algorithm.graph.revision
        self.hits = 0
        self.misses = 0

    def get_path(self, start: Cell, end: Cell) -> Path:
        self._sync()
        key = (start, end)
        cached = self._cache.get(key)
        if cached is not None:
            self.hits += 1
            return cached
        self.misses += 1
        path = self.algorithm.get_path_between_points(start, end)
        self._cache[key] = path
        return path

    def _sync(self) -> None:
        revision = self.algorithm.graph.revision
        if revision != self._revision:
            self._cache.clear()
            self._revision = revision

    def __len__(self) -> int:
        self._sync()
        return len(self._cache)

    def clear(self) -> None:
        self._cache.clear()
        self.hits = 0
        self.misses = 0


class RouteCalculator:
    """Builds and caches routes by joining cached pairwise paths."""

    __slots__ = ("paths", "_routes", "_cycles", "_revision")

    def __init__(self, path_calculator: PathCalculator) -> None:
        self.paths = path_calculator
        self._routes: dict[WaypointKey, Route] = {}
        self._cycles: dict[WaypointKey, CyclicRoute] = {}
        self._revision = path_calculator.algorithm.graph.revision

    def _sync(self) -> None:
        revision = self.paths.algorithm.graph.revision
        if revision != self._revision:
            self.clear()
            self._revision = revision

    def _join(self, waypoints: tuple[Cell, ...]) -> Path:
        if len(waypoints) == 1:
            return Path(waypoints)
        complete = Path.EMPTY
        for a, b in zip(waypoints, waypoints[1:]):
            leg = self.paths.get_path(a, b)
            if leg.empty:
                raise InvalidRouteError(f"no path between waypoints {a} and {b}")
            complete = complete.concat(leg, self.paths.algorithm.diagnostics)
        return complete

    def get_route(self, waypoints: Iterable[Cell]) -> Route:
        """Route through *waypoints* in order.

        Raises:
            InvalidRouteError: when two consecutive waypoints are not
                connected.
        """
        self._sync()
        key = WaypointKey(waypoints)
        if not key.cells:
            return Route.EMPTY
        cached = self._routes.get(key)
        if cached is not None:
            return cached
        route = Route(self._join(key.cells), key.cells)
        self._routes[key] = route
        return route

    def get_cyclic_route(self, waypoints: Iterable[Cell]) -> CyclicRoute:
        """Like :meth:`get_route` but returning to the first waypoint."""
        self._sync()
        key = WaypointKey(waypoints)
        if not key.cells:
            return CyclicRoute.EMPTY
        cached = self._cycles.get(key)
        if cached is not None:
            return cached
        cells = key.cells
        closed = cells + (cells[0],) if len(cells) >= 2 else cells
        cycle = CyclicRoute(self._join(closed), cells)
        self._cycles[key] = cycle
        return cycle

    @property
    def cached_routes(self) -> int:
        self._sync()
        return len(self._routes) + len(self._cycles)

    def clear(self) -> None:
        self._routes.clear()
        self._cycles.clear()
