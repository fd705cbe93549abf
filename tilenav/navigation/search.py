"""Single-pair shortest-path search over a :class:`Graph`.

Usage:
    search = AStarSearch(graph)
    path = search.get_path_between_points(start, end)   # Path, maybe EMPTY
    search.visits                                       # ordered trace
"""

from __future__ import annotations

import heapq
from abc import ABC, abstractmethod
from dataclasses import dataclass

from tilenav.core.enums import LogCategory, SearchStatus, VisitCategory
from tilenav.core.models import Cell
from tilenav.navigation.graph import Graph
from tilenav.navigation.path import Path
from tilenav.utils.logging import Diagnostics


@dataclass(frozen=True, slots=True)
class SearchVisit:
    """One touched cell in a search trace, for visualisation only."""

    cell: Cell
    category: VisitCategory


class PathfindingAlgorithm(ABC):
    """Shared lifecycle for graph searches.

    Subclasses implement :meth:`_search`; the base class handles resetting
    per-search state and rejecting bad endpoints.
    """

    def __init__(self, graph: Graph, diagnostics: Diagnostics | None = None, record_visits: bool = True) -> None:
        self.graph = graph
        self.diagnostics = diagnostics or Diagnostics()
        self.record_visits = record_visits
        self.status = SearchStatus.IDLE
        self.visits: list[SearchVisit] = []
        self.last_cost = 0

    def _visit(self, cell: Cell, category: VisitCategory) -> None:
        if self.record_visits:
            self.visits.append(SearchVisit(cell, category))

    def _reset(self) -> None:
        self.visits = []
        self.last_cost = 0
        self.status = SearchStatus.PREPARED

    def get_path_between_points(self, start: Cell, end: Cell) -> Path:
        self._reset()
        diag = self.diagnostics

        if start not in self.graph or end not in self.graph:
            missing = start if start not in self.graph else end
            diag.error(LogCategory.PATH, "Cannot search from %s to %s: %s is not a graph node", start, end, missing)
            self.status = SearchStatus.INVALID
            return Path.EMPTY
        if start == end:
            diag.warning(LogCategory.PATH, "Start and end are the same cell %s; no path needed", start)
            self.status = SearchStatus.INVALID
            return Path.EMPTY

        self.status = SearchStatus.SEARCHING
        path = self._search(start, end)
        if path.empty:
            diag.warning(LogCategory.PATH, "No path found from %s to %s", start, end)
            self.status = SearchStatus.EXHAUSTED
            return Path.EMPTY

        for cell in path:
            self._visit(cell, VisitCategory.FINAL_PATH)
        self.last_cost = path.cost
        self.status = SearchStatus.FOUND
        diag.debug(LogCategory.PATH, "Found path %s -> %s, length %d, cost %d", start, end, len(path), self.last_cost)
        return path

    @abstractmethod
    def _search(self, start: Cell, end: Cell) -> Path:
        """Return the path, or an empty path when the frontier runs dry."""


class AStarSearch(PathfindingAlgorithm):
    """A* with a Manhattan heuristic.

    The frontier is a heap of ``(f, counter, cell)``; the insertion counter
    makes equal-``f`` entries pop in FIFO order, so results only depend on
    graph neighbour order.
    """

    @staticmethod
    def heuristic(a: Cell, b: Cell) -> int:
        return a.manhattan(b)

    def _search(self, start: Cell, end: Cell) -> Path:
        graph = self.graph
        counter = 0
        frontier: list[tuple[int, int, Cell]] = [(self.heuristic(start, end), counter, start)]
        cost_so_far: dict[Cell, int] = {start: 0}
        came_from: dict[Cell, Cell] = {}

        while frontier:
            _, _, current = heapq.heappop(frontier)
            self._visit(current, VisitCategory.FRONTIER_POP)

            if current == end:
                return self._reconstruct(came_from, start, end)

            current_g = cost_so_far[current]
            for nxt in graph.neighbours(current):
                new_cost = current_g + current.manhattan(nxt)
                # Strict improvement only: ties keep the first predecessor.
                if nxt not in cost_so_far or new_cost < cost_so_far[nxt]:
                    cost_so_far[nxt] = new_cost
                    came_from[nxt] = current
                    counter += 1
                    heapq.heappush(frontier, (new_cost + self.heuristic(nxt, end), counter, nxt))
                    self._visit(nxt, VisitCategory.RELAXED)

        return Path.EMPTY

    @staticmethod
    def _reconstruct(came_from: dict[Cell, Cell], start: Cell, end: Cell) -> Path:
        """Walk back through came_from to build the path."""
        cells = [end]
        current = end
        while current != start:
            current = came_from[current]
            cells.append(current)
        cells.reverse()
        return Path(cells)
