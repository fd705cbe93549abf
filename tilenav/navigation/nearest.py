"""Bounded BFS from an arbitrary cell to the closest graph node."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Callable

from tilenav.core.enums import LogCategory, NodeSearchState
from tilenav.core.grid import GridLike
from tilenav.core.models import NULL_CELL, Cell
from tilenav.navigation.graph import Graph
from tilenav.utils.logging import Diagnostics


@dataclass(frozen=True, slots=True)
class NodeSearchResult:
    """Outcome of one nearest-node search.

    ``node`` is :data:`NULL_CELL` when nothing was found; ``evaluated`` is
    every cell dequeued, in order.
    """

    node: Cell
    evaluated: tuple[Cell, ...] = ()

    @property
    def found(self) -> bool:
        return not self.node.is_null


class NearestNodeFinder:
    """Breadth-first search over the grid's cells (not the graph's edges).

    Only one search may be in progress at a time.  Searches are synchronous,
    so this only bites when ``on_complete`` starts another search before
    the outer call has returned.
    """

    __slots__ = ("grid", "graph", "bfs_limit", "_diag", "state")

    def __init__(
        self,
        grid: GridLike,
        graph: Graph,
        bfs_limit: int = 20,
        diagnostics: Diagnostics | None = None,
    ) -> None:
        self.grid = grid
        self.graph = graph
        self.bfs_limit = bfs_limit
        self._diag = diagnostics or Diagnostics()
        self.state = NodeSearchState.IDLE

    def closest_node_to_cell(self, start: Cell) -> Cell:
        return self.search(start).node

    def search(
        self,
        start: Cell,
        on_complete: Callable[[NodeSearchResult], None] | None = None,
    ) -> NodeSearchResult:
        """Find the closest node to *start*, visiting at most ``bfs_limit`` cells.

        ``on_complete`` runs with the result while the search still counts
        as in progress.
        """
        if self.state is NodeSearchState.IN_PROGRESS:
            self._diag.error(LogCategory.GRAPH, "Already searching for a node, cannot start a search from %s", start)
            return NodeSearchResult(NULL_CELL)

        self.state = NodeSearchState.IN_PROGRESS
        try:
            result = self._bfs(start)
            if on_complete is not None:
                on_complete(result)
            return result
        finally:
            self.state = NodeSearchState.IDLE

    def _bfs(self, start: Cell) -> NodeSearchResult:
        if not self.graph.num_nodes:
            self._diag.error(LogCategory.GRAPH, "Either no node tiles in map or graph is uninitialised")
            return NodeSearchResult(NULL_CELL)

        searched = {start}
        queue: deque[Cell] = deque([start])
        evaluated: list[Cell] = []
        count = 0

        while queue:
            cell = queue.popleft()
            evaluated.append(cell)
            self._diag.verbose(LogCategory.GRAPH, "Evaluating %s for closest node", cell)
            if cell in self.graph:
                return NodeSearchResult(cell, tuple(evaluated))
            count += 1
            if count >= self.bfs_limit:
                self._diag.error(LogCategory.GRAPH, "Exceeded search limit of %d cells from %s", count, start)
                return NodeSearchResult(NULL_CELL, tuple(evaluated))
            for neighbour in cell.surrounding():
                if neighbour not in searched and self.grid.has_cell(neighbour):
                    searched.add(neighbour)
                    queue.append(neighbour)

        self._diag.error(LogCategory.GRAPH, "Could not find any nodes around %s", start)
        return NodeSearchResult(NULL_CELL, tuple(evaluated))
