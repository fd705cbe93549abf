"""Adjacency-list graph over grid cells.

Pure data plus mutation; search lives in :mod:`tilenav.navigation.search`.
Neighbour order is preserved exactly as given because it decides the
exploration order, and therefore tie-breaking, of every search.
"""

from __future__ import annotations

from typing import Iterable

from tilenav.core.enums import LogCategory
from tilenav.core.models import Cell
from tilenav.utils.logging import Diagnostics

UNBOUNDED = -1


class Graph:
    """Mapping of node cell -> ordered neighbour cells, with a degree cap."""

    __slots__ = ("_neighbours", "_max_neighbours", "_diag", "_revision")

    def __init__(self, max_neighbours: int = 4, diagnostics: Diagnostics | None = None) -> None:
        self._neighbours: dict[Cell, list[Cell]] = {}
        self._max_neighbours = max(max_neighbours, UNBOUNDED)
        self._diag = diagnostics or Diagnostics()
        self._revision = 0

    # -- properties --

    @property
    def max_neighbours(self) -> int:
        return self._max_neighbours

    @property
    def revision(self) -> int:
        """Bumped by every successful mutation; caches compare against it."""
        return self._revision

    @property
    def num_nodes(self) -> int:
        return len(self._neighbours)

    @property
    def nodes(self) -> list[Cell]:
        return list(self._neighbours)

    def __len__(self) -> int:
        return len(self._neighbours)

    def __contains__(self, cell: object) -> bool:
        return cell in self._neighbours

    def contains_node(self, cell: Cell) -> bool:
        return cell in self._neighbours

    def _at_capacity(self, count: int) -> bool:
        return self._max_neighbours != UNBOUNDED and count >= self._max_neighbours

    # -- queries --

    def neighbours(self, cell: Cell) -> tuple[Cell, ...]:
        """Stored neighbours of *cell*, or an empty tuple if it is not a node."""
        found = self._neighbours.get(cell)
        if found is None:
            self._diag.error(LogCategory.GRAPH, "Cell %s is not a node of the graph", cell)
            return ()
        return tuple(found)

    # -- mutation --

    def add_node(self, cell: Cell, neighbours: Iterable[Cell]) -> None:
        """Insert (or replace) *cell* with its neighbour list.

        Lists longer than ``max_neighbours`` are truncated to the first
        ``max_neighbours`` entries.
        """
        adjacent = list(neighbours)
        if self._max_neighbours != UNBOUNDED and len(adjacent) > self._max_neighbours:
            self._diag.warning(
                LogCategory.GRAPH,
                "Trying to add %s with %d neighbours; keeping the first %d",
                cell, len(adjacent), self._max_neighbours,
            )
            adjacent = adjacent[: self._max_neighbours]
        if cell in self._neighbours:
            self._diag.debug(LogCategory.GRAPH, "Replacing existing node %s", cell)
        self._neighbours[cell] = adjacent
        self._revision += 1

    def add_neighbour(self, node: Cell, neighbour: Cell) -> bool:
        adjacent = self._neighbours.get(node)
        if adjacent is None:
            self._diag.error(LogCategory.GRAPH, "Cannot add neighbour to %s: not a node", node)
            return False
        if neighbour in adjacent:
            self._diag.debug(LogCategory.GRAPH, "%s is already a neighbour of %s", neighbour, node)
            return False
        if self._at_capacity(len(adjacent)):
            self._diag.error(
                LogCategory.GRAPH, "Cannot add neighbour %s: %s already has %d neighbours",
                neighbour, node, len(adjacent),
            )
            return False
        adjacent.append(neighbour)
        self._revision += 1
        return True

    def remove_neighbour(self, node: Cell, neighbour: Cell) -> bool:
        adjacent = self._neighbours.get(node)
        if adjacent is None or neighbour not in adjacent:
            self._diag.error(LogCategory.GRAPH, "%s is not a neighbour of %s", neighbour, node)
            return False
        adjacent.remove(neighbour)
        self._revision += 1
        return True

    def remove_node(self, cell: Cell) -> bool:
        """Drop *cell* and every edge pointing at it."""
        if self._neighbours.pop(cell, None) is None:
            self._diag.error(LogCategory.GRAPH, "Cannot remove %s: not a node", cell)
            return False
        for adjacent in self._neighbours.values():
            if cell in adjacent:
                adjacent.remove(cell)
        self._revision += 1
        return True

    def clear(self) -> None:
        self._neighbours.clear()
        self._revision += 1
