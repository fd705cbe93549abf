"""NavigationMap: one grid's graph plus everything that searches it.

Owns the Graph, the A* search, both calculators and the nearest-node
finder.  The facade methods never raise; failures are reported through
Diagnostics and come back as empty values.
"""

from __future__ import annotations

from tilenav.config import NavigationConfig
from tilenav.core.enums import LogCategory
from tilenav.core.grid import GridLike
from tilenav.core.models import Cell
from tilenav.navigation.calculator import PathCalculator, RouteCalculator
from tilenav.navigation.graph import Graph
from tilenav.navigation.nearest import NearestNodeFinder, NodeSearchResult
from tilenav.navigation.path import CyclicRoute, InvalidRouteError, Path, Route
from tilenav.navigation.search import AStarSearch, SearchVisit
from tilenav.utils.logging import Diagnostics


class NavigationMap:
    """Pathfinding services over a single tile grid."""

    def __init__(
        self,
        grid: GridLike,
        config: NavigationConfig | None = None,
        diagnostics: Diagnostics | None = None,
    ) -> None:
        self.grid = grid
        self.config = config or NavigationConfig()
        self.diagnostics = diagnostics or Diagnostics()

        self.graph = Graph(self.config.max_neighbours, self.diagnostics)
        self.search = AStarSearch(self.graph, self.diagnostics, self.config.record_search_visits)
        self.paths = PathCalculator(self.search)
        self.routes = RouteCalculator(self.paths)
        self.finder = NearestNodeFinder(grid, self.graph, self.config.bfs_limit, self.diagnostics)

    # -- graph --

    def calculate_graph(self) -> int:
        """(Re)build the graph from every markable cell; returns the node count."""
        self.graph.clear()
        self.paths.clear()
        self.routes.clear()
        grid = self.grid
        for cell in grid.all_cells():
            if grid.is_markable(cell):
                self.graph.add_node(cell, [n for n in cell.surrounding() if grid.is_markable(n)])
        self.diagnostics.info(LogCategory.GRAPH, "Built navigation graph with %d nodes", self.graph.num_nodes)
        return self.graph.num_nodes

    def is_pathfinding_node(self, cell: Cell) -> bool:
        return cell in self.graph

    @property
    def node_count(self) -> int:
        return self.graph.num_nodes

    @property
    def nodes(self) -> list[Cell]:
        return self.graph.nodes

    def neighbours_of_node(self, node: Cell) -> tuple[Cell, ...]:
        return self.graph.neighbours(node)

    # -- queries --

    def find_path(self, start: Cell, end: Cell) -> Path:
        return self.paths.get_path(start, end)

    def find_route(self, waypoints: list[Cell] | tuple[Cell, ...]) -> Route:
        try:
            return self.routes.get_route(waypoints)
        except InvalidRouteError as exc:
            self.diagnostics.error(LogCategory.PATH, "Could not build route: %s", exc)
            return Route.EMPTY

    def find_cycle(self, waypoints: list[Cell] | tuple[Cell, ...]) -> CyclicRoute:
        try:
            return self.routes.get_cyclic_route(waypoints)
        except InvalidRouteError as exc:
            self.diagnostics.error(LogCategory.PATH, "Could not build cyclic route: %s", exc)
            return CyclicRoute.EMPTY

    def closest_node_to_cell(self, cell: Cell) -> Cell:
        return self.finder.closest_node_to_cell(cell)

    def closest_node_search(self, cell: Cell) -> NodeSearchResult:
        return self.finder.search(cell)

    @property
    def last_search_visits(self) -> list[SearchVisit]:
        return list(self.search.visits)

    def trace_search(self, start: Cell, end: Cell) -> tuple[Path, list[SearchVisit]]:
        """Run an uncached search and return its path and visit trace."""
        path = self.search.get_path_between_points(start, end)
        return path, list(self.search.visits)
