"""Navigation: graph, paths and routes, A* search, caches, nearest-node BFS."""

from tilenav.navigation.calculator import PathCalculator, RouteCalculator, WaypointKey
from tilenav.navigation.graph import Graph
from tilenav.navigation.navmap import NavigationMap
from tilenav.navigation.nearest import NearestNodeFinder, NodeSearchResult
from tilenav.navigation.path import (
    CyclicRoute,
    InvalidPathError,
    InvalidRouteError,
    NavigationError,
    Path,
    Route,
)
from tilenav.navigation.patrol import GroupStatus, PatrolPlanner
from tilenav.navigation.search import AStarSearch, PathfindingAlgorithm, SearchVisit

__all__ = [
    "AStarSearch",
    "CyclicRoute",
    "Graph",
    "GroupStatus",
    "InvalidPathError",
    "InvalidRouteError",
    "NavigationError",
    "NavigationMap",
    "NearestNodeFinder",
    "NodeSearchResult",
    "Path",
    "PathCalculator",
    "PathfindingAlgorithm",
    "PatrolPlanner",
    "Route",
    "RouteCalculator",
    "SearchVisit",
    "WaypointKey",
]
