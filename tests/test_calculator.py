"""Tests for the path and route memoizers."""

import logging
import sys
import os

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from tilenav.core.enums import Tile
from tilenav.core.grid import TileGrid
from tilenav.core.models import Cell
from tilenav.navigation.calculator import PathCalculator, RouteCalculator, WaypointKey
from tilenav.navigation.graph import Graph
from tilenav.navigation.navmap import NavigationMap
from tilenav.navigation.path import CyclicRoute, InvalidRouteError, Route
from tilenav.navigation.search import AStarSearch


def _open_map(width: int = 5, height: int = 5) -> NavigationMap:
    nm = NavigationMap(TileGrid(width, height, default=Tile.NODE))
    nm.calculate_graph()
    return nm


def _split_graph() -> Graph:
    g = Graph()
    g.add_node(Cell(0, 0), [Cell(1, 0)])
    g.add_node(Cell(1, 0), [Cell(0, 0)])
    g.add_node(Cell(5, 5), [])
    return g


class TestWaypointKey:
    def test_value_equality(self):
        a = WaypointKey([Cell(0, 0), Cell(1, 2)])
        b = WaypointKey((Cell(0, 0), Cell(1, 2)))
        assert a == b
        assert hash(a) == hash(b)
        assert len(a) == 2

    def test_order_matters(self):
        assert WaypointKey([Cell(0, 0), Cell(1, 2)]) != WaypointKey([Cell(1, 2), Cell(0, 0)])

    def test_z_matters(self):
        assert WaypointKey([Cell(0, 0, 0)]) != WaypointKey([Cell(0, 0, 1)])


class TestPathCalculator:
    def test_second_lookup_hits_cache(self):
        nm = _open_map()
        first = nm.paths.get_path(Cell(0, 0), Cell(4, 4))
        second = nm.paths.get_path(Cell(0, 0), Cell(4, 4))
        assert first is second
        assert nm.paths.hits == 1
        assert nm.paths.misses == 1

    def test_orderings_are_distinct_entries(self):
        nm = _open_map()
        nm.paths.get_path(Cell(0, 0), Cell(4, 4))
        nm.paths.get_path(Cell(4, 4), Cell(0, 0))
        assert nm.paths.misses == 2
        assert len(nm.paths) == 2

    def test_clear(self):
        nm = _open_map()
        nm.paths.get_path(Cell(0, 0), Cell(1, 0))
        nm.paths.clear()
        assert len(nm.paths) == 0
        assert nm.paths.hits == nm.paths.misses == 0


class TestRouteCalculator:
    def test_route_passes_waypoints_in_order(self):
        nm = _open_map()
        waypoints = [Cell(0, 0), Cell(4, 0), Cell(4, 4)]
        route = nm.routes.get_route(waypoints)
        assert route.complete_path.first == Cell(0, 0)
        assert route.complete_path.last == Cell(4, 4)
        indices = [route.waypoint_path_index(i) for i in range(3)]
        assert indices == sorted(indices)

    def test_cyclic_route_returns_to_start(self):
        nm = _open_map()
        cycle = nm.routes.get_cyclic_route([Cell(0, 0), Cell(3, 0), Cell(3, 3)])
        assert isinstance(cycle, CyclicRoute)
        assert cycle.complete_path.first == Cell(0, 0)
        assert cycle.complete_path.last == Cell(0, 0)
        assert cycle.complete_path.cost == 12

    def test_equal_lists_share_entry(self):
        nm = _open_map()
        a = nm.routes.get_route([Cell(0, 0), Cell(2, 2)])
        misses = nm.paths.misses
        b = nm.routes.get_route([Cell(0, 0), Cell(2, 2)])
        assert a is b
        assert nm.paths.misses == misses
        assert nm.routes.cached_routes == 1

    def test_distinct_orderings_distinct_entries(self):
        nm = _open_map()
        nm.routes.get_route([Cell(0, 0), Cell(2, 2)])
        nm.routes.get_route([Cell(2, 2), Cell(0, 0)])
        assert nm.routes.cached_routes == 2

    def test_routes_reuse_cached_paths(self):
        nm = _open_map()
        nm.routes.get_route([Cell(0, 0), Cell(2, 2), Cell(4, 4)])
        nm.routes.get_route([Cell(2, 2), Cell(4, 4)])
        assert nm.paths.hits >= 1

    def test_single_waypoint(self):
        nm = _open_map()
        route = nm.routes.get_route([Cell(1, 1)])
        assert len(route) == 1
        assert route.waypoints == (Cell(1, 1),)

    def test_empty_waypoints(self):
        nm = _open_map()
        assert nm.routes.get_route([]) is Route.EMPTY
        assert nm.routes.get_cyclic_route([]) is CyclicRoute.EMPTY

    def test_unreachable_leg_raises(self):
        calc = RouteCalculator(PathCalculator(AStarSearch(_split_graph())))
        with pytest.raises(InvalidRouteError):
            calc.get_route([Cell(0, 0), Cell(1, 0), Cell(5, 5)])

    def test_repeated_waypoint_raises(self):
        nm = _open_map()
        with pytest.raises(InvalidRouteError):
            nm.routes.get_route([Cell(0, 0), Cell(0, 0)])


class TestNavigationMapFacade:
    def test_find_route_reports_instead_of_raising(self, caplog):
        nm = _open_map()
        assert nm.find_route([Cell(0, 0), Cell(0, 0)]) is Route.EMPTY
        assert any(r.levelno == logging.ERROR for r in caplog.records)

    def test_find_cycle_reports_instead_of_raising(self, caplog):
        grid = TileGrid(5, 1, default=Tile.NODE)
        grid.set(Cell(2, 0), Tile.VOID)
        nm = NavigationMap(grid)
        nm.calculate_graph()
        assert nm.find_cycle([Cell(0, 0), Cell(4, 0)]) is CyclicRoute.EMPTY
        assert "Could not build cyclic route" in caplog.text

    def test_rebuild_clears_caches(self):
        nm = _open_map()
        nm.find_path(Cell(0, 0), Cell(4, 4))
        nm.find_route([Cell(0, 0), Cell(4, 4)])
        nm.calculate_graph()
        assert len(nm.paths) == 0
        assert nm.routes.cached_routes == 0

    def test_huge_coordinates_report_instead_of_raising(self, caplog):
        nm = _open_map()
        assert nm.find_route([Cell(2**70, 0), Cell(0, 0)]) is Route.EMPTY
        assert nm.find_cycle([Cell(-(2**70), 0), Cell(0, 0)]) is CyclicRoute.EMPTY
        assert any(r.levelno == logging.ERROR for r in caplog.records)


class TestGraphEdits:
    def test_revision_bumps_on_mutation_only(self):
        g = _split_graph()
        before = g.revision
        assert not g.remove_node(Cell(9, 9))
        assert g.revision == before
        assert g.add_neighbour(Cell(5, 5), Cell(5, 6))
        assert g.revision == before + 1

    def test_removed_node_invalidates_cached_path(self):
        nm = _open_map(5, 1)
        assert nm.find_path(Cell(0, 0), Cell(4, 0)).cost == 4
        nm.graph.remove_node(Cell(2, 0))
        assert nm.find_path(Cell(0, 0), Cell(4, 0)).empty
        assert nm.find_route([Cell(0, 0), Cell(4, 0)]) is Route.EMPTY

    def test_added_edge_invalidates_cached_route(self):
        g = Graph()
        g.add_node(Cell(0, 0), [Cell(1, 0)])
        g.add_node(Cell(1, 0), [Cell(0, 0)])
        g.add_node(Cell(2, 0), [Cell(1, 0)])
        calc = RouteCalculator(PathCalculator(AStarSearch(g)))
        with pytest.raises(InvalidRouteError):
            calc.get_route([Cell(0, 0), Cell(2, 0)])
        g.add_neighbour(Cell(1, 0), Cell(2, 0))
        route = calc.get_route([Cell(0, 0), Cell(2, 0)])
        assert list(route.complete_path) == [Cell(0, 0), Cell(1, 0), Cell(2, 0)]

    def test_cached_route_dropped_after_edit(self):
        nm = _open_map()
        nm.find_route([Cell(0, 0), Cell(4, 4)])
        assert nm.routes.cached_routes == 1
        nm.graph.remove_neighbour(Cell(4, 4), Cell(3, 4))
        assert nm.routes.cached_routes == 0
        assert len(nm.paths) == 0
