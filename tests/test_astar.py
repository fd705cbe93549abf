"""Tests for the A* search: optimality, determinism and failure modes."""

import logging
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from tilenav.core.enums import SearchStatus, Tile, VisitCategory
from tilenav.core.grid import TileGrid
from tilenav.core.models import Cell
from tilenav.navigation.graph import Graph
from tilenav.navigation.navmap import NavigationMap
from tilenav.navigation.path import Path
from tilenav.navigation.search import AStarSearch


def _open_map(width: int, height: int) -> NavigationMap:
    nm = NavigationMap(TileGrid(width, height, default=Tile.NODE))
    nm.calculate_graph()
    return nm


def _records(caplog, level):
    return [r for r in caplog.records if r.levelno == level and r.name.startswith("tilenav")]


class TestShortestPath:
    def test_open_grid_cost_is_manhattan(self):
        nm = _open_map(6, 6)
        path = nm.search.get_path_between_points(Cell(0, 0), Cell(4, 3))
        assert path.first == Cell(0, 0)
        assert path.last == Cell(4, 3)
        assert path.cost == 7
        assert len(path) == 8
        assert Path.is_valid_sequence(path.cells)
        assert nm.search.status is SearchStatus.FOUND
        assert nm.search.last_cost == 7

    def test_routes_around_wall(self):
        grid = TileGrid(5, 5, default=Tile.NODE)
        for y in range(4):
            grid.set(Cell(2, y), Tile.VOID)
        nm = NavigationMap(grid)
        nm.calculate_graph()
        path = nm.search.get_path_between_points(Cell(0, 0), Cell(4, 0))
        assert path.cost == 12
        assert Cell(2, 4) in path
        assert all(grid.get(c) is Tile.NODE for c in path)

    def test_tie_break_follows_neighbour_order(self):
        nm = _open_map(2, 2)
        path = nm.search.get_path_between_points(Cell(0, 0), Cell(1, 1))
        # +x is listed before +y in every neighbour list
        assert list(path) == [Cell(0, 0), Cell(1, 0), Cell(1, 1)]

    def test_repeatable(self):
        nm = _open_map(8, 8)
        a = nm.search.get_path_between_points(Cell(0, 7), Cell(6, 1))
        b = nm.search.get_path_between_points(Cell(0, 7), Cell(6, 1))
        assert a == b

    def test_heuristic(self):
        assert AStarSearch.heuristic(Cell(0, 0), Cell(3, -4)) == 7


class TestFailureModes:
    def test_disconnected(self, caplog):
        g = Graph()
        g.add_node(Cell(0, 0), [Cell(1, 0)])
        g.add_node(Cell(1, 0), [Cell(0, 0)])
        g.add_node(Cell(5, 5), [])
        search = AStarSearch(g)
        assert search.get_path_between_points(Cell(0, 0), Cell(5, 5)) == Path.EMPTY
        assert search.status is SearchStatus.EXHAUSTED
        assert "No path found" in caplog.text

    def test_same_endpoints_warns(self, caplog):
        nm = _open_map(3, 3)
        assert nm.search.get_path_between_points(Cell(1, 1), Cell(1, 1)).empty
        assert nm.search.status is SearchStatus.INVALID
        assert len(_records(caplog, logging.WARNING)) == 1
        assert not _records(caplog, logging.ERROR)

    def test_non_member_endpoint_errors(self, caplog):
        nm = _open_map(3, 3)
        assert nm.search.get_path_between_points(Cell(0, 0), Cell(9, 9)).empty
        assert nm.search.status is SearchStatus.INVALID
        assert len(_records(caplog, logging.ERROR)) == 1


class TestVisitTrace:
    def test_final_path_visits_match_path(self):
        nm = _open_map(5, 5)
        path = nm.search.get_path_between_points(Cell(0, 0), Cell(3, 2))
        final = [v.cell for v in nm.search.visits if v.category is VisitCategory.FINAL_PATH]
        assert final == list(path)
        pops = [v for v in nm.search.visits if v.category is VisitCategory.FRONTIER_POP]
        assert pops[0].cell == Cell(0, 0)
        assert pops[-1].cell == Cell(3, 2)

    def test_trace_reset_between_searches(self):
        nm = _open_map(5, 5)
        nm.search.get_path_between_points(Cell(0, 0), Cell(4, 4))
        first = len(nm.search.visits)
        nm.search.get_path_between_points(Cell(0, 0), Cell(1, 0))
        assert len(nm.search.visits) < first

    def test_recording_can_be_disabled(self):
        g = Graph()
        g.add_node(Cell(0, 0), [Cell(1, 0)])
        g.add_node(Cell(1, 0), [Cell(0, 0)])
        search = AStarSearch(g, record_visits=False)
        assert len(search.get_path_between_points(Cell(0, 0), Cell(1, 0))) == 2
        assert search.visits == []

    def test_trace_search_bypasses_cache(self):
        nm = _open_map(4, 4)
        nm.find_path(Cell(0, 0), Cell(3, 3))
        path, visits = nm.trace_search(Cell(0, 0), Cell(3, 3))
        assert path.cost == 6
        assert visits
        assert nm.paths.hits == 0
