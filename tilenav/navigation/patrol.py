"""Level patrol route management.

A level's patrol route is the cyclic route through the navpoints of every
remaining waypoint group.  When a group is collected the route is
recalculated from the rest, and subscribers are told which navpoints were
just vacated so patrollers can investigate them.  With no groups left,
patrollers cycle through the exit waypoints instead.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Sequence

from tilenav.core.enums import LogCategory
from tilenav.core.models import Cell
from tilenav.navigation.navmap import NavigationMap
from tilenav.navigation.path import CyclicRoute


@dataclass(frozen=True, slots=True)
class GroupStatus:
    """Published to subscribers whenever the set of waypoint groups changes."""

    remaining: tuple[tuple[Cell, ...], ...]
    taken: tuple[Cell, ...] = ()

    @property
    def all_taken(self) -> bool:
        return not self.remaining


class PatrolPlanner:
    """Owns the level's current patrol route."""

    def __init__(self, navmap: NavigationMap) -> None:
        self.navmap = navmap
        self.patrol_route: CyclicRoute = CyclicRoute.EMPTY
        self.groups: list[tuple[Cell, ...]] = []
        self.exit_waypoints: tuple[Cell, ...] = ()
        self._subscribers: list[Callable[[GroupStatus], None]] = []

    def invalid_waypoints(self, waypoints: Sequence[Cell]) -> list[Cell]:
        return [w for w in waypoints if not self.navmap.is_pathfinding_node(w)]

    def calculate_patrol_route(
        self,
        waypoint_groups: Sequence[Sequence[Cell]],
        exit_waypoints: Sequence[Cell] = (),
    ) -> CyclicRoute:
        """Recompute and store the patrol route from *waypoint_groups*."""
        diag = self.navmap.diagnostics
        self.groups = [tuple(g) for g in waypoint_groups]
        self.exit_waypoints = tuple(exit_waypoints)

        if not self.groups:
            diag.debug(LogCategory.GAME, "No waypoint groups left, patrolling the exit")
            self.patrol_route = self.navmap.find_cycle(self.exit_waypoints)
            return self.patrol_route

        waypoints = [cell for group in self.groups for cell in group]
        invalid = self.invalid_waypoints(waypoints)
        if invalid:
            diag.error(LogCategory.PATH, "Trying to create patrol route from non-node points: %s", invalid)
            self.patrol_route = CyclicRoute.EMPTY
            return self.patrol_route

        diag.debug(LogCategory.PATH, "Level has %d waypoints: %s", len(waypoints), waypoints)
        self.patrol_route = self.navmap.find_cycle(waypoints)
        return self.patrol_route

    # -- waypoint groups --

    def subscribe(self, callback: Callable[[GroupStatus], None]) -> None:
        """Register *callback*; it is called at once with the current status."""
        if callback in self._subscribers:
            return
        self._subscribers.append(callback)
        callback(GroupStatus(tuple(self.groups)))

    def collect_group(self, index: int) -> bool:
        """Remove group *index*, recompute the route and notify subscribers."""
        diag = self.navmap.diagnostics
        if not 0 <= index < len(self.groups):
            diag.debug(LogCategory.GAME, "Cannot collect waypoint group %d of %d", index, len(self.groups))
            return False
        taken = self.groups[index]
        remaining = self.groups[:index] + self.groups[index + 1:]
        self.calculate_patrol_route(remaining, self.exit_waypoints)
        if not remaining:
            diag.info(LogCategory.GAME, "All waypoint groups taken, get to the exit!")
        status = GroupStatus(tuple(remaining), taken)
        for callback in list(self._subscribers):
            callback(status)
        return True

    def group_at(self, cell: Cell) -> int:
        """Index of the group containing *cell*, or -1."""
        for i, group in enumerate(self.groups):
            if cell in group:
                return i
        return -1
