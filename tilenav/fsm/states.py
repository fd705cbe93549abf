"""Concrete FSM states for patrollers and the player.

Architecture:
  - AgentContext bundles what a state needs (actor, navigation map,
    config, diagnostics).  States hold one of these, never each other.
  - PathFollower is the shared path-walking strategy: compare the actor
    against the next path point, snap and advance when within the arrival
    threshold, otherwise move toward it.
  - Each state is a direct FSMState subclass that picks a path on enter
    and decides what "no path" and "path end" mean for it.

Patroller flow:
  Idle -> AutoFindPatrol -> AutoPatrol -> AutoInvestigate -> AutoFindPatrol
  any -> Error (stuck)
Player flow:
  PlayerInputControl -> PlayerAutoMovement -> PlayerIdle
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable

from tilenav.core.enums import FollowResult, LogCategory
from tilenav.core.models import Cell, Position
from tilenav.fsm.machine import FSMState
from tilenav.navigation.path import CyclicRoute, Path

if TYPE_CHECKING:
    from tilenav.config import NavigationConfig
    from tilenav.core.actor import Actor
    from tilenav.core.grid import GridLike
    from tilenav.navigation.navmap import NavigationMap
    from tilenav.utils.logging import Diagnostics


RouteProvider = Callable[[], CyclicRoute]
DestinationProvider = Callable[[], Cell | None]


# =====================================================================
# Context and shared helpers
# =====================================================================

@dataclass(slots=True)
class AgentContext:
    """Everything a state handler might need for one actor."""

    actor: Actor
    navmap: NavigationMap
    config: NavigationConfig
    diagnostics: Diagnostics

    @property
    def grid(self) -> GridLike:
        return self.navmap.grid

    @property
    def actor_cell(self) -> Cell:
        return self.grid.world_position_to_cell(self.actor.position)

    def center_of(self, cell: Cell) -> Position:
        return self.grid.cell_to_world_center(cell)

    def actor_at(self, point: Position) -> bool:
        return (point - self.actor.position).sqr_magnitude < self.config.arrival_threshold ** 2

    def closest_node(self) -> Cell:
        return self.navmap.closest_node_to_cell(self.actor_cell)


def path_between(ctx: AgentContext, start: Cell, end: Cell | None) -> Path:
    """Path from *start* to *end*; a single-cell path when they coincide."""
    if end is None or start.is_null or end.is_null:
        return Path.EMPTY
    if start == end:
        return Path((start,))
    return ctx.navmap.find_path(start, end)


class PathFollower:
    """Walks an actor along a path one tick at a time."""

    __slots__ = ("path", "index")

    def __init__(self) -> None:
        self.path = Path.EMPTY
        self.index = -1

    def follow(self, path: Path, index: int = 0) -> None:
        self.path = path
        self.index = index if not path.empty else -1

    def clear(self) -> None:
        self.follow(Path.EMPTY)

    @property
    def defined(self) -> bool:
        return not self.path.empty and self.index >= 0

    @property
    def next_cell(self) -> Cell | None:
        if self.defined and self.index < len(self.path):
            return self.path[self.index]
        return None

    def step(self, ctx: AgentContext) -> FollowResult:
        if not self.defined:
            return FollowResult.NO_PATH
        if self.index >= len(self.path):
            return FollowResult.PATH_END

        point = ctx.center_of(self.path[self.index])
        if ctx.actor_at(point):
            ctx.actor.teleport(point)  # correct accumulated inaccuracy
            self.index += 1
            return FollowResult.PATH_END if self.index >= len(self.path) else FollowResult.ARRIVED

        ctx.actor.move_towards(point, ctx.config.tick_seconds)
        return FollowResult.MOVING


# =====================================================================
# Passive states
# =====================================================================

class Idle(FSMState):
    def __init__(self, ctx: AgentContext) -> None:
        self.ctx = ctx

    def on_enter(self) -> None:
        self.ctx.diagnostics.warning(LogCategory.ACTOR, "%s has entered an idle state", self.ctx.actor.name)

    def perform_action(self) -> None:
        pass


class Error(FSMState):
    """Terminal state for actors that can no longer navigate."""

    def __init__(self, ctx: AgentContext) -> None:
        self.ctx = ctx

    def on_enter(self) -> None:
        self.ctx.diagnostics.warning(LogCategory.ACTOR, "%s has entered an error state", self.ctx.actor.name)

    def perform_action(self) -> None:
        pass


class PlayerIdle(FSMState):
    def __init__(self, ctx: AgentContext) -> None:
        self.ctx = ctx

    def on_enter(self) -> None:
        self.ctx.actor.input_blocked = True

    def on_exit(self) -> None:
        self.ctx.actor.input_blocked = False

    def perform_action(self) -> None:
        pass


class PlayerInputControl(FSMState):
    def __init__(self, ctx: AgentContext) -> None:
        self.ctx = ctx

    def on_enter(self) -> None:
        self.ctx.actor.input_blocked = False

    def perform_action(self) -> None:
        pass


# =====================================================================
# Path-following states
# =====================================================================

class AutoPatrol(FSMState):
    """Loop the level's patrol route forever, starting where the actor is."""

    def __init__(self, ctx: AgentContext, route: RouteProvider) -> None:
        self.ctx = ctx
        self._route = route
        self.follower = PathFollower()

    def on_enter(self) -> None:
        path = self._route().complete_path
        self.follower.follow(path, path.index_of(self.ctx.actor_cell))

    def on_exit(self) -> None:
        self.follower.clear()

    def perform_action(self) -> None:
        result = self.follower.step(self.ctx)
        if result is FollowResult.NO_PATH:
            self.ctx.diagnostics.error(LogCategory.PATH, "Actor %s is not on the patrol route", self.ctx.actor.name)
            self.ctx.actor.stuck = True
        elif result is FollowResult.PATH_END:
            self.follower.index = 0


class AutoFindPatrol(FSMState):
    """Walk from wherever the actor is to the nearest point of the patrol route."""

    def __init__(self, ctx: AgentContext, route: RouteProvider) -> None:
        self.ctx = ctx
        self._route = route
        self.follower = PathFollower()
        self.destination: Cell | None = None

    @property
    def reached_destination(self) -> bool:
        return self.destination is not None and self.ctx.actor_at(self.ctx.center_of(self.destination))

    def on_enter(self) -> None:
        self.destination = self._route().closest_path_point(self.ctx.actor_cell)
        self.follower.follow(path_between(self.ctx, self.ctx.closest_node(), self.destination))

    def on_exit(self) -> None:
        self.follower.clear()
        self.destination = None

    def perform_action(self) -> None:
        if self.follower.step(self.ctx) is FollowResult.NO_PATH:
            self.ctx.diagnostics.warning(LogCategory.PATH, "Actor %s cannot find the patrol route", self.ctx.actor.name)
            self.ctx.actor.stuck = True


class AutoInvestigate(FSMState):
    """Visit the navpoints the actor was told to investigate, at chase speed.

    ``at_end`` is also true when there was no route to follow, so the
    actor does not linger here.
    """

    def __init__(self, ctx: AgentContext) -> None:
        self.ctx = ctx
        self.follower = PathFollower()

    @property
    def at_end(self) -> bool:
        path = self.follower.path
        return path.empty or self.ctx.actor_at(self.ctx.center_of(path.last))

    def on_enter(self) -> None:
        waypoints = [self.ctx.closest_node()]
        for point in self.ctx.actor.investigate_points:
            if point != waypoints[-1]:
                waypoints.append(point)
        if len(waypoints) < 2 or waypoints[0].is_null:
            self.follower.clear()
        else:
            self.follower.follow(self.ctx.navmap.find_route(waypoints).complete_path)
        self.ctx.actor.speed = self.ctx.config.chase_speed

    def on_exit(self) -> None:
        self.follower.clear()
        self.ctx.actor.speed = self.ctx.config.patroller_speed
        self.ctx.actor.done_investigating()

    def perform_action(self) -> None:
        if self.follower.step(self.ctx) is FollowResult.NO_PATH:
            self.ctx.diagnostics.warning(LogCategory.PATH, "Actor %s cannot find an investigate route", self.ctx.actor.name)


class PlayerAutoMovement(FSMState):
    """Move the player to a supplied destination, teleporting if unreachable."""

    def __init__(self, ctx: AgentContext, destination: DestinationProvider) -> None:
        self.ctx = ctx
        self._destination = destination
        self.follower = PathFollower()
        self.destination: Cell | None = None

    @property
    def reached_destination(self) -> bool:
        return self.destination is not None and self.ctx.actor_at(self.ctx.center_of(self.destination))

    def on_enter(self) -> None:
        self.ctx.actor.input_blocked = True
        self.destination = self._destination()
        self.follower.follow(path_between(self.ctx, self.ctx.closest_node(), self.destination))

    def on_exit(self) -> None:
        self.follower.clear()
        self.destination = None

    def perform_action(self) -> None:
        if self.follower.step(self.ctx) is not FollowResult.NO_PATH:
            return
        if self.destination is None:
            self.ctx.diagnostics.error(LogCategory.PATH, "Player %s has no destination to move to", self.ctx.actor.name)
            return
        self.ctx.diagnostics.warning(LogCategory.PATH, "Couldn't find path for %s, teleporting", self.ctx.actor.name)
        self.ctx.actor.teleport(self.ctx.center_of(self.destination))
