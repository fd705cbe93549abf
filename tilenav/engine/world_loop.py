"""WorldLoop: the single-threaded tick driver.

Each tick:
  1. tick every agent's FSM once, in spawn order
  2. drain the FSM transitions each agent made into NavEvents
  3. collect any waypoint group the player is standing on
  4. advance the tick and record a trace frame
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from tilenav.core.actor import Actor
from tilenav.core.level import DEFAULT_LEVEL, Level, load_level
from tilenav.core.models import Cell
from tilenav.engine.snapshot import ActorView, WorldSnapshot
from tilenav.fsm.agents import build_patroller_fsm, build_player_fsm
from tilenav.fsm.machine import FiniteStateMachine, StateId
from tilenav.navigation.navmap import NavigationMap
from tilenav.navigation.patrol import GroupStatus, PatrolPlanner
from tilenav.systems.generator import generate_level
from tilenav.utils.event_log import EventLog, NavEvent
from tilenav.utils.logging import Diagnostics

if TYPE_CHECKING:
    from tilenav.config import NavigationConfig
    from tilenav.utils.replay import TraceRecorder

logger = logging.getLogger(__name__)

PATROLLER = "patroller"
PLAYER = "player"


@dataclass(slots=True)
class Agent:
    """An actor together with the machine that drives it."""

    actor: Actor
    role: str
    fsm: FiniteStateMachine
    transitions: list[tuple[StateId | None, StateId]] = field(default_factory=list)

    @property
    def state_name(self) -> str:
        state = self.fsm.current_state
        return state.name if state is not None else "none"

    def next_cell(self) -> Cell | None:
        follower = getattr(self.fsm.current_state, "follower", None)
        return follower.next_cell if follower is not None else None


class WorldLoop:
    """The heartbeat of a navigation run."""

    __slots__ = (
        "_config",
        "_level",
        "_navmap",
        "_planner",
        "_agents",
        "_recorder",
        "_events",
        "_tick_events",
        "_player_destination",
        "tick",
    )

    def __init__(
        self,
        config: NavigationConfig,
        level: Level,
        navmap: NavigationMap,
        planner: PatrolPlanner,
        agents: list[Agent],
        recorder: TraceRecorder | None = None,
        player_destination: Cell | None = None,
    ) -> None:
        self._config = config
        self._level = level
        self._navmap = navmap
        self._planner = planner
        self._agents = agents
        self._recorder = recorder
        self._events = EventLog()
        self._tick_events: list[NavEvent] = []
        self._player_destination = player_destination
        self.tick = 0
        planner.subscribe(self._on_groups_changed)
        self._drain_transitions()

    # -- accessors --

    @property
    def config(self) -> NavigationConfig:
        return self._config

    @property
    def level(self) -> Level:
        return self._level

    @property
    def navmap(self) -> NavigationMap:
        return self._navmap

    @property
    def planner(self) -> PatrolPlanner:
        return self._planner

    @property
    def agents(self) -> list[Agent]:
        return self._agents

    @property
    def events(self) -> EventLog:
        """Every event since the loop was built."""
        return self._events

    @property
    def tick_events(self) -> list[NavEvent]:
        """Events emitted during the most recent tick."""
        return self._tick_events

    @property
    def player_destination(self) -> Cell | None:
        return self._player_destination

    @player_destination.setter
    def player_destination(self, cell: Cell | None) -> None:
        self._player_destination = cell

    @property
    def finished(self) -> bool:
        return self.tick >= self._config.max_ticks

    # -- events --

    def _emit(self, category: str, message: str, actor: str = "") -> None:
        event = NavEvent(tick=self.tick, category=category, message=message, actor=actor)
        self._tick_events.append(event)
        self._events.append(event)

    def _drain_transitions(self) -> None:
        for agent in self._agents:
            for old_id, new_id in agent.transitions:
                old = agent.fsm.state(old_id).name if old_id is not None else "start"
                new = agent.fsm.state(new_id).name
                self._emit("fsm", f"{old} -> {new}", agent.actor.name)
            agent.transitions.clear()

    def _on_groups_changed(self, status: GroupStatus) -> None:
        if not status.taken:
            return
        self._emit("level", f"waypoint group {list(status.taken)} taken, {len(status.remaining)} left")
        for agent in self._agents:
            if agent.role == PATROLLER:
                agent.actor.investigate_points = status.taken
        if status.all_taken and self._level.exit_waypoints:
            self._player_destination = self._level.exit_waypoints[0]

    def collect_group(self, index: int) -> bool:
        return self._planner.collect_group(index)

    # -- ticking --

    def tick_once(self) -> bool:
        """Execute a single tick. Returns False once max_ticks is reached."""
        if self.finished:
            logger.info("Tick %d: Max ticks reached.", self.tick)
            return False

        self._tick_events = []
        for agent in self._agents:
            agent.fsm.tick()
        self._drain_transitions()

        for agent in self._agents:
            if agent.role != PLAYER:
                continue
            cell = self._navmap.grid.world_position_to_cell(agent.actor.position)
            group = self._planner.group_at(cell)
            if group >= 0:
                self.collect_group(group)

        self.tick += 1
        if self._recorder is not None:
            self._recorder.record_tick(self.tick, self._agents)
        return True

    def run(self) -> None:
        """Tick until max_ticks, then flush the trace."""
        logger.info("=== Run started (level=%s, seed=%d) ===", self._level.name, self._config.world_seed)
        while self.tick_once():
            if self.tick % 100 == 0:
                logger.info("Tick %d: %s", self.tick, ", ".join(f"{a.actor.name}={a.state_name}" for a in self._agents))
        logger.info("=== Run finished at tick %d ===", self.tick)
        if self._recorder is not None:
            self._recorder.flush()

    def create_snapshot(self) -> WorldSnapshot:
        grid = self._navmap.grid
        return WorldSnapshot(
            tick=self.tick,
            level=self._level.name,
            actors=tuple(
                ActorView(
                    name=a.actor.name,
                    role=a.role,
                    position=a.actor.position,
                    cell=grid.world_position_to_cell(a.actor.position),
                    state=a.state_name,
                    stuck=a.actor.stuck,
                    speed=a.actor.speed,
                    next_cell=a.next_cell(),
                )
                for a in self._agents
            ),
            patrol_route=self._planner.patrol_route.complete_path.cells,
            patrol_waypoints=self._planner.patrol_route.waypoints,
            remaining_groups=len(self._planner.groups),
            player_destination=self._player_destination,
            finished=self.finished,
        )


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------

def resolve_level(config: NavigationConfig) -> Level:
    """Level file if configured, else a generated level if asked, else the built-in one."""
    if config.level_file:
        return load_level(config.level_file, cell_size=config.cell_size)
    if config.generate_level:
        return generate_level(
            config.grid_width, config.grid_height, config.world_seed,
            config.pillar_density, cell_size=config.cell_size,
        )
    return Level.from_ascii(DEFAULT_LEVEL, name="default", cell_size=config.cell_size)


def build_world(
    config: NavigationConfig,
    level: Level | None = None,
    diagnostics: Diagnostics | None = None,
    recorder: TraceRecorder | None = None,
) -> WorldLoop:
    """Wire level, navigation map, patrol planner and agents into a loop."""
    level = level or resolve_level(config)
    diagnostics = diagnostics or Diagnostics.from_names(dict(config.category_levels))

    navmap = NavigationMap(level.grid, config, diagnostics)
    navmap.calculate_graph()
    planner = PatrolPlanner(navmap)
    planner.calculate_patrol_route(level.waypoint_groups, level.exit_waypoints)

    agents: list[Agent] = []
    for i, spawn in enumerate(level.patroller_spawns, start=1):
        actor = Actor(f"patroller-{i}", level.grid.cell_to_world_center(spawn), speed=config.patroller_speed)
        pending: list[tuple[StateId | None, StateId]] = []
        fsm, _ = build_patroller_fsm(actor, navmap, planner, config, diagnostics, on_transition=_collector(pending))
        agents.append(Agent(actor, PATROLLER, fsm, pending))

    destinations = level.player_destinations
    loop_ref: list[WorldLoop] = []
    if level.player_spawn is not None:
        actor = Actor("player", level.grid.cell_to_world_center(level.player_spawn), speed=config.player_speed)
        pending = []
        fsm, _ = build_player_fsm(
            actor, navmap, lambda: loop_ref[0].player_destination if loop_ref else None,
            config, diagnostics, on_transition=_collector(pending),
        )
        agents.append(Agent(actor, PLAYER, fsm, pending))

    loop = WorldLoop(
        config, level, navmap, planner, agents, recorder,
        player_destination=destinations[0] if destinations else None,
    )
    loop_ref.append(loop)
    logger.info(
        "World built: level %s, %d nodes, %d agents, patrol route length %d",
        level.name, navmap.node_count, len(agents), len(planner.patrol_route),
    )
    return loop


def _collector(pending: list[tuple[StateId | None, StateId]]):
    def on_transition(old_id: StateId | None, new_id: StateId) -> None:
        pending.append((old_id, new_id))
    return on_transition
