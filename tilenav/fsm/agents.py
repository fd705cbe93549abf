"""Wiring of concrete states into patroller and player machines."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from tilenav.config import NavigationConfig
from tilenav.core.actor import Actor
from tilenav.core.models import Cell
from tilenav.fsm.machine import FiniteStateMachine, FSMTransition, TransitionCallback
from tilenav.fsm.states import (
    AgentContext,
    AutoFindPatrol,
    AutoInvestigate,
    AutoPatrol,
    Error,
    Idle,
    PlayerAutoMovement,
    PlayerIdle,
    PlayerInputControl,
)
from tilenav.navigation.navmap import NavigationMap
from tilenav.navigation.patrol import PatrolPlanner
from tilenav.utils.logging import Diagnostics


@dataclass(slots=True)
class PatrollerStates:
    idle: Idle
    find_patrol: AutoFindPatrol
    patrol: AutoPatrol
    investigate: AutoInvestigate
    error: Error


@dataclass(slots=True)
class PlayerStates:
    input_control: PlayerInputControl
    auto_movement: PlayerAutoMovement
    idle: PlayerIdle


def build_patroller_fsm(
    actor: Actor,
    navmap: NavigationMap,
    planner: PatrolPlanner,
    config: NavigationConfig | None = None,
    diagnostics: Diagnostics | None = None,
    on_transition: TransitionCallback | None = None,
) -> tuple[FiniteStateMachine, PatrollerStates]:
    """Machine for a patroller, started in Idle.

    Idle -> FindPatrol once a patrol route exists; FindPatrol -> Patrol on
    arrival; FindPatrol or Patrol -> Investigate when navpoints need checking;
    Investigate -> FindPatrol at the end of its route; anything -> Error
    while the actor is stuck.
    """
    config = config or navmap.config
    diagnostics = diagnostics or navmap.diagnostics
    ctx = AgentContext(actor, navmap, config, diagnostics)

    def patrol_route():
        return planner.patrol_route

    states = PatrollerStates(
        idle=Idle(ctx),
        find_patrol=AutoFindPatrol(ctx, patrol_route),
        patrol=AutoPatrol(ctx, patrol_route),
        investigate=AutoInvestigate(ctx),
        error=Error(ctx),
    )
    fsm = FiniteStateMachine(f"patroller:{actor.name}", diagnostics, on_transition)
    idle = fsm.add_state(states.idle)
    find = fsm.add_state(states.find_patrol)
    patrol = fsm.add_state(states.patrol)
    investigate = fsm.add_state(states.investigate)
    error = fsm.add_state(states.error)

    fsm.add_universal_transition(FSMTransition(error, lambda: actor.stuck))
    fsm.add_transition(idle, FSMTransition(find, lambda: not planner.patrol_route.empty))
    fsm.add_transition(find, FSMTransition(patrol, lambda: states.find_patrol.reached_destination))
    fsm.add_transition(find, FSMTransition(investigate, lambda: bool(actor.investigate_points)))
    fsm.add_transition(patrol, FSMTransition(investigate, lambda: bool(actor.investigate_points)))
    fsm.add_transition(investigate, FSMTransition(find, lambda: states.investigate.at_end))

    fsm.set_current_state(idle)
    return fsm, states


def build_player_fsm(
    actor: Actor,
    navmap: NavigationMap,
    destination: Callable[[], Cell | None],
    config: NavigationConfig | None = None,
    diagnostics: Diagnostics | None = None,
    on_transition: TransitionCallback | None = None,
) -> tuple[FiniteStateMachine, PlayerStates]:
    """Machine for the player, started in input control.

    Auto movement begins as soon as *destination* returns a cell and ends
    in PlayerIdle on arrival.  A later destination the player is not
    standing on sends it moving again.
    """
    config = config or navmap.config
    diagnostics = diagnostics or navmap.diagnostics
    ctx = AgentContext(actor, navmap, config, diagnostics)

    states = PlayerStates(
        input_control=PlayerInputControl(ctx),
        auto_movement=PlayerAutoMovement(ctx, destination),
        idle=PlayerIdle(ctx),
    )
    fsm = FiniteStateMachine(f"player:{actor.name}", diagnostics, on_transition)
    control = fsm.add_state(states.input_control)
    auto = fsm.add_state(states.auto_movement)
    idle = fsm.add_state(states.idle)

    def new_destination() -> bool:
        cell = destination()
        return cell is not None and not ctx.actor_at(ctx.center_of(cell))

    fsm.add_transition(control, FSMTransition(auto, lambda: destination() is not None))
    fsm.add_transition(auto, FSMTransition(idle, lambda: states.auto_movement.reached_destination))
    fsm.add_transition(idle, FSMTransition(auto, new_destination))

    fsm.set_current_state(control)
    return fsm, states
