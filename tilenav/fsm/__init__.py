"""Finite state machine engine and the navigation states built on it."""

from tilenav.fsm.agents import build_patroller_fsm, build_player_fsm
from tilenav.fsm.machine import FiniteStateMachine, FSMState, FSMTransition, StateId
from tilenav.fsm.states import AgentContext, PathFollower

__all__ = [
    "AgentContext",
    "FSMState",
    "FSMTransition",
    "FiniteStateMachine",
    "PathFollower",
    "StateId",
    "build_patroller_fsm",
    "build_player_fsm",
]
