"""Table-driven finite state machine.

States live in an arena owned by the machine and are addressed by
integer :data:`StateId` handles; transitions store target handles, never
state objects, so states can refer to each other freely.

Tick order:
  1. universal transitions, in insertion order, first true wins
  2. otherwise the current state's transitions, first true wins
  3. a winning transition to a different state runs on_exit / on_enter
  4. perform_action on whatever state is now current
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, NewType, Sequence

from tilenav.core.enums import LogCategory
from tilenav.utils.logging import Diagnostics

StateId = NewType("StateId", int)


class FSMState(ABC):
    """Behaviour hooks for one state.

    Subclass and implement ``perform_action``; ``on_enter`` and
    ``on_exit`` default to doing nothing.
    """

    @property
    def name(self) -> str:
        return type(self).__name__

    def on_enter(self) -> None:
        pass

    def on_exit(self) -> None:
        pass

    @abstractmethod
    def perform_action(self) -> None:
        ...

    def __repr__(self) -> str:
        return self.name


@dataclass(frozen=True, slots=True, eq=False)
class FSMTransition:
    """Edge to ``target`` taken when ``condition()`` is true.

    Conditions must only read state owned elsewhere.
    """

    target: StateId
    condition: Callable[[], bool]

    def ready(self) -> bool:
        return bool(self.condition())


TransitionCallback = Callable[[StateId | None, StateId], None]


class FiniteStateMachine:
    """Arena of states plus per-state and universal transitions."""

    def __init__(
        self,
        name: str = "fsm",
        diagnostics: Diagnostics | None = None,
        on_transition: TransitionCallback | None = None,
    ) -> None:
        self.name = name
        self._diag = diagnostics or Diagnostics()
        self._on_transition = on_transition
        self._states: list[FSMState] = []
        self._ids: dict[int, StateId] = {}        # id(state) -> handle
        self._transitions: list[list[FSMTransition]] = []
        self._universal: list[FSMTransition] = []
        self._current: StateId | None = None

    # -- registration --

    def add_state(self, state: FSMState, *transitions: FSMTransition) -> StateId | None:
        """Register *state*; returns its handle, or None if already registered."""
        if id(state) in self._ids:
            self._diag.error(LogCategory.FSM, "FSM %s: state %s is already registered", self.name, state)
            return None
        state_id = StateId(len(self._states))
        self._states.append(state)
        self._ids[id(state)] = state_id
        self._transitions.append([])
        for transition in transitions:
            self.add_transition(state_id, transition)
        return state_id

    def add_transition(self, source: StateId, transition: FSMTransition) -> bool:
        if not self._registered(source):
            self._diag.error(LogCategory.FSM, "FSM %s: cannot add transition from unregistered state %s", self.name, source)
            return False
        if not self._registered(transition.target):
            self._diag.error(
                LogCategory.FSM, "FSM %s: transition from %s targets unregistered state %s",
                self.name, self._states[source], transition.target,
            )
            return False
        self._transitions[source].append(transition)
        return True

    def add_universal_transition(self, transition: FSMTransition) -> bool:
        if any(t is transition for t in self._universal):
            self._diag.debug(LogCategory.FSM, "FSM %s: universal transition already added", self.name)
            return False
        if not self._registered(transition.target):
            self._diag.error(
                LogCategory.FSM, "FSM %s: universal transition targets unregistered state %s",
                self.name, transition.target,
            )
            return False
        self._universal.append(transition)
        return True

    def _registered(self, state_id: object) -> bool:
        return isinstance(state_id, int) and 0 <= state_id < len(self._states)

    # -- lookup --

    @property
    def current_state_id(self) -> StateId | None:
        return self._current

    @property
    def current_state(self) -> FSMState | None:
        return None if self._current is None else self._states[self._current]

    def state(self, state_id: StateId) -> FSMState:
        return self._states[state_id]

    def id_of(self, state: FSMState) -> StateId | None:
        return self._ids.get(id(state))

    def transitions_of(self, state_id: StateId) -> Sequence[FSMTransition]:
        return tuple(self._transitions[state_id])

    @property
    def universal_transitions(self) -> Sequence[FSMTransition]:
        return tuple(self._universal)

    def __len__(self) -> int:
        return len(self._states)

    # -- running --

    def set_current_state(self, state_id: StateId | FSMState) -> bool:
        """Switch to *state_id*, running exit/enter hooks.

        A registered state object is resolved to its handle.  Anything
        unregistered is reported and leaves the machine unchanged.
        """
        resolved = self.id_of(state_id) if isinstance(state_id, FSMState) else state_id
        if not self._registered(resolved):
            self._diag.error(LogCategory.FSM, "FSM %s: cannot set unregistered state %s as current", self.name, state_id)
            return False
        self._change_state(resolved)
        return True

    def tick(self) -> None:
        if self._current is None:
            self._diag.error(LogCategory.FSM, "FSM %s: ticked without a current state", self.name)
            return

        transition = self._first_ready(self._universal) or self._first_ready(self._transitions[self._current])
        if transition is not None:
            if transition.target == self._current:
                self._diag.verbose(LogCategory.FSM, "FSM %s attempting to transition to same state", self.name)
            else:
                self._change_state(transition.target)

        self._states[self._current].perform_action()

    @staticmethod
    def _first_ready(transitions: Sequence[FSMTransition]) -> FSMTransition | None:
        for transition in transitions:
            if transition.ready():
                return transition
        return None

    def _change_state(self, new_id: StateId) -> None:
        old_id = self._current
        new_state = self._states[new_id]
        if old_id is not None:
            old_state = self._states[old_id]
            self._diag.debug(LogCategory.FSM, "FSM %s transitioning to state %s from state %s", self.name, new_state, old_state)
            old_state.on_exit()
        else:
            self._diag.debug(LogCategory.FSM, "FSM %s starting in state %s", self.name, new_state)
        self._current = new_id
        new_state.on_enter()
        if self._on_transition is not None:
            self._on_transition(old_id, new_id)
