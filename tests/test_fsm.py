"""Tests for the finite state machine: priority, hooks and registration."""

import logging
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from tilenav.fsm.machine import FiniteStateMachine, FSMState, FSMTransition, StateId


class _Recorder(FSMState):
    """Appends every hook call to a shared log."""

    def __init__(self, label: str, log: list):
        self.label = label
        self.log = log

    def on_enter(self):
        self.log.append(f"enter {self.label}")

    def on_exit(self):
        self.log.append(f"exit {self.label}")

    def perform_action(self):
        self.log.append(f"act {self.label}")


class _World:
    x = 0


def _errors(caplog):
    return [r for r in caplog.records if r.levelno == logging.ERROR and r.name.startswith("tilenav")]


def _abc_machine():
    """A->B (x>0), B->A (x<0), B->C (x>0), universal ->A (x<0)."""
    world = _World()
    log: list = []
    fsm = FiniteStateMachine("abc")
    a = fsm.add_state(_Recorder("A", log))
    b = fsm.add_state(_Recorder("B", log))
    c = fsm.add_state(_Recorder("C", log))
    fsm.add_transition(a, FSMTransition(b, lambda: world.x > 0))
    fsm.add_transition(b, FSMTransition(a, lambda: world.x < 0))
    fsm.add_transition(b, FSMTransition(c, lambda: world.x > 0))
    fsm.add_universal_transition(FSMTransition(a, lambda: world.x < 0))
    fsm.set_current_state(a)
    log.clear()
    return fsm, world, log, (a, b, c)


class TestTickSemantics:
    def test_scenario(self):
        fsm, world, log, (a, b, c) = _abc_machine()
        world.x = 3
        fsm.tick()
        assert fsm.current_state_id == b
        assert log == ["exit A", "enter B", "act B"]

        log.clear()
        fsm.tick()
        assert fsm.current_state_id == c
        assert log == ["exit B", "enter C", "act C"]

        log.clear()
        world.x = -5
        fsm.tick()
        assert fsm.current_state_id == a
        assert log == ["exit C", "enter A", "act A"]

    def test_action_runs_without_transition(self):
        fsm, world, log, (a, _, _) = _abc_machine()
        fsm.tick()
        fsm.tick()
        assert fsm.current_state_id == a
        assert log == ["act A", "act A"]

    def test_universal_wins_over_local(self):
        world = _World()
        log: list = []
        fsm = FiniteStateMachine()
        a = fsm.add_state(_Recorder("A", log))
        b = fsm.add_state(_Recorder("B", log))
        c = fsm.add_state(_Recorder("C", log))
        fsm.add_transition(a, FSMTransition(b, lambda: True))
        fsm.add_universal_transition(FSMTransition(c, lambda: world.x == 0))
        fsm.set_current_state(a)
        fsm.tick()
        assert fsm.current_state_id == c

    def test_universal_to_current_blocks_locals(self):
        log: list = []
        fsm = FiniteStateMachine()
        a = fsm.add_state(_Recorder("A", log))
        b = fsm.add_state(_Recorder("B", log))
        fsm.add_transition(a, FSMTransition(b, lambda: True))
        fsm.add_universal_transition(FSMTransition(a, lambda: True))
        fsm.set_current_state(a)
        log.clear()
        fsm.tick()
        assert fsm.current_state_id == a
        assert log == ["act A"]

    def test_first_true_local_wins(self):
        log: list = []
        fsm = FiniteStateMachine()
        a = fsm.add_state(_Recorder("A", log))
        b = fsm.add_state(_Recorder("B", log))
        c = fsm.add_state(_Recorder("C", log))
        fsm.add_transition(a, FSMTransition(c, lambda: True))
        fsm.add_transition(a, FSMTransition(b, lambda: True))
        fsm.set_current_state(a)
        fsm.tick()
        assert fsm.current_state_id == c

    def test_tick_without_current_state(self, caplog):
        fsm = FiniteStateMachine()
        fsm.add_state(_Recorder("A", []))
        fsm.tick()
        assert fsm.current_state is None
        assert len(_errors(caplog)) == 1


class TestRegistration:
    def test_ids_are_sequential(self):
        fsm = FiniteStateMachine()
        first = _Recorder("A", [])
        assert fsm.add_state(first) == 0
        assert fsm.add_state(_Recorder("B", [])) == 1
        assert fsm.id_of(first) == 0
        assert fsm.state(StateId(0)) is first
        assert len(fsm) == 2

    def test_duplicate_state_rejected(self, caplog):
        fsm = FiniteStateMachine()
        state = _Recorder("A", [])
        fsm.add_state(state)
        assert fsm.add_state(state) is None
        assert len(fsm) == 1
        assert len(_errors(caplog)) == 1

    def test_add_state_with_transitions(self):
        fsm = FiniteStateMachine()
        b = fsm.add_state(_Recorder("B", []))
        a = fsm.add_state(_Recorder("A", []), FSMTransition(b, lambda: True))
        assert len(fsm.transitions_of(a)) == 1

    def test_transition_to_unregistered_target(self, caplog):
        fsm = FiniteStateMachine()
        a = fsm.add_state(_Recorder("A", []))
        assert not fsm.add_transition(a, FSMTransition(StateId(7), lambda: True))
        assert fsm.transitions_of(a) == ()
        assert len(_errors(caplog)) == 1

    def test_duplicate_universal_ignored(self):
        fsm = FiniteStateMachine()
        a = fsm.add_state(_Recorder("A", []))
        transition = FSMTransition(a, lambda: False)
        assert fsm.add_universal_transition(transition)
        assert not fsm.add_universal_transition(transition)
        assert len(fsm.universal_transitions) == 1

    def test_equal_looking_universals_are_distinct(self):
        fsm = FiniteStateMachine()
        a = fsm.add_state(_Recorder("A", []))
        cond = lambda: False  # noqa: E731
        fsm.add_universal_transition(FSMTransition(a, cond))
        fsm.add_universal_transition(FSMTransition(a, cond))
        assert len(fsm.universal_transitions) == 2

    def test_set_unregistered_state(self, caplog):
        fsm, _, log, (a, _, _) = _abc_machine()
        assert not fsm.set_current_state(StateId(42))
        assert fsm.current_state_id == a
        assert log == []
        assert len(_errors(caplog)) == 1

    def test_set_unregistered_state_object(self, caplog):
        fsm, _, log, (a, _, _) = _abc_machine()
        assert not fsm.set_current_state(_Recorder("stray", log))
        assert not fsm.set_current_state("B")
        assert fsm.current_state_id == a
        assert log == []
        assert len(_errors(caplog)) == 2

    def test_set_registered_state_object(self):
        fsm, _, log, (a, b, _) = _abc_machine()
        assert fsm.set_current_state(fsm.state(b))
        assert fsm.current_state_id == b
        assert log == ["exit A", "enter B"]


class TestCallbacks:
    def test_on_transition_receives_ids(self):
        seen = []
        fsm = FiniteStateMachine(on_transition=lambda old, new: seen.append((old, new)))
        a = fsm.add_state(_Recorder("A", []))
        b = fsm.add_state(_Recorder("B", []))
        fsm.add_transition(a, FSMTransition(b, lambda: True))
        fsm.set_current_state(a)
        fsm.tick()
        assert seen == [(None, a), (a, b)]

    def test_state_name_defaults_to_class(self):
        assert _Recorder("A", []).name == "_Recorder"
