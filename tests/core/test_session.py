"""Tests for the session: coupling of gestures, run state and optimizer ticks."""

import numpy as np
import pytest

from chomp_shell.core.interaction import InteractionOutcome, PointerFlags
from chomp_shell.core.optimizer import ChompOptimizer, OptimizerContractError
from chomp_shell.core.run_state import RunState
from chomp_shell.core.session import RUN_STATE_ON_OUTCOME

PRESS = int(PointerFlags.PRESS | PointerFlags.PRIMARY)
DRAG = int(PointerFlags.DRAG | PointerFlags.PRIMARY)
RELEASE = int(PointerFlags.RELEASE | PointerFlags.PRIMARY)
SECONDARY_RELEASE = int(PointerFlags.RELEASE | PointerFlags.SECONDARY)


def test_reference_session_setup(reference_session):
    session = reference_session

    assert session.state is RunState.PAUSED
    assert session.title == "chomp"
    assert session.trajectory.num_waypoints == 20
    assert len(session.obstacles) == 2
    assert isinstance(session.optimizer, ChompOptimizer)
    assert len(session.display.entities()) == 22


def test_paused_idle_does_nothing(fake_session, recording_optimizer):
    before = fake_session.trajectory.xi.copy()

    assert fake_session.on_idle() is False

    assert recording_optimizer.calls == []
    np.testing.assert_array_equal(fake_session.trajectory.xi, before)


def test_grab_runs_and_release_pauses(fake_session):
    """Paused -> press hit -> Running -> release -> Paused, however many drags."""
    assert fake_session.on_pointer(3.0, 0.0, PRESS) is InteractionOutcome.GRABBED
    assert fake_session.state is RunState.RUNNING

    for k in range(7):
        fake_session.on_pointer(3.0 + 0.1 * k, 0.0, DRAG)
        assert fake_session.state is RunState.RUNNING

    assert fake_session.on_pointer(3.6, 0.0, RELEASE) is InteractionOutcome.RELEASED
    assert fake_session.state is RunState.PAUSED


def test_press_miss_keeps_run_state(fake_session):
    fake_session.toggle_run()

    fake_session.on_pointer(-20.0, 20.0, PRESS)

    assert fake_session.state is RunState.RUNNING


def test_creating_obstacle_keeps_run_state(fake_session):
    outcome = fake_session.on_pointer(4.0, 1.0, SECONDARY_RELEASE)

    assert outcome is InteractionOutcome.CREATED
    assert fake_session.state is RunState.PAUSED
    assert len(fake_session.obstacles) == 3


def test_coupling_rule_table():
    assert RUN_STATE_ON_OUTCOME == {
        InteractionOutcome.GRABBED: RunState.RUNNING,
        InteractionOutcome.RELEASED: RunState.PAUSED,
    }


def test_running_idle_invokes_optimizer(fake_session, recording_optimizer):
    fake_session.on_pointer(0.0, 3.0, PRESS)
    fake_session.on_pointer(0.5, 3.5, DRAG)
    xi_before = fake_session.trajectory.xi.copy()

    assert fake_session.on_idle() is True

    (start, goal, xi, obstacles), = recording_optimizer.calls
    np.testing.assert_array_equal(start, [-5.0, -5.0])
    np.testing.assert_array_equal(goal, [7.0, 7.0])
    np.testing.assert_array_equal(xi, xi_before)
    np.testing.assert_array_equal(obstacles, [[3.0, 0.0, 2.0], [0.5, 3.5, 2.0]])
    np.testing.assert_allclose(fake_session.trajectory.xi, xi_before + 0.1)
    assert fake_session.iterations == 1


def test_idle_refreshes_display(fake_session):
    fake_session.toggle_run()
    fake_session.on_idle()

    positions = [entity.position for entity in fake_session.display.waypoint_entities]
    np.testing.assert_allclose(positions, fake_session.trajectory.waypoints)


def test_step_runs_exactly_one_iteration(fake_session, recording_optimizer):
    fake_session.step()

    assert fake_session.on_idle() is True
    assert fake_session.state is RunState.PAUSED
    assert fake_session.on_idle() is False
    assert len(recording_optimizer.calls) == 1


def test_waypoint_count_invariant_with_chomp(reference_session):
    reference_session.on_pointer(3.0, 0.0, PRESS)
    for k in range(10):
        reference_session.on_pointer(3.0 - 0.3 * k, 0.3 * k, DRAG)
        reference_session.on_idle()

    assert reference_session.iterations == 10
    assert reference_session.trajectory.xi.shape == (40,)
    assert reference_session.trajectory.waypoints.shape == (20, 2)


def test_contract_violation_detected(fake_session):
    trajectory = fake_session.trajectory

    def shrinking_optimizer(start, goal, xi, obstacles):
        trajectory.xi = np.zeros(3)

    fake_session.optimizer = shrinking_optimizer
    fake_session.toggle_run()

    with pytest.raises(OptimizerContractError):
        fake_session.on_idle()


def test_jumble_reseeds_and_refreshes(fake_session):
    before = fake_session.trajectory.xi.copy()

    fake_session.jumble()

    assert not np.array_equal(fake_session.trajectory.xi, before)
    assert fake_session.trajectory.xi.shape == before.shape
    positions = [entity.position for entity in fake_session.display.waypoint_entities]
    np.testing.assert_allclose(positions, fake_session.trajectory.waypoints)


def test_viewport_uses_session_margin(fake_session):
    low, high = fake_session.viewport()

    np.testing.assert_allclose(low, [-7.0, -7.0])
    np.testing.assert_allclose(high, [9.0, 9.0])
