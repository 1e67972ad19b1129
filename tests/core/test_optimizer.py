"""Tests for the CHOMP optimizer and the optimizer registry."""

import numpy as np
import pytest

from chomp_shell.core.optimizer import (
    ChompOptimizer,
    create_optimizer,
    get_registered_optimizers,
    register_optimizer,
    smoothness_metric,
    smoothness_offset,
    unregister_optimizer,
)
from chomp_shell.core.trajectory import TrajectoryModel


def _min_clearance(waypoints, obstacles):
    deltas = waypoints[:, None, :] - obstacles[None, :, :2]
    return float((np.linalg.norm(deltas, axis=2) - obstacles[None, :, 2]).min())


def test_smoothness_metric_is_symmetric_positive_definite():
    metric = smoothness_metric(5)

    assert metric.shape == (10, 10)
    np.testing.assert_allclose(metric, metric.T)
    assert np.all(np.linalg.eigvalsh(metric) > 0)
    assert metric[0, 0] == pytest.approx(2.0 / 6.0)
    assert metric[0, 2] == pytest.approx(-1.0 / 6.0)


def test_smoothness_gradient_vanishes_on_straight_line():
    trajectory = TrajectoryModel((-5.0, -5.0), (7.0, 7.0), num_waypoints=20)
    metric = smoothness_metric(20)

    gradient = metric @ trajectory.xi + smoothness_offset(trajectory.start, trajectory.goal, 20)

    np.testing.assert_allclose(gradient, 0.0, atol=1e-12)


def test_single_waypoint_offset_uses_both_boundaries():
    offset = smoothness_offset(np.array([1.0, 2.0]), np.array([3.0, 4.0]), 1)

    np.testing.assert_allclose(offset, [-2.0, -3.0])


def test_straight_line_without_obstacles_is_a_fixed_point():
    trajectory = TrajectoryModel((-5.0, -5.0), (7.0, 7.0), num_waypoints=20)
    before = trajectory.xi.copy()

    ChompOptimizer()(trajectory.start, trajectory.goal, trajectory.xi, np.zeros((0, 3)))

    np.testing.assert_allclose(trajectory.xi, before, atol=1e-12)


def test_iterations_keep_waypoint_count():
    trajectory = TrajectoryModel((-5.0, -5.0), (7.0, 7.0), num_waypoints=20, policy="jumble",
                                 rng=np.random.default_rng(1))
    obstacles = np.array([[3.0, 0.0, 2.0], [0.0, 3.0, 2.0]])
    optimizer = ChompOptimizer()
    buffer = trajectory.xi

    for _ in range(50):
        optimizer(trajectory.start, trajectory.goal, trajectory.xi, obstacles)

    assert trajectory.xi is buffer
    assert trajectory.xi.shape == (40,)
    assert trajectory.waypoints.shape == (20, 2)
    assert np.all(np.isfinite(trajectory.xi))


def test_obstacle_pushes_waypoints_out():
    trajectory = TrajectoryModel((-5.0, -5.0), (7.0, 7.0), num_waypoints=20)
    obstacles = np.array([[1.5, 0.5, 2.0]])
    before = _min_clearance(trajectory.waypoints, obstacles)
    optimizer = ChompOptimizer()

    for _ in range(20):
        optimizer(trajectory.start, trajectory.goal, trajectory.xi, obstacles)

    assert before < 0.0
    assert _min_clearance(trajectory.waypoints, obstacles) > before


def test_rejects_odd_length_trajectory():
    with pytest.raises(ValueError):
        ChompOptimizer()(np.zeros(2), np.ones(2), np.zeros(3), np.zeros((0, 3)))


def test_rejects_non_positive_step_parameters():
    with pytest.raises(ValueError):
        ChompOptimizer(eta=0.0)


def test_create_builtin_optimizer_with_params():
    optimizer = create_optimizer("chomp", {"eta": 50.0})

    assert isinstance(optimizer, ChompOptimizer)
    assert optimizer.eta == 50.0


def test_unknown_optimizer_rejected():
    with pytest.raises(ValueError, match="Unknown optimizer"):
        create_optimizer("simulated-annealing")


def test_register_custom_optimizer():
    def freeze(start, goal, xi, obstacles):
        return None

    register_optimizer("freeze", lambda: freeze)
    try:
        assert "freeze" in get_registered_optimizers()
        assert create_optimizer("freeze") is freeze
        with pytest.raises(ValueError, match="already registered"):
            register_optimizer("freeze", lambda: freeze)
        with pytest.raises(ValueError, match="already registered"):
            register_optimizer("chomp", lambda: freeze)
    finally:
        assert unregister_optimizer("freeze")
    assert "freeze" not in get_registered_optimizers()
