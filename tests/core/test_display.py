"""Tests for the visualization adapter."""

import numpy as np
import pytest

from chomp_shell.core.display import ROBOT_RADIUS, DisplayEntity, VisualizationAdapter, entity_at
from chomp_shell.core.trajectory import TrajectoryModel


def test_refresh_builds_one_entity_per_configuration():
    trajectory = TrajectoryModel((-5.0, -5.0), (7.0, 7.0), num_waypoints=5)
    adapter = VisualizationAdapter()

    adapter.refresh(trajectory)

    entities = adapter.entities()
    assert len(entities) == 7
    assert entities[0] == DisplayEntity(position=(-5.0, -5.0), radius=ROBOT_RADIUS)
    assert entities[-1] == DisplayEntity(position=(7.0, 7.0), radius=ROBOT_RADIUS)
    np.testing.assert_allclose([e.position for e in entities[1:-1]], trajectory.waypoints)


def test_refresh_does_not_mutate_model():
    trajectory = TrajectoryModel((-5.0, -5.0), (7.0, 7.0), num_waypoints=5)
    before = trajectory.xi.copy()

    VisualizationAdapter().refresh(trajectory)

    np.testing.assert_array_equal(trajectory.xi, before)


def test_refresh_replaces_previous_frame():
    adapter = VisualizationAdapter()
    adapter.refresh(TrajectoryModel((0.0, 0.0), (1.0, 1.0), num_waypoints=8))
    adapter.refresh(TrajectoryModel((0.0, 0.0), (1.0, 1.0), num_waypoints=2))

    assert len(adapter.waypoint_entities) == 2


def test_no_entities_before_first_refresh():
    assert VisualizationAdapter().entities() == []


def test_wrong_dimension_terminates_process():
    with pytest.raises(SystemExit) as excinfo:
        entity_at(np.zeros(3))

    assert "3 DOF" in str(excinfo.value.code)


def test_corrupt_trajectory_terminates_process():
    trajectory = TrajectoryModel((0.0, 0.0), (1.0, 1.0), num_waypoints=2)
    trajectory.xi = np.zeros(5)

    with pytest.raises(SystemExit):
        VisualizationAdapter().refresh(trajectory)
