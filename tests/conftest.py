"""Pytest configuration and shared fixtures."""

from typing import List, Tuple

import numpy as np
import pytest

from chomp_shell import ObstacleStore, Session, TrajectoryModel, reference_session_config
from chomp_shell.settings import reset_settings_cache


class RecordingOptimizer:
    """Optimizer double that records its inputs and nudges every waypoint."""

    def __init__(self, shift: float = 0.1):
        self.shift = shift
        self.calls: List[Tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]] = []

    def __call__(self, start, goal, xi, obstacles):
        self.calls.append((start.copy(), goal.copy(), xi.copy(), np.array(obstacles)))
        xi += self.shift


class RecordingGfx:
    """Gfx double that stores every primitive call in order."""

    def __init__(self):
        self.calls: List[Tuple[str, tuple]] = []

    def _record(self, name, *args):
        self.calls.append((name, args))

    def set_pen(self, width, red, green, blue, alpha):
        self._record("set_pen", width, red, green, blue, alpha)

    def fill_arc(self, cx, cy, radius, start, end):
        self._record("fill_arc", cx, cy, radius, start, end)

    def draw_arc(self, cx, cy, radius, start, end):
        self._record("draw_arc", cx, cy, radius, start, end)

    def draw_line(self, x0, y0, x1, y1):
        self._record("draw_line", x0, y0, x1, y1)

    def draw_point(self, x, y):
        self._record("draw_point", x, y)

    def set_view(self, x0, y0, x1, y1):
        self._record("set_view", x0, y0, x1, y1)

    def named(self, name):
        return [args for call, args in self.calls if call == name]


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch):
    """Keep environment settings from leaking between tests."""
    for key in ("CHOMP_SHELL_FRAME_INTERVAL_MS", "CHOMP_SHELL_OPTIMIZER", "CHOMP_SHELL_SESSION_FILE"):
        monkeypatch.delenv(key, raising=False)
    reset_settings_cache()
    yield
    reset_settings_cache()


@pytest.fixture
def recording_optimizer():
    return RecordingOptimizer()


@pytest.fixture
def recording_gfx():
    return RecordingGfx()


@pytest.fixture
def reference_session():
    """The reference session with the built-in CHOMP optimizer."""
    return Session.from_config(reference_session_config())


@pytest.fixture
def fake_session(recording_optimizer):
    """Reference geometry driven by the recording optimizer."""
    trajectory = TrajectoryModel((-5.0, -5.0), (7.0, 7.0), num_waypoints=20)
    obstacles = ObstacleStore([(3.0, 0.0, 2.0), (0.0, 3.0, 2.0)])
    return Session(trajectory, obstacles, recording_optimizer, rng=np.random.default_rng(0))
