"""Growable store of circular obstacles.

Obstacles are kept as rows ``(x, y, R)`` of a single float64 array so the
optimizer can consume the whole collection without copying. The store only
grows; an obstacle's identity is its row index, which stays valid for the
lifetime of the session.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterator, Optional, Sequence, Tuple, Union

import numpy as np

logger = logging.getLogger(__name__)

OBSTACLE_DIM = 3  # x, y, R

PointLike = Union[Sequence[float], np.ndarray]


class ObstacleIndexError(IndexError):
    """Raised when an obstacle index lies outside ``[0, count)``."""


@dataclass(frozen=True)
class Obstacle:
    """Snapshot of one obstacle."""

    center: Tuple[float, float]
    radius: float

    def contains(self, point: PointLike) -> bool:
        """Inclusive circle test; a point on the boundary is inside."""
        px, py = float(point[0]), float(point[1])
        return float(np.hypot(self.center[0] - px, self.center[1] - py)) <= self.radius


def _as_point(value: PointLike, what: str) -> np.ndarray:
    point = np.asarray(value, dtype=np.float64).reshape(-1)
    if point.shape != (2,):
        raise ValueError(f"{what} must have 2 coordinates, got {point.size}")
    return point


class ObstacleStore:
    """Append-only, index-stable collection of circular obstacles."""

    def __init__(self, obstacles: Optional[Sequence[Tuple[float, float, float]]] = None) -> None:
        self._data = np.zeros((0, OBSTACLE_DIM), dtype=np.float64)
        for x, y, radius in obstacles or ():
            self.add((x, y), radius)

    @property
    def count(self) -> int:
        return int(self._data.shape[0])

    def __len__(self) -> int:
        return self.count

    def __iter__(self) -> Iterator[Obstacle]:
        for index in range(self.count):
            yield self.get(index)

    def add(self, center: PointLike, radius: float) -> int:
        """Append an obstacle and return its index.

        Every call reallocates the backing array, so callers that control the
        timing should batch insertions. Existing indices are never disturbed.
        """
        point = _as_point(center, "Obstacle center")
        radius = float(radius)
        if not radius > 0.0:
            raise ValueError(f"Obstacle radius must be positive, got {radius}")
        row = np.array([[point[0], point[1], radius]], dtype=np.float64)
        self._data = np.vstack([self._data, row])
        index = self.count - 1
        logger.debug("Added obstacle %d at (%.3f, %.3f) R=%.3f", index, point[0], point[1], radius)
        return index

    def get(self, index: int) -> Obstacle:
        self._check_index(index)
        x, y, radius = self._data[index]
        return Obstacle(center=(float(x), float(y)), radius=float(radius))

    def center(self, index: int) -> np.ndarray:
        self._check_index(index)
        return self._data[index, :2].copy()

    def set_center(self, index: int, value: PointLike) -> None:
        self._check_index(index)
        self._data[index, :2] = _as_point(value, "Obstacle center")

    def hit_test(self, point: PointLike) -> Optional[int]:
        """Return the lowest index whose circle contains ``point``, or None."""
        query = _as_point(point, "Pointer position")
        for index, obstacle in enumerate(self):
            if obstacle.contains(query):
                return index
        return None

    def as_array(self) -> np.ndarray:
        """Read-only (M, 3) view of the obstacle rows."""
        view = self._data.view()
        view.flags.writeable = False
        return view

    def _check_index(self, index: int) -> None:
        if not isinstance(index, (int, np.integer)) or not 0 <= index < self.count:
            raise ObstacleIndexError(
                f"Obstacle index {index} out of range for {self.count} obstacle(s)"
            )
