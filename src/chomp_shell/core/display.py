"""Per-frame display entities derived from the trajectory model."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy as np

from .trajectory import CONFIG_DIM, TrajectoryModel

logger = logging.getLogger(__name__)

ROBOT_RADIUS = 0.5


@dataclass(frozen=True)
class DisplayEntity:
    """A robot disk drawn at one configuration of the trajectory."""

    position: Tuple[float, float]
    radius: float = ROBOT_RADIUS


def entity_at(position: np.ndarray) -> DisplayEntity:
    """Build a display entity; exits the process on a mis-sized configuration."""
    position = np.asarray(position, dtype=np.float64).reshape(-1)
    if position.size != CONFIG_DIM:
        message = (
            f"entity_at(): position has {position.size} DOF (but needs {CONFIG_DIM})"
        )
        logger.critical(message)
        raise SystemExit(message)
    return DisplayEntity(position=(float(position[0]), float(position[1])))


class VisualizationAdapter:
    """Rebuilds start, goal and waypoint robots from the trajectory model.

    The adapter only keeps the entities of the latest refresh and never
    writes back into the model.
    """

    def __init__(self) -> None:
        self.start_entity: Optional[DisplayEntity] = None
        self.goal_entity: Optional[DisplayEntity] = None
        self.waypoint_entities: List[DisplayEntity] = []

    def refresh(self, trajectory: TrajectoryModel) -> None:
        self.start_entity = entity_at(trajectory.start)
        self.goal_entity = entity_at(trajectory.goal)
        self.waypoint_entities = [
            entity_at(trajectory.xi[offset:offset + CONFIG_DIM])
            for offset in range(0, trajectory.xi.shape[0], CONFIG_DIM)
        ]

    def entities(self) -> List[DisplayEntity]:
        """All entities in draw order: start, waypoints, goal."""
        if self.start_entity is None or self.goal_entity is None:
            return []
        return [self.start_entity, *self.waypoint_entities, self.goal_entity]
