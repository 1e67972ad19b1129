"""
Interactive CHOMP trials for a point vehicle moving in the plane.

The package keeps the live state of a trajectory and a set of circular
obstacles, lets the user drag or add obstacles with the mouse, and runs one
optimizer iteration per frame while an obstacle is held.
"""

from .config import (
    ObstacleConfig,
    OptimizerConfig,
    SessionConfig,
    load_session_config,
    reference_session_config,
)
from .core import (
    CONFIG_DIM,
    ChompOptimizer,
    DisplayEntity,
    Gfx,
    Grab,
    InteractionController,
    InteractionOutcome,
    Obstacle,
    ObstacleIndexError,
    ObstacleStore,
    Optimizer,
    OptimizerContractError,
    PointerEvent,
    PointerFlags,
    RunState,
    RunStateMachine,
    Session,
    TrajectoryModel,
    VisualizationAdapter,
    WaypointIndexError,
    draw_session,
)
from .settings import get_settings, reset_settings_cache

__all__ = [
    "ObstacleConfig",
    "OptimizerConfig",
    "SessionConfig",
    "load_session_config",
    "reference_session_config",
    "CONFIG_DIM",
    "ChompOptimizer",
    "DisplayEntity",
    "Gfx",
    "Grab",
    "InteractionController",
    "InteractionOutcome",
    "Obstacle",
    "ObstacleIndexError",
    "ObstacleStore",
    "Optimizer",
    "OptimizerContractError",
    "PointerEvent",
    "PointerFlags",
    "RunState",
    "RunStateMachine",
    "Session",
    "TrajectoryModel",
    "VisualizationAdapter",
    "WaypointIndexError",
    "draw_session",
    "get_settings",
    "reset_settings_cache",
]
