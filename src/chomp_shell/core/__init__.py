"""Interactive state machine: obstacles, trajectory, gestures and run state."""

from .display import DisplayEntity, VisualizationAdapter
from .drawing import Gfx, draw_session
from .interaction import Grab, InteractionController, InteractionOutcome, PointerEvent, PointerFlags
from .obstacles import Obstacle, ObstacleIndexError, ObstacleStore
from .optimizer import ChompOptimizer, Optimizer, OptimizerContractError
from .run_state import RunState, RunStateMachine
from .session import RUN_STATE_ON_OUTCOME, Session
from .trajectory import CONFIG_DIM, TrajectoryModel, WaypointIndexError

__all__ = [
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
    "RUN_STATE_ON_OUTCOME",
    "RunState",
    "RunStateMachine",
    "Session",
    "TrajectoryModel",
    "VisualizationAdapter",
    "WaypointIndexError",
    "draw_session",
]
