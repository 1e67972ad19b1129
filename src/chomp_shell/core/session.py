"""Session state and the per-frame callbacks driven by the event loop."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Dict, Optional, Tuple

import numpy as np

from .display import VisualizationAdapter
from .interaction import DEFAULT_OBSTACLE_RADIUS, InteractionController, InteractionOutcome, PointerEvent
from .obstacles import ObstacleStore
from .optimizer import Optimizer, OptimizerContractError, create_optimizer
from .run_state import RunState, RunStateMachine
from .trajectory import CONFIG_DIM, TrajectoryModel

if TYPE_CHECKING:
    from ..config import SessionConfig

logger = logging.getLogger(__name__)

# Grabbing an obstacle starts continuous optimization; letting go pauses it.
RUN_STATE_ON_OUTCOME: Dict[InteractionOutcome, RunState] = {
    InteractionOutcome.GRABBED: RunState.RUNNING,
    InteractionOutcome.RELEASED: RunState.PAUSED,
}


class Session:
    """Everything one interactive run owns.

    The event loop calls `on_pointer` for raw input, then `on_idle` and a
    draw routine once per frame. All mutation happens inside these calls.

    Attributes:
        title: Window title
        trajectory: Start, goal and waypoints
        obstacles: Growable obstacle store
        optimizer: Callable performing one optimization iteration
        run_state: Decides whether `on_idle` iterates
        interaction: Pointer gesture state machine
        display: Robots derived from the trajectory for drawing
        view_margin: Padding around the trajectory bounding box
        iterations: Number of optimizer iterations performed so far
    """

    def __init__(
        self,
        trajectory: TrajectoryModel,
        obstacles: ObstacleStore,
        optimizer: Optimizer,
        *,
        title: str = "chomp",
        default_obstacle_radius: float = DEFAULT_OBSTACLE_RADIUS,
        view_margin: float = 2.0,
        rng: Optional[np.random.Generator] = None,
    ) -> None:
        self.title = title
        self.trajectory = trajectory
        self.obstacles = obstacles
        self.optimizer = optimizer
        self.run_state = RunStateMachine(RunState.PAUSED)
        self.interaction = InteractionController(obstacles, default_obstacle_radius)
        self.display = VisualizationAdapter()
        self.view_margin = float(view_margin)
        self.iterations = 0
        self._rng = rng if rng is not None else np.random.default_rng()
        self.display.refresh(self.trajectory)

    @classmethod
    def from_config(cls, config: "SessionConfig", optimizer: Optional[Optimizer] = None) -> "Session":
        rng = np.random.default_rng(config.seed)
        trajectory = TrajectoryModel(
            config.start,
            config.goal,
            config.num_waypoints,
            policy=config.initial_trajectory,
            rng=rng,
        )
        obstacles = ObstacleStore(
            [(obs.center[0], obs.center[1], obs.radius) for obs in config.obstacles]
        )
        if optimizer is None:
            optimizer = create_optimizer(config.optimizer.name, config.optimizer.params)
        logger.info(
            "Session '%s': %d waypoints, %d obstacle(s), optimizer '%s'",
            config.title,
            config.num_waypoints,
            len(obstacles),
            config.optimizer.name,
        )
        return cls(
            trajectory,
            obstacles,
            optimizer,
            title=config.title,
            default_obstacle_radius=config.default_obstacle_radius,
            view_margin=config.view_margin,
            rng=rng,
        )

    # ------------------------------------------------------------------
    # Event loop callbacks
    # ------------------------------------------------------------------
    def on_idle(self) -> bool:
        """Run one optimizer iteration unless paused; True if one ran."""
        if not self.run_state.should_iterate():
            return False
        self.iterate()
        self.run_state.after_iteration()
        return True

    def on_pointer(self, x: float, y: float, flags: int) -> InteractionOutcome:
        outcome = self.interaction.handle(PointerEvent.at(x, y, flags))
        follow_up = RUN_STATE_ON_OUTCOME.get(outcome)
        if follow_up is not None:
            self.run_state.force(follow_up)
        return outcome

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------
    def iterate(self) -> None:
        """Invoke the optimizer once regardless of the run state."""
        expected = self.trajectory.num_waypoints * CONFIG_DIM
        self.optimizer(
            self.trajectory.start,
            self.trajectory.goal,
            self.trajectory.xi,
            self.obstacles.as_array(),
        )
        if not self.trajectory.is_consistent():
            raise OptimizerContractError(
                f"Optimizer changed the trajectory to shape {self.trajectory.xi.shape}, "
                f"expected ({expected},)"
            )
        self.iterations += 1
        self.display.refresh(self.trajectory)

    def step(self) -> None:
        self.run_state.request_step()

    def toggle_run(self) -> None:
        self.run_state.toggle_run()

    def jumble(self) -> None:
        self.trajectory.jumble(self._rng)
        self.display.refresh(self.trajectory)

    @property
    def state(self) -> RunState:
        return self.run_state.state

    def viewport(self) -> Tuple[np.ndarray, np.ndarray]:
        return self.trajectory.viewport(self.view_margin)
