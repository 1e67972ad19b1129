"""Optimizer contract, registry and the built-in CHOMP iteration.

An optimizer is any callable taking ``(start, goal, xi, obstacles)`` that
performs one bundled optimization iteration, modifying ``xi`` in place and
returning nothing. ``obstacles`` is the read-only ``(M, 3)`` array of
``(x, y, R)`` rows held by the obstacle store.

External packages can contribute optimizers through the
``chomp_shell.optimizers`` entry point group, or at runtime via
`register_optimizer`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Protocol, Tuple

import numpy as np

from .trajectory import CONFIG_DIM

logger = logging.getLogger(__name__)

ENTRY_POINT_GROUP = "chomp_shell.optimizers"


class OptimizerContractError(RuntimeError):
    """Raised when an optimizer leaves the trajectory in an invalid shape."""


class Optimizer(Protocol):
    """Protocol for one optimization iteration.

    Parameters
    ----------
    start, goal : np.ndarray
        Fixed boundary configurations, shape ``(2,)``.
    xi : np.ndarray
        Flat waypoint vector, modified in place.
    obstacles : np.ndarray
        Read-only array of shape ``(M, 3)``.
    """

    def __call__(
        self,
        start: np.ndarray,
        goal: np.ndarray,
        xi: np.ndarray,
        obstacles: np.ndarray,
    ) -> None:
        ...


OptimizerFactory = Callable[..., Optimizer]


# ---------------------------------------------------------------------------
# CHOMP
# ---------------------------------------------------------------------------

def smoothness_metric(num_waypoints: int, dt: float = 1.0) -> np.ndarray:
    """Finite-difference metric ``A = K^T K / (dt^2 (N + 1))``.

    ``K`` differentiates the stacked waypoints once; the resulting ``A`` is
    block tridiagonal with ``2I`` on the diagonal and ``-I`` beside it.
    """
    band = (
        2.0 * np.eye(num_waypoints)
        - np.eye(num_waypoints, k=1)
        - np.eye(num_waypoints, k=-1)
    )
    return np.kron(band, np.eye(CONFIG_DIM)) / (dt * dt * (num_waypoints + 1))


def smoothness_offset(start: np.ndarray, goal: np.ndarray, num_waypoints: int, dt: float = 1.0) -> np.ndarray:
    """Boundary term ``b`` so that ``A xi + b`` is the smoothness gradient."""
    offset = np.zeros(num_waypoints * CONFIG_DIM, dtype=np.float64)
    offset[:CONFIG_DIM] += start
    offset[-CONFIG_DIM:] += goal
    return offset / (-dt * dt * (num_waypoints + 1))


@dataclass
class ChompOptimizer:
    """One covariant gradient step of CHOMP for a point in the plane.

    Attributes:
        dt: Time step between consecutive waypoints
        eta: Step size regularizer (larger values take smaller steps)
        lam: Weight of the smoothness gradient relative to obstacles
        obstacle_gain: Scale of the cubic obstacle cost
        min_speed: Waypoints moving slower than this skip the obstacle term
    """

    dt: float = 1.0
    eta: float = 100.0
    lam: float = 1.0
    obstacle_gain: float = 10.0
    min_speed: float = 1.0e-3

    def __post_init__(self) -> None:
        if self.dt <= 0 or self.eta <= 0:
            raise ValueError("dt and eta must be positive")
        self._metric_cache: Dict[int, Tuple[np.ndarray, np.ndarray]] = {}

    def _metric(self, num_waypoints: int) -> Tuple[np.ndarray, np.ndarray]:
        cached = self._metric_cache.get(num_waypoints)
        if cached is None:
            metric = smoothness_metric(num_waypoints, self.dt)
            cached = (metric, np.linalg.inv(metric))
            self._metric_cache[num_waypoints] = cached
        return cached

    def obstacle_gradient(
        self,
        start: np.ndarray,
        waypoints: np.ndarray,
        accelerations: np.ndarray,
        obstacles: np.ndarray,
    ) -> np.ndarray:
        """Functional gradient of the obstacle cost, one row per waypoint.

        Velocities use a first-order backward difference, which drifts
        waypoints slightly toward the goal.
        """
        gradient = np.zeros_like(waypoints)
        if obstacles.shape[0] == 0:
            return gradient

        previous = np.vstack([start[None, :], waypoints[:-1]])
        velocities = waypoints - previous
        identity = np.eye(CONFIG_DIM)

        for index, (point, velocity) in enumerate(zip(waypoints, velocities)):
            speed = float(np.linalg.norm(velocity))
            if speed < self.min_speed:
                continue
            direction = velocity / speed
            projection = identity - np.outer(direction, direction)
            curvature = projection @ accelerations[index] / speed ** 2

            for cx, cy, radius in obstacles:
                delta = point - (cx, cy)
                dist = float(np.linalg.norm(delta))
                if dist >= radius or dist < 1e-9:
                    continue
                depth = 1.0 - dist / radius
                cost = self.obstacle_gain * radius * depth ** 3 / 3.0
                pull = -self.obstacle_gain * depth ** 2 / dist * delta
                gradient[index] += speed * (projection @ pull - cost * curvature)
        return gradient

    def __call__(
        self,
        start: np.ndarray,
        goal: np.ndarray,
        xi: np.ndarray,
        obstacles: np.ndarray,
    ) -> None:
        if xi.ndim != 1 or xi.shape[0] % CONFIG_DIM != 0 or xi.shape[0] == 0:
            raise ValueError(f"xi must stack {CONFIG_DIM}-D waypoints, got shape {xi.shape}")
        obstacles = np.asarray(obstacles, dtype=np.float64).reshape(-1, 3)
        num_waypoints = xi.shape[0] // CONFIG_DIM
        metric, metric_inv = self._metric(num_waypoints)

        nabla_smooth = metric @ xi + smoothness_offset(start, goal, num_waypoints, self.dt)
        waypoints = xi.reshape(num_waypoints, CONFIG_DIM)
        # In this formulation the smoothness gradient doubles as acceleration
        accelerations = nabla_smooth.reshape(num_waypoints, CONFIG_DIM)
        nabla_obs = self.obstacle_gradient(start, waypoints, accelerations, obstacles)

        dxi = metric_inv @ (nabla_obs.reshape(-1) + self.lam * nabla_smooth)
        xi -= dxi / self.eta


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

_builtin_optimizers: Dict[str, OptimizerFactory] = {
    "chomp": ChompOptimizer,
}
_optimizer_registry: Dict[str, OptimizerFactory] = {}


def register_optimizer(
    name: str,
    factory: OptimizerFactory,
    *,
    override: bool = False,
) -> None:
    """
    Register an optimizer factory under ``name``.

    Parameters
    ----------
    name : str
        Optimizer name (used in session YAML as ``optimizer.name``).
    factory : OptimizerFactory
        Callable accepting keyword parameters and returning an `Optimizer`.
    override : bool
        Allow replacing an existing registration. Default False.

    Raises
    ------
    ValueError
        If the name is taken and ``override`` is False.
    """
    if (name in _optimizer_registry or name in _builtin_optimizers) and not override:
        raise ValueError(
            f"Optimizer '{name}' already registered. Use override=True to replace it."
        )
    _optimizer_registry[name] = factory
    logger.debug("Registered optimizer: %s", name)


def unregister_optimizer(name: str) -> bool:
    if name in _optimizer_registry:
        del _optimizer_registry[name]
        logger.debug("Unregistered optimizer: %s", name)
        return True
    return False


def get_registered_optimizers() -> List[str]:
    return list(_builtin_optimizers.keys()) + [
        name for name in _optimizer_registry if name not in _builtin_optimizers
    ]


def create_optimizer(name: str = "chomp", params: Optional[Dict[str, Any]] = None) -> Optimizer:
    """Instantiate the named optimizer with keyword ``params``."""
    factory = _optimizer_registry.get(name) or _builtin_optimizers.get(name)
    if factory is None:
        raise ValueError(
            f"Unknown optimizer: '{name}'. Available optimizers: {get_registered_optimizers()}"
        )
    return factory(**(params or {}))


def discover_optimizer_plugins() -> None:
    """
    Load optimizer plugins advertised via entry points.

    Plugins register themselves in their pyproject.toml:
        [project.entry-points."chomp_shell.optimizers"]
        plugin_name = "package.module:register_function"

    The entry point should point to a function that calls
    `register_optimizer` when invoked.
    """
    from importlib.metadata import entry_points

    for ep in entry_points(group=ENTRY_POINT_GROUP):
        try:
            register_func = ep.load()
            register_func()
            logger.debug("Loaded optimizer plugin: %s", ep.name)
        except Exception as e:
            logger.warning("Failed to load optimizer plugin '%s': %s", ep.name, e)
