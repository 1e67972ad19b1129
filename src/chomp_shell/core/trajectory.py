"""Trajectory data model and waypoint initialization policies.

The trajectory is stored the way the optimizer consumes it: the ``N``
intermediate configurations are stacked into one flat vector ``xi`` of
length ``N * CONFIG_DIM``. The start and goal configurations are kept apart
from ``xi``; they are fixed for the whole session and never optimized.

Waypoint seeding is pluggable. Built-in policies are ``"linear"`` (evenly
spaced on the segment between start and goal) and ``"jumble"`` (uniform
random scatter). Additional policies can be added with
`register_initialization_policy`.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional, Protocol, Sequence, Tuple, Union

import numpy as np

logger = logging.getLogger(__name__)

CONFIG_DIM = 2

# Range of the uniform scatter used by the "jumble" policy.
JUMBLE_LOW = -5.0
JUMBLE_HIGH = 5.0

PointLike = Union[Sequence[float], np.ndarray]


class WaypointIndexError(IndexError):
    """Raised when a waypoint index lies outside ``[0, N)``."""


# ---------------------------------------------------------------------------
# Initialization policies
# ---------------------------------------------------------------------------

class InitializationPolicy(Protocol):
    """Protocol for waypoint seeding functions.

    Parameters
    ----------
    start, goal : np.ndarray
        Fixed boundary configurations, shape ``(CONFIG_DIM,)``.
    num_waypoints : int
        Number of intermediate configurations to produce.
    rng : np.random.Generator
        Random source for stochastic policies.

    Returns
    -------
    np.ndarray
        Array of shape ``(num_waypoints, CONFIG_DIM)``.
    """

    def __call__(
        self,
        start: np.ndarray,
        goal: np.ndarray,
        num_waypoints: int,
        rng: np.random.Generator,
        **kwargs: Any,
    ) -> np.ndarray:
        ...


def _linear_policy(
    start: np.ndarray,
    goal: np.ndarray,
    num_waypoints: int,
    rng: np.random.Generator,
    **kwargs: Any,
) -> np.ndarray:
    # Open interval: start and goal themselves are not waypoints
    t_values = np.arange(1, num_waypoints + 1, dtype=np.float64) / (num_waypoints + 1)
    return start + np.outer(t_values, goal - start)


def _jumble_policy(
    start: np.ndarray,
    goal: np.ndarray,
    num_waypoints: int,
    rng: np.random.Generator,
    **kwargs: Any,
) -> np.ndarray:
    return rng.uniform(JUMBLE_LOW, JUMBLE_HIGH, size=(num_waypoints, CONFIG_DIM))


_builtin_policies: Dict[str, InitializationPolicy] = {
    "linear": _linear_policy,
    "jumble": _jumble_policy,
}
_policy_registry: Dict[str, InitializationPolicy] = {}


def register_initialization_policy(
    name: str,
    policy: InitializationPolicy,
    *,
    override: bool = False,
) -> None:
    """Register a custom waypoint initialization policy.

    Raises
    ------
    ValueError
        If a policy with the same name exists and ``override`` is False.
    """
    if (name in _policy_registry or name in _builtin_policies) and not override:
        raise ValueError(
            f"Initialization policy '{name}' already registered. "
            "Use override=True to replace it."
        )
    _policy_registry[name] = policy
    logger.debug("Registered initialization policy: %s", name)


def unregister_initialization_policy(name: str) -> bool:
    if name in _policy_registry:
        del _policy_registry[name]
        logger.debug("Unregistered initialization policy: %s", name)
        return True
    return False


def get_initialization_policies() -> List[str]:
    """Names of every available policy, built-in first."""
    return list(_builtin_policies.keys()) + [
        name for name in _policy_registry if name not in _builtin_policies
    ]


def _resolve_policy(name: str) -> InitializationPolicy:
    # Custom registry first so built-ins can be overridden
    if name in _policy_registry:
        return _policy_registry[name]
    if name in _builtin_policies:
        return _builtin_policies[name]
    raise ValueError(
        f"Unsupported initialization policy: '{name}'. "
        f"Available policies: {get_initialization_policies()}"
    )


def initial_waypoints(
    start: np.ndarray,
    goal: np.ndarray,
    num_waypoints: int,
    policy: str = "linear",
    rng: Optional[np.random.Generator] = None,
) -> np.ndarray:
    """Seed ``num_waypoints`` configurations with the named policy."""
    if rng is None:
        rng = np.random.default_rng()
    generator = _resolve_policy(policy)
    seeded = np.asarray(generator(start, goal, num_waypoints, rng), dtype=np.float64)
    if seeded.shape != (num_waypoints, CONFIG_DIM):
        raise ValueError(
            f"Initialization policy '{policy}' returned shape {seeded.shape}, "
            f"expected {(num_waypoints, CONFIG_DIM)}"
        )
    return seeded


# ---------------------------------------------------------------------------
# Trajectory model
# ---------------------------------------------------------------------------

def _as_config(value: PointLike, what: str) -> np.ndarray:
    config = np.array(value, dtype=np.float64).reshape(-1)
    if config.shape != (CONFIG_DIM,):
        raise ValueError(f"{what} must have {CONFIG_DIM} coordinates, got {config.size}")
    config.flags.writeable = False
    return config


class TrajectoryModel:
    """Fixed start/goal plus the mutable stack of waypoints.

    Attributes:
        start: Start configuration (read-only array)
        goal: Goal configuration (read-only array)
        xi: Flat waypoint vector of length ``num_waypoints * CONFIG_DIM``,
            mutated in place by the optimizer
    """

    def __init__(
        self,
        start: PointLike,
        goal: PointLike,
        num_waypoints: int,
        policy: str = "linear",
        rng: Optional[np.random.Generator] = None,
    ) -> None:
        if num_waypoints < 1:
            raise ValueError(f"A trajectory needs at least one waypoint, got {num_waypoints}")
        self._start = _as_config(start, "Start configuration")
        self._goal = _as_config(goal, "Goal configuration")
        self._num_waypoints = int(num_waypoints)
        seeded = initial_waypoints(self._start, self._goal, self._num_waypoints, policy, rng)
        self.xi = seeded.reshape(-1).copy()

    @property
    def start(self) -> np.ndarray:
        return self._start

    @property
    def goal(self) -> np.ndarray:
        return self._goal

    @property
    def num_waypoints(self) -> int:
        return self._num_waypoints

    @property
    def waypoints(self) -> np.ndarray:
        """(N, 2) view sharing memory with ``xi``."""
        return self.xi.reshape(self._num_waypoints, CONFIG_DIM)

    def waypoint_at(self, index: int) -> np.ndarray:
        if not isinstance(index, (int, np.integer)) or not 0 <= index < self._num_waypoints:
            raise WaypointIndexError(
                f"Waypoint index {index} out of range for {self._num_waypoints} waypoint(s)"
            )
        offset = index * CONFIG_DIM
        return self.xi[offset:offset + CONFIG_DIM].copy()

    def bounding_box(self) -> Tuple[np.ndarray, np.ndarray]:
        """Per-axis min and max over start, goal and all waypoints."""
        points = np.vstack([self._start, self._goal, self.waypoints])
        return points.min(axis=0), points.max(axis=0)

    def viewport(self, margin: float = 2.0) -> Tuple[np.ndarray, np.ndarray]:
        low, high = self.bounding_box()
        return low - margin, high + margin

    def is_consistent(self) -> bool:
        """True while ``xi`` still holds exactly N stacked 2-D configurations."""
        return self.xi.ndim == 1 and self.xi.shape[0] == self._num_waypoints * CONFIG_DIM

    def reseed(self, policy: str, rng: Optional[np.random.Generator] = None) -> None:
        """Overwrite the waypoints in place with a fresh seeding."""
        seeded = initial_waypoints(self._start, self._goal, self._num_waypoints, policy, rng)
        self.xi[:] = seeded.reshape(-1)
        logger.debug("Reseeded %d waypoints with policy '%s'", self._num_waypoints, policy)

    def jumble(self, rng: Optional[np.random.Generator] = None) -> None:
        self.reseed("jumble", rng)
