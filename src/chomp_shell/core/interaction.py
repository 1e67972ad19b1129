"""Pointer gesture state machine for grabbing, dragging and creating obstacles."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from .obstacles import ObstacleStore

logger = logging.getLogger(__name__)

DEFAULT_OBSTACLE_RADIUS = 2.0


class PointerFlags(enum.IntFlag):
    """Phase and button bits delivered with every pointer event."""

    NONE = 0
    PRESS = 1 << 0
    DRAG = 1 << 1
    RELEASE = 1 << 2
    PRIMARY = 1 << 3
    SECONDARY = 1 << 4


class InteractionOutcome(enum.Enum):
    """What a pointer event did to the gesture state."""

    NONE = "none"
    GRABBED = "grabbed"
    DRAGGED = "dragged"
    RELEASED = "released"
    CREATED = "created"


@dataclass(frozen=True)
class PointerEvent:
    position: Tuple[float, float]
    flags: PointerFlags

    @classmethod
    def at(cls, x: float, y: float, flags: int) -> "PointerEvent":
        return cls(position=(float(x), float(y)), flags=PointerFlags(flags))


@dataclass(frozen=True)
class Grab:
    """Obstacle being dragged and the center-minus-pointer offset at grab time."""

    index: int
    offset: Tuple[float, float]


class InteractionController:
    """Turns pointer events into obstacle store mutations.

    States are ``Idle`` (``grab is None``) and ``Grabbed(index, offset)``.
    The controller leaves the run state alone; callers react to the returned
    `InteractionOutcome`.
    """

    def __init__(
        self,
        obstacles: ObstacleStore,
        default_radius: float = DEFAULT_OBSTACLE_RADIUS,
    ) -> None:
        if default_radius <= 0:
            raise ValueError(f"Default obstacle radius must be positive, got {default_radius}")
        self._obstacles = obstacles
        self._default_radius = float(default_radius)
        self._grab: Optional[Grab] = None

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------
    @property
    def grab(self) -> Optional[Grab]:
        return self._grab

    @property
    def is_idle(self) -> bool:
        return self._grab is None

    @property
    def default_radius(self) -> float:
        return self._default_radius

    # ------------------------------------------------------------------
    def handle(self, event: PointerEvent) -> InteractionOutcome:
        flags = event.flags
        pointer = np.asarray(event.position, dtype=np.float64)

        if self._grab is None:
            if flags & PointerFlags.RELEASE and flags & PointerFlags.SECONDARY:
                index = self._obstacles.add(pointer, self._default_radius)
                logger.debug("Created obstacle %d at (%.3f, %.3f)", index, pointer[0], pointer[1])
                return InteractionOutcome.CREATED
            if flags & PointerFlags.PRESS:
                return self._try_grab(pointer)
            return InteractionOutcome.NONE

        if flags & PointerFlags.DRAG:
            offset = np.asarray(self._grab.offset)
            self._obstacles.set_center(self._grab.index, pointer + offset)
            return InteractionOutcome.DRAGGED
        if flags & PointerFlags.RELEASE:
            logger.debug("Released obstacle %d", self._grab.index)
            self._grab = None
            return InteractionOutcome.RELEASED
        return InteractionOutcome.NONE

    def _try_grab(self, pointer: np.ndarray) -> InteractionOutcome:
        index = self._obstacles.hit_test(pointer)
        if index is None:
            return InteractionOutcome.NONE
        offset = self._obstacles.center(index) - pointer
        self._grab = Grab(index=index, offset=(float(offset[0]), float(offset[1])))
        logger.debug("Grabbed obstacle %d with offset (%.3f, %.3f)", index, offset[0], offset[1])
        return InteractionOutcome.GRABBED
