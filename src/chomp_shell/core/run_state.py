"""Run-state machine deciding whether the optimizer runs on a frame."""

from __future__ import annotations

import enum
import logging

logger = logging.getLogger(__name__)


class RunState(enum.Enum):
    PAUSED = "paused"
    STEP = "step"
    RUNNING = "running"


class RunStateMachine:
    """Holds the current `RunState`.

    ``STEP`` grants exactly one optimizer iteration: `after_iteration`
    drops it back to ``PAUSED``. ``RUNNING`` iterates on every frame until
    something forces another state.
    """

    def __init__(self, initial: RunState = RunState.PAUSED) -> None:
        self._state = initial

    @property
    def state(self) -> RunState:
        return self._state

    def force(self, state: RunState) -> None:
        if state is self._state:
            return
        logger.debug("Run state %s -> %s", self._state.value, state.value)
        self._state = state

    def request_step(self) -> None:
        self.force(RunState.STEP)

    def toggle_run(self) -> None:
        if self._state is RunState.RUNNING:
            self.force(RunState.PAUSED)
        else:
            self.force(RunState.RUNNING)

    def should_iterate(self) -> bool:
        return self._state is not RunState.PAUSED

    def after_iteration(self) -> None:
        if self._state is RunState.STEP:
            self.force(RunState.PAUSED)
