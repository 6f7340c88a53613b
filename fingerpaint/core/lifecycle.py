"""
Start/stop control of the hand tracker.
"""

import logging
from enum import Enum


class LifecycleState(Enum):
    STOPPED = "stopped"
    LOADING = "loading"
    STARTED = "started"


class LifecycleController:
    """Starts and stops the tracker and reports which phase it is in.

    The tracker is expected to provide start_tracking(), stop_tracking(),
    is_running() and is_ready().
    """

    def __init__(self, tracker):
        self.tracker = tracker
        self._state = LifecycleState.STOPPED
        self._logger = logging.getLogger("Lifecycle")

    @property
    def state(self) -> LifecycleState:
        return self._state

    def start(self) -> None:
        """Begin tracking; no-op unless stopped."""
        if self._state is not LifecycleState.STOPPED:
            return
        self.tracker.start_tracking()
        self._set_state(LifecycleState.LOADING)

    def stop(self) -> None:
        """End tracking from any state."""
        if self._state is LifecycleState.STOPPED:
            return
        self.tracker.stop_tracking()
        self._set_state(LifecycleState.STOPPED)

    def toggle(self) -> None:
        if self._state is LifecycleState.STOPPED:
            self.start()
        else:
            self.stop()

    def poll(self) -> LifecycleState:
        """Advance LOADING -> STARTED, or fall back to STOPPED if the tracker died."""
        if self._state is LifecycleState.STOPPED:
            return self._state

        if not self.tracker.is_running():
            self._logger.warning("Hand tracker stopped unexpectedly")
            self.tracker.stop_tracking()
            self._set_state(LifecycleState.STOPPED)
        elif self._state is LifecycleState.LOADING and self.tracker.is_ready():
            self._set_state(LifecycleState.STARTED)
        return self._state

    def _set_state(self, state: LifecycleState) -> None:
        if state is not self._state:
            self._logger.info(f"{self._state.value} -> {state.value}")
            self._state = state
