"""Generation state tracking for a single avatar video request.

Each call to the orchestrator owns one tracker. The tracker validates state
transitions and notifies registered callbacks, which lets callers observe
progress without sharing mutable state across requests.
"""

import logging
from enum import Enum
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class GenerationState(Enum):
    """Generation state enumeration."""

    SELECTING = "selecting"  # Choosing a provider
    SUBMITTED = "submitted"  # Job accepted by the vendor
    POLLING = "polling"  # Waiting for a terminal vendor status
    COMPLETED = "completed"
    FAILED = "failed"
    TIMED_OUT = "timed_out"

    @property
    def is_terminal(self) -> bool:
        return self in (GenerationState.COMPLETED, GenerationState.FAILED, GenerationState.TIMED_OUT)


StateCallback = Callable[[GenerationState, GenerationState], None]


class GenerationStateTracker:
    """Per-request generation state machine with callbacks.

    Example:
        ```python
        tracker = GenerationStateTracker(job_label="user-42")
        tracker.add_callback(lambda old, new: print(f"{old.value} -> {new.value}"))
        tracker.set_state(GenerationState.SUBMITTED)
        ```
    """

    # Valid state transitions
    VALID_TRANSITIONS = {
        GenerationState.SELECTING: [GenerationState.SUBMITTED, GenerationState.FAILED],
        GenerationState.SUBMITTED: [GenerationState.POLLING, GenerationState.FAILED],
        GenerationState.POLLING: [
            GenerationState.COMPLETED,
            GenerationState.FAILED,
            GenerationState.TIMED_OUT,
        ],
        GenerationState.COMPLETED: [],
        GenerationState.FAILED: [],
        GenerationState.TIMED_OUT: [],
    }

    def __init__(
        self,
        job_label: str = "",
        callbacks: Optional[list[StateCallback]] = None,
    ) -> None:
        """Initialize tracker in the SELECTING state.

        Args:
            job_label: Label used in log lines (e.g. the user id).
            callbacks: Optional callbacks invoked as ``callback(old, new)``.
        """
        self.job_label = job_label
        self._state = GenerationState.SELECTING
        self._callbacks: list[StateCallback] = list(callbacks or [])
        self.history: list[GenerationState] = [self._state]

    @property
    def state(self) -> GenerationState:
        return self._state

    def set_state(self, new_state: GenerationState) -> None:
        """Transition to a new state.

        Args:
            new_state: State to transition to.

        Raises:
            ValueError: If the transition is not allowed (terminal states
                are never re-opened).
        """
        old_state = self._state
        if new_state not in self.VALID_TRANSITIONS[old_state]:
            error_msg = f"Invalid state transition: {old_state.value} -> {new_state.value}"
            logger.error(error_msg)
            raise ValueError(error_msg)

        self._state = new_state
        self.history.append(new_state)
        logger.info(f"[{self.job_label}] Generation state: {old_state.value} -> {new_state.value}")
        self._notify_callbacks(old_state, new_state)

    def fail(self, timed_out: bool = False) -> None:
        """Move to FAILED (or TIMED_OUT) unless already terminal."""
        if self._state.is_terminal:
            return
        self.set_state(GenerationState.TIMED_OUT if timed_out else GenerationState.FAILED)

    def add_callback(self, callback: StateCallback) -> None:
        self._callbacks.append(callback)

    def _notify_callbacks(self, old_state: GenerationState, new_state: GenerationState) -> None:
        for callback in list(self._callbacks):
            try:
                callback(old_state, new_state)
            except Exception as e:
                logger.error(f"Error in state change callback: {e}")
