"""Generic State Machine for upload lifecycle transitions.

This module provides a reusable state machine pattern and the transition
map of a single upload request.

Example:
    sm = create_upload_state_machine()

    # Check and perform transitions
    if sm.can_transition(UploadState.AUTHENTICATING):
        sm.transition(UploadState.AUTHENTICATING)
"""

from enum import Enum
from typing import Generic, TypeVar

from tiktok_relay.core.exceptions import RelayError
from tiktok_relay.models.upload import UploadState

T = TypeVar("T", bound=str | Enum)

# Type alias for transition maps
TransitionMap = dict[T, list[T]]


class InvalidTransitionError(RelayError):
    """Raised when an invalid state transition is attempted."""

    def __init__(self, current: T, target: T, allowed: list[T] | None = None):
        self.current = current
        self.target = target
        self.allowed = allowed or []
        self.error_code = "INVALID_TRANSITION"
        allowed_str = ", ".join(str(s) for s in self.allowed) if self.allowed else "none"
        super().__init__(
            message=f"Invalid transition from '{current}' to '{target}'. "
            f"Allowed transitions: {allowed_str}",
            context={
                "current": str(current),
                "target": str(target),
                "allowed": [str(s) for s in self.allowed],
            },
        )


class StateMachine(Generic[T]):
    """Generic state machine for status transitions.

    Provides a type-safe way to manage status transitions with
    explicit allowed transitions defined upfront.

    Attributes:
        current: Current state
        transitions: Map of allowed transitions from each state

    Example:
        sm = StateMachine(
            initial="start",
            transitions={
                "start": ["middle", "end"],
                "middle": ["end"],
                "end": [],
            }
        )

        sm.transition("middle")  # OK
        sm.transition("start")   # Raises InvalidTransitionError
    """

    def __init__(self, initial: T, transitions: TransitionMap[T]):
        """Initialize state machine.

        Args:
            initial: Initial state
            transitions: Map of state -> list of allowed target states
        """
        self._current = initial
        self._transitions = transitions

    @property
    def current(self) -> T:
        """Get current state."""
        return self._current

    @property
    def allowed_transitions(self) -> list[T]:
        """Get list of states we can transition to from current state."""
        return self._transitions.get(self._current, [])

    @property
    def is_terminal(self) -> bool:
        """Whether no further transition is possible."""
        return not self.allowed_transitions

    def can_transition(self, target: T) -> bool:
        """Check if transition to target state is allowed.

        Args:
            target: Target state to check

        Returns:
            True if transition is allowed, False otherwise
        """
        return target in self.allowed_transitions

    def transition(self, target: T) -> None:
        """Perform transition to target state.

        Args:
            target: Target state

        Raises:
            InvalidTransitionError: If transition is not allowed
        """
        if not self.can_transition(target):
            raise InvalidTransitionError(
                current=self._current,
                target=target,
                allowed=self.allowed_transitions,
            )
        self._current = target

    def __str__(self) -> str:
        return f"StateMachine(current={self._current})"

    def __repr__(self) -> str:
        return f"StateMachine(current={self._current!r}, allowed={self.allowed_transitions!r})"


# ============================================
# Upload Transition Map
# ============================================


def get_upload_transitions() -> TransitionMap[UploadState]:
    """Get transition map for UploadState.

    Every non-terminal state may fail. TRANSFERRING goes straight to DONE
    in single-shot mode, where the init call already published.
    """
    return {
        UploadState.IDLE: [UploadState.AUTHENTICATING, UploadState.FAILED],
        UploadState.AUTHENTICATING: [UploadState.FETCHING, UploadState.FAILED],
        UploadState.FETCHING: [UploadState.SESSION_INIT, UploadState.FAILED],
        UploadState.SESSION_INIT: [UploadState.TRANSFERRING, UploadState.FAILED],
        UploadState.TRANSFERRING: [
            UploadState.PUBLISHING,
            UploadState.DONE,
            UploadState.FAILED,
        ],
        UploadState.PUBLISHING: [UploadState.DONE, UploadState.FAILED],
        UploadState.DONE: [],  # Terminal state
        UploadState.FAILED: [],  # Terminal state, no retry
    }


def create_upload_state_machine(
    initial_state: str | None = None,
) -> StateMachine[UploadState]:
    """Create a state machine for one upload request.

    Args:
        initial_state: Initial state (default: IDLE)

    Returns:
        Configured StateMachine for an upload
    """
    initial = UploadState(initial_state) if initial_state else UploadState.IDLE
    return StateMachine(initial, get_upload_transitions())


__all__ = [
    "InvalidTransitionError",
    "StateMachine",
    "TransitionMap",
    "create_upload_state_machine",
    "get_upload_transitions",
]
