"""Optimistic visual state of an in-flight user action.

Each presenter owns one machine. A waypoint moves to SAVING or DELETING
before its mutation is sent, back to IDLE when fresh data arrives, and
to ABORTING when the mutation is rejected. ABORTING never resolves on
its own: the presenter has to dismiss it.
"""

from enum import Enum


class VisualState(Enum):
    """Visual state of a waypoint or of the create form."""

    IDLE = "idle"
    SAVING = "saving"
    DELETING = "deleting"
    ABORTING = "aborting"


class InvalidVisualTransitionError(Exception):
    """Raised when an invalid visual state transition is attempted."""

    def __init__(self, current: VisualState, target: VisualState) -> None:
        self.current = current
        self.target = target
        super().__init__(f"Invalid transition from {current.value} to {target.value}")


WAYPOINT_TRANSITIONS: dict[VisualState, set[VisualState]] = {
    VisualState.IDLE: {VisualState.SAVING, VisualState.DELETING},
    VisualState.SAVING: {VisualState.IDLE, VisualState.ABORTING},
    VisualState.DELETING: {VisualState.IDLE, VisualState.ABORTING},
    VisualState.ABORTING: {VisualState.IDLE},
}

# The create form cannot be deleted, only saved.
CREATION_TRANSITIONS: dict[VisualState, set[VisualState]] = {
    VisualState.IDLE: {VisualState.SAVING},
    VisualState.SAVING: {VisualState.IDLE, VisualState.ABORTING},
    VisualState.ABORTING: {VisualState.IDLE},
}


class VisualStateMachine:
    """Holds exactly one visual state and validates every move."""

    def __init__(
        self, transitions: dict[VisualState, set[VisualState]] = WAYPOINT_TRANSITIONS
    ) -> None:
        self._transitions = transitions
        self._state = VisualState.IDLE

    @property
    def state(self) -> VisualState:
        return self._state

    def can_transition(self, target: VisualState) -> bool:
        return target in self._transitions.get(self._state, set())

    def transition(self, target: VisualState) -> VisualState:
        """Move to ``target``.

        Raises:
            InvalidVisualTransitionError: If the move is not in the table.
        """
        if not self.can_transition(target):
            raise InvalidVisualTransitionError(self._state, target)
        self._state = target
        return target

    def reset(self) -> None:
        """Return to IDLE unconditionally (fresh data replaces any state)."""
        self._state = VisualState.IDLE
