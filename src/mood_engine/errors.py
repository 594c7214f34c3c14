"""Exceptions raised by the mood analytics engine.

Most conditions (short windows, malformed entries, an unreachable language
provider) are absorbed into neutral results and never raised. Only explicit
state transitions that are not allowed surface as errors.
"""


class MoodEngineError(Exception):
    """Base class for mood engine errors."""


class GoalTransitionError(MoodEngineError):
    """Raised when a goal cannot move to the requested status."""

    def __init__(self, goal_id, current_status, requested_status):
        self.goal_id = goal_id
        self.current_status = current_status
        self.requested_status = requested_status
        super().__init__(
            f"Goal {goal_id} cannot move from {current_status} to {requested_status}"
        )
