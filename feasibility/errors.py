"""Exceptions raised by the feasibility analysis."""

from typing import Optional


class FeasibilityError(Exception):
    """Base class for all feasibility analysis errors."""


class InvalidInput(FeasibilityError, ValueError):
    """A service or service set violates an input invariant.

    Raised while the model is being built, so no test ever runs on
    malformed data.
    """


class NonConvergence(FeasibilityError, RuntimeError):
    """The completion-time recurrence hit its iteration cap.

    Attributes:
        index: Priority index of the service being analysed.
        iterations: Number of iterations performed.
        last_value: The last workload value computed.
    """

    def __init__(self, index: int, iterations: int, last_value: Optional[int]) -> None:
        self.index = index
        self.iterations = iterations
        self.last_value = last_value
        super().__init__(
            f"Completion time for service {index} did not converge "
            f"within {iterations} iterations (last value {last_value})"
        )
