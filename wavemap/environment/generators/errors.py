from __future__ import annotations


class WFCContradiction(Exception):
    """Raised when WFC reaches an unsolvable state.

    This occurs when constraint propagation eliminates all possibilities
    for a cell. It is recoverable: the solver discards the grid and starts
    a fresh attempt.
    """

    pass


class WFCConvergenceError(Exception):
    """Raised when the solver runs out of attempts or time without a solution."""

    def __init__(self, attempts: int, last_error: str | None = None) -> None:
        self.attempts = attempts
        self.last_error = last_error
        message = f"WFC did not converge after {attempts} attempt(s)"
        if last_error:
            message += f" (last contradiction: {last_error})"
        super().__init__(message)
