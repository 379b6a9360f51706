"""Rolling statistics over recent solves."""

import numpy as np


class MostRecentNVar:
    """Keep the last ``num_samples`` values in a ring buffer.

    The solver records how many attempts each successful solve needed, so
    ``p50`` is the typical restart cost and ``max`` the worst recent one.
    """

    def __init__(self, num_samples: int = 1000) -> None:
        self.num_samples = num_samples
        self.samples = np.zeros(num_samples, dtype=np.float64)
        self.count = 0

    def record(self, value: float) -> None:
        self.samples[self.count % self.num_samples] = value
        self.count += 1

    def clear(self) -> None:
        self.count = 0

    @property
    def sample_count(self) -> int:
        return min(self.count, self.num_samples)

    def window(self) -> np.ndarray:
        """Recorded values still in the buffer, oldest first."""
        if self.count <= self.num_samples:
            return self.samples[: self.count]
        start = self.count % self.num_samples
        return np.roll(self.samples, -start)

    @property
    def p50(self) -> float:
        values = self.window()
        return float(np.median(values)) if len(values) else 0.0

    @property
    def max(self) -> float:
        values = self.window()
        return float(values.max()) if len(values) else 0.0
