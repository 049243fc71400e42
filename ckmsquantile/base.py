"""Base protocol for streaming quantile sketches.

Quantile sketches answer "what value sits at quantile q?" over a stream using
bounded memory. They trade exact answers for space, which suits metrics
pipelines where storing every observation is impractical.

This module defines:
- QuantileSketch: the operations every quantile sketch supports
- EmptySketchError: raised when a sketch is queried before any value arrived
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable


class EmptySketchError(ValueError):
    """Raised when a sketch is queried before any value was inserted."""


class QuantileSketch[T](ABC):
    """Protocol for sketches that estimate quantiles/percentiles.

    Sketches buffer or summarize incoming values and provide approximate
    answers about their distribution. They support:
    - Inserting values one at a time or in batches
    - Quantile, percentile and CDF queries
    - Estimating memory usage
    - Clearing state for reuse

    Implementations: Estimator (CKMS)
    """

    @abstractmethod
    def insert(self, value: T) -> None:
        """Add one observation to the sketch.

        Args:
            value: The observation to add.
        """

    @abstractmethod
    def insert_all(self, values: Iterable[T]) -> None:
        """Add several observations to the sketch.

        Args:
            values: Observations to add.
        """

    @abstractmethod
    def query(self, q: float) -> T:
        """Estimate the value at a given quantile.

        Args:
            q: Quantile to estimate (0.0 to 1.0).
               - 0.5 = median (p50)
               - 0.95 = 95th percentile (p95)
               - 0.99 = 99th percentile (p99)

        Returns:
            Estimated value at the quantile.

        Raises:
            ValueError: If q is not in [0, 1].
            EmptySketchError: If nothing was ever inserted.
        """

    @abstractmethod
    def cdf(self, value: T) -> float:
        """Estimate the cumulative distribution function at a value.

        Args:
            value: The value to get CDF for.

        Returns:
            Estimated probability that a random sample <= value (0.0 to 1.0).
        """

    def percentile(self, p: float) -> T:
        """Convenience method for percentile estimation.

        Args:
            p: Percentile (0 to 100).

        Returns:
            Estimated value at the percentile.

        Raises:
            ValueError: If p is not in [0, 100].
        """
        if not 0 <= p <= 100:
            raise ValueError(f"Percentile must be in [0, 100], got {p}")
        return self.query(p / 100.0)

    @property
    @abstractmethod
    def memory_bytes(self) -> int:
        """Estimated memory usage in bytes."""

    @property
    @abstractmethod
    def item_count(self) -> int:
        """Total count of values inserted into the sketch."""

    @abstractmethod
    def clear(self) -> None:
        """Reset the sketch to its initial empty state."""
