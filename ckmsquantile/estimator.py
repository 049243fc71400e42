"""CKMS estimator for targeted streaming quantiles.

Implements the Cormode, Korn, Muthukrishnan, and Srivastava algorithm for
streaming computation of targeted, epsilon-approximate quantiles. It
generalizes Greenwald and Khanna (GK) by letting each targeted quantile carry
its own error bound, which makes high percentiles far cheaper to track.

Key properties:
- Insert: amortized O(1); values are buffered and merged in sorted batches
- Flush: O(buffer + samples)
- Query: O(samples), always reflects every inserted value
- Answers are always previously inserted values, never interpolations

This type is not safe for concurrent use; serialize access externally.

References:
    Cormode, Korn, Muthukrishnan, Srivastava. "Effective Computation of Biased
    Quantiles over Data Streams" (ICDE 2005)
    Greenwald, Khanna. "Space-efficient online computation of quantile
    summaries" (SIGMOD 2001)
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from itertools import pairwise

from ckmsquantile.base import EmptySketchError, QuantileSketch
from ckmsquantile.samples import SampleList
from ckmsquantile.targets import DEFAULT_TARGETS, QuantileTarget

DEFAULT_BUFFER_CAPACITY = 4096


@dataclass(frozen=True, slots=True)
class EstimatorSummary[T]:
    """Estimates for every registered target plus the stream extremes.

    ``estimates`` is keyed by target, so two targets on the same quantile with
    different errors each get an entry.
    """

    count: int
    sample_count: int
    min: T
    max: T
    estimates: dict[QuantileTarget, T]


class Estimator[T](QuantileSketch[T]):
    """Streaming quantile estimator with per-quantile error targets.

    Args:
        targets: Quantile targets to honour. ``None`` selects
            ``DEFAULT_TARGETS`` (median at 5%, p99 at 0.1%); an empty
            sequence registers no targets.
        buffer_capacity: Values buffered before an automatic flush.
        logger: Logger for flush diagnostics. Defaults to this module's logger.

    Example:
        estimator = Estimator([QuantileTarget(0.5, 0.05), QuantileTarget(0.99, 0.001)])

        for latency in latencies:
            estimator.insert(latency)

        p50 = estimator.query(0.5)
        p99 = estimator.percentile(99)
    """

    def __init__(
        self,
        targets: Iterable[QuantileTarget] | None = None,
        buffer_capacity: int = DEFAULT_BUFFER_CAPACITY,
        logger: logging.Logger | None = None,
    ):
        """Initialize the estimator.

        Raises:
            ValueError: If buffer_capacity < 1.
        """
        if buffer_capacity < 1:
            raise ValueError(f"buffer_capacity must be positive, got {buffer_capacity}")

        self._targets = DEFAULT_TARGETS if targets is None else tuple(targets)
        self._buffer_capacity = buffer_capacity
        self._logger = logger if logger is not None else logging.getLogger(__name__)

        self._samples: SampleList[T] = SampleList(self._targets)
        self._buffer: list[T] = []
        self._count = 0

    @property
    def targets(self) -> tuple[QuantileTarget, ...]:
        return self._targets

    @property
    def buffer_capacity(self) -> int:
        return self._buffer_capacity

    def insert(self, value: T) -> None:
        """Add one value, flushing when the buffer reaches capacity."""
        self._buffer.append(value)
        if len(self._buffer) >= self._buffer_capacity:
            self.flush()

    def insert_all(self, values: Iterable[T]) -> None:
        """Add many values; the capacity check runs once, after buffering."""
        self._buffer.extend(values)
        if len(self._buffer) >= self._buffer_capacity:
            self.flush()

    def flush(self) -> None:
        """Merge buffered values into the sample list, then compress it.

        Does nothing when the buffer is empty.
        """
        if not self._buffer:
            return

        batch = sorted(self._buffer)
        self._buffer.clear()

        merged = self._samples.merge(batch)
        self._count += merged
        removed = self._samples.compress()

        retained = len(self._samples)
        self._logger.debug(
            "Flushed %d values: %d samples retained, %d compressed away (count=%d)",
            merged,
            retained,
            removed,
            self._count,
            extra={"merged": merged, "retained": retained, "removed": removed, "count": self._count},
        )

    def query(self, q: float) -> T:
        """Estimate the value at quantile ``q``.

        Flushes first, then walks the samples accumulating minimum ranks and
        returns the last sample whose successor would overshoot the desired
        rank plus half the allowable error there.

        Args:
            q: Quantile to estimate (0.0 to 1.0).

        With no targets, or only loose ones, the walk can stop before the last
        sample even for q = 1.0; ``summary().max`` is always exact.

        Returns:
            A previously inserted value.

        Raises:
            ValueError: If q is not in [0, 1].
            EmptySketchError: If nothing was ever inserted.
        """
        if not 0 <= q <= 1:
            raise ValueError(f"Quantile must be in [0, 1], got {q}")

        self.flush()
        return self._walk(q)

    def quantiles(self, qs: Sequence[float]) -> list[T]:
        """Estimate several quantiles after a single flush."""
        for q in qs:
            if not 0 <= q <= 1:
                raise ValueError(f"Quantile must be in [0, 1], got {q}")

        self.flush()
        return [self._walk(q) for q in qs]

    def _walk(self, q: float) -> T:
        if not self._samples:
            raise EmptySketchError("No samples present")

        desired = int(q * self._count)
        threshold = desired + self._samples.allowable_error(desired) / 2

        rank_min = 0
        for prev, cur in pairwise(self._samples):
            rank_min += prev.g
            if rank_min + cur.g + cur.delta > threshold:
                return prev.value

        # Wanted the maximum.
        return self._samples[-1].value

    def cdf(self, value: T) -> float:
        """Fraction of values whose retained rank falls at or below ``value``."""
        self.flush()

        if not self._samples:
            return 0.0

        rank = 0
        for sample in self._samples:
            if sample.value > value:
                break
            rank += sample.g
        return rank / self._count

    def summary(self) -> EstimatorSummary[T]:
        """Estimates for each registered target.

        Raises:
            EmptySketchError: If nothing was ever inserted.
        """
        self.flush()

        if not self._samples:
            raise EmptySketchError("No samples present")

        return EstimatorSummary(
            count=self._count,
            sample_count=len(self._samples),
            min=self._samples[0].value,
            max=self._samples[-1].value,
            estimates={target: self._walk(target.quantile) for target in self._targets},
        )

    def samples(self) -> list[tuple[T, int, int]]:
        """Flush and return the retained samples as (value, g, delta)."""
        self.flush()
        return [(sample.value, sample.g, sample.delta) for sample in self._samples]

    @property
    def sample_count(self) -> int:
        """Number of retained samples (buffered values not included)."""
        return len(self._samples)

    @property
    def buffered_count(self) -> int:
        """Values waiting in the buffer for the next flush."""
        return len(self._buffer)

    @property
    def item_count(self) -> int:
        """All-time count of inserted values, buffered ones included."""
        return self._count + len(self._buffer)

    @property
    def memory_bytes(self) -> int:
        """Estimated memory usage in bytes."""
        # Each sample: value (8) + g (8) + delta (8), plus the list slot (8)
        sample_bytes = len(self._samples) * 32
        buffer_bytes = len(self._buffer) * 8
        return sample_bytes + buffer_bytes + sys.getsizeof(self)

    def clear(self) -> None:
        """Drop all samples and buffered values."""
        self._samples.clear()
        self._buffer.clear()
        self._count = 0
        self._logger.debug("Estimator cleared")

    def __repr__(self) -> str:
        return (
            f"Estimator(targets={len(self._targets)}, samples={len(self._samples)}, "
            f"count={self._count}, buffered={len(self._buffer)})"
        )
