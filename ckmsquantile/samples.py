"""Sample list for the CKMS biased quantile summary.

The summary keeps an ordered list of samples. Each sample stores a value seen
in the stream and two rank counters:

- g: ranks covered since the previous retained sample. The minimum possible
  rank of sample i is g[0] + ... + g[i].
- delta: extra ranks the sample might cover. Its maximum possible rank is the
  minimum rank plus delta.

Batches of sorted values are merged in with a single forward pass, and a
compress pass folds samples whose combined uncertainty stays inside the
allowable error into their right-hand neighbour.

Reference:
    Cormode, Korn, Muthukrishnan, Srivastava. "Effective Computation of Biased
    Quantiles over Data Streams" (ICDE 2005)
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass
from itertools import islice

from ckmsquantile.targets import QuantileTarget


@dataclass(slots=True)
class Sample[T]:
    """One retained value with its rank width and rank uncertainty."""

    value: T
    g: int = 1
    delta: int = 0


class SampleList[T]:
    """Ordered samples plus the rank-bound bookkeeping over them.

    Args:
        targets: Quantile targets that define the allowable error.

    The list is rebuilt in one pass by both ``merge`` and ``compress``, so each
    flush costs O(batch + samples) rather than one list shift per insert.
    """

    def __init__(self, targets: Iterable[QuantileTarget] = ()):
        self._targets = tuple(targets)
        self._samples: list[Sample[T]] = []

    @property
    def targets(self) -> tuple[QuantileTarget, ...]:
        return self._targets

    def __len__(self) -> int:
        return len(self._samples)

    def __iter__(self) -> Iterator[Sample[T]]:
        return iter(self._samples)

    def __getitem__(self, index: int) -> Sample[T]:
        return self._samples[index]

    @property
    def total_width(self) -> int:
        """Sum of g over all samples; equals the number of merged values."""
        return sum(sample.g for sample in self._samples)

    def allowable_error(self, rank: int, n: int | None = None) -> int:
        """Uncertainty (g + delta) tolerated at ``rank``.

        This is f(r, n) from the CKMS paper: the minimum of every target's
        bound, floored. ``n`` defaults to the current number of samples rather
        than the number of values seen. That is looser than the paper and keeps
        more samples around, but the paper's form with the all-time count
        overshoots the requested error.

        Args:
            rank: Position being checked.
            n: List size the bound is computed against.

        Returns:
            The floored bound, never more than n + 1.
        """
        if n is None:
            n = len(self._samples)
        min_error: float = n + 1
        for target in self._targets:
            error = target.rank_error_bound(rank, n)
            if error < min_error:
                min_error = error
        return math.floor(min_error)

    def merge(self, values: Sequence[T]) -> int:
        """Insert a batch of values sorted in ascending order.

        A single cursor moves forward through the existing samples for the
        whole batch. Each value lands before the first sample greater than it,
        after any equal value the cursor has reached.

        Args:
            values: Values to insert, already sorted.

        Returns:
            Number of values inserted.
        """
        if not values:
            return 0

        start = 0
        if not self._samples:
            self._samples.append(Sample(values[0]))
            start = 1

        existing = self._samples
        merged: list[Sample[T]] = [existing[0]]
        cursor = 1

        for value in islice(values, start, None):
            while cursor < len(existing) and merged[-1].value < value:
                merged.append(existing[cursor])
                cursor += 1
            if merged[-1].value > value:
                # Only an existing sample can be larger; step back over it.
                merged.pop()
                cursor -= 1

            position = len(merged)
            size = position + len(existing) - cursor
            if position == 0 or position == size:
                # New minimum or maximum: its rank is exact.
                delta = 0
            else:
                delta = max(self.allowable_error(position, size) - 1, 0)
            merged.append(Sample(value, 1, delta))

        merged.extend(islice(existing, cursor, None))
        self._samples = merged
        return len(values)

    def compress(self) -> int:
        """Fold redundant samples into their right-hand neighbour.

        Runs one left-to-right pass. A pair (prev, next) is folded when
        ``prev.g + next.g + next.delta`` fits inside the allowable error at
        next's position. The first sample is pinned so the minimum stays exact;
        the last is never a fold candidate. One pass does not necessarily reach
        a fixed point.

        Returns:
            Number of samples removed.
        """
        samples = self._samples
        if len(samples) < 3:
            return 0

        kept: list[Sample[T]] = samples[:2]
        for index in range(2, len(samples)):
            current = samples[index]
            prev = kept[-1]
            position = len(kept)
            size = position + len(samples) - index
            if prev.g + current.g + current.delta <= self.allowable_error(position, size):
                current.g += prev.g
                kept.pop()
            kept.append(current)

        removed = len(samples) - len(kept)
        self._samples = kept
        return removed

    def clear(self) -> None:
        self._samples = []

    def __repr__(self) -> str:
        return f"SampleList(samples={len(self._samples)}, targets={len(self._targets)})"
