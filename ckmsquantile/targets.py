"""Quantile targets: the (quantile, error) invariants an estimator tracks.

Each target contributes a rank-error bound. The estimator keeps, for every
position in its sample list, the tightest bound across all targets, so more
samples survive near the targeted quantiles and fewer elsewhere.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class QuantileTarget:
    """A quantile to track and the rank error tolerated for it.

    Quantile and error are expected in (0, 1). They are not validated; values
    outside that range give negative or infinite error bounds.

    Attributes:
        quantile: Target quantile, e.g. 0.99 for p99.
        error: Allowed rank error as a fraction of the stream length.
        u: Coefficient applied below the target rank, 2*error/(1-quantile).
        v: Coefficient applied above the target rank, 2*error/quantile.
    """

    quantile: float
    error: float
    u: float = field(init=False, repr=False, compare=False)
    v: float = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "u", 2.0 * self.error / (1.0 - self.quantile))
        object.__setattr__(self, "v", 2.0 * self.error / self.quantile)

    def rank_error_bound(self, rank: int, n: int) -> float:
        """Uncertainty this target tolerates at ``rank`` out of ``n``."""
        if rank <= self.quantile * n:
            return self.u * (n - rank)
        return self.v * rank

    def __str__(self) -> str:
        return f"Q{{q={self.quantile:f}, eps={self.error:f}}}"


# Median at 5% error, p99 at 0.1% error.
DEFAULT_TARGETS: tuple[QuantileTarget, ...] = (
    QuantileTarget(0.50, 0.05),
    QuantileTarget(0.99, 0.001),
)
