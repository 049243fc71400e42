"""Accuracy reports: compare estimator answers against the exact data.

Useful when tuning targets or buffer sizes: feed the same values to an
estimator and to ``accuracy_report``, and every registered target gets a row
saying how far the estimate's rank landed from the requested one.
"""

from __future__ import annotations

import bisect
from collections.abc import Iterable
from pathlib import Path
from typing import TYPE_CHECKING

import pandas as pd

if TYPE_CHECKING:
    from ckmsquantile.estimator import Estimator

REPORT_COLUMNS = [
    "quantile",
    "error",
    "estimate",
    "expected_rank",
    "rank_low",
    "rank_high",
    "rank_error",
    "off",
    "within_bound",
]


def accuracy_report(estimator: Estimator, values: Iterable) -> pd.DataFrame:
    """Build a per-target accuracy table.

    ``values`` must be everything that was inserted into ``estimator``. The
    expected rank for quantile q over N values is q * (N - 1) (0-based); the
    estimate's rank is the position range it occupies in the sorted data, so
    duplicates count as a hit anywhere in their run.

    Args:
        estimator: Estimator to query, once per registered target.
        values: The exact data.

    Returns:
        DataFrame with one row per target and columns ``REPORT_COLUMNS``.

    Raises:
        ValueError: If values is empty.
    """
    ordered = sorted(values)
    n = len(ordered)
    if n == 0:
        raise ValueError("Cannot build an accuracy report from no values")

    rows = []
    for target in estimator.targets:
        estimate = estimator.query(target.quantile)
        expected = target.quantile * (n - 1)
        rank_low = bisect.bisect_left(ordered, estimate)
        rank_high = bisect.bisect_right(ordered, estimate) - 1

        if expected < rank_low:
            rank_error = rank_low - expected
        elif expected > rank_high:
            rank_error = expected - rank_high
        else:
            rank_error = 0.0

        rows.append(
            {
                "quantile": target.quantile,
                "error": target.error,
                "estimate": estimate,
                "expected_rank": expected,
                "rank_low": rank_low,
                "rank_high": rank_high,
                "rank_error": float(rank_error),
                "off": rank_error / n,
                "within_bound": bool(rank_error <= target.error * n),
            }
        )

    return pd.DataFrame(rows, columns=REPORT_COLUMNS)


def plot_accuracy(report: pd.DataFrame, path: str | Path) -> Path:
    """Chart observed vs allowed rank error per target and save it.

    Args:
        report: Output of ``accuracy_report``.
        path: Image path; parent directories are created.

    Returns:
        The path written.
    """
    import matplotlib

    matplotlib.use("Agg")
    import matplotlib.pyplot as plt

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    labels = [f"q={q:g}" for q in report["quantile"]]
    positions = range(len(labels))
    width = 0.4

    fig, ax = plt.subplots(figsize=(8, 5))
    ax.bar([p - width / 2 for p in positions], report["off"], width, label="observed")
    ax.bar([p + width / 2 for p in positions], report["error"], width, label="allowed", alpha=0.6)
    ax.set_xticks(list(positions))
    ax.set_xticklabels(labels)
    ax.set_ylabel("Rank error / N")
    ax.set_title("CKMS estimate accuracy per target")
    ax.legend()

    fig.tight_layout()
    fig.savefig(path, dpi=150)
    plt.close(fig)
    return path
