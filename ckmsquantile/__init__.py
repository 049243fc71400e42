"""ckmsquantile: targeted streaming quantiles with bounded memory.

Estimates quantiles (p50, p90, p99, ...) over an unbounded stream using the
CKMS biased quantile summary. Each registered target carries its own error
tolerance, so tail percentiles stay accurate without storing every value.

Quick Reference:
    QuantileTarget: a (quantile, error) pair to honour
    Estimator: buffers values, maintains the summary, answers queries
    accuracy_report: compare estimates with the exact data (pandas)

Example:
    from ckmsquantile import Estimator, QuantileTarget

    estimator = Estimator([QuantileTarget(0.5, 0.05), QuantileTarget(0.99, 0.001)])
    for latency in latencies:
        estimator.insert(latency)
    print(f"p99: {estimator.query(0.99)}")
"""

import logging

from ckmsquantile.base import EmptySketchError, QuantileSketch
from ckmsquantile.estimator import DEFAULT_BUFFER_CAPACITY, Estimator, EstimatorSummary
from ckmsquantile.logging_config import (
    configure_from_env,
    disable_logging,
    enable_console_logging,
    enable_file_logging,
    enable_json_logging,
    set_level,
)
from ckmsquantile.report import accuracy_report, plot_accuracy
from ckmsquantile.samples import Sample, SampleList
from ckmsquantile.targets import DEFAULT_TARGETS, QuantileTarget

# Silent unless the caller enables a handler.
logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"

__all__ = [
    "DEFAULT_BUFFER_CAPACITY",
    "DEFAULT_TARGETS",
    # Errors
    "EmptySketchError",
    # Estimation
    "Estimator",
    "EstimatorSummary",
    "QuantileSketch",
    "QuantileTarget",
    "Sample",
    "SampleList",
    # Reporting
    "accuracy_report",
    # Logging
    "configure_from_env",
    "disable_logging",
    "enable_console_logging",
    "enable_file_logging",
    "enable_json_logging",
    "plot_accuracy",
    "set_level",
]
