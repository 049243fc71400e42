"""Scenario registry for performance benchmarks."""

from tests.perf.scenarios import (
    batch_insert,
    query_latency,
    random_values,
    shuffled_insert,
)

SCENARIOS: dict[str, object] = {
    "shuffled_insert": shuffled_insert,
    "random_values": random_values,
    "batch_insert": batch_insert,
    "query_latency": query_latency,
}
