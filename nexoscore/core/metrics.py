"""Prometheus metrics for the NexoScore service.

Metrics are organized into two categories:

Business Metrics (for Product/Risk):
- nexoscore_calculations_total: Score computations by tier
- nexoscore_score: Distribution of computed scores
- nexoscore_batch_last_avg_score: Average score of the last batch run

Technical Metrics (for Engineering/SRE):
- nexoscore_calculation_latency_seconds: Per-merchant pipeline latency
- nexoscore_persist_failures_total: Snapshot writes that failed
- nexoscore_network_lookup_failures_total: Cross-merchant lookup failures
- nexoscore_batch_runs_total: Batch runs by status
- nexoscore_batch_merchants_total: Batch items by outcome
- nexoscore_http_requests_total: HTTP requests by endpoint/status
"""

import time
from contextlib import contextmanager
from typing import Generator

from prometheus_client import Counter, Histogram, Gauge, REGISTRY, generate_latest
from prometheus_client.exposition import CONTENT_TYPE_LATEST


# =============================================================================
# Business Metrics (Product/Risk dashboards)
# =============================================================================

calculations_total = Counter(
    "nexoscore_calculations_total",
    "Total number of NexoScore computations",
    ["tier"],  # A, B, C, D, F
)

score_histogram = Histogram(
    "nexoscore_score",
    "Distribution of computed NexoScores (0-1000)",
    buckets=[100, 200, 300, 450, 600, 750, 900, 1000],
)

batch_last_avg_score = Gauge(
    "nexoscore_batch_last_avg_score",
    "Average score produced by the last completed batch run",
)


# =============================================================================
# Technical Metrics (Engineering/SRE dashboards)
# =============================================================================

calculation_latency = Histogram(
    "nexoscore_calculation_latency_seconds",
    "Per-merchant scoring pipeline latency in seconds",
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

persist_failures = Counter(
    "nexoscore_persist_failures_total",
    "Total number of score snapshots that could not be persisted",
)

network_lookup_failures = Counter(
    "nexoscore_network_lookup_failures_total",
    "Total number of cross-merchant phone lookup failures",
    ["error_type"],  # timeout, error
)

batch_runs = Counter(
    "nexoscore_batch_runs_total",
    "Total number of batch runs",
    ["status"],  # completed, failed
)

batch_merchants = Counter(
    "nexoscore_batch_merchants_total",
    "Merchants handled by batch runs",
    ["outcome"],  # processed, error, skipped
)

batch_duration = Histogram(
    "nexoscore_batch_duration_seconds",
    "Batch run duration in seconds",
    buckets=[1, 5, 15, 30, 60, 120, 300, 600, 1800],
)

http_requests_total = Counter(
    "nexoscore_http_requests_total",
    "Total HTTP requests by endpoint and status",
    ["method", "endpoint", "status"],
)

http_request_latency = Histogram(
    "nexoscore_http_request_latency_seconds",
    "HTTP request latency by endpoint",
    ["method", "endpoint"],
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
)


# =============================================================================
# Helper Functions
# =============================================================================

def record_calculation(score: int, grade: str) -> None:
    """Record a completed score computation."""
    calculations_total.labels(tier=grade).inc()
    score_histogram.observe(score)


@contextmanager
def track_calculation_latency() -> Generator[None, None, None]:
    """Context manager to track per-merchant pipeline latency."""
    start = time.perf_counter()
    try:
        yield
    finally:
        duration = time.perf_counter() - start
        calculation_latency.observe(duration)


def record_persist_failure() -> None:
    """Record a snapshot persistence failure."""
    persist_failures.inc()


def record_network_lookup_failure(error_type: str) -> None:
    """Record a cross-merchant lookup failure."""
    network_lookup_failures.labels(error_type=error_type).inc()


def record_batch_merchant(outcome: str) -> None:
    """Record the outcome of one merchant within a batch run."""
    batch_merchants.labels(outcome=outcome).inc()


def record_batch_run(status: str, duration_seconds: float, avg_score: int | None = None) -> None:
    """Record a finished batch run."""
    batch_runs.labels(status=status).inc()
    batch_duration.observe(duration_seconds)
    if avg_score is not None:
        batch_last_avg_score.set(avg_score)


def record_http_request(method: str, endpoint: str, status: int, duration: float) -> None:
    """Record an HTTP request."""
    http_requests_total.labels(method=method, endpoint=endpoint, status=str(status)).inc()
    http_request_latency.labels(method=method, endpoint=endpoint).observe(duration)


def get_metrics() -> bytes:
    """Get current metrics in Prometheus format."""
    return generate_latest(REGISTRY)


def get_metrics_content_type() -> str:
    """Get the content type for metrics response."""
    return CONTENT_TYPE_LATEST
