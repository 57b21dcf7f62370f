"""Prometheus metrics for outbound Pezesha API calls.

Metrics:
- pezesha_api_requests_total: API calls by operation and outcome
- pezesha_api_latency_seconds: API call latency by operation
- pezesha_authentications_total: Token requests by outcome
- pezesha_validation_failures_total: Calls rejected before reaching the API
"""

import time
from contextlib import contextmanager
from typing import Generator

from prometheus_client import Counter, Histogram, REGISTRY, generate_latest


api_requests_total = Counter(
    "pezesha_api_requests_total",
    "Total number of Pezesha API requests",
    ["operation", "outcome"],  # success, http_error, timeout, transport_error, invalid_response
)

api_latency = Histogram(
    "pezesha_api_latency_seconds",
    "Pezesha API request latency in seconds",
    ["operation"],
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0],
)

authentications_total = Counter(
    "pezesha_authentications_total",
    "Total number of token requests",
    ["outcome"],  # success, failure
)

validation_failures_total = Counter(
    "pezesha_validation_failures_total",
    "Total number of calls rejected by client-side validation",
    ["operation"],
)


@contextmanager
def track_api_latency(operation: str) -> Generator[None, None, None]:
    """Context manager to track API request latency."""
    start = time.perf_counter()
    try:
        yield
    finally:
        duration = time.perf_counter() - start
        api_latency.labels(operation=operation).observe(duration)


def record_api_success(operation: str) -> None:
    """Record a successful API request."""
    api_requests_total.labels(operation=operation, outcome="success").inc()


def record_api_failure(operation: str, outcome: str) -> None:
    """Record a failed API request."""
    api_requests_total.labels(operation=operation, outcome=outcome).inc()


def record_authentication(success: bool) -> None:
    """Record the outcome of a token request."""
    authentications_total.labels(outcome="success" if success else "failure").inc()


def record_validation_failure(operation: str) -> None:
    """Record a call rejected by client-side validation."""
    validation_failures_total.labels(operation=operation).inc()


def get_metrics() -> bytes:
    """Get current metrics in Prometheus format."""
    return generate_latest(REGISTRY)
