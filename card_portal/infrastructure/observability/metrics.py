"""Prometheus metrics for remote API health, sessions and dashboard statistics"""

from prometheus_client import Counter, Histogram, Gauge

# Remote API metrics
portal_api_latency_histogram = Histogram(
    "portal_api_latency_seconds",
    "Remote card-management API response time",
    ["operation"],
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

portal_api_failure_counter = Counter(
    "portal_api_failures_total",
    "Failed remote API calls",
    ["operation", "kind"],  # timeout | unavailable | http_4xx | http_5xx | invalid_response
)

# Session metrics
login_counter = Counter(
    "card_portal_logins_total",
    "Login attempts",
    ["outcome"],  # success | rejected | error
)

active_sessions_gauge = Gauge(
    "card_portal_active_sessions",
    "Sessions opened minus sessions closed since process start",
)

# Statistics metrics
statistics_counter = Counter(
    "card_portal_statistics_total",
    "Dashboard statistics computed",
    ["scope"],  # customer | admin | admin_report | admin_page
)

statistics_records_histogram = Histogram(
    "card_portal_statistics_records",
    "Transaction records per statistics computation",
    buckets=[0, 10, 100, 1000, 5000, 10000, 50000],
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_statistics(scope: str, record_count: int) -> None:
    """Record one statistics computation and the size of its input"""
    statistics_counter.labels(scope=scope).inc()
    statistics_records_histogram.observe(record_count)


def record_remote_failure(operation: str, status_code: int | None = None, kind: str | None = None) -> None:
    """Count a remote API failure, bucketed by HTTP status class when there is one"""
    if kind is None:
        kind = "http_5xx" if status_code is not None and status_code >= 500 else "http_4xx"
    portal_api_failure_counter.labels(operation=operation, kind=kind).inc()


def record_login(outcome: str) -> None:
    login_counter.labels(outcome=outcome).inc()
    if outcome == "success":
        active_sessions_gauge.inc()


def record_logout(count: int = 1) -> None:
    """Count closed sessions; an admin deleting a customer can close several at once"""
    if count > 0:
        active_sessions_gauge.dec(count)
