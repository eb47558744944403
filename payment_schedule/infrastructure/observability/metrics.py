"""Prometheus metrics for schedule computations, cache efficiency and audits"""

from prometheus_client import Counter, Histogram, Gauge

# Schedule metrics
schedule_view_counter = Counter(
    "payment_schedule_views_total",
    "Schedule views computed",
    ["kind"],  # monthly_view | day_totals | scheduled_date
)

skipped_transactions_counter = Counter(
    "payment_schedule_skipped_transactions_total",
    "Transactions skipped because their account or bank was missing",
)

schedule_compute_histogram = Histogram(
    "payment_schedule_compute_seconds",
    "Time spent building schedule views",
    ["kind"],
    buckets=[0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0],
)

# Cache metrics
cache_request_counter = Counter(
    "payment_schedule_cache_requests_total",
    "Schedule cache lookups",
    ["result"],  # hit | miss
)

# Audit metrics
problematic_accounts_gauge = Gauge(
    "payment_schedule_problematic_accounts",
    "Accounts with month-end payment and weekend adjustment in the last audit",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_schedule_view(kind: str, skipped_count: int, duration_seconds: float) -> None:
    """Record one computed view"""
    schedule_view_counter.labels(kind=kind).inc()
    schedule_compute_histogram.labels(kind=kind).observe(duration_seconds)
    if skipped_count:
        skipped_transactions_counter.inc(skipped_count)


def record_cache_lookup(hit: bool) -> None:
    cache_request_counter.labels(result="hit" if hit else "miss").inc()


def record_audit(problematic_accounts: int) -> None:
    problematic_accounts_gauge.set(problematic_accounts)
