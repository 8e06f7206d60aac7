"""
Metrics instrumentation for observability.
Exposes Prometheus-compatible metrics at /metrics endpoint.
"""

from prometheus_client import Counter, Gauge, generate_latest, CONTENT_TYPE_LATEST
from fastapi import Response

# Live subscription metrics
snapshots_received = Counter(
    'snapshots_received_total',
    'Full collection snapshots delivered to live views',
    ['collection']
)

subscription_errors = Counter(
    'subscription_errors_total',
    'Live subscriptions that ended with an error',
    ['collection']
)

active_subscriptions = Gauge(
    'active_subscriptions',
    'Currently open live subscriptions',
    ['collection']
)

normalization_failures = Counter(
    'normalization_failures_total',
    'Documents that could not be shaped into display records',
    ['collection']
)

# Action dispatcher metrics
console_actions = Counter(
    'console_actions_total',
    'Admin actions issued against the store',
    ['action', 'result']  # success, failure, partial
)

# Secondary reads
stats_count_failures = Counter(
    'stats_count_failures_total',
    'Aggregate count queries that failed',
    ['collection']
)

user_lookup_failures = Counter(
    'user_lookup_failures_total',
    'Batched requester-name lookups that failed'
)


def metrics_endpoint() -> Response:
    """
    Prometheus metrics endpoint.

    Usage:
        @app.get("/metrics")
        def metrics():
            return metrics_endpoint()
    """
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST
    )


def record_action(action: str, result: str):
    """Record an admin action. Result: success, failure, partial"""
    console_actions.labels(action=action, result=result).inc()
