"""
Metrics instrumentation for observability.
Exposes Prometheus-compatible metrics at /metrics endpoint.
"""

from prometheus_client import Counter, generate_latest, CONTENT_TYPE_LATEST
from fastapi import Response

# Workflow metrics
event_submissions = Counter(
    'event_submissions_total',
    'Events submitted for approval',
    ['published']  # true, false
)

review_decisions = Counter(
    'event_review_decisions_total',
    'Admin review attempts',
    ['outcome']  # approved, rejected, conflict
)

# Auth metrics
signin_attempts = Counter(
    'signin_attempts_total',
    'Sign-in attempts',
    ['result']  # success, failure
)

rate_limited_requests = Counter(
    'rate_limited_requests_total',
    'Requests rejected by the rate limiter',
    ['scope']
)

redis_connection_errors = Counter(
    'redis_connection_errors_total',
    'Redis connection errors'
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


def record_submission(published: bool):
    event_submissions.labels(published=str(published).lower()).inc()


def record_review(outcome: str):
    """Record a review attempt. Outcome: approved, rejected, conflict"""
    review_decisions.labels(outcome=outcome).inc()


def record_signin(success: bool):
    result = "success" if success else "failure"
    signin_attempts.labels(result=result).inc()


def record_rate_limited(scope: str):
    rate_limited_requests.labels(scope=scope).inc()
