"""Prometheus metrics definitions and helpers."""

from __future__ import annotations

from prometheus_client import Counter, Histogram

REQUEST_COUNT = Counter(
    "http_requests_total",
    "Total HTTP requests processed",
    ("method", "route", "status"),
)

REQUEST_LATENCY = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ("method", "route"),
    buckets=(
        0.005,
        0.01,
        0.025,
        0.05,
        0.1,
        0.25,
        0.5,
        1.0,
        2.5,
        5.0,
        10.0,
        30.0,
        60.0,
        90.0,
    ),
)

ERROR_COUNTER = Counter(
    "app_internal_errors_total",
    "Number of requests ending in internal server error responses",
    ("method", "route"),
)

STAGE_LATENCY = Histogram(
    "audio_guide_stage_duration_seconds",
    "Duration of each audio guide pipeline stage in seconds",
    ("stage",),
    buckets=(0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 20.0, 30.0, 60.0, 90.0),
)

PIPELINE_FAILURES = Counter(
    "audio_guide_pipeline_failures_total",
    "Audio guide requests that ended in a pipeline error",
    ("origin", "provider", "stage"),
)

ENRICHMENT_FAILURES = Counter(
    "audio_guide_enrichment_failures_total",
    "Reverse geocoding lookups that could not resolve a location",
)


def observe_request(
    method: str,
    route: str,
    status_code: int,
    duration_seconds: float,
) -> None:
    """Record metrics for a completed HTTP request."""

    safe_route = route or "unknown"
    safe_method = method or "UNKNOWN"
    status_label = str(status_code)
    observed_duration = duration_seconds if duration_seconds >= 0 else 0

    REQUEST_COUNT.labels(
        method=safe_method,
        route=safe_route,
        status=status_label,
    ).inc()
    REQUEST_LATENCY.labels(
        method=safe_method,
        route=safe_route,
    ).observe(observed_duration)

    if status_code >= 500:
        ERROR_COUNTER.labels(
            method=safe_method,
            route=safe_route,
        ).inc()


def observe_stage(stage: str, duration_seconds: float) -> None:
    """Record how long one pipeline stage took."""

    STAGE_LATENCY.labels(stage=stage).observe(max(0.0, duration_seconds))


def record_pipeline_failure(origin: str, provider: str | None, stage: str | None) -> None:
    PIPELINE_FAILURES.labels(
        origin=origin,
        provider=provider or "none",
        stage=stage or "unknown",
    ).inc()


def record_enrichment_failure() -> None:
    ENRICHMENT_FAILURES.inc()
