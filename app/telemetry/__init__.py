"""Telemetry helpers and metrics."""

from .metrics import (
    ENRICHMENT_FAILURES,
    ERROR_COUNTER,
    PIPELINE_FAILURES,
    REQUEST_COUNT,
    REQUEST_LATENCY,
    STAGE_LATENCY,
    observe_request,
    observe_stage,
    record_enrichment_failure,
    record_pipeline_failure,
)

__all__ = [
    "ENRICHMENT_FAILURES",
    "ERROR_COUNTER",
    "PIPELINE_FAILURES",
    "REQUEST_COUNT",
    "REQUEST_LATENCY",
    "STAGE_LATENCY",
    "observe_request",
    "observe_stage",
    "record_enrichment_failure",
    "record_pipeline_failure",
]
