"""Failure classification into boundary status codes and user messages."""

from __future__ import annotations

import pytest

from app.pipelines.audio_guide import (
    AttractionValidationError,
    ErrorOrigin,
    PipelineCancelledError,
    PipelineTimeoutError,
    Provider,
    UpstreamProviderError,
    error_response,
)
from app.pipelines.audio_guide.errors import (
    CANCELLED_MESSAGE,
    CONFIGURATION_MESSAGE,
    GENERATION_BUSY_MESSAGE,
    GENERIC_MESSAGE,
    SPEECH_BUSY_MESSAGE,
    TIMEOUT_MESSAGE,
    UNPROCESSABLE_MESSAGE,
)


def test_validation_error_is_400_with_field_message():
    exc = AttractionValidationError("category", "category is required")

    assert exc.origin is ErrorOrigin.VALIDATION
    assert error_response(exc) == (400, "Invalid request: category is required")


def test_timeout_and_cancellation():
    assert error_response(PipelineTimeoutError("late")) == (504, TIMEOUT_MESSAGE)
    assert error_response(PipelineCancelledError("gone")) == (408, CANCELLED_MESSAGE)


@pytest.mark.parametrize(
    ("provider", "upstream_status", "expected"),
    [
        (Provider.GENERATION, 429, (503, GENERATION_BUSY_MESSAGE)),
        (Provider.SPEECH, 429, (503, SPEECH_BUSY_MESSAGE)),
        (Provider.GENERATION, 401, (502, CONFIGURATION_MESSAGE)),
        (Provider.SPEECH, 401, (502, CONFIGURATION_MESSAGE)),
        (Provider.SPEECH, 422, (502, UNPROCESSABLE_MESSAGE)),
        (Provider.GENERATION, 500, (502, GENERIC_MESSAGE)),
        (Provider.SPEECH, None, (502, GENERIC_MESSAGE)),
    ],
)
def test_upstream_mapping(provider, upstream_status, expected):
    exc = UpstreamProviderError(provider, "raw upstream text", status_code=upstream_status)

    assert error_response(exc) == expected


def test_upstream_text_never_reaches_the_caller():
    exc = UpstreamProviderError(
        Provider.GENERATION,
        "Incorrect API key provided: sk-abc***",
        status_code=401,
    )

    _, message = error_response(exc)

    assert "sk-abc" not in message


def test_unknown_exception_is_generic_bad_gateway():
    assert error_response(RuntimeError("boom")) == (502, GENERIC_MESSAGE)
