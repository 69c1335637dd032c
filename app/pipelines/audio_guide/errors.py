"""Error taxonomy shared by every stage of the audio guide pipeline.

Provider adapters translate their own failure shapes into one of these
exceptions so the orchestrator and the HTTP layer only ever see a single
error contract. ``error_response`` is the one place that decides which
status code and which user-safe sentence a failure turns into.
"""

from __future__ import annotations

from enum import Enum

from fastapi import status


class ErrorOrigin(str, Enum):
    """Where in the request lifetime a failure was raised."""

    VALIDATION = "validation"
    UPSTREAM = "upstream"
    TIMEOUT = "timeout"
    CANCELLATION = "cancellation"


class Provider(str, Enum):
    """External generation providers chained by the pipeline."""

    GENERATION = "fact/script provider"
    SPEECH = "speech provider"


class PipelineError(Exception):
    """Base failure carried outward by the pipeline. Never retried."""

    origin: ErrorOrigin = ErrorOrigin.UPSTREAM

    def __init__(
        self,
        message: str,
        *,
        provider: Provider | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.provider = provider
        self.status_code = status_code
        # Set by the orchestrator to the state that was running when it failed.
        self.stage: str | None = None


class AttractionValidationError(PipelineError):
    """The inbound description failed validation; no call was made."""

    origin = ErrorOrigin.VALIDATION

    def __init__(self, field: str, message: str) -> None:
        super().__init__(message)
        self.field = field


class UpstreamProviderError(PipelineError):
    """A provider rejected the call or returned an unusable response."""

    origin = ErrorOrigin.UPSTREAM

    def __init__(
        self,
        provider: Provider,
        message: str,
        *,
        status_code: int | None = None,
        code: str | None = None,
    ) -> None:
        super().__init__(message, provider=provider, status_code=status_code)
        self.code = code

    def __str__(self) -> str:
        return f"{self.provider.value} error ({self.status_code}): {self.message}"


class PipelineTimeoutError(PipelineError):
    """The shared request deadline was exhausted."""

    origin = ErrorOrigin.TIMEOUT


class PipelineCancelledError(PipelineError):
    """The caller went away before the pipeline finished."""

    origin = ErrorOrigin.CANCELLATION


GENERIC_MESSAGE = "An unexpected error occurred. Please try again."
TIMEOUT_MESSAGE = "Request timed out. Please try again."
CANCELLED_MESSAGE = "Request was cancelled."
CONFIGURATION_MESSAGE = "Service configuration error. Please try again later."
GENERATION_BUSY_MESSAGE = "Service is busy. Please wait a moment and try again."
SPEECH_BUSY_MESSAGE = "Audio service is busy. Please wait a moment."
UNPROCESSABLE_MESSAGE = "Content could not be processed. Please try again."

# 422 Unprocessable Content
_UNPROCESSABLE_STATUS = 422


def user_message(exc: Exception) -> str:
    """Return the sentence shown to callers; never echoes upstream text."""

    if isinstance(exc, AttractionValidationError):
        return f"Invalid request: {exc.message}"
    if isinstance(exc, PipelineTimeoutError):
        return TIMEOUT_MESSAGE
    if isinstance(exc, PipelineCancelledError):
        return CANCELLED_MESSAGE
    if not isinstance(exc, UpstreamProviderError):
        return GENERIC_MESSAGE

    if exc.status_code == status.HTTP_401_UNAUTHORIZED:
        return CONFIGURATION_MESSAGE
    if exc.status_code == status.HTTP_429_TOO_MANY_REQUESTS:
        if exc.provider is Provider.SPEECH:
            return SPEECH_BUSY_MESSAGE
        return GENERATION_BUSY_MESSAGE
    if exc.status_code == _UNPROCESSABLE_STATUS:
        return UNPROCESSABLE_MESSAGE
    return GENERIC_MESSAGE


def http_status(exc: Exception) -> int:
    """Pick the boundary status code for a pipeline failure."""

    if isinstance(exc, AttractionValidationError):
        return status.HTTP_400_BAD_REQUEST
    if isinstance(exc, PipelineTimeoutError):
        return status.HTTP_504_GATEWAY_TIMEOUT
    if isinstance(exc, PipelineCancelledError):
        return status.HTTP_408_REQUEST_TIMEOUT
    if (
        isinstance(exc, UpstreamProviderError)
        and exc.status_code == status.HTTP_429_TOO_MANY_REQUESTS
    ):
        return status.HTTP_503_SERVICE_UNAVAILABLE
    return status.HTTP_502_BAD_GATEWAY


def error_response(exc: Exception) -> tuple[int, str]:
    """Return ``(status_code, message)`` for the boundary layer."""

    return http_status(exc), user_message(exc)


__all__ = [
    "AttractionValidationError",
    "ErrorOrigin",
    "PipelineCancelledError",
    "PipelineError",
    "PipelineTimeoutError",
    "Provider",
    "UpstreamProviderError",
    "error_response",
    "http_status",
    "user_message",
]
