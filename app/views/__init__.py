"""Pydantic schemas used as views in the MVC architecture."""

from .audio_guide import AttractionRequest
from .common import ErrorResponse, HealthResponse

__all__ = [
    "AttractionRequest",
    "ErrorResponse",
    "HealthResponse",
]
