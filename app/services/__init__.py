"""Service layer helpers for external integrations."""

from .geocoding import NominatimGeocoder, location_from_payload
from .llm_client import OpenAIChatClient
from .speech import ElevenLabsSpeechClient, SpeechResult, parse_error_detail

__all__ = [
    "ElevenLabsSpeechClient",
    "NominatimGeocoder",
    "OpenAIChatClient",
    "SpeechResult",
    "location_from_payload",
    "parse_error_detail",
]
