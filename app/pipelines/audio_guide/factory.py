"""Wire the pipeline to its provider adapters from application settings."""

from __future__ import annotations

from app.config.settings import Settings
from app.services.geocoding import NominatimGeocoder
from app.services.llm_client import OpenAIChatClient
from app.services.speech import ElevenLabsSpeechClient

from .flow import AudioGuidePipeline


def build_audio_guide_pipeline(app_settings: Settings) -> AudioGuidePipeline:
    """Build the shared pipeline; raises ``ConfigurationError`` without credentials."""

    app_settings.require_credentials()
    geocoder = (
        NominatimGeocoder(app_settings.geocoding)
        if app_settings.geocoding.enabled
        else None
    )
    return AudioGuidePipeline(
        chat_client=OpenAIChatClient(app_settings.openai),
        speech_client=ElevenLabsSpeechClient(app_settings.elevenlabs),
        geocoder=geocoder,
        facts_max_tokens=app_settings.openai.facts_max_tokens,
        facts_temperature=app_settings.openai.facts_temperature,
        script_max_tokens=app_settings.openai.script_max_tokens,
        script_temperature=app_settings.openai.script_temperature,
    )


__all__ = ["build_audio_guide_pipeline"]
