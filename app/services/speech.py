"""ElevenLabs text-to-speech client returning compressed narration audio."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import httpx

from app.config.settings import ElevenLabsConfig
from app.pipelines.audio_guide.errors import Provider, UpstreamProviderError

logger = logging.getLogger(__name__)

UNKNOWN_ERROR_MESSAGE = "Unknown ElevenLabs error"


@dataclass(frozen=True)
class SpeechResult:
    """Synthesised audio bytes for one narration script."""

    audio_bytes: bytes
    media_type: str
    voice_id: str


def parse_error_detail(detail: Any) -> str:
    """Flatten ElevenLabs' ``detail`` field (string or ``{"message": ...}``)."""

    if isinstance(detail, str) and detail:
        return detail
    if isinstance(detail, dict):
        message = detail.get("message")
        if isinstance(message, str) and message:
            return message
    return UNKNOWN_ERROR_MESSAGE


class ElevenLabsSpeechClient:
    """Generate narration audio with a fixed voice and fixed voice settings."""

    def __init__(
        self,
        config: ElevenLabsConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config = config
        self._api_key = config.api_key.get_secret_value() if config.api_key else ""
        self._endpoint = (
            f"{config.base_url.rstrip('/')}/text-to-speech/{config.voice_id}"
        )
        self._transport = transport

    def _build_body(self, text: str) -> dict[str, Any]:
        return {
            "text": text,
            "model_id": self._config.model_id,
            "voice_settings": {
                "stability": self._config.stability,
                "similarity_boost": self._config.similarity_boost,
                "style": self._config.style,
                "use_speaker_boost": self._config.use_speaker_boost,
            },
        }

    async def synthesize(self, text: str, *, timeout: float | None = None) -> SpeechResult:
        """Convert ``text`` to speech and return the MP3 bytes."""

        call_timeout = self._config.timeout_seconds
        if timeout is not None:
            call_timeout = min(call_timeout, timeout)

        async with httpx.AsyncClient(
            timeout=call_timeout,
            transport=self._transport,
        ) as client:
            try:
                response = await client.post(
                    self._endpoint,
                    json=self._build_body(text),
                    headers={
                        "xi-api-key": self._api_key,
                        "Accept": self._config.media_type,
                    },
                )
            except httpx.RequestError as exc:
                logger.warning(
                    "ElevenLabs request failed for voice '%s': %s",
                    self._config.voice_id,
                    exc.__class__.__name__,
                )
                raise UpstreamProviderError(
                    Provider.SPEECH, f"request failed: {exc.__class__.__name__}"
                ) from exc

        if response.status_code != httpx.codes.OK:
            message = f"ElevenLabs API error: {response.status_code}"
            try:
                payload = response.json()
            except ValueError:
                payload = None
            if isinstance(payload, dict):
                message = parse_error_detail(payload.get("detail"))
            logger.warning(
                "ElevenLabs rejected synthesis status=%s voice=%s",
                response.status_code,
                self._config.voice_id,
            )
            logger.debug("ElevenLabs error detail: %s", message)
            raise UpstreamProviderError(
                Provider.SPEECH, message, status_code=response.status_code
            )

        audio_bytes = response.content
        if not audio_bytes:
            raise UpstreamProviderError(Provider.SPEECH, "ElevenLabs returned no audio")

        return SpeechResult(
            audio_bytes=audio_bytes,
            media_type=self._config.media_type,
            voice_id=self._config.voice_id,
        )


__all__ = [
    "ElevenLabsSpeechClient",
    "SpeechResult",
    "parse_error_detail",
]
