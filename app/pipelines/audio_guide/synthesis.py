"""TTS synthesis stage (single call to the speech provider)."""

from __future__ import annotations

import logging
from typing import Protocol

from .deadline import RequestDeadline
from .types import AudioArtifact, NarrationScript

logger = logging.getLogger("app.services.audio_guide_pipeline")


class SynthesizedSpeech(Protocol):
    audio_bytes: bytes
    media_type: str
    voice_id: str


class SpeechClient(Protocol):
    async def synthesize(
        self,
        text: str,
        *,
        timeout: float | None = None,
    ) -> SynthesizedSpeech: ...


async def synthesize_narration(
    client: SpeechClient,
    script: NarrationScript,
    deadline: RequestDeadline,
) -> AudioArtifact:
    """Synthesize the narration and hand back the compressed audio."""

    result = await deadline.run(
        "speech synthesis",
        lambda: client.synthesize(script.text, timeout=deadline.remaining()),
    )
    logger.info(
        "Synthesized narration voice=%s bytes=%s",
        result.voice_id,
        len(result.audio_bytes),
    )
    return AudioArtifact(
        audio_bytes=result.audio_bytes,
        media_type=result.media_type,
        voice_id=result.voice_id,
    )


__all__ = ["SpeechClient", "SynthesizedSpeech", "synthesize_narration"]
