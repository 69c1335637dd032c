"""Orchestrator for the audio guide generation pipeline.

One run walks a fixed state sequence and stops at the first failure:

1. ``validating`` – trim and check the inbound description (no I/O).
2. ``enriching`` – optional reverse geocoding; failures only downgrade
   the prompt to raw coordinates and raise the location warning.
3. ``generating_facts`` – first generation-provider call.
4. ``composing_script`` – second generation-provider call.
5. ``synthesizing_audio`` – speech-provider call producing MP3 bytes.

A single ``RequestDeadline`` is checked before every external stage and
bounds every call. Nothing is cached between runs and nothing is retried.
"""

from __future__ import annotations

import logging
import time
from typing import Awaitable, TypeVar

from app.telemetry import observe_stage, record_enrichment_failure, record_pipeline_failure

from .deadline import RequestDeadline
from .enrichment import ReverseGeocoder, enrich_location
from .errors import PipelineError
from .facts import ChatCompletionClient, generate_facts
from .script import compose_script
from .synthesis import SpeechClient, synthesize_narration
from .types import PipelineOutcome, PipelineState, RawAttraction
from .validation import validate_attraction

logger = logging.getLogger("app.services.audio_guide_pipeline")

T = TypeVar("T")


class AudioGuidePipeline:
    """Sequence validation, enrichment, facts, script and audio for one request.

    Instances hold only read-only collaborators and settings, so a single
    pipeline is shared by all concurrent requests.
    """

    def __init__(
        self,
        *,
        chat_client: ChatCompletionClient,
        speech_client: SpeechClient,
        geocoder: ReverseGeocoder | None = None,
        facts_max_tokens: int = 500,
        facts_temperature: float = 0.7,
        script_max_tokens: int = 300,
        script_temperature: float = 0.8,
    ) -> None:
        self._chat_client = chat_client
        self._speech_client = speech_client
        self._geocoder = geocoder
        self._facts_max_tokens = facts_max_tokens
        self._facts_temperature = facts_temperature
        self._script_max_tokens = script_max_tokens
        self._script_temperature = script_temperature

    async def _timed(self, state: PipelineState, step: Awaitable[T]) -> T:
        started = time.perf_counter()
        try:
            return await step
        finally:
            elapsed = time.perf_counter() - started
            observe_stage(state.value, elapsed)
            logger.info("Stage %s finished in %.2fs", state.value, elapsed)

    async def run(self, raw: RawAttraction, deadline: RequestDeadline) -> PipelineOutcome:
        """Execute the full chain or raise the first ``PipelineError``."""

        states: list[PipelineState] = [PipelineState.VALIDATING]
        try:
            description = validate_attraction(raw)

            location = None
            if self._geocoder is not None:
                states.append(PipelineState.ENRICHING)
                location = await self._timed(
                    PipelineState.ENRICHING,
                    enrich_location(self._geocoder, description, deadline),
                )
                if not location.valid:
                    record_enrichment_failure()
                    logger.warning(
                        "Location unavailable for '%s' (%.4f, %.4f); using coordinates",
                        description.name,
                        description.latitude,
                        description.longitude,
                    )

            states.append(PipelineState.GENERATING_FACTS)
            deadline.check("fact generation")
            facts = await self._timed(
                PipelineState.GENERATING_FACTS,
                generate_facts(
                    self._chat_client,
                    description,
                    location,
                    deadline,
                    max_tokens=self._facts_max_tokens,
                    temperature=self._facts_temperature,
                ),
            )

            states.append(PipelineState.COMPOSING_SCRIPT)
            deadline.check("script composition")
            script = await self._timed(
                PipelineState.COMPOSING_SCRIPT,
                compose_script(
                    self._chat_client,
                    description.name,
                    facts,
                    description.language,
                    deadline,
                    max_tokens=self._script_max_tokens,
                    temperature=self._script_temperature,
                ),
            )

            states.append(PipelineState.SYNTHESIZING_AUDIO)
            deadline.check("speech synthesis")
            audio = await self._timed(
                PipelineState.SYNTHESIZING_AUDIO,
                synthesize_narration(self._speech_client, script, deadline),
            )
        except PipelineError as exc:
            exc.stage = states[-1].value
            states.append(PipelineState.FAILED)
            provider = exc.provider.value if exc.provider else None
            record_pipeline_failure(exc.origin.value, provider, exc.stage)
            logger.warning(
                "Pipeline failed stage=%s origin=%s provider=%s status=%s: %s",
                exc.stage,
                exc.origin.value,
                provider,
                exc.status_code,
                exc.message,
            )
            raise

        states.append(PipelineState.DONE)
        logger.info(
            "Audio guide ready name=%s language=%s bytes=%s",
            description.name,
            description.language,
            audio.size,
        )
        return PipelineOutcome(
            audio=audio,
            description=description,
            location=location,
            facts=facts,
            script=script,
            states=states,
        )


__all__ = ["AudioGuidePipeline"]
