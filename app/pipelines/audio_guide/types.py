"""Typed containers shared across the audio guide pipeline.

These dataclasses live in their own module so the stage modules
(`validation`, `enrichment`, `facts`, `script`, `synthesis`, `flow`) can
import them without creating circular dependencies.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


DEFAULT_LANGUAGE = "English"


@dataclass(frozen=True)
class RawAttraction:
    """Inbound description exactly as the boundary layer received it."""

    name: str = ""
    category: str = ""
    latitude: float = 0.0
    longitude: float = 0.0
    language: str | None = None


@dataclass(frozen=True)
class AttractionDescription:
    """Validated, trimmed attraction; never mutated after validation."""

    name: str
    category: str
    latitude: float
    longitude: float
    language: str = DEFAULT_LANGUAGE


@dataclass(frozen=True)
class LocationContext:
    """Best-effort reverse geocoding result attached to a description."""

    country: str = ""
    city: str = ""
    street: str = ""
    neighborhood: str = ""
    valid: bool = False

    @classmethod
    def unavailable(cls) -> "LocationContext":
        return cls(valid=False)

    def parts(self) -> list[str]:
        """Known address parts, most specific first."""

        if not self.valid:
            return []
        return [
            part
            for part in (self.street, self.neighborhood, self.city, self.country)
            if part
        ]


@dataclass(frozen=True)
class ChatMessage:
    """Role-tagged message sent to the generation provider."""

    role: str
    content: str


@dataclass(frozen=True)
class FactSet:
    """3-5 short factual statements in the target language."""

    text: str
    language: str


@dataclass(frozen=True)
class NarrationScript:
    """Speech-normalized narration, roughly 80-150 words."""

    text: str
    language: str

    @property
    def word_count(self) -> int:
        return len(self.text.split())


@dataclass(frozen=True)
class AudioArtifact:
    """Synthesized narration handed to the boundary layer as-is."""

    audio_bytes: bytes
    media_type: str
    voice_id: str

    @property
    def size(self) -> int:
        return len(self.audio_bytes)


class PipelineState(str, Enum):
    """States of one pipeline run, in execution order."""

    VALIDATING = "validating"
    ENRICHING = "enriching"
    GENERATING_FACTS = "generating_facts"
    COMPOSING_SCRIPT = "composing_script"
    SYNTHESIZING_AUDIO = "synthesizing_audio"
    DONE = "done"
    FAILED = "failed"


@dataclass
class PipelineOutcome:
    """Successful result plus the advisory signals gathered along the way."""

    audio: AudioArtifact
    description: AttractionDescription
    location: LocationContext | None
    facts: FactSet
    script: NarrationScript
    states: list[PipelineState] = field(default_factory=list)

    @property
    def location_warning(self) -> bool:
        """True when enrichment ran and could not resolve the coordinates."""

        return self.location is not None and not self.location.valid
