"""Shared fixtures: credentials, fake providers and a controllable clock."""

from __future__ import annotations

import asyncio
import os
import sys
import tempfile
from pathlib import Path
from typing import Any, Callable

import pytest

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

_LOG_DIR = Path(tempfile.gettempdir()) / "audio-guide-tests"
os.environ.setdefault("OPENAI_API_KEY", "test-openai-key")
os.environ.setdefault("ELEVENLABS_API_KEY", "test-elevenlabs-key")
os.environ.setdefault("LOG_FILE", str(_LOG_DIR / "app.log"))
os.environ.setdefault("PIPELINE_LOG_FILE", str(_LOG_DIR / "pipeline.log"))

from app.pipelines.audio_guide import (  # noqa: E402
    AudioGuidePipeline,
    LocationContext,
    RawAttraction,
)
from app.services.speech import SpeechResult  # noqa: E402

FAKE_FACTS = "1. The tower was meant to stand for only twenty years.\n2. It grows in summer."
FAKE_SCRIPT = "Welcome to the Eiffel Tower! Enjoy exploring."
FAKE_AUDIO = b"ID3-fake-mp3-bytes"


class FakeClock:
    """Monotonic clock stand-in that only moves when told to."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class RecordingChatClient:
    """Chat client fake that replays ``replies`` and records every call.

    A reply may be a string, an exception instance to raise, or a callable
    returning an awaitable for custom behaviour (sleeping, clock moves...).
    """

    def __init__(self, events: list[str], replies: list[Any] | None = None) -> None:
        self.events = events
        self.replies = list(replies if replies is not None else [FAKE_FACTS, FAKE_SCRIPT])
        self.calls: list[dict[str, Any]] = []
        self.cancelled = False

    async def complete(self, messages, *, max_tokens, temperature, timeout=None):
        self.events.append("chat")
        self.calls.append(
            {
                "messages": list(messages),
                "max_tokens": max_tokens,
                "temperature": temperature,
                "timeout": timeout,
            }
        )
        reply = self.replies[(len(self.calls) - 1) % len(self.replies)]
        if isinstance(reply, BaseException):
            raise reply
        if callable(reply):
            try:
                return await reply()
            except asyncio.CancelledError:
                self.cancelled = True
                raise
        return reply


class RecordingSpeechClient:
    def __init__(self, events: list[str], error: BaseException | None = None) -> None:
        self.events = events
        self.error = error
        self.texts: list[str] = []

    async def synthesize(self, text, *, timeout=None):
        self.events.append("speech")
        self.texts.append(text)
        if self.error is not None:
            raise self.error
        return SpeechResult(audio_bytes=FAKE_AUDIO, media_type="audio/mpeg", voice_id="test-voice")


class FakeGeocoder:
    def __init__(
        self,
        events: list[str],
        location: LocationContext | None = None,
        on_call: Callable[[], None] | None = None,
    ) -> None:
        self.events = events
        self.location = location or LocationContext(
            country="France",
            city="Paris",
            street="Avenue Anatole France",
            neighborhood="Gros-Caillou",
            valid=True,
        )
        self.on_call = on_call
        self.timeout_seconds = 5.0
        self.calls: list[tuple[float, float]] = []

    async def reverse(self, latitude, longitude, *, timeout=None):
        self.events.append("geocode")
        self.calls.append((latitude, longitude))
        if self.on_call is not None:
            self.on_call()
        return self.location


@pytest.fixture
def events() -> list[str]:
    return []


@pytest.fixture
def chat_client(events) -> RecordingChatClient:
    return RecordingChatClient(events)


@pytest.fixture
def speech_client(events) -> RecordingSpeechClient:
    return RecordingSpeechClient(events)


@pytest.fixture
def geocoder(events) -> FakeGeocoder:
    return FakeGeocoder(events)


@pytest.fixture
def pipeline(chat_client, speech_client, geocoder) -> AudioGuidePipeline:
    return AudioGuidePipeline(
        chat_client=chat_client,
        speech_client=speech_client,
        geocoder=geocoder,
    )


@pytest.fixture
def eiffel() -> RawAttraction:
    return RawAttraction(
        name="  Eiffel Tower ",
        category="landmark",
        latitude=48.8584,
        longitude=2.2945,
    )
