"""Integration-style tests for the /generate-audio endpoint."""

from __future__ import annotations

import asyncio

import pytest
from fastapi.testclient import TestClient

from app.config.settings import ConfigurationError, PipelineConfig, Settings
from app.controllers.audio_guide import (
    LOCATION_WARNING_HEADER,
    LOCATION_WARNING_MESSAGE,
    _cancel_on_disconnect,
    get_audio_guide_pipeline,
    get_pipeline_config,
)
from app.main import app, create_app
from app.pipelines.audio_guide import (
    AudioGuidePipeline,
    LocationContext,
    Provider,
    RequestDeadline,
    UpstreamProviderError,
)
from app.pipelines.audio_guide.errors import (
    CONFIGURATION_MESSAGE,
    SPEECH_BUSY_MESSAGE,
    TIMEOUT_MESSAGE,
)

from conftest import (
    FAKE_AUDIO,
    FakeGeocoder,
    RecordingChatClient,
    RecordingSpeechClient,
)

EIFFEL = {
    "name": "Eiffel Tower",
    "category": "landmark",
    "latitude": 48.8584,
    "longitude": 2.2945,
    "language": "English",
}


@pytest.fixture
def use_pipeline():
    """Route the endpoint to a pipeline built from test fakes."""

    def install(pipeline: AudioGuidePipeline, timeout_seconds: float = 90.0) -> None:
        app.dependency_overrides[get_audio_guide_pipeline] = lambda: pipeline
        app.dependency_overrides[get_pipeline_config] = lambda: PipelineConfig(
            request_timeout_seconds=timeout_seconds,
            disconnect_poll_seconds=0.01,
        )

    yield install

    app.dependency_overrides.clear()


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


def test_generate_audio_returns_mpeg(client, use_pipeline, pipeline, events):
    use_pipeline(pipeline)

    response = client.post("/generate-audio", json=EIFFEL)

    assert response.status_code == 200
    assert response.headers["content-type"] == "audio/mpeg"
    assert response.content == FAKE_AUDIO
    assert LOCATION_WARNING_HEADER not in response.headers
    assert events == ["geocode", "chat", "chat", "speech"]


def test_unresolved_location_sets_warning_header(client, use_pipeline, events, chat_client, speech_client):
    use_pipeline(
        AudioGuidePipeline(
            chat_client=chat_client,
            speech_client=speech_client,
            geocoder=FakeGeocoder(events, location=LocationContext.unavailable()),
        )
    )

    response = client.post("/generate-audio", json=EIFFEL)

    assert response.status_code == 200
    assert response.content == FAKE_AUDIO
    assert response.headers[LOCATION_WARNING_HEADER] == LOCATION_WARNING_MESSAGE


def test_missing_name_is_rejected_without_provider_calls(client, use_pipeline, pipeline, events):
    use_pipeline(pipeline)

    response = client.post("/generate-audio", json={**EIFFEL, "name": "   "})

    assert response.status_code == 400
    assert response.json() == {"error": "Invalid request: name is required"}
    assert events == []


def test_null_fields_are_read_as_empty(client, use_pipeline, pipeline, events):
    use_pipeline(pipeline)

    response = client.post("/generate-audio", json={**EIFFEL, "name": None})

    assert response.status_code == 400
    assert response.json() == {"error": "Invalid request: name is required"}
    assert events == []


def test_null_language_defaults_to_english(client, use_pipeline, pipeline, chat_client):
    use_pipeline(pipeline)

    response = client.post("/generate-audio", json={**EIFFEL, "language": None})

    assert response.status_code == 200
    system, _ = chat_client.calls[0]["messages"]
    assert "Write your response entirely in English." in system.content


def test_out_of_range_latitude(client, use_pipeline, pipeline):
    use_pipeline(pipeline)

    response = client.post("/generate-audio", json={**EIFFEL, "latitude": 123.0})

    assert response.status_code == 400
    assert response.json() == {"error": "Invalid request: latitude must be between -90 and 90"}


def test_wrongly_typed_field_is_bad_request(client, use_pipeline, pipeline, events):
    use_pipeline(pipeline)

    response = client.post("/generate-audio", json={**EIFFEL, "latitude": "north"})

    assert response.status_code == 400
    assert response.json()["error"].startswith("Invalid request: latitude")
    assert events == []


def test_malformed_json_is_bad_request(client, use_pipeline, pipeline):
    use_pipeline(pipeline)

    response = client.post(
        "/generate-audio",
        content=b'{"name": "Eiffel',
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 400
    assert response.json() == {"error": "Invalid request: Invalid JSON"}


def test_get_is_method_not_allowed(client, use_pipeline, pipeline):
    use_pipeline(pipeline)

    response = client.get("/generate-audio")

    assert response.status_code == 405
    assert response.json() == {"error": "Method not allowed"}


def test_speech_rate_limit_maps_to_503(client, use_pipeline, events, chat_client, geocoder):
    speech_client = RecordingSpeechClient(
        events,
        error=UpstreamProviderError(Provider.SPEECH, "too many requests", status_code=429),
    )
    use_pipeline(
        AudioGuidePipeline(
            chat_client=chat_client,
            speech_client=speech_client,
            geocoder=geocoder,
        )
    )

    response = client.post("/generate-audio", json=EIFFEL)

    assert response.status_code == 503
    assert response.json() == {"error": SPEECH_BUSY_MESSAGE}


def test_rejected_credentials_map_to_configuration_error(client, use_pipeline, events, speech_client, geocoder):
    chat_client = RecordingChatClient(
        events,
        replies=[
            UpstreamProviderError(
                Provider.GENERATION,
                "Incorrect API key provided",
                status_code=401,
            )
        ],
    )
    use_pipeline(
        AudioGuidePipeline(
            chat_client=chat_client,
            speech_client=speech_client,
            geocoder=geocoder,
        )
    )

    response = client.post("/generate-audio", json=EIFFEL)

    assert response.status_code == 502
    assert response.json() == {"error": CONFIGURATION_MESSAGE}
    assert "Incorrect API key" not in response.text
    assert speech_client.texts == []


def test_exhausted_deadline_maps_to_504(client, use_pipeline, events, speech_client, geocoder):
    async def hang():
        await asyncio.sleep(30)
        return "never"

    use_pipeline(
        AudioGuidePipeline(
            chat_client=RecordingChatClient(events, replies=[hang]),
            speech_client=speech_client,
            geocoder=geocoder,
        ),
        timeout_seconds=0.2,
    )

    response = client.post("/generate-audio", json=EIFFEL)

    assert response.status_code == 504
    assert response.json() == {"error": TIMEOUT_MESSAGE}


def test_disconnect_watcher_cancels_deadline():
    class DisconnectingRequest:
        def __init__(self) -> None:
            self.polls = 0

        async def is_disconnected(self) -> bool:
            self.polls += 1
            return self.polls >= 3

    request = DisconnectingRequest()
    deadline = RequestDeadline(5)

    asyncio.run(_cancel_on_disconnect(request, deadline, 0.001))

    assert deadline.cancelled is True
    assert request.polls == 3


def test_health_and_root(client):
    health = client.get("/health")
    root = client.get("/")

    assert health.status_code == 200
    assert health.json()["status"] == "healthy"
    assert root.json()["status"] == "operational"


def test_metrics_exposes_pipeline_series(client, use_pipeline, pipeline):
    use_pipeline(pipeline)
    client.post("/generate-audio", json=EIFFEL)

    response = client.get("/metrics")

    assert response.status_code == 200
    assert "audio_guide_stage_duration_seconds" in response.text
    assert 'route="/generate-audio"' in response.text


def test_missing_credentials_fail_at_startup(monkeypatch):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    monkeypatch.setenv("ELEVENLABS_API_KEY", "present")

    with pytest.raises(ConfigurationError, match="OPENAI_API_KEY"):
        Settings().require_credentials()

    with pytest.raises(ConfigurationError):
        create_app(Settings())
