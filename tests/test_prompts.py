from __future__ import annotations

from app.pipelines.audio_guide import AttractionDescription, FactSet, LocationContext
from app.pipelines.audio_guide.prompts import (
    build_facts_messages,
    build_script_messages,
    describe_location,
)

ALHAMBRA = AttractionDescription(
    name="Alhambra",
    category="palace",
    latitude=37.176,
    longitude=-3.5881,
    language="French",
)


def test_location_line_lists_known_parts_only():
    location = LocationContext(city="Granada", country="Spain", valid=True)

    assert describe_location(ALHAMBRA, location) == "Location: Granada, Spain\n"


def test_invalid_or_empty_location_uses_coordinates():
    expected = "Coordinates: 37.176000, -3.588100\n"

    assert describe_location(ALHAMBRA, None) == expected
    assert describe_location(ALHAMBRA, LocationContext.unavailable()) == expected
    assert describe_location(ALHAMBRA, LocationContext(valid=True)) == expected


def test_facts_messages_name_the_attraction_and_language():
    system, user = build_facts_messages(ALHAMBRA, None)

    assert [system.role, user.role] == ["system", "user"]
    assert system.content.endswith("Write your response entirely in French.")
    assert user.content.startswith('Provide 3-5 truly fascinating facts about "Alhambra" (palace).')
    assert "Coordinates: 37.176000, -3.588100" in user.content
    assert user.content.endswith("Write entirely in French.")


def test_script_messages_embed_facts_and_speech_rules():
    facts = FactSet(text="1. Built in the 13th century.", language="French")

    system, user = build_script_messages("Alhambra", facts, "French")

    assert "Write ALL numbers as words" in system.content
    assert "Write entirely in French." in system.content
    assert "1. Built in the 13th century." in user.content
    assert "80-150 words" in user.content
    assert "Write the entire script in French" in user.content
