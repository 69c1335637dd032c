"""Prompt construction for the two generation calls.

Both builders return the ordered system/user messages sent to the chat
provider. The wording is kept in one place so the facts and script stages
stay thin.
"""

from __future__ import annotations

from .types import AttractionDescription, ChatMessage, FactSet, LocationContext

FACTS_SYSTEM_PROMPT = (
    "You are a knowledgeable tour guide with expertise in history, architecture, "
    "and culture. Provide accurate, engaging facts suitable for tourists. "
    "Write your response entirely in {language}."
)

FACTS_USER_PROMPT = """Provide 3-5 truly fascinating facts about "{name}" ({category}).

{location_line}
Focus on:
- Surprising or little-known facts that most visitors wouldn't know
- Unique historical events or stories connected to this place
- Interesting architectural or design details with specific context
- Cultural significance and local traditions
- Notable people or events associated with this location

Avoid:
- Generic information easily found in any guidebook
- Obvious facts about the category (e.g., "this museum has art")
- Vague statements without specific details

Each fact should make the visitor say "I didn't know that!" Be concise but engaging. \
Each fact should be 1-2 sentences. Write entirely in {language}."""

SCRIPT_SYSTEM_PROMPT = """You are a professional audio guide scriptwriter. Write natural, \
conversational scripts for text-to-speech narration. Avoid visual references like \
"as you can see". Write entirely in {language}.

CRITICAL TEXT-TO-SPEECH REQUIREMENTS:
- Write ALL numbers as words (e.g., "eighteen eighty-nine" not "1889", "three hundred" not "300")
- Write dates in full words (e.g., "the fifteenth of March, nineteen twenty-one" not "March 15, 1921")
- Write ordinals as words (e.g., "nineteenth century" not "19th century", "the third floor" not "the 3rd floor")
- Expand ALL abbreviations (e.g., "Saint" not "St.", "Doctor" not "Dr.", "Mister" not "Mr.")
- Spell out acronyms or explain them (e.g., "UNESCO, the United Nations cultural organization")
- Avoid special characters and symbols
- Use phonetic-friendly phrasing for foreign or difficult words"""

SCRIPT_USER_PROMPT = """Write a 30-60 second audio guide script for "{name}" based on these facts:

{facts}

Requirements:
- Start with a warm welcome mentioning the attraction name
- Share 2-3 of the most interesting facts naturally
- Use conversational, engaging language
- End with an invitation to explore or take photos
- Keep it between 80-150 words for optimal audio length
- Write the entire script in {language}
- IMPORTANT: All numbers, dates, and abbreviations must be written as full words for text-to-speech"""


def describe_location(
    description: AttractionDescription,
    location: LocationContext | None,
) -> str:
    """Render the location line, falling back to raw coordinates."""

    parts = location.parts() if location is not None else []
    if parts:
        return f"Location: {', '.join(parts)}\n"
    return f"Coordinates: {description.latitude:f}, {description.longitude:f}\n"


def build_facts_messages(
    description: AttractionDescription,
    location: LocationContext | None,
) -> list[ChatMessage]:
    return [
        ChatMessage(
            role="system",
            content=FACTS_SYSTEM_PROMPT.format(language=description.language),
        ),
        ChatMessage(
            role="user",
            content=FACTS_USER_PROMPT.format(
                name=description.name,
                category=description.category,
                location_line=describe_location(description, location),
                language=description.language,
            ),
        ),
    ]


def build_script_messages(
    attraction_name: str,
    facts: FactSet,
    language: str,
) -> list[ChatMessage]:
    return [
        ChatMessage(
            role="system",
            content=SCRIPT_SYSTEM_PROMPT.format(language=language),
        ),
        ChatMessage(
            role="user",
            content=SCRIPT_USER_PROMPT.format(
                name=attraction_name,
                facts=facts.text,
                language=language,
            ),
        ),
    ]


__all__ = [
    "build_facts_messages",
    "build_script_messages",
    "describe_location",
]
