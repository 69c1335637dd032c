"""Fact generation stage (first call to the generation provider)."""

from __future__ import annotations

import logging
from typing import Protocol, Sequence

from .deadline import RequestDeadline
from .prompts import build_facts_messages
from .types import AttractionDescription, ChatMessage, FactSet, LocationContext

logger = logging.getLogger("app.services.audio_guide_pipeline")


class ChatCompletionClient(Protocol):
    async def complete(
        self,
        messages: Sequence[ChatMessage],
        *,
        max_tokens: int,
        temperature: float,
        timeout: float | None = None,
    ) -> str: ...


async def generate_facts(
    client: ChatCompletionClient,
    description: AttractionDescription,
    location: LocationContext | None,
    deadline: RequestDeadline,
    *,
    max_tokens: int = 500,
    temperature: float = 0.7,
) -> FactSet:
    """Ask the provider for 3-5 specific facts in the target language."""

    messages = build_facts_messages(description, location)
    logger.info(
        "Generating facts name=%s language=%s located=%s",
        description.name,
        description.language,
        bool(location and location.parts()),
    )
    text = await deadline.run(
        "fact generation",
        lambda: client.complete(
            messages,
            max_tokens=max_tokens,
            temperature=temperature,
            timeout=deadline.remaining(),
        ),
    )
    return FactSet(text=text, language=description.language)


__all__ = ["ChatCompletionClient", "generate_facts"]
