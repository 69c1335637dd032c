"""Script composition stage (second call to the generation provider)."""

from __future__ import annotations

import logging

from .deadline import RequestDeadline
from .facts import ChatCompletionClient
from .prompts import build_script_messages
from .types import FactSet, NarrationScript

logger = logging.getLogger("app.services.audio_guide_pipeline")


async def compose_script(
    client: ChatCompletionClient,
    attraction_name: str,
    facts: FactSet,
    language: str,
    deadline: RequestDeadline,
    *,
    max_tokens: int = 300,
    temperature: float = 0.8,
) -> NarrationScript:
    """Turn the facts into a speech-ready narration."""

    messages = build_script_messages(attraction_name, facts, language)
    logger.info("Composing script name=%s language=%s", attraction_name, language)
    text = await deadline.run(
        "script composition",
        lambda: client.complete(
            messages,
            max_tokens=max_tokens,
            temperature=temperature,
            timeout=deadline.remaining(),
        ),
    )
    script = NarrationScript(text=text, language=language)
    logger.info("Script composed name=%s words=%s", attraction_name, script.word_count)
    return script


__all__ = ["compose_script"]
