"""Thin OpenAI chat-completions client used for facts and scripts."""

from __future__ import annotations

import logging
from typing import Any, Sequence

import httpx

from app.config.settings import OpenAIConfig
from app.pipelines.audio_guide.errors import Provider, UpstreamProviderError
from app.pipelines.audio_guide.types import ChatMessage

logger = logging.getLogger(__name__)


def _parse_error_body(response: httpx.Response) -> tuple[str, str | None]:
    """Extract ``(message, code)`` from an OpenAI error payload."""

    fallback = f"OpenAI API error: {response.status_code}"
    try:
        payload = response.json()
    except ValueError:
        return fallback, None

    error = payload.get("error") if isinstance(payload, dict) else None
    if not isinstance(error, dict):
        return fallback, None
    message = error.get("message")
    code = error.get("code")
    return (
        message if isinstance(message, str) and message else fallback,
        str(code) if code is not None else None,
    )


class OpenAIChatClient:
    """Invoke the chat-completions endpoint with a fixed model."""

    def __init__(
        self,
        config: OpenAIConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config = config
        self._api_key = config.api_key.get_secret_value() if config.api_key else ""
        self._endpoint = config.base_url.rstrip("/") + "/chat/completions"
        self._transport = transport

    async def complete(
        self,
        messages: Sequence[ChatMessage],
        *,
        max_tokens: int,
        temperature: float,
        timeout: float | None = None,
    ) -> str:
        """Run one completion and return the first choice's text."""

        body: dict[str, Any] = {
            "model": self._config.model,
            "messages": [
                {"role": message.role, "content": message.content}
                for message in messages
            ],
            "max_tokens": max_tokens,
            "temperature": temperature,
        }
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
                    json=body,
                    headers={"Authorization": f"Bearer {self._api_key}"},
                )
            except httpx.RequestError as exc:
                logger.warning("OpenAI request failed: %s", exc.__class__.__name__)
                raise UpstreamProviderError(
                    Provider.GENERATION, f"request failed: {exc.__class__.__name__}"
                ) from exc

        if response.status_code != httpx.codes.OK:
            message, code = _parse_error_body(response)
            logger.warning(
                "OpenAI rejected completion status=%s code=%s",
                response.status_code,
                code,
            )
            logger.debug("OpenAI error message: %s", message)
            raise UpstreamProviderError(
                Provider.GENERATION,
                message,
                status_code=response.status_code,
                code=code,
            )

        try:
            payload = response.json()
            content = payload["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as exc:
            raise UpstreamProviderError(
                Provider.GENERATION, "no response from OpenAI"
            ) from exc

        if not isinstance(content, str) or not content.strip():
            raise UpstreamProviderError(Provider.GENERATION, "empty response from OpenAI")
        return content.strip()


__all__ = ["OpenAIChatClient"]
