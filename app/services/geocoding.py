"""Nominatim reverse geocoding used to give prompts a human-readable place."""

from __future__ import annotations

import logging
from typing import Any, Mapping

import httpx

from app.config.settings import GeocodingConfig
from app.pipelines.audio_guide.types import LocationContext

logger = logging.getLogger(__name__)


def _first_present(address: Mapping[str, Any], *keys: str) -> str:
    for key in keys:
        value = address.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return ""


def location_from_payload(payload: Any) -> LocationContext:
    """Map a Nominatim ``format=json`` body onto a ``LocationContext``."""

    if not isinstance(payload, Mapping):
        return LocationContext.unavailable()
    address = payload.get("address")
    if not isinstance(address, Mapping):
        return LocationContext.unavailable()

    return LocationContext(
        country=_first_present(address, "country"),
        city=_first_present(address, "city", "town", "village"),
        street=_first_present(address, "road", "street"),
        neighborhood=_first_present(address, "suburb", "neighbourhood"),
        valid=True,
    )


class NominatimGeocoder:
    """Resolve coordinates to an address; failures degrade, never raise."""

    def __init__(
        self,
        config: GeocodingConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config = config
        self._transport = transport

    @property
    def timeout_seconds(self) -> float:
        return self._config.timeout_seconds

    async def reverse(
        self,
        latitude: float,
        longitude: float,
        *,
        timeout: float | None = None,
    ) -> LocationContext:
        call_timeout = self._config.timeout_seconds
        if timeout is not None:
            call_timeout = min(call_timeout, timeout)

        try:
            async with httpx.AsyncClient(
                timeout=call_timeout,
                transport=self._transport,
                headers={"User-Agent": self._config.user_agent},
            ) as client:
                response = await client.get(
                    self._config.reverse_url,
                    params={
                        "lat": f"{latitude:f}",
                        "lon": f"{longitude:f}",
                        "format": "json",
                    },
                )
                response.raise_for_status()
                payload = response.json()
        except httpx.HTTPStatusError as exc:
            logger.info(
                "Reverse geocoding returned HTTP %s for %.4f,%.4f",
                exc.response.status_code,
                latitude,
                longitude,
            )
            return LocationContext.unavailable()
        except httpx.RequestError as exc:
            logger.info(
                "Reverse geocoding unavailable for %.4f,%.4f: %s",
                latitude,
                longitude,
                exc.__class__.__name__,
            )
            return LocationContext.unavailable()
        except ValueError:
            logger.info("Reverse geocoding returned malformed JSON")
            return LocationContext.unavailable()

        return location_from_payload(payload)


__all__ = ["NominatimGeocoder", "location_from_payload"]
