"""Best-effort location enrichment stage."""

from __future__ import annotations

import logging
from typing import Protocol

from .deadline import RequestDeadline
from .errors import PipelineCancelledError, PipelineTimeoutError
from .types import AttractionDescription, LocationContext

logger = logging.getLogger("app.services.audio_guide_pipeline")


class ReverseGeocoder(Protocol):
    timeout_seconds: float

    async def reverse(
        self,
        latitude: float,
        longitude: float,
        *,
        timeout: float | None = None,
    ) -> LocationContext: ...


async def enrich_location(
    geocoder: ReverseGeocoder,
    description: AttractionDescription,
    deadline: RequestDeadline,
) -> LocationContext:
    """Resolve the coordinates under a short sub-deadline; never raises."""

    try:
        return await deadline.run(
            "enrichment",
            lambda: geocoder.reverse(
                description.latitude,
                description.longitude,
                timeout=min(geocoder.timeout_seconds, deadline.remaining()),
            ),
            cap_seconds=geocoder.timeout_seconds,
        )
    except (PipelineTimeoutError, PipelineCancelledError) as exc:
        logger.info("Enrichment skipped for '%s': %s", description.name, exc)
        return LocationContext.unavailable()
    except Exception:
        logger.warning(
            "Enrichment failed for '%s'; continuing without location",
            description.name,
            exc_info=True,
        )
        return LocationContext.unavailable()


__all__ = ["ReverseGeocoder", "enrich_location"]
