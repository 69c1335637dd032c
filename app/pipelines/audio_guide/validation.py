"""Validation stage: normalize the inbound attraction before any network call."""

from __future__ import annotations

import math

from .errors import AttractionValidationError
from .types import DEFAULT_LANGUAGE, AttractionDescription, RawAttraction

MAX_NAME_LENGTH = 500
MAX_CATEGORY_LENGTH = 100
MAX_LANGUAGE_LENGTH = 50


def _check_range(field: str, value: float, bound: float) -> None:
    # NaN compares false against both bounds, so reject it explicitly.
    if math.isnan(value) or value < -bound or value > bound:
        raise AttractionValidationError(
            field, f"{field} must be between {-bound:g} and {bound:g}"
        )


def validate_attraction(raw: RawAttraction) -> AttractionDescription:
    """Return the trimmed description or raise on the first failing field.

    Fields are checked in a fixed order: name, category, latitude,
    longitude, language. A blank language falls back to English.
    """

    name = (raw.name or "").strip()
    if not name:
        raise AttractionValidationError("name", "name is required")
    if len(name) > MAX_NAME_LENGTH:
        raise AttractionValidationError(
            "name", f"name must be at most {MAX_NAME_LENGTH} characters"
        )

    category = (raw.category or "").strip()
    if not category:
        raise AttractionValidationError("category", "category is required")
    if len(category) > MAX_CATEGORY_LENGTH:
        raise AttractionValidationError(
            "category", f"category must be at most {MAX_CATEGORY_LENGTH} characters"
        )

    _check_range("latitude", raw.latitude, 90)
    _check_range("longitude", raw.longitude, 180)

    language = (raw.language or "").strip() or DEFAULT_LANGUAGE
    if len(language) > MAX_LANGUAGE_LENGTH:
        raise AttractionValidationError(
            "language", f"language must be at most {MAX_LANGUAGE_LENGTH} characters"
        )

    return AttractionDescription(
        name=name,
        category=category,
        latitude=float(raw.latitude),
        longitude=float(raw.longitude),
        language=language,
    )


__all__ = ["validate_attraction"]
