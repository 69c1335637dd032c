"""Schema for audio guide generation requests."""

from typing import Optional

from pydantic import BaseModel

from app.pipelines.audio_guide import RawAttraction


class AttractionRequest(BaseModel):
    """Inbound attraction; field rules are enforced by the pipeline validator.

    JSON ``null`` is accepted for every field and read as the zero value.
    """

    name: Optional[str] = None
    category: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    language: Optional[str] = None

    def to_raw(self) -> RawAttraction:
        return RawAttraction(
            name=self.name or "",
            category=self.category or "",
            latitude=self.latitude if self.latitude is not None else 0.0,
            longitude=self.longitude if self.longitude is not None else 0.0,
            language=self.language,
        )
