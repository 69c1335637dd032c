"""FastAPI routers acting as controllers in the MVC architecture."""

from . import audio_guide

__all__ = ["audio_guide"]
