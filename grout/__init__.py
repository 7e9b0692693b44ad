"""Grout - avatar and placeholder images over HTTP."""

from .api import app, create_app
from .render import Renderer
from .service import ImageService

__version__ = "1.0.0"

__all__ = [
    "ImageService",
    "Renderer",
    "app",
    "create_app",
]
