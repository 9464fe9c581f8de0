"""HTTP proxy between the coach front end and the Gemini API."""

from .app import create_app

__all__ = ["create_app"]
