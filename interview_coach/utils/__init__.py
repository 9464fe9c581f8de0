"""Utility modules for imports, logging, and helpers."""

from .imports import import_device_library, native_stderr_silenced, with_suppressed_audio_warnings
from .logging import setup_logging

__all__ = [
    "import_device_library", "native_stderr_silenced",
    "with_suppressed_audio_warnings", "setup_logging"
]
