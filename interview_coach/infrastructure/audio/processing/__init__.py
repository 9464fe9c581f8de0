"""Audio processing helpers."""

from .processing import (
    pcm16_to_float,
    stereo_to_mono,
    resample_to_target,
    float_to_pcm16,
    to_recognition_chunk,
)

__all__ = [
    "pcm16_to_float",
    "stereo_to_mono",
    "resample_to_target",
    "float_to_pcm16",
    "to_recognition_chunk",
]
