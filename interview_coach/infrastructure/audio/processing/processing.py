"""
Basic audio processing functions: format conversions and resampling.
"""
from math import gcd

import numpy as np
from scipy.signal import resample_poly

from ....config import SAMPLE_RATE_TARGET


def pcm16_to_float(raw: bytes, channels: int = 1) -> np.ndarray:
    """Interleaved PCM16 bytes to a (frames, channels) float array in [-1, 1]."""
    samples = np.frombuffer(raw, dtype=np.int16).astype(np.float32) / 32768.0
    return samples.reshape(-1, channels)


def stereo_to_mono(x: np.ndarray) -> np.ndarray:
    """Convert multi-channel audio to mono by averaging channels."""
    if x.ndim == 1:
        return x
    return np.mean(x, axis=1)


def resample_to_target(mono: np.ndarray, sr_in: int, sr_out: int = SAMPLE_RATE_TARGET) -> np.ndarray:
    """Resample mono audio from ``sr_in`` to ``sr_out``."""
    if sr_in == sr_out:
        return mono.astype(np.float32)
    factor = gcd(sr_in, sr_out)
    return resample_poly(mono, up=sr_out // factor, down=sr_in // factor).astype(np.float32)


def float_to_pcm16(audio: np.ndarray) -> bytes:
    """Float audio in [-1, 1] to PCM16 bytes, clipping out-of-range samples."""
    return np.clip(audio * 32767, -32768, 32767).astype(np.int16).tobytes()


def to_recognition_chunk(raw: bytes, channels: int, sr_in: int) -> bytes:
    """Device capture chunk to 16 kHz mono PCM16, the format the recognizer expects."""
    mono = stereo_to_mono(pcm16_to_float(raw, channels))
    return float_to_pcm16(resample_to_target(mono, sr_in))
