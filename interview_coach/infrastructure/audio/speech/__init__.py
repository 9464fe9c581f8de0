"""Speech recognition: the streaming engine and the transcriber that drives it."""

from .engine import (
    RecognitionEngine, RecognitionListener, RecognitionResult,
    NO_SPEECH, NOT_ALLOWED, NETWORK, SERVICE_NOT_ALLOWED
)
from .transcriber import SpeechTranscriber, TranscriberState, combine_results

__all__ = [
    "RecognitionEngine", "RecognitionListener", "RecognitionResult",
    "NO_SPEECH", "NOT_ALLOWED", "NETWORK", "SERVICE_NOT_ALLOWED",
    "SpeechTranscriber", "TranscriberState", "combine_results",
    "GoogleStreamingEngine",
]


def __getattr__(name):
    # google-cloud-speech is only loaded when the streaming engine is needed
    if name == "GoogleStreamingEngine":
        from .stt import GoogleStreamingEngine
        return GoogleStreamingEngine
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
