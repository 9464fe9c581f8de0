"""
Audio conversion and speech recognition.

- processing: PCM conversion, down-mixing and resampling for the recognizer
- speech: streaming speech-to-text and the transcriber state machine
"""

from .processing import to_recognition_chunk
from .speech import SpeechTranscriber, TranscriberState

__all__ = [
    "to_recognition_chunk",
    "SpeechTranscriber",
    "TranscriberState"
]
