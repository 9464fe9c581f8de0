"""
Recognition engine interface shared by the real engine and test doubles.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional

from ....config import LANGUAGE_CODE

# Engine error codes
NO_SPEECH = "no-speech"
NOT_ALLOWED = "not-allowed"
NETWORK = "network"
SERVICE_NOT_ALLOWED = "service-not-allowed"


@dataclass
class RecognitionResult:
    """One transcript fragment; interim fragments may still be revised."""
    transcript: str
    is_final: bool


class RecognitionListener(ABC):
    """Receives engine events. Calls arrive on the owner's event loop."""

    @abstractmethod
    def on_result(self, results: List[RecognitionResult]) -> None:
        """Cumulative results of the current utterance: finals, then the interim one."""

    @abstractmethod
    def on_error(self, code: str, message: str = "") -> None:
        ...

    @abstractmethod
    def on_end(self) -> None:
        ...


class RecognitionEngine(ABC):
    """A continuous recognizer with interim results and a fixed language."""

    def __init__(self,
                 language_code: str = LANGUAGE_CODE,
                 interim_results: bool = True,
                 continuous: bool = True):
        self.language_code = language_code
        self.interim_results = interim_results
        self.continuous = continuous
        self.listener: Optional[RecognitionListener] = None

    @abstractmethod
    def start(self) -> None:
        ...

    @abstractmethod
    def stop(self) -> None:
        """Ask the engine to finish; ``on_end`` follows."""
