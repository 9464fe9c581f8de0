"""
Speech transcriber: keeps a recognition engine running while it is wanted.

States::

    idle --start()--> listening --stop() / engine end--> idle
                         ^                                 |
                         +---- auto-restart on end --------+
                               (still wanted, mic on, media playing)
"""
import logging
from enum import Enum
from typing import Callable, List, Optional

from ....interview.events import (
    InterviewEventBus, TranscriptUpdatedEvent, TranscriptionWarningEvent
)
from .engine import RecognitionEngine, RecognitionListener, RecognitionResult, NO_SPEECH

logger = logging.getLogger("transcriber")

NO_SPEECH_MESSAGE = "No speech detected. Please speak into your microphone."
UNSUPPORTED_MESSAGE = "Speech recognition is not supported in this environment."

TranscriptHandler = Callable[[str, bool], None]


class TranscriberState(str, Enum):
    IDLE = "idle"
    LISTENING = "listening"


def combine_results(results: List[RecognitionResult]) -> str:
    """Finalized fragments followed by the interim fragment, space separated."""
    finals = [r.transcript.strip() for r in results if r.is_final]
    interim = [r.transcript.strip() for r in results if not r.is_final]
    return " ".join(t for t in finals + interim if t)


class SpeechTranscriber(RecognitionListener):
    """
    Owns one recognition engine for the lifetime of a media session.

    ``should_listen`` is consulted before every automatic restart so that a
    muted microphone or stopped media ends the restart loop.
    """

    def __init__(self,
                 engine_factory: Callable[[], RecognitionEngine],
                 should_listen: Callable[[], bool] = lambda: True,
                 on_transcript: Optional[TranscriptHandler] = None,
                 event_bus: Optional[InterviewEventBus] = None):
        self.engine_factory = engine_factory
        self.should_listen = should_listen
        self.on_transcript = on_transcript
        self.event_bus = event_bus
        self.state = TranscriberState.IDLE
        self.transcript = ""
        self.unsupported = False
        self.warning: Optional[str] = None
        self._engine: Optional[RecognitionEngine] = None
        self._wanted = False
        self._discarding = False

    @property
    def listening(self) -> bool:
        return self.state == TranscriberState.LISTENING

    def start(self) -> bool:
        """Begin listening. Returns False when recognition is unavailable."""
        if self.unsupported:
            return False
        self._wanted = True
        if self.listening:
            return True
        return self._start_engine()

    def stop(self) -> None:
        """Stop listening and cancel any pending automatic restart."""
        self._wanted = False
        if self._engine is not None and self.listening:
            self._engine.stop()
        self.state = TranscriberState.IDLE

    def close(self) -> None:
        """Teardown: stop and drop the engine."""
        self.stop()
        if self._engine is not None:
            self._engine.listener = None
            self._engine = None

    def restart_utterance(self) -> None:
        """
        Forget the current utterance so the next question starts from an
        empty buffer. Results still in flight from the old stream are dropped.
        """
        self.transcript = ""
        if self._engine is not None and self.listening:
            self._discarding = True
            self._engine.stop()

    # RecognitionListener

    def on_result(self, results: List[RecognitionResult]) -> None:
        if self._discarding:
            return
        text = combine_results(results)
        is_final = bool(results) and results[-1].is_final
        self.transcript = text
        if self.event_bus:
            self.event_bus.emit(TranscriptUpdatedEvent(text, is_final))
        if self.on_transcript:
            self.on_transcript(text, is_final)

    def on_error(self, code: str, message: str = "") -> None:
        if code == NO_SPEECH:
            logger.info("No speech detected")
            self.warning = NO_SPEECH_MESSAGE
            self._emit_warning(code, NO_SPEECH_MESSAGE, fatal=False)
            return

        logger.error("Recognition error '%s': %s", code, message)
        self.unsupported = True
        self._wanted = False
        self.warning = UNSUPPORTED_MESSAGE
        self._emit_warning(code, UNSUPPORTED_MESSAGE, fatal=True)

    def on_end(self) -> None:
        self.state = TranscriberState.IDLE
        self._discarding = False
        if self._wanted and not self.unsupported and self.should_listen():
            logger.debug("Recognition ended, restarting")
            self._start_engine()

    def _start_engine(self) -> bool:
        try:
            if self._engine is None:
                self._engine = self.engine_factory()
                self._engine.listener = self
            self._engine.start()
        except Exception as e:
            self.on_error("unavailable", str(e))
            return False
        self.state = TranscriberState.LISTENING
        return True

    def _emit_warning(self, code: str, message: str, fatal: bool) -> None:
        if self.event_bus:
            self.event_bus.emit(TranscriptionWarningEvent(code, message, fatal))
