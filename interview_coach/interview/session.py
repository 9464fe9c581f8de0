"""
Interview session: wires media, transcription, debouncing, answers,
navigation, chat and scoring for one candidate.

All state changes happen on the event loop thread. The only blocking work
(remote coach calls) runs in the loop's default executor.
"""
import asyncio
import logging
import time
from typing import Callable, Optional, Sequence

from ..config import Config, get_config
from ..infrastructure.audio.speech import SpeechTranscriber, RecognitionEngine
from ..infrastructure.media.acquisition import MediaAcquisition, SourceKind
from ..infrastructure.media.devices import DeviceMediaFactory
from .aggregator import AnswerAggregator
from .coach import CoachChat, RemoteCoachProxy, ScoreService
from .debounce import TranscriptDebouncer
from .events import (
    InterviewEventBus, EventLogger, InterviewMetrics,
    EventType, ScoresReadyEvent, ErrorOccurredEvent
)
from .models import ChatMessage, InterviewSnapshot, ScoreCard
from .navigator import QuestionNavigator

logger = logging.getLogger("interview_session")


def format_elapsed(seconds: float) -> str:
    """``mm:ss:00``; the last field is always zero."""
    seconds = int(seconds)
    return f"{seconds // 60:02d}:{seconds % 60:02d}:00"


class ElapsedTimer:
    """Counts time while media is running; pauses while it is stopped."""

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self.clock = clock
        self._accumulated = 0.0
        self._started_at: Optional[float] = None

    @property
    def running(self) -> bool:
        return self._started_at is not None

    @property
    def seconds(self) -> float:
        if self._started_at is None:
            return self._accumulated
        return self._accumulated + self.clock() - self._started_at

    def start(self) -> None:
        if self._started_at is None:
            self._started_at = self.clock()

    def pause(self) -> None:
        if self._started_at is not None:
            self._accumulated += self.clock() - self._started_at
            self._started_at = None

    def reset(self) -> None:
        self._accumulated = 0.0
        self._started_at = self.clock() if self.running else None


class InterviewSession:
    """
    One mock interview from first question to score card.

    Collaborators can be injected for testing; by default real devices, the
    Google streaming recognizer and the HTTP coach proxy are used.
    """

    def __init__(self,
                 config: Optional[Config] = None,
                 user_name: str = "",
                 questions: Optional[Sequence[str]] = None,
                 devices: Optional[DeviceMediaFactory] = None,
                 engine_factory: Optional[Callable[[], RecognitionEngine]] = None,
                 coach: Optional[RemoteCoachProxy] = None,
                 scheduler=None,
                 clock: Callable[[], float] = time.monotonic,
                 event_bus: Optional[InterviewEventBus] = None):
        self.config = config or get_config()
        self.user_name = user_name

        # Initialize event system
        self.event_bus = event_bus or InterviewEventBus()
        self.event_logger = EventLogger()
        self.metrics = InterviewMetrics()
        self.event_bus.subscribe_all(self.event_logger.handle_event)
        self.event_bus.subscribe_all(self.metrics.handle_event)
        self.event_bus.subscribe(EventType.RESULTS_SHOWN, self._on_results_shown)

        self.questions = tuple(questions or self.config.questions)
        self.aggregator = AnswerAggregator(self.questions, self.event_bus)
        self.navigator = QuestionNavigator(self.questions, self.aggregator, self.event_bus)
        self.debouncer = TranscriptDebouncer(
            self.aggregator.update, self.config.debounce_seconds, scheduler
        )

        self.media = MediaAcquisition(
            devices=devices or DeviceMediaFactory(self.config.camera_index),
            event_bus=self.event_bus,
            mic_enabled=self.config.mic_enabled,
            volume=self.config.playback_volume,
        )
        self.transcriber = SpeechTranscriber(
            engine_factory=engine_factory or self._create_engine,
            should_listen=self._should_listen,
            on_transcript=self._on_transcript,
            event_bus=self.event_bus,
        )

        self.coach = coach or RemoteCoachProxy(self.config.coach_endpoint_url)
        self.chat = CoachChat(self.coach, user_name)
        self.score_service = ScoreService(self.coach)
        self.scores: Optional[ScoreCard] = None
        self.timer = ElapsedTimer(clock)
        self.closed = False

    # --- media -----------------------------------------------------------

    @property
    def transcript(self) -> str:
        return self.transcriber.transcript

    @property
    def elapsed(self) -> str:
        return format_elapsed(self.timer.seconds)

    def start(self) -> bool:
        """
        Start the interview: first question, camera on, listening.

        Returns False when the camera could not be acquired; the interview
        still starts and a video file can be uploaded instead.
        """
        self.navigator.start()
        acquired = self.media.start_camera()
        self._after_media_change()
        return acquired

    def upload_video(self, path: str, mime_type: Optional[str] = None) -> bool:
        """Use a video file as the answer source. Non-video files are ignored."""
        # On failure the previous source is still active and nothing changed
        if not self.media.upload_file(path, mime_type):
            return False
        self.transcriber.restart_utterance()
        self._after_media_change()
        return True

    def toggle_camera(self) -> bool:
        result = self.media.toggle_camera()
        self._after_media_change()
        return result

    def toggle_mic(self) -> bool:
        enabled = self.media.toggle_mic()
        self._after_media_change()
        return enabled

    def stop_media(self) -> None:
        self.transcriber.stop()
        self.media.stop()
        self.timer.pause()

    def _after_media_change(self) -> None:
        if self.media.is_playing:
            self.timer.start()
        else:
            self.timer.pause()

        if self._should_listen():
            self.transcriber.start()
        else:
            self.transcriber.stop()

    def _create_engine(self) -> RecognitionEngine:
        # Imported here so google-cloud-speech loads only for real sessions
        from ..infrastructure.audio.speech.stt import GoogleStreamingEngine
        return GoogleStreamingEngine(
            audio_source=self.media.audio_chunks,
            language_code=self.config.language_code,
        )

    def _should_listen(self) -> bool:
        if self.closed or not self.navigator.interview_active:
            return False
        if self.media.source == SourceKind.CAMERA and not self.media.mic_enabled:
            return False
        return self.media.is_playing and self.media.has_audio

    def _on_transcript(self, text: str, is_final: bool) -> None:
        # Attribution uses the question that is active when the text arrives
        if self.closed or not self.navigator.interview_active:
            return
        self.debouncer.submit(text, self.navigator.current_index)

    # --- navigation ------------------------------------------------------

    def next_question(self) -> None:
        """Move on; after the last question the results become visible."""
        self.navigator.next()
        if not self.navigator.show_results:
            self.transcriber.restart_utterance()

    def end_interview(self) -> None:
        self.navigator.end()

    def restart(self) -> None:
        """Discard answers and scores and begin again at the first question."""
        self.debouncer.cancel_all()
        self.navigator.reset()
        self.scores = None
        self.timer.reset()
        self.transcriber.restart_utterance()
        self.navigator.start()
        self._after_media_change()

    def _on_results_shown(self, event) -> None:
        self.transcriber.stop()

    # --- coach -----------------------------------------------------------

    async def request_scores(self) -> Optional[ScoreCard]:
        """
        Ask the coach to grade the recorded answers.

        The remote call is never cancelled; if the session was closed while
        it was in flight the card is discarded and None is returned.
        """
        answers = self.aggregator.answers
        loop = asyncio.get_running_loop()
        card = await loop.run_in_executor(None, self.score_service.score, answers)
        if self.closed:
            logger.info("Session closed before scores arrived; discarding them")
            return None

        self.scores = card
        self.event_bus.emit(ScoresReadyEvent(card.as_dict(), card.summary, card.is_fallback))
        return card

    async def send_chat(self, text: str) -> Optional[ChatMessage]:
        """
        Send a chat message. Both turns are appended on the loop thread; only
        the coach call runs in the executor.
        """
        history = self.chat.add_user_message(text)
        if history is None:
            return None

        loop = asyncio.get_running_loop()
        try:
            reply = await loop.run_in_executor(None, self.chat.reply_to, text, history)
        except Exception as e:
            logger.error(f"Chat failed: {e}")
            self.event_bus.emit(ErrorOccurredEvent(type(e).__name__, str(e), "chat"))
            return None
        return self.chat.add_reply(reply)

    # --- lifecycle -------------------------------------------------------

    def snapshot(self) -> InterviewSnapshot:
        return InterviewSnapshot(
            questions=list(self.questions),
            current_index=self.navigator.current_index,
            interview_active=self.navigator.interview_active,
            show_results=self.navigator.show_results,
            answered=self.aggregator.answered,
            answers=self.aggregator.answers,
            transcript=self.transcript,
            scores=self.scores,
        )

    def close(self) -> None:
        """Teardown: cancel pending updates, stop recognition, release media."""
        if self.closed:
            return
        self.closed = True
        self.debouncer.cancel_all()
        self.transcriber.close()
        self.media.close()
        self.timer.pause()
        logger.info("Interview session closed")

    def __enter__(self) -> 'InterviewSession':
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
