"""
Event-driven architecture for the interview coach.

Components publish what happened; front ends and loggers observe. Nothing
downstream ever touches the media handle or the recognition engine directly.
"""
import logging
import time
from abc import ABC
from typing import Dict, Any, List, Callable, Optional
from dataclasses import dataclass
from enum import Enum

logger = logging.getLogger("events")


class EventType(str, Enum):
    """Types of interview events."""
    INTERVIEW_STARTED = "interview_started"
    QUESTION_ADVANCED = "question_advanced"
    RESULTS_SHOWN = "results_shown"
    INTERVIEW_RESET = "interview_reset"
    ANSWER_RECORDED = "answer_recorded"
    TRANSCRIPT_UPDATED = "transcript_updated"
    TRANSCRIPTION_WARNING = "transcription_warning"
    MEDIA_STARTED = "media_started"
    MEDIA_STOPPED = "media_stopped"
    MEDIA_ERROR = "media_error"
    SCORES_READY = "scores_ready"
    ERROR_OCCURRED = "error_occurred"


@dataclass
class InterviewEvent(ABC):
    """Base class for all interview events."""
    event_type: EventType
    timestamp: float
    data: Dict[str, Any]


@dataclass
class InterviewStartedEvent(InterviewEvent):
    """Event fired when an interview begins."""
    def __init__(self, question_count: int, timestamp: Optional[float] = None):
        super().__init__(
            event_type=EventType.INTERVIEW_STARTED,
            timestamp=timestamp or time.time(),
            data={"question_count": question_count}
        )


@dataclass
class QuestionAdvancedEvent(InterviewEvent):
    """Event fired when the navigator moves to another question."""
    def __init__(self, index: int, question: str, timestamp: Optional[float] = None):
        super().__init__(
            event_type=EventType.QUESTION_ADVANCED,
            timestamp=timestamp or time.time(),
            data={"index": index, "question": question}
        )


@dataclass
class ResultsShownEvent(InterviewEvent):
    """Event fired when results become visible."""
    def __init__(self, reason: str, timestamp: Optional[float] = None):
        super().__init__(
            event_type=EventType.RESULTS_SHOWN,
            timestamp=timestamp or time.time(),
            data={"reason": reason}
        )


@dataclass
class InterviewResetEvent(InterviewEvent):
    """Event fired when the interview is restarted from scratch."""
    def __init__(self, timestamp: Optional[float] = None):
        super().__init__(
            event_type=EventType.INTERVIEW_RESET,
            timestamp=timestamp or time.time(),
            data={}
        )


@dataclass
class AnswerRecordedEvent(InterviewEvent):
    """Event fired when a debounced transcript is attributed to a question."""
    def __init__(self, index: int, question: str, answer: str, first_answer: bool,
                 timestamp: Optional[float] = None):
        super().__init__(
            event_type=EventType.ANSWER_RECORDED,
            timestamp=timestamp or time.time(),
            data={
                "index": index,
                "question": question,
                "answer": answer,
                "first_answer": first_answer
            }
        )


@dataclass
class TranscriptUpdatedEvent(InterviewEvent):
    """Event fired for every result batch from the transcriber."""
    def __init__(self, text: str, is_final: bool, timestamp: Optional[float] = None):
        super().__init__(
            event_type=EventType.TRANSCRIPT_UPDATED,
            timestamp=timestamp or time.time(),
            data={"text": text, "is_final": is_final}
        )


@dataclass
class TranscriptionWarningEvent(InterviewEvent):
    """Event fired when the recognition engine reports an error."""
    def __init__(self, code: str, message: str, fatal: bool, timestamp: Optional[float] = None):
        super().__init__(
            event_type=EventType.TRANSCRIPTION_WARNING,
            timestamp=timestamp or time.time(),
            data={"code": code, "message": message, "fatal": fatal}
        )


@dataclass
class MediaStartedEvent(InterviewEvent):
    """Event fired when a media source becomes active."""
    def __init__(self, source: str, has_audio: bool, timestamp: Optional[float] = None):
        super().__init__(
            event_type=EventType.MEDIA_STARTED,
            timestamp=timestamp or time.time(),
            data={"source": source, "has_audio": has_audio}
        )


@dataclass
class MediaStoppedEvent(InterviewEvent):
    """Event fired when the active media source is released."""
    def __init__(self, source: str, timestamp: Optional[float] = None):
        super().__init__(
            event_type=EventType.MEDIA_STOPPED,
            timestamp=timestamp or time.time(),
            data={"source": source}
        )


@dataclass
class MediaErrorEvent(InterviewEvent):
    """Event fired when camera or microphone access fails."""
    def __init__(self, message: str, timestamp: Optional[float] = None):
        super().__init__(
            event_type=EventType.MEDIA_ERROR,
            timestamp=timestamp or time.time(),
            data={"message": message}
        )


@dataclass
class ScoresReadyEvent(InterviewEvent):
    """Event fired when a score card is available."""
    def __init__(self, scores: Dict[str, int], summary: str, is_fallback: bool,
                 timestamp: Optional[float] = None):
        super().__init__(
            event_type=EventType.SCORES_READY,
            timestamp=timestamp or time.time(),
            data={"scores": scores, "summary": summary, "is_fallback": is_fallback}
        )


@dataclass
class ErrorOccurredEvent(InterviewEvent):
    """Event fired when an error occurs."""
    def __init__(self, error_type: str, error_message: str, component: str,
                 timestamp: Optional[float] = None):
        super().__init__(
            event_type=EventType.ERROR_OCCURRED,
            timestamp=timestamp or time.time(),
            data={
                "error_type": error_type,
                "error_message": error_message,
                "component": component
            }
        )


EventHandler = Callable[[InterviewEvent], None]


class InterviewEventBus:
    """Event bus for interview coach communication."""

    def __init__(self):
        self._handlers: Dict[EventType, List[EventHandler]] = {}
        self._global_handlers: List[EventHandler] = []

    def subscribe(self, event_type: EventType, handler: EventHandler) -> None:
        """
        Subscribe to specific event type.

        Args:
            event_type: Type of event to listen for
            handler: Function to call when event occurs
        """
        self._handlers.setdefault(event_type, []).append(handler)
        logger.debug(f"Subscribed handler to {event_type}")

    def subscribe_all(self, handler: EventHandler) -> None:
        """Subscribe to all events."""
        self._global_handlers.append(handler)
        logger.debug("Subscribed global handler")

    def unsubscribe(self, event_type: EventType, handler: EventHandler) -> None:
        """Unsubscribe from specific event type."""
        if event_type in self._handlers:
            try:
                self._handlers[event_type].remove(handler)
                logger.debug(f"Unsubscribed handler from {event_type}")
            except ValueError:
                logger.warning(f"Handler not found for {event_type}")

    def emit(self, event: InterviewEvent) -> None:
        """
        Emit an event to all subscribers.

        A failing handler is logged and skipped; the others still run.
        """
        logger.debug(f"Emitting event: {event.event_type}")

        for handler in list(self._handlers.get(event.event_type, [])):
            try:
                handler(event)
            except Exception as e:
                logger.error(f"Error in event handler for {event.event_type}: {e}")

        for handler in list(self._global_handlers):
            try:
                handler(event)
            except Exception as e:
                logger.error(f"Error in global event handler: {e}")

    def clear_handlers(self) -> None:
        """Clear all event handlers."""
        self._handlers.clear()
        self._global_handlers.clear()
        logger.debug("Cleared all event handlers")


class EventLogger:
    """Logs all events for debugging and analysis."""

    def __init__(self, log_level: int = logging.INFO):
        self.logger = logging.getLogger("event_logger")
        self.logger.setLevel(log_level)

    def handle_event(self, event: InterviewEvent) -> None:
        """Log event details."""
        self.logger.info(f"Event: {event.event_type.value} | Data: {event.data}")


class InterviewMetrics:
    """Collects counters from interview events."""

    def __init__(self):
        self.reset()

    def handle_event(self, event: InterviewEvent) -> None:
        """Update metrics based on event."""
        if event.event_type == EventType.INTERVIEW_STARTED:
            self.interviews_started += 1
        elif event.event_type == EventType.RESULTS_SHOWN:
            self.interviews_completed += 1
        elif event.event_type == EventType.ANSWER_RECORDED:
            self.answers_recorded += 1
        elif event.event_type == EventType.TRANSCRIPTION_WARNING:
            self.transcription_warnings += 1
        elif event.event_type == EventType.MEDIA_ERROR:
            self.media_errors += 1
        elif event.event_type == EventType.SCORES_READY and event.data.get("is_fallback"):
            self.fallback_scores += 1
        elif event.event_type == EventType.ERROR_OCCURRED:
            self.errors_occurred += 1

    def get_metrics(self) -> Dict[str, int]:
        """Get current metrics snapshot."""
        return {
            "interviews_started": self.interviews_started,
            "interviews_completed": self.interviews_completed,
            "answers_recorded": self.answers_recorded,
            "transcription_warnings": self.transcription_warnings,
            "media_errors": self.media_errors,
            "fallback_scores": self.fallback_scores,
            "errors_occurred": self.errors_occurred
        }

    def reset(self) -> None:
        """Reset all metrics to zero."""
        self.interviews_started = 0
        self.interviews_completed = 0
        self.answers_recorded = 0
        self.transcription_warnings = 0
        self.media_errors = 0
        self.fallback_scores = 0
        self.errors_occurred = 0
