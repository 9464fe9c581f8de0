"""Interview system components.

This module contains the business logic of a mock interview: question
navigation, answer aggregation, transcript debouncing, the coach chat and
scoring, and the session that wires them to media and speech recognition.
"""

# Data models
from .models import Answer, ChatMessage, ScoreCard, UploadedVideo, InterviewSnapshot

# Event system
from .events import (
    InterviewEventBus, EventLogger, InterviewMetrics,
    EventType, InterviewEvent, InterviewStartedEvent,
    QuestionAdvancedEvent, ResultsShownEvent, InterviewResetEvent,
    AnswerRecordedEvent, TranscriptUpdatedEvent, TranscriptionWarningEvent,
    MediaStartedEvent, MediaStoppedEvent, MediaErrorEvent,
    ScoresReadyEvent, ErrorOccurredEvent
)

# Answer pipeline
from .aggregator import AnswerAggregator
from .navigator import QuestionNavigator
from .debounce import TranscriptDebouncer

# Coach
from .prompts import CoachPrompts, PromptFormatter
from .results import ResultsRenderer, parse_score_text, fallback_score_card
from .coach import RemoteCoachProxy, CoachChat, ScoreService, CoachUnavailableError

# Session (imports the media and speech infrastructure, so it comes last)
from .session import InterviewSession, ElapsedTimer, format_elapsed

__all__ = [
    # Data models
    "Answer", "ChatMessage", "ScoreCard", "UploadedVideo", "InterviewSnapshot",

    # Events
    "InterviewEventBus", "EventLogger", "InterviewMetrics",
    "EventType", "InterviewEvent", "InterviewStartedEvent",
    "QuestionAdvancedEvent", "ResultsShownEvent", "InterviewResetEvent",
    "AnswerRecordedEvent", "TranscriptUpdatedEvent", "TranscriptionWarningEvent",
    "MediaStartedEvent", "MediaStoppedEvent", "MediaErrorEvent",
    "ScoresReadyEvent", "ErrorOccurredEvent",

    # Answer pipeline
    "AnswerAggregator", "QuestionNavigator", "TranscriptDebouncer",

    # Coach
    "CoachPrompts", "PromptFormatter", "ResultsRenderer", "parse_score_text",
    "fallback_score_card", "RemoteCoachProxy", "CoachChat", "ScoreService",
    "CoachUnavailableError",

    # Session
    "InterviewSession", "ElapsedTimer", "format_elapsed"
]
