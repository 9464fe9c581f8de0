"""
Question navigation for a single interview.
"""
import logging
from typing import Optional, Sequence

from .aggregator import AnswerAggregator
from .events import (
    InterviewEventBus, InterviewStartedEvent, QuestionAdvancedEvent,
    ResultsShownEvent, InterviewResetEvent
)

logger = logging.getLogger("question_navigator")


class QuestionNavigator:
    """Holds the ordered question list and the current position in it."""

    def __init__(self,
                 questions: Sequence[str],
                 aggregator: Optional[AnswerAggregator] = None,
                 event_bus: Optional[InterviewEventBus] = None):
        if not questions:
            raise ValueError("An interview needs at least one question")
        self.questions = tuple(questions)
        self.aggregator = aggregator
        self.event_bus = event_bus
        self.current_index = 0
        self.show_results = False
        self.interview_active = False

    @property
    def question_count(self) -> int:
        return len(self.questions)

    @property
    def current_question(self) -> str:
        return self.questions[self.current_index]

    @property
    def question_number(self) -> int:
        """1-based number of the current question."""
        return self.current_index + 1

    @property
    def progress_percentage(self) -> float:
        return self.question_number / self.question_count * 100

    def start(self) -> None:
        """Begin the interview at the first question."""
        self.current_index = 0
        self.show_results = False
        self.interview_active = True
        logger.info("Interview started with %d questions", self.question_count)
        self._emit(InterviewStartedEvent(self.question_count))

    def next(self) -> None:
        """Advance to the next question, or show results after the last one."""
        if self.show_results:
            return
        if self.current_index < self.question_count - 1:
            self.current_index += 1
            logger.info("Advanced to question %d", self.question_number)
            self._emit(QuestionAdvancedEvent(self.current_index, self.current_question))
        else:
            self._finish("completed")

    def end(self) -> None:
        """End the interview early; results become visible."""
        if not self.show_results:
            self._finish("ended")

    def reset(self) -> None:
        """Back to the first question with all answers and flags cleared."""
        self.current_index = 0
        self.show_results = False
        if self.aggregator:
            self.aggregator.reset()
        logger.info("Interview reset")
        self._emit(InterviewResetEvent())

    def _finish(self, reason: str) -> None:
        self.show_results = True
        self.interview_active = False
        logger.info("Showing results (%s)", reason)
        self._emit(ResultsShownEvent(reason))

    def _emit(self, event) -> None:
        if self.event_bus:
            self.event_bus.emit(event)
