"""
Answer aggregation: attributes debounced transcripts to interview questions.
"""
import logging
from typing import List, Optional, Sequence

from .models import Answer
from .events import InterviewEventBus, AnswerRecordedEvent

logger = logging.getLogger("answer_aggregator")


class AnswerAggregator:
    """
    Keeps one answer per question and a per-question "answered" flag.

    Answers are looked up by question text, not by index, so two questions
    with identical text share a single answer. Callers that need distinct
    answers must use distinct question texts.
    """

    def __init__(self, questions: Sequence[str], event_bus: Optional[InterviewEventBus] = None):
        self.questions = tuple(questions)
        self.event_bus = event_bus
        self._answers: List[Answer] = []
        self._answered: List[bool] = [False] * len(self.questions)

        if len(set(self.questions)) != len(self.questions):
            logger.warning("Duplicate question texts present; their answers will be merged")

    @property
    def answers(self) -> List[Answer]:
        """Answers in the order questions were first answered."""
        return [Answer(a.question, a.answer) for a in self._answers]

    @property
    def answered(self) -> List[bool]:
        return list(self._answered)

    @property
    def answered_count(self) -> int:
        return sum(self._answered)

    def update(self, text: str, index: int) -> None:
        """
        Record the latest transcript for the question at ``index``.

        Blank text is ignored. An existing answer is overwritten (last write
        wins); otherwise a new answer is appended.
        """
        if not text or not text.strip():
            return
        if not 0 <= index < len(self.questions):
            logger.warning("Ignoring transcript for out-of-range question index %d", index)
            return

        question = self.questions[index]
        existing = self._find(question)
        if existing is not None:
            existing.answer = text
        else:
            self._answers.append(Answer(question, text))

        first_answer = not self._answered[index]
        self._answered[index] = True
        logger.debug("Answer for question %d updated (%d chars)", index, len(text))

        if self.event_bus:
            self.event_bus.emit(AnswerRecordedEvent(index, question, text, first_answer))

    def answer_for(self, index: int) -> Optional[str]:
        """Current answer text for the question at ``index``, if any."""
        if not 0 <= index < len(self.questions):
            return None
        existing = self._find(self.questions[index])
        return existing.answer if existing else None

    def reset(self) -> None:
        """Discard all answers and flags."""
        self._answers = []
        self._answered = [False] * len(self.questions)

    def _find(self, question: str) -> Optional[Answer]:
        for answer in self._answers:
            if answer.question == question:
                return answer
        return None
