"""
Data models for the interview coach.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Dict, List, Tuple

from ..config import SCORE_LABELS


@dataclass
class Answer:
    """A candidate's answer, keyed by the question text it was given for."""
    question: str
    answer: str


@dataclass
class ChatMessage:
    """One chat turn between the candidate and the coach."""
    role: str  # "user" or "assistant"
    content: str
    timestamp: str = field(default_factory=lambda: datetime.now().strftime("%H:%M"))

    def to_history(self) -> Dict[str, str]:
        """Wire form used by the proxy endpoint (no timestamp)."""
        return {"role": self.role, "content": self.content}


@dataclass
class ScoreCard:
    """Scores parsed from the coach's evaluation."""
    overall: int = 0
    professionalism: int = 0
    business_acumen: int = 0
    opportunistic: int = 0
    closing_technique: int = 0
    summary: str = ""
    is_fallback: bool = False

    @classmethod
    def from_scores(cls, scores: Tuple[int, ...], summary: str = "", is_fallback: bool = False) -> 'ScoreCard':
        """Build a card from scores ordered like SCORE_LABELS."""
        overall, professionalism, business_acumen, opportunistic, closing_technique = scores
        return cls(
            overall=overall,
            professionalism=professionalism,
            business_acumen=business_acumen,
            opportunistic=opportunistic,
            closing_technique=closing_technique,
            summary=summary,
            is_fallback=is_fallback,
        )

    def as_tuple(self) -> Tuple[int, int, int, int, int]:
        return (
            self.overall,
            self.professionalism,
            self.business_acumen,
            self.opportunistic,
            self.closing_technique,
        )

    def as_dict(self) -> Dict[str, int]:
        """Scores keyed by their display label."""
        return dict(zip(SCORE_LABELS, self.as_tuple()))


@dataclass
class UploadedVideo:
    """A user-supplied video file acting as the media source."""
    path: str
    mime_type: str


@dataclass
class InterviewSnapshot:
    """Read-only view of a session, used by front ends."""
    questions: List[str]
    current_index: int
    interview_active: bool
    show_results: bool
    answered: List[bool]
    answers: List[Answer]
    transcript: str
    scores: Optional[ScoreCard] = None
