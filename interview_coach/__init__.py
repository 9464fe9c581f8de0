"""
Interview Coach: mock interview practice with live transcription and AI feedback.

Captures the candidate's camera and microphone (or an uploaded video),
transcribes answers as they are spoken, attributes them to the active
question, and asks a Gemini-backed coach for chat advice and a score card.
"""

__version__ = "1.0.0"

# Main entry points
from .interview.session import InterviewSession
from .interview.models import Answer, ScoreCard

__all__ = ["InterviewSession", "Answer", "ScoreCard"]
