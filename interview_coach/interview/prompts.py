"""
Coach prompt templates and canned responses.

This module contains all the prompt text used by the coach, keeping it
separate from the business logic for easier maintenance and editing.
"""
from typing import Dict, List, Sequence

from ..config import COACH_PERSONA, SCORE_LABELS
from .models import Answer


# Keyword groups checked in order; first match wins
CANNED_CHAT_RESPONSES = (
    (("prepare", "advice"),
     "To prepare for your interview, research the company thoroughly, practice common interview "
     "questions, and prepare examples of your achievements. Also, make sure to get a good night's "
     "sleep before the big day!"),
    (("nervous", "anxiety"),
     "It's normal to feel nervous before an interview. Try deep breathing exercises, visualize "
     "success, and remember that the interview is also an opportunity for you to evaluate if the "
     "company is a good fit for you."),
    (("question", "ask"),
     "Some common interview questions include: 'Tell me about yourself', 'Why do you want this "
     "job?', 'What are your strengths and weaknesses?', and 'Where do you see yourself in 5 "
     "years?'. Prepare concise answers with specific examples."),
)

DEFAULT_CHAT_RESPONSE = (
    "I'm here to help you prepare for your interview. Feel free to ask about specific interview "
    "questions, techniques for answering different types of questions, or advice on how to present "
    "yourself professionally."
)


class CoachPrompts:
    """Collection of all coach-related prompts."""

    @staticmethod
    def greeting(name: str) -> str:
        return f"Hello, {name}!"

    @staticmethod
    def canned_chat_response(user_input: str) -> str:
        """Offline reply picked by keyword when the coach can't be reached."""
        lower_input = user_input.lower()
        for keywords, response in CANNED_CHAT_RESPONSES:
            if any(keyword in lower_input for keyword in keywords):
                return response
        return DEFAULT_CHAT_RESPONSE

    @staticmethod
    def scoring_prompt(answers: Sequence[Answer]) -> str:
        """Ask the coach to grade the candidate in a line-per-score format."""
        if answers:
            qa_text = "\n\n".join(
                f"Q{i}: {a.question}\nA{i}: {a.answer.strip()}" for i, a in enumerate(answers, 1)
            )
        else:
            qa_text = "(The candidate did not answer any question.)"

        score_lines = "\n".join(f"{label}: <integer 0-100>" for label in SCORE_LABELS)

        return f"""
Evaluate this sales interview. Grade the candidate's answers below.

{qa_text}

Reply with exactly these lines and nothing else:
{score_lines}
Summary: <one or two sentences of feedback>
        """.strip()


class PromptFormatter:
    """Builds upstream LLM request contents."""

    @staticmethod
    def to_gemini_contents(prompt: str,
                           history: Sequence[Dict[str, str]],
                           persona: str = COACH_PERSONA) -> List[Dict]:
        """
        Persona first (as a user turn), then history, then the new prompt.

        History roles other than "user" are sent as "model".
        """
        contents = [{"role": "user", "parts": [{"text": persona}]}]
        for msg in history:
            role = "user" if msg.get("role") == "user" else "model"
            contents.append({"role": role, "parts": [{"text": msg.get("content", "")}]})
        contents.append({"role": "user", "parts": [{"text": prompt}]})
        return contents
