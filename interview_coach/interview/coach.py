"""
Client side of the remote coach: chat and scoring over the proxy endpoint.

Every failure of the remote call ends in a usable fallback value; nothing
here raises to the front end.
"""
import logging
from typing import Dict, List, Optional, Sequence

import requests

from ..config import COACH_ENDPOINT_URL, COACH_REQUEST_TIMEOUT
from .models import Answer, ChatMessage, ScoreCard
from .prompts import CoachPrompts
from .results import ResultsRenderer

logger = logging.getLogger("coach")


class CoachUnavailableError(RuntimeError):
    """The proxy could not produce a reply."""


class RemoteCoachProxy:
    """Posts prompts plus conversation history to the coach endpoint."""

    def __init__(self, endpoint_url: str = COACH_ENDPOINT_URL, timeout: float = COACH_REQUEST_TIMEOUT,
                 session: Optional[requests.Session] = None):
        self.endpoint_url = endpoint_url
        self.timeout = timeout
        self.session = session or requests.Session()

    def ask(self, prompt: str, history: Sequence[Dict[str, str]] = ()) -> str:
        """
        Return the coach's reply to ``prompt``.

        Raises:
            CoachUnavailableError: network error, non-2xx status, an ``error``
                field in the body, or no ``response`` field.
        """
        payload = {"prompt": prompt, "history": list(history)}
        try:
            resp = self.session.post(self.endpoint_url, json=payload, timeout=self.timeout)
        except requests.RequestException as e:
            raise CoachUnavailableError(f"Coach endpoint unreachable: {e}") from e

        if not resp.ok:
            raise CoachUnavailableError(f"Coach endpoint returned {resp.status_code}")

        try:
            data = resp.json()
        except ValueError as e:
            raise CoachUnavailableError("Coach endpoint returned a non-JSON body") from e

        if not isinstance(data, dict):
            raise CoachUnavailableError("Coach endpoint returned an unexpected body")
        if data.get("error"):
            raise CoachUnavailableError(str(data["error"]))
        response = data.get("response")
        if not isinstance(response, str):
            raise CoachUnavailableError("Coach endpoint returned no response")
        return response


class CoachChat:
    """Chat with the coach, falling back to canned advice when offline."""

    def __init__(self, coach: RemoteCoachProxy, user_name: str):
        self.coach = coach
        self.messages: List[ChatMessage] = [
            ChatMessage(role="assistant", content=CoachPrompts.greeting(user_name))
        ]

    def history(self) -> List[Dict[str, str]]:
        return [m.to_history() for m in self.messages]

    def send(self, text: str) -> Optional[ChatMessage]:
        """
        Send ``text`` and append both turns to the conversation.

        Blank input is ignored and returns None. Otherwise returns the
        assistant message that was appended.
        """
        history = self.add_user_message(text)
        if history is None:
            return None
        return self.add_reply(self.reply_to(text, history))

    def add_user_message(self, text: str) -> Optional[List[Dict[str, str]]]:
        """Append the user turn; returns the history that preceded it, or None for blank input."""
        if not text or not text.strip():
            return None
        history = self.history()
        self.messages.append(ChatMessage(role="user", content=text))
        return history

    def reply_to(self, text: str, history: List[Dict[str, str]]) -> str:
        """Coach reply text; does not touch ``messages``."""
        try:
            return self.coach.ask(text, history)
        except CoachUnavailableError as e:
            logger.warning("Falling back to canned chat response: %s", e)
            return CoachPrompts.canned_chat_response(text)

    def add_reply(self, reply: str) -> ChatMessage:
        message = ChatMessage(role="assistant", content=reply)
        self.messages.append(message)
        return message


class ScoreService:
    """Requests an evaluation of the recorded answers."""

    def __init__(self, coach: RemoteCoachProxy, renderer: Optional[ResultsRenderer] = None):
        self.coach = coach
        self.renderer = renderer or ResultsRenderer()

    def fetch_evaluation(self, answers: Sequence[Answer]) -> Optional[str]:
        """Raw evaluation text, or None when the coach can't be reached."""
        prompt = CoachPrompts.scoring_prompt(answers)
        try:
            return self.coach.ask(prompt, [])
        except CoachUnavailableError as e:
            logger.warning("Scoring request failed: %s", e)
            return None

    def score(self, answers: Sequence[Answer]) -> ScoreCard:
        return self.renderer.render(self.fetch_evaluation(answers))
