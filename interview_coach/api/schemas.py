"""
Request and response bodies for the coach endpoint.
"""
from typing import List

from pydantic import BaseModel, Field


class HistoryMessage(BaseModel):
    role: str
    content: str


class CoachRequest(BaseModel):
    prompt: str
    history: List[HistoryMessage] = Field(default_factory=list)


class CoachResponse(BaseModel):
    response: str


class ErrorResponse(BaseModel):
    error: str
