"""Infrastructure components for the interview coach.

This module contains low-level technical components: capture devices and
media sources, audio conversion, speech recognition, the Gemini client and
local persistence. Submodules are imported on demand.
"""

# LLM infrastructure
from .llm import GeminiRestClient, LLMError, create_llm_client

# Local persistence
from .data import ProfileStore, UserProfile

__all__ = [
    # LLM client
    "GeminiRestClient", "LLMError", "create_llm_client",

    # Persistence
    "ProfileStore", "UserProfile"
]
