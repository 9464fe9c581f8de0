"""LLM client infrastructure."""

from .client import GeminiRestClient, LLMError, create_llm_client

__all__ = ["GeminiRestClient", "LLMError", "create_llm_client"]
