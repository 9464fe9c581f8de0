"""
Gemini REST client for LLM interactions.
"""
import logging
from typing import Optional, Dict, Any, List, Tuple

import requests
import google.auth
import google.auth.exceptions
import google.auth.transport.requests
from google.oauth2 import service_account

from ...config import (
    VERTEX_LOCATION, MODEL_NAME, LLM_TIMEOUT, MAX_OUTPUT_TOKENS,
    TEMPERATURE, GENERATIVE_LANGUAGE_URL
)

logger = logging.getLogger("llm_client")


class LLMError(RuntimeError):
    """Raised when the upstream model can't produce text."""


class GeminiRestClient:
    """
    REST-based client for Gemini models.

    Uses the Generative Language API when an API key is given, otherwise
    Vertex AI with Google application default (or service account) credentials.
    """

    def __init__(self,
                 api_key: Optional[str] = None,
                 project: Optional[str] = None,
                 location: str = VERTEX_LOCATION,
                 model: str = MODEL_NAME,
                 credentials_json: Optional[str] = None,
                 timeout: int = LLM_TIMEOUT):
        self.api_key = api_key
        self.project = project
        self.location = location
        self.model = model
        self.credentials_json = credentials_json
        self.timeout = timeout
        self._token = None

    @property
    def configured(self) -> bool:
        return bool(self.api_key or self.project)

    def _refresh_token(self):
        """Refresh the OAuth token for Vertex calls."""
        if self.credentials_json:
            creds = service_account.Credentials.from_service_account_file(
                self.credentials_json,
                scopes=["https://www.googleapis.com/auth/cloud-platform"],
            )
        else:
            creds, _ = google.auth.default(scopes=["https://www.googleapis.com/auth/cloud-platform"])

        auth_req = google.auth.transport.requests.Request()
        creds.refresh(auth_req)
        self._token = creds.token

    def _ensure_token(self):
        if not self._token:
            self._refresh_token()

    def _endpoint(self) -> Tuple[str, Dict[str, str]]:
        """URL and headers for a generateContent call."""
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            url = f"{GENERATIVE_LANGUAGE_URL}/models/{self.model}:generateContent"
            headers["x-goog-api-key"] = self.api_key
            return url, headers

        if not self.project:
            raise LLMError("Gemini API key not configured")

        try:
            self._ensure_token()
        except google.auth.exceptions.GoogleAuthError as e:
            raise LLMError(f"Google credentials unavailable: {e}") from e
        base_url = f"https://{self.location}-aiplatform.googleapis.com/v1"
        resource = f"projects/{self.project}/locations/{self.location}/publishers/google/models/{self.model}"
        headers["Authorization"] = f"Bearer {self._token}"
        return f"{base_url}/{resource}:generateContent", headers

    def generate_content(
        self,
        contents: List[Dict[str, Any]],
        temperature: float = TEMPERATURE,
        max_output_tokens: int = MAX_OUTPUT_TOKENS,
    ) -> str:
        """
        Generate text from role-tagged ``contents``.

        Returns the first candidate's text. Raises LLMError on missing
        credentials, transport failure, non-2xx status or an empty candidate.
        """
        url, headers = self._endpoint()

        body: Dict[str, Any] = {
            "contents": contents,
            "generationConfig": {
                "temperature": float(temperature),
                "maxOutputTokens": int(max_output_tokens),
            },
        }

        try:
            resp = requests.post(url, headers=headers, json=body, timeout=self.timeout)
        except requests.RequestException as e:
            raise LLMError(f"Gemini request failed: {e}") from e

        if resp.status_code >= 400:
            raise LLMError(f"Gemini API error {resp.status_code}: {resp.text}")

        try:
            data = resp.json()
        except ValueError as e:
            raise LLMError("Gemini returned a non-JSON body") from e

        text = self._parse_response_text(data)
        if text is None:
            raise LLMError("Gemini returned no candidate text")
        return text

    def _parse_response_text(self, resp_json: Dict[str, Any]) -> Optional[str]:
        """Extract candidates[0].content.parts[0].text, or None."""
        if not isinstance(resp_json, dict):
            return None
        cands = resp_json.get("candidates") or []
        if not cands or not isinstance(cands[0], dict):
            return None
        content = cands[0].get("content") or {}
        parts = content.get("parts") if isinstance(content, dict) else None
        if parts and isinstance(parts, list):
            for p in parts:
                if isinstance(p, dict) and isinstance(p.get("text"), str):
                    return p["text"]
        return None


def create_llm_client(config) -> GeminiRestClient:
    """Build a client from a Config object."""
    return GeminiRestClient(
        api_key=config.gemini_api_key,
        project=config.google_cloud_project if config.use_vertex else None,
        location=config.vertex_location,
        model=config.model_name,
        credentials_json=config.google_application_credentials,
    )
