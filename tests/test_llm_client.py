from unittest.mock import MagicMock, patch

import pytest
import requests

from interview_coach.config import Config
from interview_coach.infrastructure.llm import GeminiRestClient, LLMError, create_llm_client

CONTENTS = [{"role": "user", "parts": [{"text": "Hi"}]}]


def ok_response(body):
    resp = MagicMock(status_code=200)
    resp.json.return_value = body
    return resp


@patch("interview_coach.infrastructure.llm.client.requests.post")
def test_api_key_request(mock_post):
    mock_post.return_value = ok_response(
        {"candidates": [{"content": {"parts": [{"text": "Hello!"}]}}]}
    )
    client = GeminiRestClient(api_key="k123", model="gemini-1.5-flash")

    assert client.generate_content(CONTENTS, temperature=0.7, max_output_tokens=250) == "Hello!"

    url = mock_post.call_args.args[0]
    kwargs = mock_post.call_args.kwargs
    assert url.endswith("/models/gemini-1.5-flash:generateContent")
    assert kwargs["headers"]["x-goog-api-key"] == "k123"
    assert kwargs["json"] == {
        "contents": CONTENTS,
        "generationConfig": {"temperature": 0.7, "maxOutputTokens": 250},
    }


def test_no_credentials_raises():
    client = GeminiRestClient()

    assert not client.configured
    with pytest.raises(LLMError):
        client.generate_content(CONTENTS)


@patch("interview_coach.infrastructure.llm.client.requests.post")
def test_error_status_raises(mock_post):
    mock_post.return_value = MagicMock(status_code=403, text="forbidden")

    with pytest.raises(LLMError):
        GeminiRestClient(api_key="k").generate_content(CONTENTS)


@patch("interview_coach.infrastructure.llm.client.requests.post")
def test_transport_error_raises(mock_post):
    mock_post.side_effect = requests.Timeout("slow")

    with pytest.raises(LLMError):
        GeminiRestClient(api_key="k").generate_content(CONTENTS)


@pytest.mark.parametrize("body", [
    {},
    {"candidates": []},
    {"candidates": [{"content": {"parts": []}}]},
    {"candidates": [{"finishReason": "SAFETY"}]},
])
@patch("interview_coach.infrastructure.llm.client.requests.post")
def test_missing_candidate_text_raises(mock_post, body):
    mock_post.return_value = ok_response(body)

    with pytest.raises(LLMError):
        GeminiRestClient(api_key="k").generate_content(CONTENTS)


def test_factory_prefers_api_key_over_project():
    client = create_llm_client(Config(gemini_api_key="k", google_cloud_project="proj"))

    assert client.api_key == "k"
    assert client.project is None


def test_factory_uses_vertex_for_project_only():
    client = create_llm_client(Config(gemini_api_key=None, google_cloud_project="proj"))

    assert client.project == "proj"
    assert client.configured
