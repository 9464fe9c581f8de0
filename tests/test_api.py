import pytest
from fastapi.testclient import TestClient

from interview_coach.api import create_app
from interview_coach.config import COACH_PERSONA, Config
from interview_coach.infrastructure.llm import LLMError
from interview_coach.interview.testing import MockLLMClient

PATH = "/api/gemini"


def make_client(llm_client):
    return TestClient(create_app(Config(), llm_client=llm_client))


def test_returns_generated_text():
    llm = MockLLMClient(["Great answer."])
    client = make_client(llm)

    resp = client.post(PATH, json={
        "prompt": "How did I do?",
        "history": [
            {"role": "user", "content": "Hi"},
            {"role": "assistant", "content": "Hello, Dana!"},
        ],
    })

    assert resp.status_code == 200
    assert resp.json() == {"response": "Great answer."}

    request = llm.request_history[0]
    assert request["contents"] == [
        {"role": "user", "parts": [{"text": COACH_PERSONA}]},
        {"role": "user", "parts": [{"text": "Hi"}]},
        {"role": "model", "parts": [{"text": "Hello, Dana!"}]},
        {"role": "user", "parts": [{"text": "How did I do?"}]},
    ]
    assert request["temperature"] == 0.7
    assert request["kwargs"] == {"max_output_tokens": 250}


def test_history_is_optional():
    client = make_client(MockLLMClient(["ok"]))

    resp = client.post(PATH, json={"prompt": "Hi"})

    assert resp.status_code == 200


@pytest.mark.parametrize("body", [{}, {"prompt": ""}, {"history": []}])
def test_missing_prompt_is_400(body):
    llm = MockLLMClient()
    client = make_client(llm)

    resp = client.post(PATH, json=body)

    assert resp.status_code == 400
    assert resp.json() == {"error": "Prompt is required"}
    assert llm.request_history == []


def test_missing_credentials_is_500():
    client = make_client(MockLLMClient(configured=False))

    resp = client.post(PATH, json={"prompt": "Hi"})

    assert resp.status_code == 500
    assert resp.json() == {"error": "Failed to generate response"}


def test_upstream_error_detail_is_not_leaked():
    client = make_client(MockLLMClient(error=LLMError("Gemini API error 403: secret detail")))

    resp = client.post(PATH, json={"prompt": "Hi"})

    assert resp.status_code == 500
    assert resp.json() == {"error": "Failed to generate response"}


def test_unexpected_error_is_500():
    client = make_client(MockLLMClient(error=KeyError("boom")))

    resp = client.post(PATH, json={"prompt": "Hi"})

    assert resp.status_code == 500


def test_malformed_body_is_500():
    client = make_client(MockLLMClient())

    resp = client.post(PATH, content=b"{not json", headers={"Content-Type": "application/json"})

    assert resp.status_code == 500
    assert resp.json() == {"error": "Failed to generate response"}


def test_malformed_history_is_500():
    client = make_client(MockLLMClient())

    resp = client.post(PATH, json={"prompt": "Hi", "history": ["not a message"]})

    assert resp.status_code == 500
