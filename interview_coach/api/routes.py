"""
Coach proxy route: forwards a prompt and chat history to Gemini.
"""
import logging

from fastapi import APIRouter, Depends, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from ..config import COACH_ENDPOINT_PATH
from ..infrastructure.llm import GeminiRestClient, LLMError
from ..interview.prompts import PromptFormatter
from .schemas import CoachRequest, CoachResponse, ErrorResponse

logger = logging.getLogger("api")

router = APIRouter()

GENERIC_ERROR = "Failed to generate response"


def get_llm_client(request: Request) -> GeminiRestClient:
    return request.app.state.llm_client


def _error(message: str, status_code: int) -> JSONResponse:
    return JSONResponse(ErrorResponse(error=message).model_dump(), status_code=status_code)


@router.post(
    COACH_ENDPOINT_PATH,
    response_model=CoachResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def coach_proxy(request: Request, llm_client: GeminiRestClient = Depends(get_llm_client)):
    try:
        body = await request.json()
    except ValueError:
        logger.warning("Rejected request with a malformed JSON body")
        return _error(GENERIC_ERROR, 500)

    if not isinstance(body, dict):
        return _error(GENERIC_ERROR, 500)

    if not body.get("prompt"):
        return _error("Prompt is required", 400)

    try:
        coach_request = CoachRequest.model_validate(body)
    except ValidationError as e:
        logger.warning("Rejected invalid coach request: %s", e)
        return _error(GENERIC_ERROR, 500)

    config = request.app.state.config
    contents = PromptFormatter.to_gemini_contents(
        coach_request.prompt,
        [msg.model_dump() for msg in coach_request.history],
    )

    try:
        text = await run_in_threadpool(
            llm_client.generate_content,
            contents,
            temperature=config.temperature,
            max_output_tokens=config.max_output_tokens,
        )
    except LLMError as e:
        # Upstream detail stays in the log only
        logger.error("Error in Gemini API: %s", e)
        return _error(GENERIC_ERROR, 500)
    except Exception:
        logger.exception("Unexpected error while generating a coach response")
        return _error(GENERIC_ERROR, 500)

    return CoachResponse(response=text)
