"""
FastAPI application for the coach proxy endpoint.
"""
import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ..config import Config, get_config
from ..infrastructure.llm import GeminiRestClient, create_llm_client
from .routes import router

logger = logging.getLogger("api")


def create_app(config: Optional[Config] = None, llm_client: Optional[GeminiRestClient] = None) -> FastAPI:
    """Build the proxy app; the LLM client is shared by all requests."""
    config = config or get_config()

    app = FastAPI(title="Interview Coach Proxy")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.state.config = config
    app.state.llm_client = llm_client or create_llm_client(config)
    if not app.state.llm_client.configured:
        logger.warning("No Gemini credentials configured; coach requests will fail with 500")
    app.include_router(router)
    return app
