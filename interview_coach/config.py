"""
Interview Coach Configuration System
====================================

This file contains ALL configuration for the interview coach.
- User settings at the top (things users might want to change)
- Internal constants at the bottom (technical defaults)
"""
import os
from dataclasses import dataclass, field
from typing import Optional, Tuple


# =============================================================================
# USER SETTINGS - Edit these to customize the coach
# =============================================================================

# LLM credentials. Either an API key (Generative Language API) or a
# Google Cloud project (Vertex AI, uses application default credentials)
GEMINI_API_KEY = None
GOOGLE_CLOUD_PROJECT = None
GOOGLE_APPLICATION_CREDENTIALS = None  # Optional: path to credentials JSON

# Interview settings
QUESTIONS = (
    "Tell us about yourself?",
    "Why do you think you are good at sales?",
    "What is the biggest deal you have closed?",
    "Why you choose this company?",
    "What your expectation is",
)

# Speech settings
LANGUAGE_CODE = "en-US"
DEBOUNCE_SECONDS = 1.0

# Media
CAMERA_INDEX = 0
MIC_ENABLED = True
PLAYBACK_VOLUME = 50  # 0-100

# Proxy server
SERVER_HOST = "127.0.0.1"
SERVER_PORT = 8000
COACH_ENDPOINT_PATH = "/api/gemini"
COACH_ENDPOINT_URL = f"http://{SERVER_HOST}:{SERVER_PORT}{COACH_ENDPOINT_PATH}"

# Local profile storage
PROFILE_STORE_PATH = "./_coach/local_storage.json"
PROFILE_KEY = "userInfo"

# Logging
LOG_FILE = "./_coach/interview_coach.log"
LOG_LEVEL = "INFO"


# =============================================================================
# COACH PERSONA
# =============================================================================

COACH_NAME = "Olivia Wild"
COACH_PERSONA = (
    f"You are an AI interview coach named {COACH_NAME}. Be concise, helpful, and "
    "encouraging. Keep responses short and friendly, under 100 words."
)


# =============================================================================
# INTERNAL CONSTANTS - Don't change these unless you know what you're doing
# =============================================================================

# Audio processing
SAMPLE_RATE_CAPTURE = 48000
SAMPLE_RATE_TARGET = 16000
CHANNELS = 1
CHUNK_MS = 100

# Uploaded media
VIDEO_MIME_PREFIX = "video/"
FFMPEG_BINARY = "ffmpeg"

# LLM
VERTEX_LOCATION = "us-central1"
MODEL_NAME = "gemini-1.5-flash"
GENERATIVE_LANGUAGE_URL = "https://generativelanguage.googleapis.com/v1beta"
LLM_TIMEOUT = 30
MAX_OUTPUT_TOKENS = 250
TEMPERATURE = 0.7

# Proxy client
COACH_REQUEST_TIMEOUT = 45

# Scoring
SCORE_LABELS = (
    "Overall",
    "Professionalism",
    "Business Acumen",
    "Opportunistic",
    "Closing Technique",
)
FALLBACK_SCORES = (85, 80, 90, 65, 85)
FALLBACK_SUMMARY = "The presentation of sales is good. Check the breakdown summary of AI Video Score."


# =============================================================================
# MAIN CONFIG OBJECT
# =============================================================================

@dataclass
class Config:
    """Main configuration object."""
    gemini_api_key: Optional[str] = GEMINI_API_KEY
    google_cloud_project: Optional[str] = GOOGLE_CLOUD_PROJECT
    google_application_credentials: Optional[str] = GOOGLE_APPLICATION_CREDENTIALS
    questions: Tuple[str, ...] = field(default_factory=lambda: tuple(QUESTIONS))
    language_code: str = LANGUAGE_CODE
    debounce_seconds: float = DEBOUNCE_SECONDS
    camera_index: int = CAMERA_INDEX
    mic_enabled: bool = MIC_ENABLED
    playback_volume: int = PLAYBACK_VOLUME
    server_host: str = SERVER_HOST
    server_port: int = SERVER_PORT
    coach_endpoint_url: str = COACH_ENDPOINT_URL
    profile_store_path: str = PROFILE_STORE_PATH
    model_name: str = MODEL_NAME
    vertex_location: str = VERTEX_LOCATION
    max_output_tokens: int = MAX_OUTPUT_TOKENS
    temperature: float = TEMPERATURE
    log_file: str = LOG_FILE
    log_level: str = LOG_LEVEL

    @property
    def use_vertex(self) -> bool:
        """Vertex AI is used only when a project is set and no API key is."""
        return bool(self.google_cloud_project) and not self.gemini_api_key


def _env_int(name: str, default: int) -> int:
    val = os.getenv(name)
    if val is None:
        return default
    try:
        return int(val)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    val = os.getenv(name)
    if val is None:
        return default
    try:
        return float(val)
    except ValueError:
        return default


def get_config() -> Config:
    """Load configuration, letting environment variables override the settings above."""
    host = os.getenv("COACH_SERVER_HOST") or SERVER_HOST
    port = _env_int("COACH_SERVER_PORT", SERVER_PORT)

    return Config(
        gemini_api_key=os.getenv("GEMINI_API_KEY") or GEMINI_API_KEY,
        google_cloud_project=os.getenv("GOOGLE_CLOUD_PROJECT") or GOOGLE_CLOUD_PROJECT,
        google_application_credentials=(
            os.getenv("GOOGLE_APPLICATION_CREDENTIALS") or GOOGLE_APPLICATION_CREDENTIALS
        ),
        language_code=os.getenv("COACH_LANGUAGE_CODE") or LANGUAGE_CODE,
        debounce_seconds=_env_float("COACH_DEBOUNCE_SECONDS", DEBOUNCE_SECONDS),
        camera_index=_env_int("COACH_CAMERA_INDEX", CAMERA_INDEX),
        server_host=host,
        server_port=port,
        coach_endpoint_url=(
            os.getenv("COACH_ENDPOINT_URL") or f"http://{host}:{port}{COACH_ENDPOINT_PATH}"
        ),
        profile_store_path=os.getenv("COACH_PROFILE_STORE") or PROFILE_STORE_PATH,
        model_name=os.getenv("GEMINI_MODEL") or MODEL_NAME,
        log_file=os.getenv("COACH_LOG_FILE") or LOG_FILE,
        log_level=os.getenv("COACH_LOG_LEVEL") or LOG_LEVEL,
    )
