"""
Runtime settings read from the environment.

Rationale:
- Environment variables (optionally from a .env file) are the only configuration source.
- The API key is required: a missing key is a startup failure, not a per-request error.
"""

import os
from dataclasses import dataclass

from .errors import ConfigurationError

DEFAULT_MODEL = "gemini-2.5-pro"


@dataclass(frozen=True)
class Settings:
    api_key: str
    model_name: str = DEFAULT_MODEL
    temperature: float = 0.2
    request_timeout: float = 120.0
    log_level: str = "INFO"


def load_settings() -> Settings:
    """
    Build Settings from the environment. Call after load_dotenv().
    """
    api_key = os.getenv("GEMINI_API_KEY") or os.getenv("LLM_API_KEY")
    if not api_key:
        raise ConfigurationError("GEMINI_API_KEY or LLM_API_KEY must be set in environment")

    try:
        temperature = float(os.getenv("LTGD_TEMPERATURE", "0.2"))
        request_timeout = float(os.getenv("LTGD_REQUEST_TIMEOUT", "120"))
    except ValueError as e:
        raise ConfigurationError(f"Invalid numeric setting: {e}")

    return Settings(
        api_key=api_key,
        model_name=os.getenv("GEMINI_MODEL") or DEFAULT_MODEL,
        temperature=temperature,
        request_timeout=request_timeout,
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )
