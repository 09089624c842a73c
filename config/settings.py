from __future__ import annotations

import logging
import os
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv


load_dotenv()

logger = logging.getLogger("tradedesk.settings")

_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}


def _log_level(raw: str) -> str:
    level = raw.strip().upper()
    if level not in _LOG_LEVELS:
        logger.warning("Unrecognised LOG_LEVEL=%r, falling back to INFO", raw)
        return "INFO"
    return level


class Settings:
    """Application settings loaded from environment variables.

    Keep all credentials and config centralized here. A missing API key is
    not an error at this point; it only surfaces when a generation call is
    attempted. Malformed numeric values raise ValueError.
    """

    def __init__(self) -> None:
        self.app_env: str = os.getenv("APP_ENV", "development")
        self.google_api_key: Optional[str] = (
            os.getenv("GOOGLE_API_KEY") or os.getenv("API_KEY") or None
        )
        self.gemini_model: str = os.getenv("GEMINI_MODEL", "gemini-2.0-flash")
        self.temperature: float = float(os.getenv("MODEL_TEMPERATURE", "0.7"))
        self.top_p: float = float(os.getenv("MODEL_TOP_P", "0.95"))
        self.request_timeout: float = float(os.getenv("MODEL_TIMEOUT", "60"))
        self.default_tool: str = os.getenv("DEFAULT_TOOL", "listing_writer")
        self.max_sessions: int = int(os.getenv("MAX_SESSIONS", "1000"))
        self.log_level: str = _log_level(os.getenv("LOG_LEVEL", "INFO"))

    @property
    def is_development(self) -> bool:
        return self.app_env.lower() in {"dev", "development", "local"}


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
