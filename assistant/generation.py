from __future__ import annotations

import logging
from typing import Any, Optional

from langchain_core.messages import HumanMessage, SystemMessage
from langchain_google_genai import ChatGoogleGenerativeAI

from assistant.core.prompt import SYSTEM_INSTRUCTION
from config.settings import Settings, get_settings


logger = logging.getLogger("tradedesk.generation")


class GenerationFailed(Exception):
    """Any failure of the generation backend."""


class MissingCredentialError(GenerationFailed):
    pass


class ProviderError(GenerationFailed):
    pass


def _response_text(content: Any) -> str:
    if isinstance(content, str):
        return content
    parts = []
    for part in content or []:
        if isinstance(part, str):
            parts.append(part)
        elif isinstance(part, dict) and part.get("type", "text") == "text":
            parts.append(str(part.get("text") or ""))
    return "".join(parts)


class GenerationClient:
    """Stateless wrapper around the Gemini chat model.

    A new chat model is constructed for every call so that concurrent calls
    never share a credential or connection object.
    """

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self._settings = settings

    @property
    def settings(self) -> Settings:
        return self._settings or get_settings()

    def _build_llm(self, temperature: float) -> ChatGoogleGenerativeAI:
        settings = self.settings
        if not settings.google_api_key:
            raise MissingCredentialError(
                "GOOGLE_API_KEY not set. Please configure it in environment or .env"
            )
        return ChatGoogleGenerativeAI(
            model=settings.gemini_model,
            google_api_key=settings.google_api_key,
            temperature=temperature,
            top_p=settings.top_p,
            # A failed call is reported once; the manager holds its in-flight
            # guard for the whole request.
            max_retries=0,
            timeout=settings.request_timeout,
        )

    def generate(
        self,
        prompt: str,
        system_instruction: str = SYSTEM_INSTRUCTION,
        temperature: Optional[float] = None,
    ) -> str:
        if not prompt or not prompt.strip():
            raise ValueError("prompt must not be empty")
        if temperature is None:
            temperature = self.settings.temperature
        if not 0.0 <= temperature <= 1.0:
            raise ValueError(f"temperature must be within [0, 1], got {temperature}")

        try:
            llm = self._build_llm(temperature)
        except MissingCredentialError:
            logger.warning("Generation skipped: no API key configured")
            raise

        logger.info(
            "Generating: model=%s temperature=%.2f prompt_len=%s",
            self.settings.gemini_model,
            temperature,
            len(prompt),
        )
        try:
            response = llm.invoke(
                [
                    SystemMessage(content=system_instruction),
                    HumanMessage(content=prompt),
                ]
            )
        except Exception as exc:
            logger.exception("Gemini API error: %s", exc)
            raise ProviderError(f"Generation backend call failed: {exc}") from exc

        text = _response_text(getattr(response, "content", ""))
        logger.info("Model responded: %s chars", len(text))
        return text
