from __future__ import annotations

import logging
from typing import Optional, Protocol

from config import Settings, get_settings

logger = logging.getLogger(__name__)


class TextModel(Protocol):
    """Prompt in, plain text out. ``None`` means the model returned no text."""

    name: str

    def generate_text(self, prompt: str) -> Optional[str]:
        ...


def get_provider(settings: Settings | None = None) -> TextModel:
    """Return the configured text model.

    Logic:
    - PROVIDER=gemini -> Gemini (requires GEMINI_API_KEY)
    - PROVIDER=groq -> Groq (requires GROQ_API_KEY)
    - PROVIDER=mock -> deterministic mock (default)

    A missing key or a failing client constructor degrades to the mock model
    with a warning, so the app still boots in local development.
    """

    from .mock_provider import MockTextModel  # local import to avoid cycles

    settings = settings or get_settings()
    provider_env = settings.provider

    if provider_env == "gemini":
        if not settings.gemini_api_key:
            logger.warning("PROVIDER=gemini requires GEMINI_API_KEY. Falling back to mock provider.")
            return MockTextModel()
        try:
            from .gemini_provider import GeminiTextModel

            return GeminiTextModel(api_key=settings.gemini_api_key, model_name=settings.gemini_model)
        except Exception as e:
            logger.warning("Gemini initialization failed: %s. Using mock provider.", e)
            return MockTextModel()

    if provider_env == "groq":
        if not settings.groq_api_key:
            logger.warning("PROVIDER=groq requires GROQ_API_KEY. Falling back to mock provider.")
            return MockTextModel()
        try:
            from .groq_provider import GroqTextModel

            return GroqTextModel(api_key=settings.groq_api_key, model_name=settings.groq_model)
        except Exception as e:
            logger.warning("Groq initialization failed: %s. Using mock provider.", e)
            return MockTextModel()

    return MockTextModel()
