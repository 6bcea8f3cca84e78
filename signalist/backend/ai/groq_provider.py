from __future__ import annotations

import logging
from typing import Optional

from groq import Groq

from config import DEFAULT_GROQ_MODEL

logger = logging.getLogger(__name__)


class GroqTextModel:
    """Groq-hosted Llama model, used when Gemini quota is not available."""

    name = "groq"

    def __init__(self, api_key: str, model_name: str = DEFAULT_GROQ_MODEL, temperature: float = 0.7) -> None:
        self._client = Groq(api_key=api_key)
        self._model_name = model_name
        self._temperature = temperature
        logger.info("Groq provider initialized with model=%s", model_name)

    def generate_text(self, prompt: str) -> Optional[str]:
        response = self._client.chat.completions.create(
            model=self._model_name,
            messages=[{"role": "user", "content": prompt}],
            temperature=self._temperature,
        )
        if not response.choices:
            return None
        return response.choices[0].message.content or None
