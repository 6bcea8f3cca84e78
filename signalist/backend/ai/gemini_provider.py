from __future__ import annotations

import logging
import random
import time
from typing import Any, Optional

from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from config import DEFAULT_GEMINI_MODEL

logger = logging.getLogger(__name__)


def generate_with_retry(call_fn, max_retries=5):
    """Retry with exponential backoff and jitter on rate-limit errors only."""
    delay = 8.0
    for attempt in range(max_retries):
        try:
            return call_fn()
        except genai_errors.ClientError as e:
            msg = str(e)
            if ("429" in msg or "RESOURCE_EXHAUSTED" in msg) and attempt < max_retries - 1:
                jittered_delay = delay + random.random()
                logger.warning(
                    "Gemini rate limited (attempt %d/%d). Retrying in %.1fs...",
                    attempt + 1,
                    max_retries,
                    jittered_delay,
                )
                time.sleep(jittered_delay)
                delay = min(delay * 2, 20)
                continue
            raise


def first_part_text(response: Any) -> Optional[str]:
    """Text of the first part of the first candidate, if there is one."""
    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        return None
    content = getattr(candidates[0], "content", None)
    parts = getattr(content, "parts", None) or []
    if not parts:
        return None
    return getattr(parts[0], "text", None) or None


class GeminiTextModel:
    """Google Gemini-backed text model.

    Errors are not masked here: callers decide whether a failure means
    "skip this user" or "let the job runtime retry".
    """

    name = "gemini"

    def __init__(self, api_key: str, model_name: str = DEFAULT_GEMINI_MODEL, temperature: float = 0.7) -> None:
        self._client = genai.Client(api_key=api_key)
        self._model_name = model_name
        self._config = types.GenerateContentConfig(temperature=temperature)
        logger.info("Gemini provider initialized with model=%s", model_name)

    def generate_text(self, prompt: str) -> Optional[str]:
        response = generate_with_retry(
            lambda: self._client.models.generate_content(
                model=self._model_name,
                contents=[types.Content(role="user", parts=[types.Part(text=prompt)])],
                config=self._config,
            )
        )
        return first_part_text(response)
