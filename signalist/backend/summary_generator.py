from __future__ import annotations

import logging
from typing import Callable, Iterable, List, Optional

from ai.prompt_builder import build_news_summary_prompt
from models import UserNewsBatch, UserNewsSummary
from results import capture, map_result, on_error, unwrap_or

logger = logging.getLogger(__name__)

NO_NEWS_FALLBACK = "No market news."

# (step_id, prompt) -> model text. Lets the job runtime own each inference.
InferFn = Callable[[str, str], Optional[str]]


def summary_step_id(email: str) -> str:
    return f"summarize-news-{email}"


def summarize_batch(batch: UserNewsBatch, infer: InferFn) -> Optional[str]:
    prompt = build_news_summary_prompt(batch.articles)
    return infer(summary_step_id(batch.user.email), prompt)


def generate_summaries(batches: Iterable[UserNewsBatch], infer: InferFn) -> List[UserNewsSummary]:
    """Summarise each user's articles in turn.

    ``news_content`` is ``None`` when the model call failed (no mail is sent)
    and ``NO_NEWS_FALLBACK`` when the model answered with nothing usable.
    """
    summaries: List[UserNewsSummary] = []
    for batch in batches:
        result = map_result(capture(summarize_batch, batch, infer), lambda text: text or NO_NEWS_FALLBACK)
        on_error(
            result,
            lambda exc, email=batch.user.email: logger.error("Failed to summarize news for %s: %s", email, exc),
        )
        summaries.append(UserNewsSummary(user=batch.user, news_content=unwrap_or(result, None)))
    return summaries
