from __future__ import annotations

import json
import re
from typing import List, Optional

NEWS_DATA_MARKER = "NEWS DATA:"
PROFILE_MARKER = "USER PROFILE:"


class MockTextModel:
    """Deterministic stand-in used when no model API key is configured.

    Output is derived from the prompt itself so local runs produce mail that
    reflects the real input without any network call.
    """

    name = "mock"

    def generate_text(self, prompt: str) -> Optional[str]:
        if NEWS_DATA_MARKER in prompt:
            return self._news_summary(prompt.split(NEWS_DATA_MARKER, 1)[1])
        if PROFILE_MARKER in prompt:
            return self._welcome_intro(prompt.split(PROFILE_MARKER, 1)[1])
        return None

    def _news_summary(self, payload: str) -> Optional[str]:
        match = re.search(r"\[.*\]", payload, re.DOTALL)
        if not match:
            return None
        try:
            articles = json.loads(match.group(0))
        except ValueError:
            return None
        headlines: List[str] = [a["headline"] for a in articles if isinstance(a, dict) and a.get("headline")]
        if not headlines:
            return None
        items = "".join(f"<li>{h}</li>" for h in headlines)
        return f"<h3>Market Highlights</h3><ul>{items}</ul>"

    def _welcome_intro(self, profile: str) -> str:
        industry = "the markets"
        match = re.search(r"Preferred industry:\s*(.+)", profile)
        if match and match.group(1).strip() not in {"", "None"}:
            industry = match.group(1).strip()
        return (
            f"<p>Welcome aboard! We'll keep an eye on {industry} for you and send "
            "a short daily summary of the news that matters to your watchlist.</p>"
        )
