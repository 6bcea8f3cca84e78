from __future__ import annotations

import json
from textwrap import dedent
from typing import Sequence

from models import MarketNewsArticle, SignUpEventData


PERSONALIZED_WELCOME_EMAIL_PROMPT = dedent(
    """
    You write the opening paragraph of a welcome email for Signalist, a stock
    market tracking app. Personalise it using the profile below.

    USER PROFILE:
    {{userProfile}}

    Requirements:
    - Return a single HTML paragraph: <p style="font-size: 16px; line-height: 30px; color: #CCDADC;">...</p>
    - Two or three sentences, warm but concise.
    - Reference the user's goals or preferred industry where it fits naturally.
    - Do not give investment advice and do not name specific stocks to buy or sell.
    - No markdown, no greeting line, no sign-off.
    """
).strip()


NEWS_SUMMARY_EMAIL_PROMPT = dedent(
    """
    Summarise today's market news for a Signalist user's daily email.

    Requirements:
    - Return clean HTML only (h3, p, ul, li, strong, a tags). No markdown.
    - Group related stories under short section headings.
    - For each story: a one-line headline, two sentences in plain English on
      what happened and why it matters to an everyday investor, and a
      "Read Full Story" link to the article url.
    - Keep it factual. No buy/sell recommendations.
    - If the list is empty, return nothing.

    NEWS DATA:
    {{newsData}}
    """
).strip()


def format_user_profile(event: SignUpEventData) -> str:
    return dedent(
        f"""
        - Country: {event.country}
        - Investment goals: {event.investment_goals}
        - Risk tolerance: {event.risk_tolerance}
        - Preferred industry: {event.preferred_industry}
        """
    ).strip()


def build_welcome_prompt(event: SignUpEventData) -> str:
    return PERSONALIZED_WELCOME_EMAIL_PROMPT.replace("{{userProfile}}", format_user_profile(event))


def build_news_summary_prompt(articles: Sequence[MarketNewsArticle]) -> str:
    news_data = json.dumps(
        [a.model_dump(mode="json", exclude_none=True) for a in articles], indent=2
    )
    return NEWS_SUMMARY_EMAIL_PROMPT.replace("{{newsData}}", news_data)
