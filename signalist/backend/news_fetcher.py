from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Protocol

from models import MarketNewsArticle, UserForNewsEmail, UserNewsBatch
from results import capture, on_error, unwrap_or

logger = logging.getLogger(__name__)

ARTICLES_PER_USER = 6


class WatchlistLookup(Protocol):
    def symbols_for_email(self, email: str) -> List[str]:
        ...


class NewsLookup(Protocol):
    def get_news(self, symbols: Optional[Iterable[str]] = None) -> List[MarketNewsArticle]:
        ...


class UserNewsFetcher:
    def __init__(self, watchlists: WatchlistLookup, news: NewsLookup, *, limit: int = ARTICLES_PER_USER) -> None:
        self._watchlists = watchlists
        self._news = news
        self._limit = limit

    def articles_for(self, user: UserForNewsEmail) -> List[MarketNewsArticle]:
        symbols = self._watchlists.symbols_for_email(user.email)
        articles = list(self._news.get_news(symbols) or [])[: self._limit]
        if not articles:
            articles = list(self._news.get_news() or [])[: self._limit]
        return articles

    def fetch_all(self, users: Iterable[UserForNewsEmail]) -> List[UserNewsBatch]:
        """One batch per user, in order. A failing user gets an empty batch."""
        batches: List[UserNewsBatch] = []
        for user in users:
            result = on_error(
                capture(self.articles_for, user),
                lambda exc, email=user.email: logger.error("daily-news error for %s: %s", email, exc),
            )
            batches.append(UserNewsBatch(user=user, articles=unwrap_or(result, [])))
        return batches
