from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional

import requests

from errors import NewsSourceError
from models import MarketNewsArticle

logger = logging.getLogger(__name__)

MAX_ARTICLES = 6
LOOKBACK_DAYS = 5


def is_valid_article(item: Dict) -> bool:
    return bool(item.get("headline") and item.get("summary") and item.get("url") and item.get("datetime"))


def clean_symbols(symbols: Optional[Iterable[str]]) -> List[str]:
    seen: List[str] = []
    for raw in symbols or []:
        symbol = str(raw or "").strip().upper()
        if symbol and symbol not in seen:
            seen.append(symbol)
    return seen


class FinnhubClient:
    """Minimal Finnhub news client.

    ``get_news(symbols)`` returns company news for the watchlist, picking
    articles round-robin across symbols; without symbols it returns general
    market news.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://finnhub.io/api/v1",
        *,
        timeout: float = 15.0,
        session: Optional[requests.Session] = None,
    ) -> None:
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._session = session or requests.Session()

    def _get(self, path: str, params: Dict[str, str]) -> List[Dict]:
        if not self._api_key:
            raise NewsSourceError("FINNHUB_API_KEY is not configured")
        try:
            resp = self._session.get(
                f"{self._base_url}{path}",
                params={**params, "token": self._api_key},
                timeout=self._timeout,
            )
            resp.raise_for_status()
            payload = resp.json()
        except (requests.RequestException, ValueError) as exc:
            raise NewsSourceError(f"Finnhub request {path} failed: {exc}") from exc
        if not isinstance(payload, list):
            raise NewsSourceError(f"Finnhub request {path} returned {type(payload).__name__}")
        return payload

    def company_news(self, symbol: str, start: date, end: date) -> List[Dict]:
        return self._get(
            "/company-news",
            {"symbol": symbol, "from": start.isoformat(), "to": end.isoformat()},
        )

    def market_news(self, category: str = "general") -> List[Dict]:
        return self._get("/news", {"category": category})

    def get_news(self, symbols: Optional[Iterable[str]] = None) -> List[MarketNewsArticle]:
        cleaned = clean_symbols(symbols)
        if cleaned:
            return self._watchlist_news(cleaned)
        return self._general_news()

    def _watchlist_news(self, symbols: List[str]) -> List[MarketNewsArticle]:
        end = date.today()
        start = end - timedelta(days=LOOKBACK_DAYS)
        per_symbol: Dict[str, List[Dict]] = {}
        picked: List[Dict] = []
        seen_urls = set()
        # Each pass takes at most one article per symbol; exhausted symbols are skipped.
        while len(picked) < MAX_ARTICLES:
            added = False
            for symbol in symbols:
                if len(picked) >= MAX_ARTICLES:
                    break
                if symbol not in per_symbol:
                    try:
                        per_symbol[symbol] = [a for a in self.company_news(symbol, start, end) if is_valid_article(a)]
                    except NewsSourceError as exc:
                        logger.warning("Company news for %s unavailable: %s", symbol, exc)
                        per_symbol[symbol] = []
                queue = per_symbol[symbol]
                while queue:
                    article = queue.pop(0)
                    if article["url"] in seen_urls:
                        continue
                    seen_urls.add(article["url"])
                    picked.append({**article, "related": article.get("related") or symbol})
                    added = True
                    break
            if not added:
                break

        picked.sort(key=lambda a: a.get("datetime") or 0, reverse=True)
        return [MarketNewsArticle.model_validate(a) for a in picked]

    def _general_news(self) -> List[MarketNewsArticle]:
        seen = set()
        unique: List[Dict] = []
        for article in self.market_news():
            if not is_valid_article(article):
                continue
            key = article.get("id") or article.get("url") or article.get("headline")
            if key in seen:
                continue
            seen.add(key)
            unique.append(article)
            if len(unique) >= MAX_ARTICLES:
                break
        return [MarketNewsArticle.model_validate(a) for a in unique]
