from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Optional, Protocol

from ai.provider import TextModel, get_provider
from config import Settings
from mailer import Mailer, SmtpTransport
from models import UserForNewsEmail
from mongo import MongoConnection
from news_fetcher import NewsLookup, UserNewsFetcher
from news_source import FinnhubClient
from user_directory import get_all_users_for_news_email
from watchlist import WatchlistRepository


class DatabaseProvider(Protocol):
    def get_database(self) -> Optional[Any]:
        ...


@dataclass
class Services:
    """External collaborators shared by the background workflows."""

    mongo: DatabaseProvider
    news: NewsLookup
    model: TextModel
    mailer: Mailer
    user_collection_name: Optional[str] = None
    watchlist_collection_name: str = "watchlists"

    def load_users(self) -> List[UserForNewsEmail]:
        return get_all_users_for_news_email(self.mongo.get_database(), self.user_collection_name)

    def news_fetcher(self) -> UserNewsFetcher:
        watchlists = WatchlistRepository(
            self.mongo.get_database(),
            watchlist_collection=self.watchlist_collection_name,
        )
        return UserNewsFetcher(watchlists, self.news)


def build_services(settings: Settings) -> Services:
    return Services(
        mongo=MongoConnection.from_settings(settings),
        news=FinnhubClient(settings.finnhub_api_key, settings.finnhub_base_url),
        model=get_provider(settings),
        mailer=Mailer(SmtpTransport.from_settings(settings)),
        user_collection_name=settings.user_collection_name,
        watchlist_collection_name=settings.watchlist_collection_name,
    )
