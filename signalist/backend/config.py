from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


ENV_PATH = Path(__file__).with_name(".env")

DEFAULT_GEMINI_MODEL = "gemini-2.5-flash-lite"
DEFAULT_GROQ_MODEL = "llama-3.3-70b-versatile"
DEFAULT_DAILY_NEWS_CRON = "0 12 * * *"


def env_bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_str(name: str, default: str = "") -> str:
    return (os.getenv(name, default) or default).strip()


@dataclass(frozen=True)
class Settings:
    mongodb_uri: str
    mongodb_db_name: str
    user_collection_name: Optional[str]
    watchlist_collection_name: str

    provider: str
    gemini_api_key: str
    gemini_model: str
    groq_api_key: str
    groq_model: str

    finnhub_api_key: str
    finnhub_base_url: str

    smtp_host: str
    smtp_port: int
    smtp_user: str
    smtp_password: str
    mail_from: str

    daily_news_cron: str
    enable_scheduler: bool

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            mongodb_uri=_env_str("MONGODB_URI", "mongodb://localhost:27017"),
            mongodb_db_name=_env_str("MONGODB_DB_NAME", "signalist"),
            user_collection_name=_env_str("USER_COLLECTION_NAME") or None,
            watchlist_collection_name=_env_str("WATCHLIST_COLLECTION_NAME", "watchlists"),
            provider=_env_str("PROVIDER", "mock").lower(),
            gemini_api_key=_env_str("GEMINI_API_KEY"),
            gemini_model=_env_str("GEMINI_MODEL", DEFAULT_GEMINI_MODEL) or DEFAULT_GEMINI_MODEL,
            groq_api_key=_env_str("GROQ_API_KEY"),
            groq_model=_env_str("GROQ_MODEL", DEFAULT_GROQ_MODEL) or DEFAULT_GROQ_MODEL,
            finnhub_api_key=_env_str("FINNHUB_API_KEY"),
            finnhub_base_url=_env_str("FINNHUB_BASE_URL", "https://finnhub.io/api/v1"),
            smtp_host=_env_str("SMTP_HOST", "smtp.gmail.com"),
            smtp_port=int(_env_str("SMTP_PORT", "587") or 587),
            smtp_user=_env_str("SMTP_USER"),
            smtp_password=_env_str("SMTP_PASSWORD"),
            mail_from=_env_str("MAIL_FROM", "Signalist <signalist@example.com>"),
            daily_news_cron=_env_str("DAILY_NEWS_CRON", DEFAULT_DAILY_NEWS_CRON) or DEFAULT_DAILY_NEWS_CRON,
            enable_scheduler=env_bool(os.getenv("ENABLE_SCHEDULER"), default=True),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load backend/.env once and return the process-wide settings."""
    load_dotenv(dotenv_path=ENV_PATH, override=False)
    return Settings.from_env()
