from __future__ import annotations

import os

# Must be set before db.py builds its engine.
os.environ.setdefault("SQLALCHEMY_DATABASE_URL", "sqlite://")
os.environ.setdefault("ENABLE_SCHEDULER", "0")
os.environ.setdefault("PROVIDER", "mock")

from typing import Any, Dict, List, Optional

import pytest

from db import Base, engine
from jobs.functions import build_functions
from jobs.ledger import JobLedger
from jobs.runtime import JobRuntime
from mailer import Mailer
from models import MarketNewsArticle
from services import Services


def _matches(doc: Dict[str, Any], query: Dict[str, Any]) -> bool:
    for key, cond in query.items():
        if key == "$or":
            if not any(_matches(doc, sub) for sub in cond):
                return False
            continue
        value = doc.get(key)
        if isinstance(cond, dict):
            if "$exists" in cond and (key in doc) != cond["$exists"]:
                return False
            if "$ne" in cond and value == cond["$ne"]:
                return False
        elif value != cond:
            return False
    return True


def _project(doc: Dict[str, Any], projection: Optional[Dict[str, int]]) -> Dict[str, Any]:
    if not projection:
        return dict(doc)
    keep = {k for k, v in projection.items() if v} | {"_id"}
    return {k: v for k, v in doc.items() if k in keep}


class FakeCollection:
    def __init__(self, docs: List[Dict[str, Any]]) -> None:
        self.docs = docs
        self.find_calls = 0

    def find_one(self, query=None, projection=None):
        for doc in self.docs:
            if _matches(doc, query or {}):
                return _project(doc, projection)
        return None

    def find(self, query=None, projection=None):
        self.find_calls += 1
        return [_project(d, projection) for d in self.docs if _matches(d, query or {})]


class FakeDatabase:
    """Just enough of pymongo's Database for the code under test."""

    def __init__(self, collections: Optional[Dict[str, List[Dict[str, Any]]]] = None) -> None:
        self.collections = {name: FakeCollection(docs) for name, docs in (collections or {}).items()}

    def list_collection_names(self) -> List[str]:
        return list(self.collections)

    def __getitem__(self, name: str) -> FakeCollection:
        return self.collections.setdefault(name, FakeCollection([]))


class FakeMongo:
    def __init__(self, db: Optional[FakeDatabase]) -> None:
        self.db = db

    def get_database(self):
        return self.db

    def ping(self) -> bool:
        return self.db is not None


class RecordingTransport:
    def __init__(self, fail_for=()) -> None:
        self.sent: List[Dict[str, str]] = []
        self.fail_for = set(fail_for)

    def send(self, to: str, subject: str, html_body: str) -> None:
        if to in self.fail_for:
            raise RuntimeError(f"SMTP rejected {to}")
        self.sent.append({"to": to, "subject": subject, "html": html_body})


class StaticModel:
    name = "static"

    def __init__(self, text: Optional[str] = "<p>Summary</p>", fail_for=()) -> None:
        self.text = text
        self.fail_for = list(fail_for)
        self.prompts: List[str] = []

    def generate_text(self, prompt: str) -> Optional[str]:
        self.prompts.append(prompt)
        for marker in self.fail_for:
            if marker in prompt:
                raise RuntimeError("model unavailable")
        return self.text


def make_article(n: int, **extra) -> MarketNewsArticle:
    return MarketNewsArticle(
        id=n,
        headline=f"Headline {n}",
        summary=f"Summary {n}",
        url=f"https://news.example.com/{n}",
        datetime=1_700_000_000 + n,
        source="Example",
        **extra,
    )


@pytest.fixture(autouse=True)
def ledger_schema():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
def user_db() -> FakeDatabase:
    return FakeDatabase(
        {
            "user": [
                {"_id": "u1", "email": "ada@example.com", "name": "Ada"},
                {"_id": "u2", "email": "bob@example.com"},
            ],
            "watchlists": [
                {"userId": "u1", "symbol": "aapl"},
            ],
        }
    )


@pytest.fixture
def make_services(transport):
    def _make(db=None, news=None, model=None, user_collection_name=None) -> Services:
        return Services(
            mongo=FakeMongo(db),
            news=news,
            model=model or StaticModel(),
            mailer=Mailer(transport),
            user_collection_name=user_collection_name,
        )

    return _make


@pytest.fixture
def make_runtime():
    def _make(services: Services) -> JobRuntime:
        return JobRuntime(services, build_functions("0 12 * * *"), JobLedger())

    return _make
