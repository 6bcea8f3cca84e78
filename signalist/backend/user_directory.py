"""Find the users that should receive the daily news email.

The auth layer persists users into whatever collection its adapter chooses,
so the user collection is located at runtime with an ordered chain of
strategies. The first strategy that names an existing collection wins.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, List, Optional, Protocol, Sequence

from models import DEFAULT_INVESTOR_NAME, UserForNewsEmail

logger = logging.getLogger(__name__)

COMMON_USER_COLLECTIONS = ("users", "user", "accounts", "account", "profiles")

HAS_EMAIL = {"email": {"$exists": True, "$ne": None}}


class CollectionStrategy(Protocol):
    name: str

    def resolve(self, db: Any, collection_names: Sequence[str]) -> Optional[str]:
        ...


@dataclass(frozen=True)
class ConfiguredName:
    preferred: Optional[str]
    name: str = "configured-name"

    def resolve(self, db: Any, collection_names: Sequence[str]) -> Optional[str]:
        if self.preferred and self.preferred in collection_names:
            return self.preferred
        return None


@dataclass(frozen=True)
class CommonName:
    candidates: Sequence[str] = COMMON_USER_COLLECTIONS
    name: str = "common-name"

    def resolve(self, db: Any, collection_names: Sequence[str]) -> Optional[str]:
        for candidate in self.candidates:
            if candidate in collection_names:
                return candidate
        return None


@dataclass(frozen=True)
class ProbeByEmailField:
    name: str = "probe-by-field"

    def resolve(self, db: Any, collection_names: Sequence[str]) -> Optional[str]:
        # Existence probe only: one document with an email is enough.
        for collection_name in collection_names:
            hit = db[collection_name].find_one(HAS_EMAIL, projection={"_id": 1})
            if hit:
                return collection_name
        return None


def default_strategies(preferred: Optional[str] = None) -> List[CollectionStrategy]:
    return [ConfiguredName(preferred), CommonName(), ProbeByEmailField()]


def detect_user_collection(
    db: Any,
    collection_names: Sequence[str],
    strategies: Sequence[CollectionStrategy],
) -> Optional[str]:
    for strategy in strategies:
        match = strategy.resolve(db, collection_names)
        if match:
            logger.debug("User collection '%s' detected by %s", match, strategy.name)
            return match
    return None


def _to_user(doc: dict) -> UserForNewsEmail:
    return UserForNewsEmail(
        id=str(doc["_id"]),
        email=doc["email"],
        name=doc.get("name") or DEFAULT_INVESTOR_NAME,
    )


def get_all_users_for_news_email(
    db: Any,
    preferred_collection: Optional[str] = None,
    strategies: Optional[Sequence[CollectionStrategy]] = None,
) -> List[UserForNewsEmail]:
    """Return every user that can receive mail. Never raises.

    Any failure (no database, no collections, no user collection, nobody with
    an email address) is logged and yields an empty list.
    """
    try:
        if db is None:
            logger.error("Database connection exists but db is undefined")
            return []

        collection_names = list(db.list_collection_names())
        if not collection_names:
            logger.error("No collections found in database")
            return []

        chain = strategies if strategies is not None else default_strategies(preferred_collection)
        user_collection = detect_user_collection(db, collection_names, chain)
        if not user_collection:
            logger.error(
                "No collection containing user emails was found. "
                "Check auth provider persistence."
            )
            return []

        docs = list(
            db[user_collection].find(HAS_EMAIL, projection={"email": 1, "name": 1})
        )
        users = [_to_user(doc) for doc in docs if doc.get("email")]
        if not users:
            logger.warning(
                "User collection '%s' exists but has no emailable users", user_collection
            )
            return []

        logger.info("Newsletter users loaded: %d from '%s'", len(users), user_collection)
        return users
    except Exception:
        logger.exception("get_all_users_for_news_email failed")
        return []
