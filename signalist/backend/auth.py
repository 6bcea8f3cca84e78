from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Mapping, Optional, Protocol

from bson import ObjectId
from bson.errors import InvalidId
from pymongo.errors import PyMongoError
from starlette.requests import cookie_parser

from models import DEFAULT_INVESTOR_NAME, Session, SessionUser
from services import DatabaseProvider

logger = logging.getLogger(__name__)

SESSION_COOKIE = "better-auth.session_token"
SECURE_SESSION_COOKIE = "__Secure-better-auth.session_token"


class SessionLookup(Protocol):
    def get_session(self, headers: Mapping[str, str]) -> Optional[Session]:
        ...


def session_token_from_headers(headers: Mapping[str, str]) -> Optional[str]:
    raw = headers.get("cookie") or headers.get("Cookie")
    if not raw:
        return None
    cookies = cookie_parser(raw)
    value = cookies.get(SECURE_SESSION_COOKIE) or cookies.get(SESSION_COOKIE)
    if not value:
        return None
    # Signed cookies look like "<token>.<signature>".
    return value.split(".", 1)[0] or None


def _as_utc(value: Any) -> Optional[datetime]:
    if not isinstance(value, datetime):
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class MongoSessionStore:
    """Resolves auth sessions persisted by the auth provider's Mongo adapter."""

    def __init__(self, mongo: DatabaseProvider, *, session_collection: str = "session", user_collection: str = "user") -> None:
        self._mongo = mongo
        self._session_collection = session_collection
        self._user_collection = user_collection

    def _find_user(self, db: Any, user_id: Any) -> Optional[dict]:
        query: dict = {"_id": user_id}
        if isinstance(user_id, str):
            try:
                query = {"_id": ObjectId(user_id)}
            except InvalidId:
                query = {"$or": [{"_id": user_id}, {"id": user_id}]}
        return db[self._user_collection].find_one(query)

    def get_session(self, headers: Mapping[str, str]) -> Optional[Session]:
        token = session_token_from_headers(headers)
        if not token:
            return None
        db = self._mongo.get_database()
        if db is None:
            return None
        try:
            return self._lookup(db, token)
        except PyMongoError as exc:
            logger.error("Session lookup failed: %s", exc)
            return None

    def _lookup(self, db: Any, token: str) -> Optional[Session]:
        doc = db[self._session_collection].find_one({"token": token})
        if not doc:
            return None
        expires_at = _as_utc(doc.get("expiresAt"))
        if expires_at is not None and expires_at <= datetime.now(timezone.utc):
            logger.debug("Session %s expired at %s", doc.get("_id"), expires_at)
            return None

        user = self._find_user(db, doc.get("userId"))
        if not user or not user.get("email"):
            return None
        return Session(
            user=SessionUser(
                id=str(user.get("id") or user["_id"]),
                name=user.get("name") or DEFAULT_INVESTOR_NAME,
                email=user["email"],
            ),
            expires_at=expires_at,
        )
