from __future__ import annotations

import logging
from typing import Optional

from pymongo import MongoClient
from pymongo.database import Database
from pymongo.errors import PyMongoError

from config import Settings

logger = logging.getLogger(__name__)


class MongoConnection:
    """Lazily-connected handle to the application's document store.

    Built once at startup and passed to the components that need it.
    """

    def __init__(self, uri: str, db_name: str, *, timeout_ms: int = 5000) -> None:
        self._uri = uri
        self._db_name = db_name
        self._timeout_ms = timeout_ms
        self._client: Optional[MongoClient] = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "MongoConnection":
        return cls(settings.mongodb_uri, settings.mongodb_db_name)

    def get_database(self) -> Optional[Database]:
        """Return the database handle, or None when the server is unreachable."""
        if self._client is None:
            try:
                client = MongoClient(
                    self._uri,
                    serverSelectionTimeoutMS=self._timeout_ms,
                    connectTimeoutMS=self._timeout_ms,
                )
                client.admin.command("ping")
            except PyMongoError as exc:
                logger.error("Mongo connection to %s failed: %s", self._db_name, exc)
                return None
            self._client = client
            logger.info("Connected to Mongo database '%s'", self._db_name)
        return self._client[self._db_name]

    def ping(self) -> bool:
        db = self.get_database()
        if db is None:
            return False
        try:
            db.command("ping")
            return True
        except PyMongoError:
            return False

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None
