from __future__ import annotations

import logging
from typing import Any, List, Optional

logger = logging.getLogger(__name__)

AUTH_USER_COLLECTION = "user"


class WatchlistRepository:
    """Reads watchlist symbols for a user identified by email."""

    def __init__(
        self,
        db: Any,
        *,
        watchlist_collection: str = "watchlists",
        user_collection: str = AUTH_USER_COLLECTION,
    ) -> None:
        self._db = db
        self._watchlist_collection = watchlist_collection
        self._user_collection = user_collection

    def _find_user_id(self, email: str) -> Optional[str]:
        doc = self._db[self._user_collection].find_one({"email": email})
        if not doc:
            return None
        return str(doc.get("id") or doc["_id"])

    def symbols_for_email(self, email: str) -> List[str]:
        """Return the user's watchlist symbols; empty on any lookup failure."""
        if self._db is None or not email:
            return []
        try:
            user_id = self._find_user_id(email)
            if not user_id:
                return []
            items = self._db[self._watchlist_collection].find(
                {"userId": user_id}, projection={"symbol": 1}
            )
            return [str(item["symbol"]).upper() for item in items if item.get("symbol")]
        except Exception as exc:
            logger.error("Watchlist lookup failed for %s: %s", email, exc)
            return []
