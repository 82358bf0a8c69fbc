"""User preference lookup.

Preferences are free-text hints per category, e.g. ``{"pets": ["dog", "cat"]}``.
"""

from typing import Any, Protocol

import orjson
import structlog
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from petfeed_recommender.exceptions import UpstreamLoadError
from petfeed_recommender.infrastructure.database.connection import get_db_session

logger = structlog.get_logger()


class PreferenceStore(Protocol):
    async def get_preferences(self, user_id: str) -> dict[str, Any]: ...


def parse_preferences(raw: Any) -> dict[str, Any]:
    if raw is None:
        return {}
    if isinstance(raw, (str, bytes)):
        try:
            raw = orjson.loads(raw)
        except orjson.JSONDecodeError:
            logger.warning("Ignoring malformed preferences document")
            return {}
    return raw if isinstance(raw, dict) else {}


class PostgresPreferenceStore:
    """Reads the JSON ``preferences`` column of a user's profile."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession] | None = None,
        schema: str = "recommender",
    ):
        self.session_factory = session_factory
        self.schema = schema

    async def get_preferences(self, user_id: str) -> dict[str, Any]:
        query = text(f"""
            SELECT preferences
            FROM "{self.schema}".user_profiles
            WHERE external_user_id = :user_id
        """)
        try:
            async with get_db_session(self.session_factory) as session:
                result = await session.execute(query, {"user_id": user_id})
                row = result.first()
        except (SQLAlchemyError, OSError) as e:
            logger.error("Failed to load user preferences", user_id=user_id, error=str(e))
            raise UpstreamLoadError("Could not load user preferences") from e

        if row is None:
            return {}
        return parse_preferences(row.preferences)
