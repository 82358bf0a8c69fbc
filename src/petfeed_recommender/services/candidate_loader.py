"""Loading of precomputed item embeddings from the backing store."""

import math
from numbers import Real
from typing import Any, Protocol

import orjson
import structlog
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from petfeed_recommender.constants import CATEGORY_POOL_KEYS
from petfeed_recommender.exceptions import UpstreamLoadError
from petfeed_recommender.infrastructure.database.connection import get_db_session
from petfeed_recommender.models import EmbeddingRecord

logger = structlog.get_logger()


class CandidateLoader(Protocol):
    async def fetch(self, key: str) -> list[EmbeddingRecord]: ...


def parse_embedding(raw: Any) -> list[float] | None:
    """
    Return ``raw`` as a list of floats, or None if it is not a usable vector.

    Accepts a JSON array or a JSON-encoded string of one. Empty arrays,
    booleans, non-numeric or non-finite entries are rejected.
    """
    if isinstance(raw, (str, bytes)):
        try:
            raw = orjson.loads(raw)
        except orjson.JSONDecodeError:
            return None
    if not isinstance(raw, (list, tuple)) or not raw:
        return None

    vector = []
    for value in raw:
        if isinstance(value, bool) or not isinstance(value, Real):
            return None
        value = float(value)
        if not math.isfinite(value):
            return None
        vector.append(value)
    return vector


def to_records(rows: list[tuple[Any, Any]]) -> list[EmbeddingRecord]:
    """Build records from ``(id, embedding)`` rows, dropping rows without a vector."""
    records = []
    for item_id, raw_embedding in rows:
        embedding = parse_embedding(raw_embedding)
        if embedding is not None:
            records.append(EmbeddingRecord(id=str(item_id), embedding=embedding))
    return records


class PostgresCandidateLoader:
    """Reads ``(id, embedding)`` rows for a pool from its table in the store schema."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession] | None = None,
        schema: str = "recommender",
    ):
        self.session_factory = session_factory
        self.schema = schema

    async def fetch(self, key: str) -> list[EmbeddingRecord]:
        # Pool keys become table names, so only known pools are queried
        if key not in CATEGORY_POOL_KEYS.values():
            raise UpstreamLoadError(f"Unknown embedding pool: {key}")

        query = text(f'SELECT id, embedding FROM "{self.schema}"."{key}"')
        try:
            async with get_db_session(self.session_factory) as session:
                result = await session.execute(query)
                rows = [(row.id, row.embedding) for row in result.fetchall()]
        except (SQLAlchemyError, OSError) as e:
            logger.error("Failed to load embedding pool", key=key, error=str(e))
            raise UpstreamLoadError(f"Could not load pool {key}") from e

        records = to_records(rows)
        if len(records) < len(rows):
            logger.debug(
                "Dropped rows without a valid embedding",
                key=key,
                dropped=len(rows) - len(records),
            )
        return records
