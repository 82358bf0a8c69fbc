"""Bearer token verification against issued API tokens."""

import hashlib
from typing import Protocol

import structlog
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from petfeed_recommender.exceptions import AuthenticationError, UpstreamLoadError
from petfeed_recommender.infrastructure.database.connection import get_db_session

logger = structlog.get_logger()


class TokenVerifier(Protocol):
    async def verify(self, token: str) -> str: ...


def hash_token(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


class PostgresTokenVerifier:
    """Resolves a bearer token to a user id; tokens are stored as SHA-256 digests."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession] | None = None,
        schema: str = "recommender",
    ):
        self.session_factory = session_factory
        self.schema = schema

    async def verify(self, token: str) -> str:
        """
        Return the user id owning ``token``.

        Raises:
            AuthenticationError: unknown, revoked or expired token
            UpstreamLoadError: the token store is unreachable
        """
        if not token:
            raise AuthenticationError("Empty token")

        query = text(f"""
            SELECT external_user_id
            FROM "{self.schema}".api_tokens
            WHERE token_hash = :token_hash
            AND revoked_at IS NULL
            AND (expires_at IS NULL OR expires_at > NOW())
        """)
        try:
            async with get_db_session(self.session_factory) as session:
                result = await session.execute(query, {"token_hash": hash_token(token)})
                row = result.first()
        except (SQLAlchemyError, OSError) as e:
            logger.error("Token lookup failed", error=str(e))
            raise UpstreamLoadError("Token store unavailable") from e

        if row is None:
            raise AuthenticationError("Invalid or expired token")
        return str(row.external_user_id)
