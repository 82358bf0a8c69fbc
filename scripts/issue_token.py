#!/usr/bin/env python3
"""
Issue an API bearer token for a user and print it once.

Only the SHA-256 digest is stored; the plain token cannot be recovered later.

Usage:
    python scripts/issue_token.py <user_id> [--days 30]
"""

import argparse
import asyncio
import secrets
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import structlog
from sqlalchemy import text

from petfeed_recommender.config import get_settings
from petfeed_recommender.infrastructure.database.connection import (
    dispose_engine,
    get_db_session,
)
from petfeed_recommender.services.auth import hash_token

# stdout carries only the token
structlog.configure(logger_factory=structlog.PrintLoggerFactory(sys.stderr))

logger = structlog.get_logger()


async def issue_token(user_id: str, days: int | None) -> str:
    token = secrets.token_urlsafe(32)
    expires_at = None
    if days:
        expires_at = datetime.now(timezone.utc) + timedelta(days=days)

    schema = get_settings().store_schema
    query = text(f"""
        INSERT INTO "{schema}".api_tokens (token_hash, external_user_id, expires_at)
        VALUES (:token_hash, :user_id, :expires_at)
    """)
    async with get_db_session() as session:
        await session.execute(
            query,
            {"token_hash": hash_token(token), "user_id": user_id, "expires_at": expires_at},
        )
        await session.commit()

    logger.info("Issued API token", user_id=user_id, expires_at=expires_at)
    return token


async def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument("user_id")
    parser.add_argument("--days", type=int, default=30, help="Lifetime in days (0 = never expires)")
    args = parser.parse_args()

    try:
        print(await issue_token(args.user_id, args.days))
    finally:
        await dispose_engine()


if __name__ == "__main__":
    asyncio.run(main())
