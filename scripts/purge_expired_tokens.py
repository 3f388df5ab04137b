#!/usr/bin/env python3
"""
Expired Token Cleanup Script
============================
Deletes expired sessions and verification codes. Requests already remove
expired rows they touch; this sweeps the ones nobody touches again.

Usage:
    python scripts/purge_expired_tokens.py

Cron Setup:
    # Daily at 3 AM
    0 3 * * * cd /srv/placement-backend && .venv/bin/python scripts/purge_expired_tokens.py >> /var/log/placement/purge.log 2>&1
"""

import asyncio
import os
import sys

import structlog
from dotenv import load_dotenv

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

load_dotenv()

from app.core.logging import setup_logging  # noqa: E402
from app.db.session import AsyncSessionLocal, engine  # noqa: E402
from app.repositories import SessionRepository, VerificationTokenRepository  # noqa: E402

logger = structlog.get_logger("purge_expired_tokens")


async def purge_expired_tokens() -> dict:
    """Delete every expired session and verification code."""
    async with AsyncSessionLocal() as db:
        sessions = await SessionRepository(db).purge_expired()
        codes = await VerificationTokenRepository(db).purge_expired()
    return {"sessions": sessions, "verification_tokens": codes}


async def main() -> int:
    setup_logging()
    try:
        removed = await purge_expired_tokens()
    finally:
        await engine.dispose()
    logger.info("expired_tokens_purged", **removed)
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
