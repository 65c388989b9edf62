#!/usr/bin/env python3
"""Recompute every package's rating and review count from its approved reviews."""

import asyncio
import logging
import sys
from pathlib import Path

# Add the server directory to the Python path
server_dir = Path(__file__).parent.parent / "server"
sys.path.insert(0, str(server_dir))

from tourer.core.database import async_session_factory, close_db
from tourer.services.review_service import ReviewService

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


async def main():
    async with async_session_factory() as db:
        changed = await ReviewService(db).recalculate_all()

    await close_db()
    logger.info("Rating recalculation finished, %d package(s) updated", changed)


if __name__ == "__main__":
    asyncio.run(main())
