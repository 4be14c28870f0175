"""Background polling loop that runs every producer on a fixed cadence."""

import asyncio
import logging
from collections.abc import Mapping

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from viewerwatch.services.producers import Producer, run_producer

logger = logging.getLogger(__name__)


async def poll_once(
    producers: Mapping[str, Producer],
    session_factory: async_sessionmaker[AsyncSession],
) -> int:
    """Run each producer once in its own session. Returns samples recorded.

    One platform failing is logged and rolled back without affecting the
    others.
    """
    recorded = 0
    for platform, producer in producers.items():
        async with session_factory() as db:
            try:
                samples = await run_producer(producer, db)
                await db.commit()
                recorded += len(samples)
            except Exception:
                logger.exception("Polling %s failed", platform)
                await db.rollback()
    return recorded


async def poll_forever(
    producers: Mapping[str, Producer],
    session_factory: async_sessionmaker[AsyncSession],
    interval_seconds: float,
) -> None:
    """Poll until cancelled."""
    logger.info(
        "Polling %s every %ss",
        ", ".join(producers) or "nothing",
        interval_seconds,
    )
    while True:
        await poll_once(producers, session_factory)
        await asyncio.sleep(interval_seconds)
