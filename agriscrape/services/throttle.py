"""Politeness delays between requests to the same origin."""

import asyncio
import logging
from secrets import randbelow

logger = logging.getLogger(__name__)


def polite_delay(base_seconds: float, jitter_seconds: float) -> float:
    """Compute a delay of ``base_seconds`` plus up to ``jitter_seconds`` extra.

    Jitter is drawn with millisecond resolution.
    """
    if jitter_seconds <= 0:
        return max(base_seconds, 0.0)
    span_ms = int(jitter_seconds * 1000)
    return max(base_seconds, 0.0) + randbelow(span_ms + 1) / 1000


async def sleep_politely(base_seconds: float, jitter_seconds: float) -> float:
    """Sleep for a polite delay and return how long was slept."""
    delay = polite_delay(base_seconds, jitter_seconds)
    if delay > 0:
        logger.debug(f"Sleeping {delay:.2f}s before next request")
        await asyncio.sleep(delay)
    return delay
