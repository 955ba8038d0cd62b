"""Rate-Limit Sweeper — background task that evicts expired rate-limit windows.

Invariants:
    - Runs for the lifetime of the app; cancelled by the lifespan on shutdown
    - A failing sweep is logged and the loop keeps going
"""

import asyncio
import logging

from urbanestate.core.rate_limit import RateLimiter

logger = logging.getLogger(__name__)


async def sweep_forever(limiter: RateLimiter, interval_seconds: float) -> None:
    while True:
        await asyncio.sleep(interval_seconds)
        try:
            removed = limiter.sweep()
        except Exception as e:
            logger.error(f"Rate-limit sweep failed: {e}", exc_info=True)
            continue
        if removed:
            logger.debug(
                f"Swept {removed} expired rate-limit windows",
                extra={"removed": removed},
            )


def start_sweeper(limiter: RateLimiter, interval_seconds: float) -> asyncio.Task:
    return asyncio.create_task(
        sweep_forever(limiter, interval_seconds), name="rate-limit-sweeper",
    )
