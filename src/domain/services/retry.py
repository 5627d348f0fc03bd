"""Retry policy for version-checked document writes."""

import asyncio
import random

MAX_UPDATE_ATTEMPTS = 3

# Upper bound of the random pause before the second attempt; doubles after that
RETRY_BACKOFF_SECONDS = 0.02


async def backoff(attempt: int) -> None:
    """Sleep a jittered, growing delay so racing writers stop colliding."""
    await asyncio.sleep(random.uniform(0, RETRY_BACKOFF_SECONDS * 2 ** (attempt - 1)))
