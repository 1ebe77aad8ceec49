"""Backoff helpers for remote service calls."""

from __future__ import annotations

import asyncio
import random

MAX_BACKOFF_SECONDS = 30.0


def compute_backoff(
    attempt: int,
    base: float = 1.5,
    jitter: float = 0.5,
    cap: float = MAX_BACKOFF_SECONDS,
) -> float:
    """Exponential delay for retry ``attempt`` (1-based), capped, plus jitter."""
    delay = min(base ** attempt, cap)
    return delay + random.uniform(0, jitter)


async def schedule_retry(attempt: int) -> None:
    """Sleep before retry ``attempt``."""
    await asyncio.sleep(compute_backoff(attempt))
