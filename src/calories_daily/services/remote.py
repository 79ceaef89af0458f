"""Helpers for calling the blocking remote store from async code."""

import asyncio
import logging
from collections.abc import Callable
from typing import TypeVar

from calories_daily.domain.errors import RemoteUnavailableError

T = TypeVar("T")

_logger = logging.getLogger(__name__)


async def call_remote(
    func: Callable[[], T],
    *,
    action: str,
    retry_attempts: int = 0,
    retry_delay_seconds: float = 0.3,
) -> T:
    """Run a remote call in a worker thread, retrying a few times on failure.

    Any failure left after the retries is raised as RemoteUnavailableError.
    """
    attempt = 0
    while True:
        try:
            return await asyncio.to_thread(func)
        except Exception as exc:
            attempt += 1
            _logger.warning(
                "Remote %s failed (attempt %s/%s): %s",
                action,
                attempt,
                retry_attempts + 1,
                exc,
            )
            if attempt > retry_attempts:
                raise RemoteUnavailableError(f"Remote {action} failed: {exc}") from exc
            await asyncio.sleep(retry_delay_seconds)
