"""
Wrap sensitive actions (login, booking submission) with the attempt throttle.
"""

from __future__ import annotations

import logging
from typing import Awaitable, Callable, TypeVar

from ..domain.exceptions import ThrottledError
from ..domain.throttle import AttemptThrottle, ThrottleConfig, attempt_throttle

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _admit(key: str, config: ThrottleConfig, throttle: AttemptThrottle) -> None:
    if not throttle.check(key, config):
        remaining = throttle.get_blocked_remaining_seconds(key)
        logger.info("Attempt for %r refused, %d s remaining", key, remaining)
        raise ThrottledError(key, remaining)


def run_guarded(
    key: str,
    config: ThrottleConfig,
    action: Callable[[], T],
    throttle: AttemptThrottle = attempt_throttle,
    reset_on_success: bool = True,
) -> T:
    """
    Run ``action`` if the throttle admits another attempt for ``key``.

    A failing action propagates its exception and the attempt stays counted.
    On success the key is reset so earlier failures are not held against
    the next legitimate attempt.

    Raises:
        ThrottledError: If the attempt was refused
    """
    _admit(key, config, throttle)
    result = action()
    if reset_on_success:
        throttle.reset(key)
    return result


async def run_guarded_async(
    key: str,
    config: ThrottleConfig,
    action: Callable[[], Awaitable[T]],
    throttle: AttemptThrottle = attempt_throttle,
    reset_on_success: bool = True,
) -> T:
    """Async counterpart of :func:`run_guarded`."""
    _admit(key, config, throttle)
    result = await action()
    if reset_on_success:
        throttle.reset(key)
    return result
