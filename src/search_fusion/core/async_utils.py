"""
Async Utilities for Provider Calls.

Provides:
- Timed calls with a hard deadline that never raise past their boundary
- Circuit breaker for repeatedly failing backends
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar
from collections.abc import Awaitable, Callable

from .exceptions import ProviderTimeoutError, ProviderUnavailableError

logger = logging.getLogger(__name__)

T = TypeVar("T")


# =============================================================================
# Timed Call Wrapper
# =============================================================================


@dataclass
class TimedResult(Generic[T]):
    """Outcome of one deadline-bounded call."""

    name: str
    value: T | None
    elapsed_ms: int
    error: str | None = None
    exception: BaseException | None = field(default=None, repr=False)

    @property
    def ok(self) -> bool:
        return self.error is None


async def timed_call(
    name: str,
    call: Callable[[], Awaitable[T]],
    timeout: float,
) -> TimedResult[T]:
    """
    Run ``call()`` under a hard deadline, measuring elapsed time.

    The awaited coroutine is cancelled when the deadline expires. Failures
    are captured in the returned ``TimedResult`` instead of being raised, so
    one misbehaving provider cannot take its siblings down with it.

    Example:
        outcome = await timed_call("brave", lambda: adapter.search(query), 5.0)
        if outcome.ok:
            use(outcome.value)
    """
    start = time.perf_counter()
    try:
        value = await asyncio.wait_for(call(), timeout=timeout)
    except asyncio.TimeoutError:
        error = ProviderTimeoutError(name, timeout)
        logger.warning(f"[{name}] {error}")
        return TimedResult(name, None, _elapsed_ms(start), str(error), error)
    except asyncio.CancelledError:
        raise
    except Exception as e:
        logger.warning(f"[{name}] call failed: {e}")
        return TimedResult(name, None, _elapsed_ms(start), str(e) or type(e).__name__, e)

    return TimedResult(name, value, _elapsed_ms(start))


def _elapsed_ms(start: float) -> int:
    return int((time.perf_counter() - start) * 1000)


# =============================================================================
# Circuit Breaker Pattern
# =============================================================================


@dataclass
class CircuitBreaker:
    """
    Circuit breaker for fault tolerance.

    States:
    - closed: Normal operation
    - open: Failing, reject requests immediately
    - half_open: Testing if service recovered

    Example:
        breaker = CircuitBreaker(failure_threshold=5, name="google")

        async with breaker:
            result = await risky_api_call()
    """

    failure_threshold: int = 5
    recovery_timeout: float = 30.0
    name: str = "provider"

    _failure_count: int = field(init=False, default=0)
    _last_failure_time: float | None = field(init=False, default=None)
    _state: str = field(init=False, default="closed")

    @property
    def state(self) -> str:
        if self._state == "open" and self._recovery_elapsed():
            return "half_open"
        return self._state

    def _recovery_elapsed(self) -> bool:
        if self._last_failure_time is None:
            return True
        return time.monotonic() - self._last_failure_time > self.recovery_timeout

    async def __aenter__(self) -> CircuitBreaker:
        if self.state == "open":
            raise ProviderUnavailableError(
                "Circuit breaker is open",
                provider=self.name,
                retry_after=self.recovery_timeout,
            )
        if self._state == "open":
            self._state = "half_open"
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        if exc_val is not None and not isinstance(exc_val, asyncio.CancelledError):
            self._failure_count += 1
            self._last_failure_time = time.monotonic()
            if self._state == "half_open" or self._failure_count >= self.failure_threshold:
                if self._state != "open":
                    logger.warning(f"Circuit breaker for {self.name} opened after {self._failure_count} failures")
                self._state = "open"
        elif exc_val is None:
            if self._state == "half_open":
                logger.info(f"Circuit breaker for {self.name} closed (recovered)")
            self._state = "closed"
            self._failure_count = 0
