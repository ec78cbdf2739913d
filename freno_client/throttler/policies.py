# freno_client/throttler/policies.py
# SPDX-License-Identifier: Apache-2.0
"""
Pluggable policies of the throttler, with their defaults.

Mapper
    Any callable receiving the context given to `throttle` and returning the
    store names to check. `IdentityMapper` (default) checks exactly the stores
    given as context. A mapper could, for example, turn a set of
    (table, shard_id) tuples into the stores where those shards live.

Instrumenter
    Receives `instrument(event_name, payload)` for every throttler
    transition. `NoopInstrumenter` (default) does nothing;
    `LoggingInstrumenter` writes events to a logger.

CircuitBreaker
    Gate consulted before every round of checks, told about `success()` and
    `failure()`. A circuit is open when it does not allow the next request.
    `NoopCircuitBreaker` (default) always allows and offers no resiliency;
    `SimpleCircuitBreaker` is a small per-process implementation.

    See https://martinfowler.com/bliki/CircuitBreaker.html
"""

from __future__ import annotations

import logging
import time
from typing import (
    Any,
    Callable,
    Iterable,
    List,
    Mapping,
    Optional,
    Protocol,
    runtime_checkable,
)

__all__ = [
    "Mapper",
    "IdentityMapper",
    "Instrumenter",
    "NoopInstrumenter",
    "LoggingInstrumenter",
    "CircuitBreaker",
    "NoopCircuitBreaker",
    "SimpleCircuitBreaker",
]

Mapper = Callable[[Any], Iterable[Any]]


class IdentityMapper:
    """
    Checks the same stores received as context, without translation.

    A string is one store name; any other iterable (list, set, generator,
    dict keys) is expanded, keeping first-seen order without duplicates.
    """

    def __call__(self, context: Any) -> List[Any]:
        if context is None:
            return []
        if isinstance(context, (str, bytes)) or not isinstance(context, Iterable):
            return [context]
        return list(dict.fromkeys(context))


@runtime_checkable
class Instrumenter(Protocol):
    """Sink for named throttler events."""
    def instrument(self, event_name: str, payload: Mapping[str, Any]) -> None: ...


class NoopInstrumenter:
    """Instrumenter that ignores every event."""
    def instrument(self, event_name: str, payload: Mapping[str, Any]) -> None:
        return None


class LoggingInstrumenter:
    """
    Instrumenter that logs every event.

    Args:
        logger: Logger to write to (default: this module's logger).
        level:  Log level for events (default: DEBUG).
    """

    def __init__(self, logger: Optional[logging.Logger] = None, level: int = logging.DEBUG) -> None:
        self.logger = logger or logging.getLogger(__name__)
        self.level = level

    def instrument(self, event_name: str, payload: Mapping[str, Any]) -> None:
        if self.logger.isEnabledFor(self.level):
            self.logger.log(self.level, "%s %s", event_name, dict(payload))


@runtime_checkable
class CircuitBreaker(Protocol):
    """Minimal circuit breaker interface for gating freno checks."""
    def allow_request(self) -> bool: ...
    def success(self) -> None: ...
    def failure(self) -> None: ...


class NoopCircuitBreaker:
    """Breaker that never trips; the throttler's default."""
    def allow_request(self) -> bool: return True
    def success(self) -> None: ...
    def failure(self) -> None: ...


class SimpleCircuitBreaker:
    """
    Tiny per-process circuit breaker.

    Not distributed. Opens after N consecutive failures; half-open after the
    recovery window, when a single success closes it again.
    """
    def __init__(
        self,
        *,
        failure_threshold: int = 5,
        recovery_after_s: float = 10.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._failure_threshold = max(1, int(failure_threshold))
        self._recovery_after_s = max(0.0, float(recovery_after_s))
        self._clock = clock
        self._failures = 0
        self._opened_at: Optional[float] = None

    @property
    def is_open(self) -> bool:
        return not self.allow_request()

    def allow_request(self) -> bool:
        if self._opened_at is None:
            return True
        # Half-open probe after recovery interval.
        return (self._clock() - self._opened_at) >= self._recovery_after_s

    def success(self) -> None:
        self._failures = 0
        self._opened_at = None

    def failure(self) -> None:
        self._failures += 1
        if self._failures >= self._failure_threshold:
            self._opened_at = self._clock()
