# freno_client/throttler/throttler_base.py
# SPDX-License-Identifier: Apache-2.0
"""
Throttler: slows writes down to the pace the stores can absorb.

Before running a unit of work, the throttler asks freno whether every store
affected by it is healthy. If any is not, it waits and asks again, up to a
total wait budget.

    throttler = Throttler(client=freno, app="my_app")
    for batch in batches(rows):
        throttler.throttle(["mysqla", "mysqlb"], lambda: update(batch))

    # or, as a context manager
    with throttler.throttled("mysqla", low_priority=True):
        update(batch)

Every transition is reported to the instrumenter:

    throttler.called           {store_names}                  on every call
    throttler.succeeded        {store_names, waited}          stores ok, before running the work
    throttler.waited           {store_names, waited, max}     stores not ok, after waiting
    throttler.waited_too_long  {store_names, waited, max}     budget exhausted, before WaitedTooLong
    throttler.freno_errored    {store_names, error}           client error, before ClientError
    throttler.circuit_open     {store_names, waited}          breaker refused, before CircuitOpen

The wait budget is checked before sleeping: the throttler never performs a
wait that could not be followed by another check within `max_wait_seconds`.
With wait_seconds=1 and max_wait_seconds=3 it checks four times, waiting
three times in between, then raises WaitedTooLong(waited=3).
"""

from __future__ import annotations

import logging
import math
import os
import time
from contextlib import contextmanager
from typing import Any, Callable, Iterator, List, Optional, Sequence

from freno_client.core.config import (
    DEFAULT_MAX_WAIT_SECONDS,
    DEFAULT_WAIT_SECONDS,
    ThrottlerSettings,
)
from freno_client.errors import ConfigurationError, FrenoError
from freno_client.throttler.errors import CircuitOpen, ClientError, WaitedTooLong
from freno_client.throttler.policies import (
    CircuitBreaker,
    IdentityMapper,
    Instrumenter,
    Mapper,
    NoopCircuitBreaker,
    NoopInstrumenter,
)

LOG = logging.getLogger(__name__)

__all__ = ["Throttler"]

REQUIRED_ARGS = (
    "client",
    "app",
    "mapper",
    "instrumenter",
    "circuit_breaker",
    "wait_seconds",
    "max_wait_seconds",
)


class Throttler:
    """
    Throttles work against one or more stores.

    Args:
        client:
            Check invoker; anything with
            `check_ok(app=..., store_name=..., options=...) -> bool` that
            raises `FrenoError` when freno itself fails. Usually a
            `FrenoClient`.
        app:
            App name freno answers checks for.
        mapper:
            Callable mapping the context given to `throttle` to store names.
            Defaults to `IdentityMapper`.
        instrumenter:
            Receives throttler events. Defaults to `NoopInstrumenter`.
        circuit_breaker:
            Gate for freno checks. Defaults to `NoopCircuitBreaker`.
        wait_seconds:
            Seconds to wait before checking again when a store is not ok.
        max_wait_seconds:
            Total seconds the throttler may wait before raising
            `WaitedTooLong`. Must be greater than `wait_seconds`.
        sleeper:
            Blocking sleep function (default: `time.sleep`).
        configure:
            Optional callback run with the throttler before validation, to
            set attributes after construction.

    Raises:
        ConfigurationError: listing every missing or inconsistent setting.
    """

    def __init__(
        self,
        *,
        client: Any = None,
        app: Any = None,
        mapper: Optional[Mapper] = None,
        instrumenter: Optional[Instrumenter] = None,
        circuit_breaker: Optional[CircuitBreaker] = None,
        wait_seconds: float = DEFAULT_WAIT_SECONDS,
        max_wait_seconds: float = DEFAULT_MAX_WAIT_SECONDS,
        sleeper: Callable[[float], None] = time.sleep,
        configure: Optional[Callable[["Throttler"], None]] = None,
    ) -> None:
        self.client = client
        self.app = app
        self.mapper = mapper if mapper is not None else IdentityMapper()
        self.instrumenter = instrumenter if instrumenter is not None else NoopInstrumenter()
        self.circuit_breaker = circuit_breaker if circuit_breaker is not None else NoopCircuitBreaker()
        self.wait_seconds = wait_seconds
        self.max_wait_seconds = max_wait_seconds
        self.sleeper = sleeper

        if configure is not None:
            configure(self)

        self._validate()

    @classmethod
    def from_env(cls, client: Any, **kwargs: Any) -> "Throttler":
        """Build a throttler with FRENO_APP and FRENO_*WAIT_SECONDS from the environment."""
        settings = ThrottlerSettings.from_env()
        kwargs.setdefault("app", os.getenv("FRENO_APP") or None)
        kwargs.setdefault("wait_seconds", settings.wait_seconds)
        kwargs.setdefault("max_wait_seconds", settings.max_wait_seconds)
        return cls(client=client, **kwargs)

    # ------------------------------------------------------------------ #
    # Public API
    # ------------------------------------------------------------------ #

    def throttle(
        self,
        context: Any = None,
        func: Optional[Callable[[], Any]] = None,
        /,
        **options: Any,
    ) -> Any:
        """
        Wait until every store for `context` is healthy, then run `func`.

        `options` are passed to every check, e.g. `low_priority=True`.
        Returns what `func` returns (None without a func). Exceptions raised
        by `func` propagate unchanged.

        Raises:
            CircuitOpen: the circuit breaker refused the request.
            ClientError: the client failed while checking.
            WaitedTooLong: the stores did not catch up within the budget.
        """
        self.wait_until_ok(context, **options)
        if func is None:
            return None
        return func()

    @contextmanager
    def throttled(self, context: Any = None, **options: Any) -> Iterator[None]:
        """Context manager form of `throttle`: the body runs once the stores are ok."""
        self.wait_until_ok(context, **options)
        yield

    def wait_until_ok(self, context: Any = None, **options: Any) -> float:
        """
        Run the admission loop for `context` and return the seconds waited.

        Raises the same errors as `throttle`.
        """
        store_names = list(self.mapper(context))
        self._instrument("called", store_names=store_names)
        waits = 0
        waited = 0

        while True:
            if not self.circuit_breaker.allow_request():
                self._instrument("circuit_open", store_names=store_names, waited=waited)
                LOG.warning("circuit open for stores %s", store_names)
                raise CircuitOpen(
                    "circuit breaker is open",
                    details={"store_names": store_names, "waited": waited},
                )

            if self._all_stores_ok(store_names, options):
                self._instrument("succeeded", store_names=store_names, waited=waited)
                self.circuit_breaker.success()
                return waited

            if self._exceeds_budget(waits + 1):
                self._instrument(
                    "waited_too_long",
                    store_names=store_names,
                    waited=waited,
                    max=self.max_wait_seconds,
                )
                self.circuit_breaker.failure()
                LOG.warning(
                    "stores %s not ok after waiting %ss (max %ss)",
                    store_names, waited, self.max_wait_seconds,
                )
                raise WaitedTooLong(waited_seconds=waited, max_wait_seconds=self.max_wait_seconds)

            self._wait()
            waits += 1
            # Multiplied, not summed, so decimal intervals do not drift.
            waited = waits * self.wait_seconds
            self._instrument(
                "waited",
                store_names=store_names,
                waited=waited,
                max=self.max_wait_seconds,
            )

    # ------------------------------------------------------------------ #
    # Internals
    # ------------------------------------------------------------------ #

    def _validate(self) -> None:
        errors: List[str] = []

        for name in REQUIRED_ARGS:
            value = getattr(self, name)
            if value is None or value == "":
                errors.append(f"{name} must be provided")

        if self.wait_seconds is not None and self.max_wait_seconds is not None:
            if not self.max_wait_seconds > self.wait_seconds:
                errors.append(
                    f"max_wait_seconds ({self.max_wait_seconds}) has to be greater "
                    f"than wait_seconds ({self.wait_seconds})"
                )

        if errors:
            raise ConfigurationError("\n".join(errors), details={"violations": errors})

    def _all_stores_ok(self, store_names: Sequence[Any], options: dict) -> bool:
        try:
            return all(
                self.client.check_ok(app=self.app, store_name=store_name, options=options)
                for store_name in store_names
            )
        except FrenoError as error:
            self._instrument("freno_errored", store_names=list(store_names), error=error)
            self.circuit_breaker.failure()
            LOG.warning("freno errored while checking %s: %s", list(store_names), error)
            raise ClientError(error) from error

    def _exceeds_budget(self, waits: int) -> bool:
        total = waits * self.wait_seconds
        return total > self.max_wait_seconds and not math.isclose(total, self.max_wait_seconds)

    def _wait(self) -> None:
        LOG.debug("waiting %ss for stores to catch up", self.wait_seconds)
        self.sleeper(self.wait_seconds)

    def _instrument(self, event_name: str, **payload: Any) -> None:
        self.instrumenter.instrument(f"throttler.{event_name}", payload)
