# freno_client/throttler/errors.py
# SPDX-License-Identifier: Apache-2.0
"""Errors raised by `Throttler.throttle`."""

from __future__ import annotations

from typing import Any

from freno_client.errors import FrenoError

__all__ = ["ThrottlerError", "WaitedTooLong", "CircuitOpen", "ClientError"]


class ThrottlerError(FrenoError):
    """Any throttler-related error."""
    default_code = "THROTTLER_ERROR"


class WaitedTooLong(ThrottlerError):
    """The stores did not catch up within the throttler's wait budget."""
    default_code = "WAITED_TOO_LONG"

    def __init__(self, waited_seconds: float, max_wait_seconds: float, **kwargs: Any):
        kwargs.setdefault(
            "details",
            {"waited_seconds": waited_seconds, "max_wait_seconds": max_wait_seconds},
        )
        super().__init__(
            f"Waited {waited_seconds} seconds. Max allowed was {max_wait_seconds} seconds",
            **kwargs,
        )
        self.waited_seconds = waited_seconds
        self.max_wait_seconds = max_wait_seconds

    def __str__(self) -> str:
        return self.message


class CircuitOpen(ThrottlerError):
    """The circuit breaker did not allow the request."""
    default_code = "CIRCUIT_OPEN"


class ClientError(ThrottlerError):
    """
    The freno client itself errored, as opposed to a store being unhealthy.

    The original error is available as `error` and as `__cause__`.
    """
    default_code = "CLIENT_ERROR"

    def __init__(self, error: BaseException, **kwargs: Any):
        super().__init__(str(error) or type(error).__name__, **kwargs)
        self.error = error
