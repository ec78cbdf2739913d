# freno_client/throttler/__init__.py
# SPDX-License-Identifier: Apache-2.0

"""Throttler built on the freno client, with its pluggable policies."""

from freno_client.throttler.errors import (
    ThrottlerError,
    WaitedTooLong,
    CircuitOpen,
    ClientError,
)
from freno_client.throttler.policies import (
    Mapper,
    IdentityMapper,
    Instrumenter,
    NoopInstrumenter,
    LoggingInstrumenter,
    CircuitBreaker,
    NoopCircuitBreaker,
    SimpleCircuitBreaker,
)
from freno_client.throttler.throttler_base import Throttler

__all__ = [
    "Throttler",
    "ThrottlerError",
    "WaitedTooLong",
    "CircuitOpen",
    "ClientError",
    "Mapper",
    "IdentityMapper",
    "Instrumenter",
    "NoopInstrumenter",
    "LoggingInstrumenter",
    "CircuitBreaker",
    "NoopCircuitBreaker",
    "SimpleCircuitBreaker",
]
