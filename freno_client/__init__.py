# freno_client/__init__.py
# SPDX-License-Identifier: Apache-2.0

"""
freno client - Public API

A client for freno, the cooperative throttling service, and a throttler that
holds writes back until the affected stores report healthy.
"""

from freno_client.errors import (
    FrenoError,
    PreconditionNotMet,
    DecorationError,
    ConfigurationError,
)
from freno_client.client import (
    ALL,
    REQUESTS,
    ClientDefaults,
    Decorator,
    DecoratorFactory,
    FrenoClient,
    Meaning,
    RequestConfig,
    RequestDecorator,
    RequestPipeline,
    Result,
)
from freno_client.throttler import (
    Throttler,
    ThrottlerError,
    WaitedTooLong,
    CircuitOpen,
    ClientError,
    IdentityMapper,
    NoopInstrumenter,
    LoggingInstrumenter,
    NoopCircuitBreaker,
    SimpleCircuitBreaker,
)

__version__ = "0.9.0"

__all__ = [
    "__version__",
    # Errors
    "FrenoError",
    "PreconditionNotMet",
    "DecorationError",
    "ConfigurationError",
    # Client
    "ALL",
    "REQUESTS",
    "ClientDefaults",
    "Decorator",
    "DecoratorFactory",
    "FrenoClient",
    "Meaning",
    "RequestConfig",
    "RequestDecorator",
    "RequestPipeline",
    "Result",
    # Throttler
    "Throttler",
    "ThrottlerError",
    "WaitedTooLong",
    "CircuitOpen",
    "ClientError",
    "IdentityMapper",
    "NoopInstrumenter",
    "LoggingInstrumenter",
    "NoopCircuitBreaker",
    "SimpleCircuitBreaker",
]
