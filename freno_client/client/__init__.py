# freno_client/client/__init__.py
# SPDX-License-Identifier: Apache-2.0

"""Client for freno's HTTP API, its requests, results and decorators."""

from freno_client.client.client_base import FrenoClient
from freno_client.client.decoration import (
    ALL,
    Decorator,
    DecoratorFactory,
    RequestDecorator,
    RequestPipeline,
)
from freno_client.client.requests import (
    REQUESTS,
    Check,
    CheckRead,
    ReplicationDelay,
    Request,
)
from freno_client.client.result import Meaning, Result
from freno_client.core.config import ClientDefaults, RequestConfig

__all__ = [
    "FrenoClient",
    "ALL",
    "Decorator",
    "DecoratorFactory",
    "RequestDecorator",
    "RequestPipeline",
    "REQUESTS",
    "Check",
    "CheckRead",
    "ReplicationDelay",
    "Request",
    "Meaning",
    "Result",
    "ClientDefaults",
    "RequestConfig",
]
