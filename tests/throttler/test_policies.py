# SPDX-License-Identifier: Apache-2.0
"""
Throttler — default mapper and instrumenters.
"""

import logging

import pytest

from freno_client.throttler import (
    CircuitBreaker,
    IdentityMapper,
    LoggingInstrumenter,
    NoopCircuitBreaker,
    NoopInstrumenter,
    SimpleCircuitBreaker,
)
from freno_client.throttler.policies import Instrumenter
from tests.mock.mock_freno import MemoryInstrumenter, SingleFailureAllowedCircuitBreaker


@pytest.mark.parametrize(
    "context, expected",
    [
        (None, []),
        ("mysqla", ["mysqla"]),
        (["mysqla", "mysqlb"], ["mysqla", "mysqlb"]),
        (("mysqla", "mysqla", "mysqlb"), ["mysqla", "mysqlb"]),
        ({"mysqla"}, ["mysqla"]),
    ],
)
def test_identity_mapper(context, expected):
    assert IdentityMapper()(context) == expected


def test_logging_instrumenter_writes_events(caplog):
    logger = logging.getLogger("tests.throttler.events")
    instrumenter = LoggingInstrumenter(logger, level=logging.INFO)

    with caplog.at_level(logging.INFO, logger="tests.throttler.events"):
        instrumenter.instrument("throttler.waited", {"store_names": ["mysqla"], "waited": 0.5})

    assert len(caplog.records) == 1
    assert "throttler.waited" in caplog.records[0].getMessage()
    assert "mysqla" in caplog.records[0].getMessage()


def test_logging_instrumenter_respects_level(caplog):
    logger = logging.getLogger("tests.throttler.quiet")
    instrumenter = LoggingInstrumenter(logger)

    with caplog.at_level(logging.INFO, logger="tests.throttler.quiet"):
        instrumenter.instrument("throttler.called", {"store_names": []})

    assert caplog.records == []


def test_noop_policies():
    assert NoopInstrumenter().instrument("throttler.called", {}) is None

    breaker = NoopCircuitBreaker()
    breaker.failure()
    breaker.failure()
    assert breaker.allow_request() is True


@pytest.mark.parametrize(
    "instrumenter",
    [NoopInstrumenter(), LoggingInstrumenter(), MemoryInstrumenter()],
)
def test_instrumenters_satisfy_protocol(instrumenter):
    assert isinstance(instrumenter, Instrumenter)


@pytest.mark.parametrize(
    "breaker",
    [NoopCircuitBreaker(), SimpleCircuitBreaker(), SingleFailureAllowedCircuitBreaker()],
)
def test_breakers_satisfy_protocol(breaker):
    assert isinstance(breaker, CircuitBreaker)


def test_identity_mapper_expands_any_iterable():
    mapper = IdentityMapper()

    assert mapper(name for name in ["mysqla", "mysqlb", "mysqla"]) == ["mysqla", "mysqlb"]
    assert mapper({"mysqla": 1, "mysqlb": 2}.keys()) == ["mysqla", "mysqlb"]
    assert mapper(b"mysqla") == [b"mysqla"]
