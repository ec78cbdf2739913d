# SPDX-License-Identifier: Apache-2.0
"""
Shared fixtures for the freno client and throttler tests.
"""

from __future__ import annotations

from typing import Iterator

import pytest

from freno_client.client.client_base import FrenoClient
from freno_client.core.config import ClientDefaults
from tests.mock.mock_freno import (
    MemoryInstrumenter,
    RecordingSleeper,
    StubFreno,
    stub_http,
)


@pytest.fixture
def freno_stub() -> StubFreno:
    """Empty route table; tests add routes as (METHOD, path) -> answer."""
    return StubFreno()


@pytest.fixture
def freno(freno_stub: StubFreno) -> Iterator[FrenoClient]:
    """Client defaulting to app=github on mysql/main, backed by `freno_stub`."""
    client = FrenoClient(
        stub_http(freno_stub),
        defaults=ClientDefaults(app="github", store_type="mysql", store_name="main"),
    )
    yield client
    client.close()


@pytest.fixture
def instrumenter() -> MemoryInstrumenter:
    return MemoryInstrumenter()


@pytest.fixture
def sleeper() -> RecordingSleeper:
    return RecordingSleeper()


@pytest.fixture(autouse=True)
def _clean_freno_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "FRENO_URL",
        "FRENO_TIMEOUT",
        "FRENO_APP",
        "FRENO_STORE_TYPE",
        "FRENO_STORE_NAME",
        "FRENO_RAISE_ON_TIMEOUT",
        "FRENO_LOW_PRIORITY",
        "FRENO_WAIT_SECONDS",
        "FRENO_MAX_WAIT_SECONDS",
    ):
        monkeypatch.delenv(name, raising=False)
