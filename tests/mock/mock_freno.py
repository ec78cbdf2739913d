# SPDX-License-Identifier: Apache-2.0
"""
Test doubles for the freno client and throttler.

- `stub_http`: an httpx.Client answering from a route table, no network
- `MemoryInstrumenter`: records throttler events by name
- `SingleFailureAllowedCircuitBreaker`: opens after the first failure
- `RecordingSleeper`: records waits instead of sleeping
- `RecordingDecorator`: appends a word to a shared memo, then forwards
"""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, Union

import httpx

from freno_client.client.decoration import Decorator

RouteAnswer = Union[Tuple[int, Optional[str]], BaseException, Callable[[httpx.Request], httpx.Response]]

BASE_URL = "http://freno.test"


class StubFreno:
    """Route table for httpx.MockTransport, recording every request seen."""

    def __init__(self, routes: Optional[Mapping[Tuple[str, str], RouteAnswer]] = None) -> None:
        self.routes: Dict[Tuple[str, str], RouteAnswer] = dict(routes or {})
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        answer = self.routes.get((request.method, request.url.path))
        if answer is None:
            return httpx.Response(404)
        if isinstance(answer, BaseException):
            raise answer
        if callable(answer):
            return answer(request)
        status, body = answer
        return httpx.Response(status, content=(body or "").encode("utf-8"))


def stub_http(stub: StubFreno) -> httpx.Client:
    return httpx.Client(base_url=BASE_URL, transport=httpx.MockTransport(stub))


class MemoryInstrumenter:
    def __init__(self) -> None:
        self.events: Dict[str, List[Dict[str, Any]]] = {}

    def instrument(self, event_name: str, payload: Mapping[str, Any]) -> None:
        self.events.setdefault(event_name, []).append(dict(payload))

    def events_for(self, event_name: str) -> List[Dict[str, Any]]:
        return self.events.get(event_name, [])

    def count(self, event_name: str) -> int:
        return len(self.events_for(event_name))


class SingleFailureAllowedCircuitBreaker:
    def __init__(self) -> None:
        self.failed_once = False
        self.failures = 0
        self.successes = 0

    def allow_request(self) -> bool:
        return not self.failed_once

    def success(self) -> None:
        self.successes += 1

    def failure(self) -> None:
        self.failures += 1
        self.failed_once = True


class RecordingSleeper:
    def __init__(self) -> None:
        self.waits: List[float] = []

    def __call__(self, seconds: float) -> None:
        self.waits.append(seconds)


class RecordingDecorator(Decorator):
    def __init__(self, memo: List[str], word: str) -> None:
        self.memo = memo
        self.word = word

    def perform(self, **kwargs: Any) -> Any:
        self.memo.append(self.word)
        return self.request.perform(**kwargs)

    def __repr__(self) -> str:
        return f"RecordingDecorator({self.word!r})"
