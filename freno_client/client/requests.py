# freno_client/client/requests.py
# SPDX-License-Identifier: Apache-2.0
"""
Request kinds supported by the freno client.

Each request kind is a class whose `perform(**kwargs)` class method builds a
request and performs it. That makes the class itself the base request at the
tail of a decorator chain (see `freno_client.client.decoration`).

Arguments are validated when a request is built, so `PreconditionNotMet`
surfaces before any HTTP call is made. Anything that goes wrong while talking
to freno is normalized into `FrenoError`.

See https://github.com/github/freno/blob/master/doc/http.md
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional

import httpx

from freno_client.client.preconditions import preconditions
from freno_client.client.result import Meaning, Result
from freno_client.errors import FrenoError

LOG = logging.getLogger(__name__)

__all__ = [
    "Request",
    "Check",
    "CheckRead",
    "ReplicationDelay",
    "REQUESTS",
]


class Request:
    """
    Base class for freno requests.

    Recognized options:
        raise_on_timeout:
            When False, a transport timeout yields a `request_timeout` Result
            instead of raising `FrenoError`. Defaults to True.
        verb:
            HTTP verb, HEAD by default.
        low_priority:
            Ask freno for a low priority check (`p=low`).
    """

    default_verb = "HEAD"

    @classmethod
    def perform(cls, **kwargs: Any) -> Any:
        return cls(**kwargs).execute()

    def __init__(
        self,
        *,
        http: Optional[httpx.Client] = None,
        options: Optional[Mapping[str, Any]] = None,
        **args: Any,
    ) -> None:
        self.http = http
        self.args = args
        self.options: Dict[str, Any] = dict(options or {})
        self.raise_on_timeout = bool(self.options.get("raise_on_timeout", True))
        self._verb = str(self.options.get("verb", self.default_verb)).upper()
        self.params: Dict[str, str] = {}
        self._path: Optional[str] = None

    def execute(self) -> Any:
        LOG.debug("freno %s %s params=%s", self.verb, self.path, self.params)
        try:
            response = self.request(self.verb, self.path, self.params)
            return self.process_response(response)
        except httpx.TimeoutException as exc:
            if self.raise_on_timeout:
                raise FrenoError(str(exc) or "timeout", details={"path": self.path}) from exc
            LOG.debug("freno %s %s timed out", self.verb, self.path)
            return Result.from_meaning(Meaning.REQUEST_TIMEOUT)
        except FrenoError:
            raise
        except Exception as exc:
            raise FrenoError(str(exc) or type(exc).__name__, details={"path": self.path}) from exc

    def request(self, verb: str, path: str, params: Mapping[str, str]) -> httpx.Response:
        if self.http is None:
            raise FrenoError("no http client configured for freno requests")
        return self.http.request(verb, path, params=dict(params))

    @property
    def path(self) -> str:
        if self._path is None:
            raise NotImplementedError("must be overridden in specific requests, or set in _path")
        return self._path

    @property
    def verb(self) -> str:
        return self._verb

    def process_response(self, response: httpx.Response) -> Any:
        return Result.from_response(response)

    def _apply_priority(self) -> None:
        # A low priority check fails fast for any app with failed checks
        # within the last second, without checking the underlying metric.
        if self.options.get("low_priority"):
            self.params["p"] = "low"


class Check(Request):
    """`check/<app>/<store_type>/<store_name>`: may the app write to the store."""

    def __init__(
        self,
        *,
        app: Any = None,
        store_type: Any = None,
        store_name: Any = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(app=app, store_type=store_type, store_name=store_name, **kwargs)

        with preconditions() as check:
            check.present(app=app, store_type=store_type, store_name=store_name)

        self._apply_priority()
        self._path = f"check/{app}/{store_type}/{store_name}"


class CheckRead(Request):
    """`check-read/<app>/<store_type>/<store_name>/<threshold>`: are replicas within threshold."""

    def __init__(
        self,
        *,
        app: Any = None,
        store_type: Any = None,
        store_name: Any = None,
        threshold: Any = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(
            app=app,
            store_type=store_type,
            store_name=store_name,
            threshold=threshold,
            **kwargs,
        )

        with preconditions() as check:
            check.present(app=app, store_type=store_type, store_name=store_name, threshold=threshold)
            if threshold is not None:
                check.number(threshold=threshold)

        self._apply_priority()
        self._path = f"check-read/{app}/{store_type}/{store_name}/{round(float(threshold), 3)}"


class ReplicationDelay(Check):
    """A check issued with GET whose JSON body reports the replication delay."""

    @property
    def verb(self) -> str:
        return "GET"

    def process_response(self, response: httpx.Response) -> float:
        result = super().process_response(response)
        body = result.body
        if not isinstance(body, Mapping) or "Value" not in body:
            raise FrenoError(
                "replication delay response has no Value",
                details={"code": result.code},
            )
        return float(body["Value"])


REQUESTS: Dict[str, type] = {
    "check": Check,
    "check_read": CheckRead,
    "replication_delay": ReplicationDelay,
}
