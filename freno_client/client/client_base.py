# freno_client/client/client_base.py
# SPDX-License-Identifier: Apache-2.0
"""
FrenoClient: HTTP client for freno's check API.

If most of the time you ask freno about the same app and store, give the
client defaults and override them per call as needed:

    freno = FrenoClient(
        httpx.Client(base_url="http://freno:8111"),
        defaults=ClientDefaults(app="my_app", store_name="my_cluster"),
    )

    freno.check_ok()                              # my_app on my_cluster
    freno.check_ok(store_name="other_cluster")    # call-site override

Options set on the defaults are merged into every request; call-site options
are merged on top:

    freno = FrenoClient(http, defaults=ClientDefaults(options={"raise_on_timeout": False}))
    freno.check_ok(options={"low_priority": True})
    # performed with {"raise_on_timeout": False, "low_priority": True}

Every request goes through a `RequestPipeline`, so part or all of the API can
be decorated (see `decorate`).
"""

from __future__ import annotations

import logging
import os
from typing import Any, Callable, Iterable, Mapping, Optional, Union

import httpx

from freno_client.client.decoration import DecoratorSpec, RequestPipeline
from freno_client.client.requests import REQUESTS
from freno_client.client.result import Result
from freno_client.core.config import (
    DEFAULT_TIMEOUT_SECONDS,
    ClientDefaults,
    RequestConfig,
    env_float,
)
from freno_client.errors import ConfigurationError

LOG = logging.getLogger(__name__)

__all__ = ["FrenoClient"]


class FrenoClient:
    """
    Client for freno's check, check-read and replication delay requests.

    Args:
        http:
            An `httpx.Client` whose base URL points at freno.
        defaults:
            Client-level defaults for app, store and options.
        configure:
            Optional callback run with the client once it is set up, e.g. to
            register decorators.
    """

    def __init__(
        self,
        http: httpx.Client,
        *,
        defaults: Optional[ClientDefaults] = None,
        configure: Optional[Callable[["FrenoClient"], None]] = None,
    ) -> None:
        self.http = http
        self.defaults = defaults or ClientDefaults()
        self.pipeline = RequestPipeline(REQUESTS)

        if configure is not None:
            configure(self)

    @classmethod
    def from_env(
        cls,
        base_url: Optional[str] = None,
        *,
        timeout: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> "FrenoClient":
        """Build a client from FRENO_* environment variables."""
        url = base_url or os.getenv("FRENO_URL")
        if not url:
            raise ConfigurationError("FRENO_URL must be provided", details={"variable": "FRENO_URL"})

        client_kwargs: dict = {
            "base_url": url,
            "timeout": timeout or env_float("FRENO_TIMEOUT", DEFAULT_TIMEOUT_SECONDS),
        }
        if transport is not None:
            client_kwargs["transport"] = transport
        return cls(httpx.Client(**client_kwargs), defaults=ClientDefaults.from_env())

    # ------------------------------------------------------------------ #
    # Requests
    # ------------------------------------------------------------------ #

    def check(
        self,
        *,
        app: Any = None,
        store_type: Any = None,
        store_name: Any = None,
        options: Optional[Mapping[str, Any]] = None,
    ) -> Result:
        """
        Freno's check request: may `app` write to `store_name`.

        See https://github.com/github/freno/blob/master/doc/http.md#check-request
        """
        config = self.defaults.resolve(
            app=app, store_type=store_type, store_name=store_name, options=options
        )
        return self._perform("check", config)

    def check_read(
        self,
        threshold: float,
        *,
        app: Any = None,
        store_type: Any = None,
        store_name: Any = None,
        options: Optional[Mapping[str, Any]] = None,
    ) -> Result:
        """
        Freno's check-read request: is replication delay below `threshold` seconds.

        See https://github.com/github/freno/blob/master/doc/http.md#specialized-requests
        """
        config = self.defaults.resolve(
            app=app, store_type=store_type, store_name=store_name, options=options
        )
        return self._perform("check_read", config, threshold=threshold)

    def replication_delay(
        self,
        *,
        app: Any = None,
        store_type: Any = None,
        store_name: Any = None,
        options: Optional[Mapping[str, Any]] = None,
    ) -> float:
        """Consolidated replication delay, in seconds, as reported by freno."""
        config = self.defaults.resolve(
            app=app, store_type=store_type, store_name=store_name, options=options
        )
        return self._perform("replication_delay", config)

    def check_ok(self, **kwargs: Any) -> bool:
        """Whether freno considers it OK to write. Takes the same arguments as `check`."""
        return self.check(**kwargs).ok

    def check_read_ok(self, threshold: float, **kwargs: Any) -> bool:
        """Whether replicas are within `threshold`. Takes the same arguments as `check_read`."""
        return self.check_read(threshold, **kwargs).ok

    # ------------------------------------------------------------------ #
    # Decoration
    # ------------------------------------------------------------------ #

    def decorate(self, target: str, with_: Union[DecoratorSpec, Iterable[DecoratorSpec]]) -> None:
        """
        Extend part or all of the API with decorators.

        `target` is a request kind ("check", "check_read",
        "replication_delay") or ALL. Decorators registered for a kind run
        before those registered for ALL, in registration order.
        """
        self.pipeline.use(target, with_)

    def close(self) -> None:
        self.http.close()

    def __enter__(self) -> "FrenoClient":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    def _perform(self, kind: str, config: RequestConfig, **extra: Any) -> Any:
        LOG.debug(
            "freno %s app=%s store=%s/%s",
            kind, config.app, config.store_type, config.store_name,
        )
        return self.pipeline.perform(kind, http=self.http, **config.as_kwargs(), **extra)
