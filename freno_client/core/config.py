# freno_client/core/config.py
# SPDX-License-Identifier: Apache-2.0
"""
Configuration for the freno client and throttler.

Per-call request configuration is resolved once, at call entry, with a fixed
precedence:

    call-site argument  >  client-level default  >  library default

`ClientDefaults` holds the client-level layer; `RequestConfig` is the resolved
result handed to a request. Both are immutable; update client defaults by
replacing them (`defaults.with_updates(...)`).

Environment
-----------
`from_env` constructors read:

    FRENO_URL               base URL of the freno service
    FRENO_TIMEOUT           HTTP timeout in seconds
    FRENO_APP               default app
    FRENO_STORE_TYPE        default store type (library default: mysql)
    FRENO_STORE_NAME        default store name
    FRENO_RAISE_ON_TIMEOUT  raise on timeouts (default: true)
    FRENO_LOW_PRIORITY      issue low priority checks (default: false)
    FRENO_WAIT_SECONDS      throttler wait interval (default: 0.5)
    FRENO_MAX_WAIT_SECONDS  throttler wait budget (default: 10)
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Mapping, Optional

from freno_client.errors import ConfigurationError

__all__ = [
    "DEFAULT_STORE_TYPE",
    "DEFAULT_WAIT_SECONDS",
    "DEFAULT_MAX_WAIT_SECONDS",
    "DEFAULT_TIMEOUT_SECONDS",
    "LIBRARY_OPTIONS",
    "env_flag",
    "env_float",
    "RequestConfig",
    "ClientDefaults",
    "ThrottlerSettings",
]

DEFAULT_STORE_TYPE = "mysql"
DEFAULT_WAIT_SECONDS = 0.5
DEFAULT_MAX_WAIT_SECONDS = 10
DEFAULT_TIMEOUT_SECONDS = 1.0

LIBRARY_OPTIONS: Mapping[str, Any] = {"raise_on_timeout": True}

_TRUTHY = {"1", "true", "yes", "on"}


def env_flag(name: str, default: bool = False) -> bool:
    """
    Parse a boolean-ish environment variable, case-insensitively.

    Truthy values: "1", "true", "yes", "on". Unset falls back to `default`.
    """
    val = os.getenv(name)
    if val is None:
        return default
    return val.strip().lower() in _TRUTHY


def env_float(name: str, default: Optional[float] = None) -> Optional[float]:
    val = os.getenv(name)
    if val is None or not val.strip():
        return default
    try:
        return float(val)
    except ValueError:
        raise ConfigurationError(
            f"{name} must be a number, got {val!r}",
            details={"variable": name},
        ) from None


@dataclass(frozen=True)
class RequestConfig:
    """Configuration of a single request, resolved at call entry."""
    app: Any
    store_type: Any
    store_name: Any
    options: Mapping[str, Any] = field(default_factory=dict)

    def as_kwargs(self) -> Dict[str, Any]:
        return {
            "app": self.app,
            "store_type": self.store_type,
            "store_name": self.store_name,
            "options": dict(self.options),
        }


@dataclass(frozen=True)
class ClientDefaults:
    """
    Client-level defaults.

    Attributes:
        app:
            App name freno answers checks for.
        store_type:
            Store type, "mysql" unless overridden.
        store_name:
            Store (cluster) name.
        options:
            Request options merged into every call, e.g.
            `{"raise_on_timeout": False}`.
    """
    app: Any = None
    store_type: Any = DEFAULT_STORE_TYPE
    store_name: Any = None
    options: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "options", dict(self.options or {}))

    def with_updates(self, **changes: Any) -> "ClientDefaults":
        return replace(self, **changes)

    def resolve(
        self,
        *,
        app: Any = None,
        store_type: Any = None,
        store_name: Any = None,
        options: Optional[Mapping[str, Any]] = None,
    ) -> RequestConfig:
        return RequestConfig(
            app=_first(app, self.app),
            store_type=_first(store_type, self.store_type, DEFAULT_STORE_TYPE),
            store_name=_first(store_name, self.store_name),
            options={**LIBRARY_OPTIONS, **self.options, **dict(options or {})},
        )

    @classmethod
    def from_env(cls, prefix: str = "FRENO_") -> "ClientDefaults":
        """Read {prefix}APP, {prefix}STORE_TYPE, {prefix}STORE_NAME and the option flags."""
        options: Dict[str, Any] = {}
        if os.getenv(f"{prefix}RAISE_ON_TIMEOUT") is not None:
            options["raise_on_timeout"] = env_flag(f"{prefix}RAISE_ON_TIMEOUT", True)
        if env_flag(f"{prefix}LOW_PRIORITY"):
            options["low_priority"] = True
        return cls(
            app=os.getenv(f"{prefix}APP") or None,
            store_type=os.getenv(f"{prefix}STORE_TYPE") or DEFAULT_STORE_TYPE,
            store_name=os.getenv(f"{prefix}STORE_NAME") or None,
            options=options,
        )


@dataclass(frozen=True)
class ThrottlerSettings:
    """Wait interval and wait budget of a throttler, in seconds."""
    wait_seconds: float = DEFAULT_WAIT_SECONDS
    max_wait_seconds: float = DEFAULT_MAX_WAIT_SECONDS

    @classmethod
    def from_env(cls) -> "ThrottlerSettings":
        return cls(
            wait_seconds=env_float("FRENO_WAIT_SECONDS", DEFAULT_WAIT_SECONDS),
            max_wait_seconds=env_float("FRENO_MAX_WAIT_SECONDS", DEFAULT_MAX_WAIT_SECONDS),
        )


def _first(*values: Any) -> Any:
    for value in values:
        if value is not None:
            return value
    return None
