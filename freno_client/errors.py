# freno_client/errors.py
# SPDX-License-Identifier: Apache-2.0
"""
Normalized error taxonomy for the freno client.

Every error raised by this package derives from `FrenoError` so callers can
catch a single base class. Errors carry a human-readable message, an
upper-snake-case machine code, and optional JSON-safe details.

`FrenoError` doubles as the "service error" of the client: it is what a
request raises on transport or service failure, as opposed to a store merely
reporting that it is not healthy.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional

__all__ = [
    "FrenoError",
    "PreconditionNotMet",
    "DecorationError",
    "ConfigurationError",
]


class FrenoError(Exception):
    """
    Base exception for all freno client errors.

    Attributes:
        message:
            Human-readable description (safe for logs).
        code:
            Upper-snake-case machine code.
        details:
            Additional JSON-safe context.
    """
    default_code = "FRENO_ERROR"

    def __init__(
        self,
        message: str = "",
        *,
        code: Optional[str] = None,
        details: Optional[Mapping[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.details = dict(details or {})

    def __str__(self) -> str:
        base = self.message or self.__class__.__name__
        if self.details:
            base += f" details={self.details}"
        return base


class PreconditionNotMet(FrenoError, ValueError):
    """
    Request arguments failed validation.

    The message lists every violation, one per line.
    """
    default_code = "PRECONDITION_NOT_MET"


class DecorationError(FrenoError, ValueError):
    """
    A request decorator could not be registered.

    Raised when a live decorator instance is registered more than once, or
    when decorators target an unknown request kind.
    """
    default_code = "DECORATION_ERROR"


class ConfigurationError(FrenoError, ValueError):
    """
    Invalid construction-time configuration.

    The message enumerates every violated invariant, one per line.
    """
    default_code = "BAD_CONFIG"
