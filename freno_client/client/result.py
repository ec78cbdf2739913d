# freno_client/client/result.py
# SPDX-License-Identifier: Apache-2.0
"""
Result of a freno check.

A Result wraps the HTTP status code returned by freno, the symbolic meaning of
that code, and the raw response body (parsed as JSON on first access).

See https://github.com/github/freno/blob/master/doc/http.md#status-codes
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from functools import cached_property
from typing import Any, Dict, Optional, Union

import httpx

__all__ = [
    "Meaning",
    "FRENO_STATUS_CODE_MEANINGS",
    "ADDITIONAL_STATUS_CODE_MEANINGS",
    "CODE_MEANINGS",
    "MEANING_CODES",
    "Result",
]


class Meaning(str, Enum):
    """Symbolic meaning of a freno status code."""
    OK = "ok"
    NOT_FOUND = "not_found"
    EXPECTATION_FAILED = "expectation_failed"
    TOO_MANY_REQUESTS = "too_many_requests"
    INTERNAL_SERVER_ERROR = "internal_server_error"
    REQUEST_TIMEOUT = "request_timeout"
    UNKNOWN = "unknown"


FRENO_STATUS_CODE_MEANINGS: Dict[int, Meaning] = {
    200: Meaning.OK,
    404: Meaning.NOT_FOUND,
    417: Meaning.EXPECTATION_FAILED,
    429: Meaning.TOO_MANY_REQUESTS,
    500: Meaning.INTERNAL_SERVER_ERROR,
}

# Never sent by freno; synthesized locally when a request times out.
ADDITIONAL_STATUS_CODE_MEANINGS: Dict[int, Meaning] = {
    408: Meaning.REQUEST_TIMEOUT,
}

CODE_MEANINGS: Dict[int, Meaning] = {
    **FRENO_STATUS_CODE_MEANINGS,
    **ADDITIONAL_STATUS_CODE_MEANINGS,
}
MEANING_CODES: Dict[Meaning, int] = {meaning: code for code, meaning in CODE_MEANINGS.items()}


@dataclass(frozen=True, eq=False)
class Result:
    """
    Outcome of a single request to freno.

    Attributes:
        code:
            HTTP status code (408 when synthesized on timeout, 0 when unmapped).
        raw_body:
            Raw payload, if the response had one.
        meaning:
            Derived from `code`; `Meaning.UNKNOWN` for unmapped codes.
    """
    code: int
    raw_body: Optional[Union[bytes, str]] = None
    meaning: Meaning = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "meaning", CODE_MEANINGS.get(self.code, Meaning.UNKNOWN))

    @classmethod
    def from_response(cls, response: httpx.Response) -> "Result":
        return cls(response.status_code, response.content or None)

    @classmethod
    def from_meaning(cls, meaning: Union[Meaning, str]) -> "Result":
        try:
            key = Meaning(meaning)
        except ValueError:
            return cls(0)
        return cls(MEANING_CODES.get(key, 0))

    @property
    def ok(self) -> bool:
        return self.meaning is Meaning.OK

    @property
    def failed(self) -> bool:
        return not self.ok

    @property
    def unknown(self) -> bool:
        return self.meaning is Meaning.UNKNOWN

    @cached_property
    def body(self) -> Any:
        if not self.raw_body:
            return None
        return json.loads(self.raw_body)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Result):
            return self.code == other.code and self.raw_body == other.raw_body
        if isinstance(other, str):
            return self.meaning == other
        if isinstance(other, int) and not isinstance(other, bool):
            return self.code == other
        return NotImplemented

    def __hash__(self) -> int:
        return hash((self.code, self.raw_body))

    def __repr__(self) -> str:
        return f"Result(code={self.code}, meaning={self.meaning.value})"
