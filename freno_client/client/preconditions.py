# freno_client/client/preconditions.py
# SPDX-License-Identifier: Apache-2.0
"""
Argument validation for freno requests.

Violations are collected rather than raised one by one, so a caller sees every
problem with a request at once:

    with preconditions() as check:
        check.present(app=app, store_name=store_name)
        check.number(threshold=threshold)
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Iterator, List

from freno_client.errors import PreconditionNotMet

__all__ = ["Checker", "preconditions"]


class Checker:
    """Accumulates precondition violations."""

    def __init__(self) -> None:
        self.errors: List[str] = []

    def present(self, **values: Any) -> "Checker":
        for name, value in values.items():
            if value is None or value == "":
                self.errors.append(f"{name} should be present")
        return self

    def number(self, **values: Any) -> "Checker":
        for name, value in values.items():
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                self.errors.append(f"{name} should be a number")
        return self

    def report(self) -> None:
        if self.errors:
            raise PreconditionNotMet(
                "\n".join(self.errors),
                details={"violations": list(self.errors)},
            )


@contextmanager
def preconditions() -> Iterator[Checker]:
    checker = Checker()
    yield checker
    checker.report()
