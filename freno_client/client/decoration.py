# freno_client/client/decoration.py
# SPDX-License-Identifier: Apache-2.0
"""
Request decoration: composing middleware in front of freno requests.

A decorator is any object with a settable `request` attribute (the next
request in the chain) and a `perform(**kwargs)` method that eventually
forwards to `self.request.perform(**kwargs)`. Decorators add cross-cutting
behavior (caching, logging, instrumentation) without touching the requests
themselves.

Chains are built per request kind as

    [decorators for the kind] + [decorators for ALL kinds] + [request class]

with each element's `request` slot pointing at the following element. The
first element is the composed request. Chains are built lazily, cached, and
rebuilt after new decorators are registered for an affected kind.

Example: a read-through cache for replication delay requests only, plus
logging for every request. The cache runs first.

    class Cache(Decorator):
        def __init__(self, store, ttl):
            self.store = store
            self.ttl = ttl

        def perform(self, **kwargs):
            key = f"freno:client:v1:{sorted(kwargs.items())!r}"
            return self.store.fetch(key, ttl=self.ttl, fn=lambda: self.request.perform(**kwargs))

    pipeline.use("replication_delay", Cache(app_cache, ttl=1))
    pipeline.use(ALL, [logging_decorator])

Live decorator instances hold a single `request` slot, so an instance may be
registered only once; a second registration raises `DecorationError`.
A live instance registered for ALL is shallow-copied into each kind's chain,
so every chain gets its own `request` slot while sharing the state
it references, such as a cache dict.
Decorators given as a `DecoratorFactory` (or a `(cls, args)` tuple) are
instantiated fresh for every chain and are exempt from that check.
"""

from __future__ import annotations

import copy
import logging
from typing import (
    Any,
    Dict,
    Iterable,
    List,
    Mapping,
    NamedTuple,
    Optional,
    Protocol,
    Tuple,
    Union,
    runtime_checkable,
)

from freno_client.errors import DecorationError

LOG = logging.getLogger(__name__)

ALL = "all"

__all__ = [
    "ALL",
    "RequestDecorator",
    "Decorator",
    "DecoratorFactory",
    "RequestPipeline",
]


@runtime_checkable
class RequestDecorator(Protocol):
    """Capability every decorator in a chain exposes."""
    request: Any

    def perform(self, **kwargs: Any) -> Any: ...


class Decorator:
    """Convenience base: forwards to the next request unchanged."""
    request: Any = None

    def perform(self, **kwargs: Any) -> Any:
        return self.request.perform(**kwargs)


class DecoratorFactory(NamedTuple):
    """Constructor/arguments pair; instantiated once per chain build."""
    cls: type
    args: Tuple[Any, ...] = ()
    kwargs: Mapping[str, Any] = {}

    def build(self) -> Any:
        return self.cls(*self.args, **dict(self.kwargs))


DecoratorSpec = Union[Any, DecoratorFactory, Tuple[Any, ...]]


def _as_factory(spec: Any) -> Optional[DecoratorFactory]:
    if isinstance(spec, DecoratorFactory):
        return spec
    if isinstance(spec, tuple) and 2 <= len(spec) <= 3 and isinstance(spec[0], type):
        if not isinstance(spec[1], (tuple, list)):
            raise DecorationError(
                f"Decorator arguments must be a tuple or list, got {spec[1]!r}",
                details={"decorator": spec[0].__name__},
            )
        if len(spec) == 3 and not isinstance(spec[2], Mapping):
            raise DecorationError(
                f"Decorator keyword arguments must be a mapping, got {spec[2]!r}",
                details={"decorator": spec[0].__name__},
            )
        kwargs = dict(spec[2]) if len(spec) == 3 else {}
        return DecoratorFactory(spec[0], tuple(spec[1]), kwargs)
    return None


def _as_specs(with_: Any) -> List[Any]:
    if isinstance(with_, list):
        return list(with_)
    if isinstance(with_, tuple) and _as_factory(with_) is None:
        return list(with_)
    return [with_]


class RequestPipeline:
    """
    Builds and caches decorated request chains, one per request kind.

    Not safe for concurrent registration: register decorators during client
    setup, before requests are issued from several threads.
    """

    def __init__(self, requests: Mapping[str, type]) -> None:
        self._requests: Dict[str, type] = dict(requests)
        self._decorators: Dict[str, List[Any]] = {}
        self._chains: Dict[str, Any] = {}
        # id(instance) -> (scope, instance); the instance is kept so its id
        # cannot be recycled while registered.
        self._registry: Dict[int, Tuple[str, Any]] = {}

    @property
    def kinds(self) -> Tuple[str, ...]:
        return tuple(self._requests)

    def decorators_for(self, target: str) -> Tuple[Any, ...]:
        return tuple(self._decorators.get(target, ()))

    def use(self, target: str, with_: Union[DecoratorSpec, Iterable[DecoratorSpec]]) -> None:
        """
        Register decorators for one request kind, or for ALL of them.

        Raises:
            DecorationError: unknown target, or a live instance that is
                already registered.
        """
        if target != ALL and target not in self._requests:
            raise DecorationError(
                f"Cannot decorate unknown request: {target!r}",
                details={"known": sorted(self._requests)},
            )

        specs = _as_specs(with_)
        self._validate(target, specs)

        self._decorators.setdefault(target, []).extend(specs)
        self.invalidate(None if target == ALL else target)
        LOG.debug("registered %d decorator(s) for %s", len(specs), target)

    def chain(self, kind: str) -> Any:
        """Return the composed request for `kind`, building it if needed."""
        composed = self._chains.get(kind)
        if composed is None:
            composed = self._build(kind)
            self._chains[kind] = composed
        return composed

    def perform(self, kind: str, **kwargs: Any) -> Any:
        return self.chain(kind).perform(**kwargs)

    def invalidate(self, kind: Optional[str] = None) -> None:
        if kind is None:
            self._chains.clear()
        else:
            self._chains.pop(kind, None)

    # ------------------------------------------------------------------ #
    # Internals
    # ------------------------------------------------------------------ #

    def _build(self, kind: str) -> Any:
        try:
            base = self._requests[kind]
        except KeyError:
            raise DecorationError(f"Unknown request: {kind!r}") from None

        links: List[Any] = [self._materialize(spec) for spec in self.decorators_for(kind)]
        links.extend(self._materialize(spec, shared=True) for spec in self.decorators_for(ALL))
        links.append(base)

        for current, following in zip(links, links[1:]):
            current.request = following

        LOG.debug("built %s chain: %s", kind, " -> ".join(_describe(link) for link in links))
        return links[0]

    @staticmethod
    def _materialize(spec: Any, shared: bool = False) -> Any:
        factory = _as_factory(spec)
        if factory is not None:
            return factory.build()
        # ALL instances sit in several chains; each chain links its own copy.
        return copy.copy(spec) if shared else spec

    def _validate(self, target: str, specs: List[Any]) -> None:
        seen: Dict[int, Any] = {}
        for spec in specs:
            if _as_factory(spec) is not None:
                continue
            key = id(spec)
            if key in seen:
                raise DecorationError(
                    f"Cannot reuse decorator instance: {spec!r}",
                    details={"scope": target},
                )
            registered = self._registry.get(key)
            if registered is not None:
                raise DecorationError(
                    f"Cannot reuse decorator instance: {spec!r} "
                    f"(already registered for {registered[0]})",
                    details={"scope": target, "registered_scope": registered[0]},
                )
            seen[key] = spec

        for key, spec in seen.items():
            self._registry[key] = (target, spec)


def _describe(link: Any) -> str:
    return link.__name__ if isinstance(link, type) else type(link).__name__
