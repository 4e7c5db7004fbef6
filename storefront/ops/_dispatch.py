"""
Ops — typed operations dispatched to plain async handlers.

Handler parameters are resolved by annotation:
- the operation's own type receives the request
- any other type receives a value injected on the runner (shared) or
  passed to run() (per call, e.g. the authenticated principal)

Example:
    @dataclass(frozen=True, slots=True)
    class GetCart(Op[CartView, StorefrontError]):
        pass

    async def get_cart(req: GetCart, carts: CartRepository, who: Principal) -> Result[CartView, StorefrontError]:
        ...

    runner = ops().on(GetCart, get_cart).compile().inject(CartRepository, repo)
    result = await runner.run(GetCart(), Principal("c1"))
"""

from __future__ import annotations

import inspect
import logging
from abc import ABC
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any, cast, get_type_hints

from kungfu import Result, Error, LazyCoroResult

from storefront.errors import NotFoundError

logger = logging.getLogger(__name__)

type HandlerFunc = Callable[..., Awaitable[Result[Any, Any]]]


class Op[T, E](ABC):
    """Base class for operations; subclasses are frozen dataclasses."""


# Aliases
Returns = Op
Returning = Op


@dataclass(frozen=True, slots=True)
class _OpReg:
    op_type: type[Op[Any, Any]]
    handler: HandlerFunc
    params: tuple[tuple[str, type[Any]], ...]


def _resolve_params(op_type: type[Op[Any, Any]], handler: HandlerFunc) -> tuple[tuple[str, type[Any]], ...]:
    hints = get_type_hints(handler)
    params: list[tuple[str, type[Any]]] = []
    for name in inspect.signature(handler).parameters:
        if name not in hints:
            raise TypeError(f"{handler.__name__}: parameter {name!r} needs a type annotation")
        params.append((name, hints[name]))
    if not any(typ is op_type for _, typ in params):
        raise TypeError(f"{handler.__name__} does not accept {op_type.__name__}")
    return tuple(params)


@dataclass(slots=True, frozen=True)
class OpsBuilder:
    _items: tuple[tuple[type[Op[Any, Any]], HandlerFunc], ...] = ()

    def on(self, op_type: type[Op[Any, Any]], handler: HandlerFunc) -> OpsBuilder:
        """Register handler for op_type. Last registration wins."""
        others = tuple(i for i in self._items if i[0] is not op_type)
        return OpsBuilder(_items=(*others, (op_type, handler)))

    def compile(self) -> Runner:
        registry = {
            op_type: _OpReg(op_type, handler, _resolve_params(op_type, handler))
            for op_type, handler in self._items
        }
        return Runner(_registry=registry)


@dataclass(slots=True)
class Runner:
    _registry: dict[type[Op[Any, Any]], _OpReg]
    _injected: dict[type[Any], object] = field(default_factory=dict)

    def inject(self, typ: type[Any], impl: object) -> Runner:
        """Inject a shared dependency."""
        self._injected[typ] = impl
        return self

    @property
    def operations(self) -> tuple[type[Op[Any, Any]], ...]:
        return tuple(self._registry)

    async def run[T, E](self, req: Op[T, E], *scoped: object) -> Result[T, E | NotFoundError]:
        op_type = type(req)
        reg = self._registry.get(op_type)
        if reg is None:
            return Error(NotFoundError("operation", op_type.__name__))

        available: dict[type[Any], object] = {**self._injected, **{type(v): v for v in scoped}}
        available[op_type] = req

        kwargs: dict[str, object] = {}
        for name, typ in reg.params:
            if typ not in available:
                raise LookupError(f"{op_type.__name__}: nothing injected for {name}: {typ!r}")
            kwargs[name] = available[typ]

        logger.debug("dispatching %s", op_type.__name__)
        return cast(Result[T, E], await reg.handler(**kwargs))

    def __call__[T, E](self, req: Op[T, E], *scoped: object) -> LazyCoroResult[T, E | NotFoundError]:
        async def inner() -> Result[T, E | NotFoundError]:
            return await self.run(req, *scoped)

        return LazyCoroResult(inner)


def ops() -> OpsBuilder:
    """Create ops builder: ops().on(...).compile()"""
    return OpsBuilder()


__all__ = ("Op", "Returns", "Returning", "OpsBuilder", "Runner", "ops")
