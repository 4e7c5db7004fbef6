"""
Runner — thin layer over nodnod.

A target node pulls in every node it depends on; plain values are injected
into the scope by type.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, cast

from nodnod import Scope, Value, EventLoopAgent, Node


# ═══════════════════════════════════════════════════════════════════════════════
# TypedScope
# ═══════════════════════════════════════════════════════════════════════════════

class TypedScope:
    """Type-keyed wrapper around nodnod.Scope."""

    __slots__ = ("_scope",)

    def __init__(self, detail: str = "scope") -> None:
        self._scope = Scope(detail=detail)

    @property
    def inner(self) -> Scope:
        return self._scope

    def inject[T](self, typ: type[T], value: T) -> TypedScope:
        self._scope.push(Value(typ, value))
        return self

    def get[T](self, typ: type[T]) -> T:
        found = self._scope.get(typ)
        if found is None:
            raise KeyError(f"{typ.__name__} not found in scope")
        return cast(T, found.value)

    async def __aenter__(self) -> TypedScope:
        await self._scope.__aenter__()
        return self

    async def __aexit__(self, *args: object) -> None:
        await self._scope.__aexit__(*args)


# ═══════════════════════════════════════════════════════════════════════════════
# Run — awaitable builder
# ═══════════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True, slots=True)
class Run[T]:
    """
    Awaitable run of a target node.

    Example:
        page = await run(ProductPageNode).inject_as(CatalogLookup, catalog).given(item)
    """

    _target: type[T]
    _injections: tuple[tuple[type[Any], Any], ...] = ()

    def inject_as[V](self, typ: type[V], value: V) -> Run[T]:
        """Inject under an explicit type (protocols, base classes)."""
        return Run(self._target, (*self._injections, (typ, value)))

    def given(self, *values: object) -> Run[T]:
        """Inject values under their runtime types."""
        extra = tuple((cast(type[Any], type(v)), v) for v in values)
        return Run(self._target, (*self._injections, *extra))

    def __await__(self) -> Any:
        return self._execute().__await__()

    async def _execute(self) -> T:
        agent = EventLoopAgent.build({cast(type[Node[Any, Any]], self._target)})

        async with TypedScope(detail=f"run:{self._target.__name__}") as scope:
            for typ, value in self._injections:
                scope.inject(typ, value)
            await agent.run(scope.inner, {})  # type: ignore[misc]
            return scope.get(self._target)


def run[T](target: type[T]) -> Run[T]:
    return Run(_target=target)


async def compose[T](target: type[T], *inputs: object) -> T:
    """
    One-shot composition.

    Example:
        page = await compose(ProductPageNode, item_id, catalog)
    """
    return await run(target).given(*inputs)


__all__ = ("TypedScope", "Run", "run", "compose")
