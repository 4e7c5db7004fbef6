"""
Ops — data-driven dispatch with dependency injection by type.

    from storefront import ops as O

    @dataclass(frozen=True, slots=True)
    class RemoveFromCart(O.Returning[CartView, StorefrontError]):
        sku_id: SkuId

    async def remove_from_cart(req: RemoveFromCart, carts: CartRepository, who: Principal):
        ...

    runner = O.ops().on(RemoveFromCart, remove_from_cart).compile().inject(CartRepository, repo)
    result = await runner.run(RemoveFromCart("77"), Principal("c1"))
"""

from storefront.ops._dispatch import (
    Op,
    Returns,
    Returning,
    OpsBuilder,
    Runner,
    ops,
)

__all__ = (
    "Op",
    "Returns",
    "Returning",
    "OpsBuilder",
    "Runner",
    "ops",
)
