"""
Graph — dependency-driven composition over nodnod.

    from storefront import graph as G

    @G.node
    class GroupsNode:
        def __init__(self, groups: tuple[PropertyGroup, ...]) -> None:
            self.groups = groups

        @classmethod
        def __compose__(cls, product: ProductNode) -> "GroupsNode":
            return cls(build_groups(product.product))

    groups = await G.compose(GroupsNode, item_id, catalog)
"""

from nodnod import scalar_node as node

from storefront.graph._run import (
    TypedScope,
    Run,
    run,
    compose,
)

__all__ = (
    "node",
    "TypedScope",
    "Run",
    "run",
    "compose",
)
