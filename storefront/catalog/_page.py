"""
Product page — graph of nodes from item id to a renderable page.

    ProductRequest, CatalogLookup
              │
              ▼
         ProductNode
          │       │
          ▼       │
     GroupsNode   │
          │       │
          ▼       ▼
        ProductPageNode
"""

from dataclasses import dataclass

from kungfu import Result, Ok, Error

from storefront import graph as G
from storefront._types import ItemId
from storefront.errors import StorefrontError
from storefront.catalog._types import Product, PropertyGroup, Sku
from storefront.catalog._groups import build_groups
from storefront.catalog._match import auto_select
from storefront.catalog._lookup import CatalogLookup


@dataclass(frozen=True, slots=True)
class ProductRequest:
    item_id: ItemId


@dataclass(frozen=True, slots=True)
class ProductPage:
    """Everything needed to render variant selection for one product."""

    product: Product
    groups: tuple[PropertyGroup, ...]
    initial: Sku | None

    @property
    def single_tier(self) -> bool:
        return not self.groups


class ProductUnavailable(Exception):
    """Raised inside the graph when the lookup fails; unwrapped by load_product_page."""

    def __init__(self, error: StorefrontError) -> None:
        super().__init__(error.message)
        self.error = error


@G.node
class ProductNode:
    def __init__(self, product: Product) -> None:
        self.product = product

    @classmethod
    async def __compose__(cls, request: ProductRequest, catalog: CatalogLookup) -> "ProductNode":
        match await catalog.product(request.item_id):
            case Ok(product):
                return cls(product)
            case Error(e):
                raise ProductUnavailable(e)


@G.node
class GroupsNode:
    def __init__(self, groups: tuple[PropertyGroup, ...]) -> None:
        self.groups = groups

    @classmethod
    def __compose__(cls, product: ProductNode) -> "GroupsNode":
        return cls(build_groups(product.product))


@G.node
class ProductPageNode:
    def __init__(self, page: ProductPage) -> None:
        self.page = page

    @classmethod
    def __compose__(cls, product: ProductNode, groups: GroupsNode) -> "ProductPageNode":
        initial = auto_select(product.product, groups.groups).unwrap_or_none()
        return cls(ProductPage(product.product, groups.groups, initial))


async def load_product_page(
    catalog: CatalogLookup,
    item_id: ItemId,
) -> Result[ProductPage, StorefrontError]:
    """Fetch a product and derive its option groups and preselected SKU."""
    try:
        node = await G.run(ProductPageNode).given(ProductRequest(item_id), catalog)
    except ProductUnavailable as exc:
        return Error(exc.error)
    return Ok(node.page)


__all__ = (
    "ProductRequest",
    "ProductPage",
    "ProductUnavailable",
    "ProductNode",
    "GroupsNode",
    "ProductPageNode",
    "load_product_page",
)
