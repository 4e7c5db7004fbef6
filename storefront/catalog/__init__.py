"""
Catalog — variant resolution.

    from storefront import catalog as K

    groups = K.build_groups(product)
    selection = K.toggle(K.Selection(), "Color", "Red")
    K.is_option_available(product, selection, "Size", "S")
    match K.resolve(product, groups, selection):
        case K.Resolved(sku):
            ...
"""

from storefront.catalog._types import (
    SkuProperty,
    Sku,
    PropertyImage,
    Product,
    Option,
    PropertyGroup,
)
from storefront.catalog._groups import image_lookup, build_groups, is_single_tier
from storefront.catalog._match import (
    Selection,
    toggle,
    Resolved,
    Unresolved,
    NoMatch,
    Resolution,
    resolve,
    is_option_available,
    OptionState,
    GroupState,
    option_states,
    auto_select,
    pick_sku,
    display_image,
)
from storefront.catalog._pricing import (
    PriceDisplay,
    price_display,
    unit_price,
    purchasable_quantity,
)
from storefront.catalog._url import extract_product_id, extract_url, is_url
from storefront.catalog._lookup import CatalogSource, CatalogLookup, product_key
from storefront.catalog._page import (
    ProductRequest,
    ProductPage,
    ProductUnavailable,
    load_product_page,
)

__all__ = (
    # Types
    "SkuProperty",
    "Sku",
    "PropertyImage",
    "Product",
    "Option",
    "PropertyGroup",
    # Property graph builder
    "image_lookup",
    "build_groups",
    "is_single_tier",
    # Selection matcher
    "Selection",
    "toggle",
    "Resolved",
    "Unresolved",
    "NoMatch",
    "Resolution",
    "resolve",
    "is_option_available",
    "OptionState",
    "GroupState",
    "option_states",
    "auto_select",
    "pick_sku",
    "display_image",
    # Pricing
    "PriceDisplay",
    "price_display",
    "unit_price",
    "purchasable_quantity",
    # Links
    "extract_product_id",
    "extract_url",
    "is_url",
    # Lookup
    "CatalogSource",
    "CatalogLookup",
    "product_key",
    "ProductRequest",
    "ProductPage",
    "ProductUnavailable",
    "load_product_page",
)
