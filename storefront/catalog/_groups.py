"""
Property graph builder — flat SKU list → ordered option groups.

Stateless: takes a Product, returns new derived structures.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from storefront._types import SkuId
from storefront.catalog._types import (
    Product,
    PropertyImage,
    PropertyGroup,
    Option,
)

# ═══════════════════════════════════════════════════════════════════════════════
# Image Lookup
# ═══════════════════════════════════════════════════════════════════════════════


def image_lookup(images: Iterable[PropertyImage]) -> dict[str, str]:
    """
    Build "pid:vid" → image url.

    Single-property entries win (first one seen). A multi-property entry only
    contributes its first pair, and only where no single-property entry exists.
    """
    single: dict[str, str] = {}
    combined: dict[str, str] = {}

    for entry in images:
        if not entry.image_url:
            continue
        pairs = entry.pairs
        if len(pairs) == 1:
            single.setdefault(pairs[0], entry.image_url)
        elif len(pairs) > 1:
            combined.setdefault(pairs[0], entry.image_url)

    return {**combined, **single}


# ═══════════════════════════════════════════════════════════════════════════════
# Accumulators
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(slots=True)
class _OptionAcc:
    value_name: str
    value_id: int
    image: str | None
    sku_ids: list[SkuId] = field(default_factory=list[SkuId])

    def freeze(self) -> Option:
        return Option(
            value_name=self.value_name,
            value_id=self.value_id,
            image=self.image,
            sku_ids=frozenset(self.sku_ids),
        )


@dataclass(slots=True)
class _GroupAcc:
    name: str
    prop_id: int
    options: dict[str, _OptionAcc] = field(default_factory=dict[str, _OptionAcc])

    def freeze(self) -> PropertyGroup:
        options = tuple(o.freeze() for o in self.options.values())
        distinct = {o.image for o in options if o.image}
        return PropertyGroup(
            name=self.name,
            prop_id=self.prop_id,
            options=options,
            visual=len(distinct) > 1,
        )


# ═══════════════════════════════════════════════════════════════════════════════
# build_groups()
# ═══════════════════════════════════════════════════════════════════════════════


def build_groups(product: Product) -> tuple[PropertyGroup, ...]:
    """
    Derive selectable option groups from the product's SKUs.

    Groups come out sorted by option count, fewest first; ties keep
    first-seen order. A product whose SKUs carry no properties yields ().

    Example:
        groups = build_groups(product)
        [g.name for g in groups]   # ["Size", "Color"]
    """
    images = image_lookup(product.property_images)
    groups: dict[str, _GroupAcc] = {}

    for sku in product.skus:
        for prop in product.properties_of(sku):
            group = groups.get(prop.prop_name)
            if group is None:
                group = groups[prop.prop_name] = _GroupAcc(prop.prop_name, prop.prop_id)

            option = group.options.get(prop.value_name)
            if option is None:
                option = group.options[prop.value_name] = _OptionAcc(
                    value_name=prop.value_name,
                    value_id=prop.value_id,
                    image=images.get(prop.image_key) or sku.pic_url,
                )
            option.sku_ids.append(sku.sku_id)

    frozen = [g.freeze() for g in groups.values()]
    frozen.sort(key=lambda g: len(g.options))
    return tuple(frozen)


def is_single_tier(groups: tuple[PropertyGroup, ...]) -> bool:
    """No facets: SKUs are picked directly."""
    return not groups


__all__ = ("image_lookup", "build_groups", "is_single_tier")
