"""
Selection matcher — selections, SKU resolution and option availability.

Every function here is pure: same Product + same Selection, same answer.

    selection = toggle(Selection(), "Color", "Red")
    match resolve(product, groups, selection):
        case Resolved(sku):
            ...
        case Unresolved(missing):
            ...
        case NoMatch():
            ...
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass

from kungfu import Result, Ok, Error, Option as Maybe, Some, Nothing

from storefront._types import SkuId
from storefront.errors import NotFoundError
from storefront.catalog._types import Product, Sku, PropertyGroup, Option

# ═══════════════════════════════════════════════════════════════════════════════
# Selection — immutable group → value mapping
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Selection:
    """
    Chosen value per property group; partial until every group is filled.

    Choices are kept sorted by group name so equal selections compare equal.
    """

    choices: tuple[tuple[str, str], ...] = ()

    @classmethod
    def of(cls, mapping: Mapping[str, str]) -> Selection:
        return cls(tuple(sorted(mapping.items())))

    def get(self, group: str) -> str | None:
        return next((v for g, v in self.choices if g == group), None)

    def as_dict(self) -> dict[str, str]:
        return dict(self.choices)

    def with_value(self, group: str, value: str) -> Selection:
        return Selection.of({**self.as_dict(), group: value})

    def without(self, group: str) -> Selection:
        return Selection(tuple((g, v) for g, v in self.choices if g != group))

    def __contains__(self, group: object) -> bool:
        return any(g == group for g, _ in self.choices)

    def __len__(self) -> int:
        return len(self.choices)


def toggle(selection: Selection, group: str, value: str) -> Selection:
    """
    Select value for group, or clear it when it is already selected.

    Other groups are untouched.
    """
    if selection.get(group) == value:
        return selection.without(group)
    return selection.with_value(group, value)


# ═══════════════════════════════════════════════════════════════════════════════
# Resolution — tagged outcome of resolve()
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Resolved:
    sku: Sku


@dataclass(frozen=True, slots=True)
class Unresolved:
    """Groups still waiting for a choice, in display order."""

    missing: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class NoMatch:
    """Complete selection that no SKU carries."""


type Resolution = Resolved | Unresolved | NoMatch


def _props(product: Product, sku: Sku) -> dict[str, str]:
    return {p.prop_name: p.value_name for p in product.properties_of(sku)}


def resolve(
    product: Product,
    groups: tuple[PropertyGroup, ...],
    selection: Selection,
) -> Resolution:
    """
    Find the SKU whose property set equals the selection.

    Without groups only a single-SKU product resolves; several property-less
    SKUs are picked directly (see pick_sku).
    """
    if not groups:
        if len(product.skus) == 1:
            return Resolved(product.skus[0])
        return Unresolved(())

    missing = tuple(g.name for g in groups if g.name not in selection)
    if missing:
        return Unresolved(missing)

    wanted = selection.as_dict()
    for sku in product.skus:
        if _props(product, sku) == wanted:
            return Resolved(sku)
    return NoMatch()


def is_option_available(
    product: Product,
    selection: Selection,
    group: str,
    value: str,
) -> bool:
    """
    True iff some in-stock SKU carries value for group and agrees with every
    other selected group.
    """
    others = [(g, v) for g, v in selection.choices if g != group]
    for sku in product.skus:
        if not sku.in_stock:
            continue
        props = _props(product, sku)
        if props.get(group) != value:
            continue
        if all(props.get(g) == v for g, v in others):
            return True
    return False


# ═══════════════════════════════════════════════════════════════════════════════
# Render Helpers
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class OptionState:
    option: Option
    available: bool
    selected: bool


@dataclass(frozen=True, slots=True)
class GroupState:
    group: PropertyGroup
    options: tuple[OptionState, ...]

    @property
    def selected(self) -> str | None:
        return next((s.option.value_name for s in self.options if s.selected), None)


def option_states(
    product: Product,
    groups: tuple[PropertyGroup, ...],
    selection: Selection,
) -> tuple[GroupState, ...]:
    """Every group with per-option availability under the current selection."""
    return tuple(
        GroupState(
            group=g,
            options=tuple(
                OptionState(
                    option=o,
                    available=is_option_available(product, selection, g.name, o.value_name),
                    selected=selection.get(g.name) == o.value_name,
                )
                for o in g.options
            ),
        )
        for g in groups
    )


def auto_select(product: Product, groups: tuple[PropertyGroup, ...]) -> Maybe[Sku]:
    """
    SKU to preselect without user interaction.

    One SKU: that SKU. No groups: first SKU in stock, else the first SKU.
    """
    if len(product.skus) == 1:
        return Some(product.skus[0])
    if not groups and product.skus:
        in_stock = next((s for s in product.skus if s.in_stock), None)
        return Some(in_stock or product.skus[0])
    return Nothing()


def pick_sku(product: Product, sku_id: SkuId) -> Result[Sku, NotFoundError]:
    """Direct SKU choice for single-tier products."""
    sku = product.sku(sku_id)
    if sku is None:
        return Error(NotFoundError("sku", sku_id))
    return Ok(sku)


def display_image(product: Product, resolution: Resolution) -> str | None:
    """Resolved SKU image if it has one, else the product's main image."""
    match resolution:
        case Resolved(sku) if sku.pic_url:
            return sku.pic_url
        case _:
            return product.main_image


__all__ = (
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
)
