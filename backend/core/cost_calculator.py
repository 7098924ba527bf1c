"""
Per-drink cost estimation.

Turns a cocktail's ingredient usages (amount + unit + ingredient price/bottle
size/type) into an estimated cost. Pure functions only: nothing here touches
the database or the network, so it is safe to call once per rendered cocktail.

Bad rows never abort the whole drink: a usage with no ingredient, a missing or
non-numeric amount or price contributes 0 and is reported in
`CostBreakdown.skipped`.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Iterable, Mapping, Optional, Tuple

ML_PER_OUNCE = 29.5735  # 1 US fluid ounce

# Rough estimate of how many dashes a bottle of bitters pours
DASHES_PER_BOTTLE = 200

BOTTLE_SIZE_TO_ML: Mapping[str, int] = MappingProxyType({
    "50ml": 50,
    "200ml": 200,
    "375ml": 375,
    "500ml": 500,
    "750ml": 750,
    "1L": 1000,
    "1.75L": 1750,
})

OUNCE_UNITS = frozenset({"oz", "ounce", "ounces"})
ML_UNIT = "ml"
DASH_UNIT = "dash"
BITTERS = "bitters"

_BOTTLE_SIZE_LOOKUP = {k.lower(): v for k, v in BOTTLE_SIZE_TO_ML.items()}


class SkipReason(str, Enum):
    MISSING_INGREDIENT = "missing_ingredient"
    MISSING_AMOUNT = "missing_amount"
    INVALID_AMOUNT = "invalid_amount"
    NEGATIVE_AMOUNT = "negative_amount"
    MISSING_PRICE = "missing_price"
    INVALID_PRICE = "invalid_price"
    UNKNOWN_BOTTLE_SIZE = "unknown_bottle_size"
    UNRECOGNIZED_UNIT = "unrecognized_unit"


@dataclass(frozen=True)
class IngredientSnapshot:
    price: Optional[float]
    bottle_size: Optional[str] = None
    type: Optional[str] = None
    name: Optional[str] = None


@dataclass(frozen=True)
class IngredientUsage:
    amount: Optional[float]
    unit: Optional[str]
    ingredient: Optional[IngredientSnapshot]


@dataclass(frozen=True)
class LineCost:
    index: int
    amount: float
    unit: str
    basis: str  # "oz", "dash" or "piece"
    unit_price: float
    cost: float
    name: Optional[str] = None


@dataclass(frozen=True)
class SkippedUsage:
    index: int
    reason: SkipReason
    unit: Optional[str] = None
    name: Optional[str] = None


@dataclass(frozen=True)
class CostBreakdown:
    total: float = 0.0
    lines: Tuple[LineCost, ...] = field(default_factory=tuple)
    skipped: Tuple[SkippedUsage, ...] = field(default_factory=tuple)


def _normalize_unit(unit: Any) -> str:
    return str(unit or "").strip().lower()


def _plain(value: Any) -> Any:
    # str-based enums arrive here from the API schemas
    return getattr(value, "value", value)


def _to_float(value: Any) -> Optional[float]:
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _is_bottled(bottle_size: Any) -> bool:
    # None and blank strings both mean "sold per piece"
    return bool(str(_plain(bottle_size) or "").strip())


def bottle_size_ml(bottle_size: Any) -> Optional[int]:
    """Milliliters in a bottle of the given size, or None if the size is unknown."""
    size = _plain(bottle_size)
    if size is None:
        return None
    return _BOTTLE_SIZE_LOOKUP.get(str(size).strip().lower())


def price_per_ounce(price: float, bottle_size: Any) -> Optional[float]:
    ml = bottle_size_ml(bottle_size)
    if not ml:
        return None
    return price * ML_PER_OUNCE / ml


def unit_price(ingredient: Optional[IngredientSnapshot], unit: Optional[str] = None) -> Optional[Tuple[str, float]]:
    """
    Price of one unit of an ingredient as (basis, price).

    basis is "dash" for bitters poured by the dash, "piece" for items without a
    bottle size and "oz" for bottled items. When `unit` is omitted, bitters are
    priced per dash. Returns None when the ingredient has no price or an
    unknown bottle size.
    """
    if ingredient is None:
        return None
    price = _to_float(ingredient.price)
    if price is None:
        return None
    kind = _normalize_unit(_plain(ingredient.type))
    if kind == BITTERS and (unit is None or _normalize_unit(unit) == DASH_UNIT):
        return DASH_UNIT, price / DASHES_PER_BOTTLE
    if not _is_bottled(ingredient.bottle_size):
        return "piece", price
    per_oz = price_per_ounce(price, ingredient.bottle_size)
    if per_oz is None:
        return None
    return "oz", per_oz


def _price_usage(index: int, usage: Optional[IngredientUsage]):
    if usage is None:
        return SkippedUsage(index, SkipReason.MISSING_INGREDIENT)
    ingredient = usage.ingredient
    if ingredient is None:
        return SkippedUsage(index, SkipReason.MISSING_INGREDIENT, usage.unit)
    name = ingredient.name
    if usage.amount is None:
        return SkippedUsage(index, SkipReason.MISSING_AMOUNT, usage.unit, name)
    amount = _to_float(usage.amount)
    if amount is None:
        return SkippedUsage(index, SkipReason.INVALID_AMOUNT, usage.unit, name)
    if amount < 0:
        return SkippedUsage(index, SkipReason.NEGATIVE_AMOUNT, usage.unit, name)
    if ingredient.price is None:
        return SkippedUsage(index, SkipReason.MISSING_PRICE, usage.unit, name)
    if _to_float(ingredient.price) is None:
        return SkippedUsage(index, SkipReason.INVALID_PRICE, usage.unit, name)

    unit = _normalize_unit(usage.unit)
    priced = unit_price(ingredient, unit)
    if priced is None:
        return SkippedUsage(index, SkipReason.UNKNOWN_BOTTLE_SIZE, usage.unit, name)

    basis, per_unit = priced
    if basis in ("dash", "piece"):
        quantity = amount
    elif unit in OUNCE_UNITS:
        quantity = amount
    elif unit == ML_UNIT:
        quantity = amount / ML_PER_OUNCE
    else:
        return SkippedUsage(index, SkipReason.UNRECOGNIZED_UNIT, usage.unit, name)

    return LineCost(
        index=index,
        amount=amount,
        unit=unit,
        basis=basis,
        unit_price=per_unit,
        cost=per_unit * quantity,
        name=name,
    )


def calculate_cost_breakdown(usages: Optional[Iterable[IngredientUsage]]) -> CostBreakdown:
    """Cost of a drink with the priced lines and the rows that were skipped."""
    if not usages:
        return CostBreakdown()

    lines = []
    skipped = []
    for index, usage in enumerate(usages):
        result = _price_usage(index, usage)
        if isinstance(result, SkippedUsage):
            skipped.append(result)
        else:
            lines.append(result)

    total = 0.0
    for line in lines:
        total += line.cost
    return CostBreakdown(total=total, lines=tuple(lines), skipped=tuple(skipped))


def calculate_cost(usages: Optional[Iterable[IngredientUsage]]) -> float:
    """Estimated cost of one drink. Empty or None input costs 0."""
    return calculate_cost_breakdown(usages).total


def display_cost(value: Optional[float]) -> float:
    """Currency value safe to show: NaN, infinities and negatives become 0."""
    if value is None:
        return 0.0
    value = float(value)
    if math.isnan(value) or math.isinf(value) or value < 0:
        return 0.0
    return round(value, 2)


def format_cost(value: Optional[float]) -> str:
    return f"{display_cost(value):.2f}"


def usage_from_mapping(data: Mapping[str, Any]) -> IngredientUsage:
    """
    Build a usage from a loosely shaped dict, e.g.
    {"amount": 2, "unit": "oz", "ingredient": {"price": 30, "bottleSize": "750ml", "type": "spirit"}}.
    The ingredient may also sit under "ingredients" and the bottle size under "bottle_size".
    """
    raw = data.get("ingredient")
    if raw is None:
        raw = data.get("ingredients")

    ingredient = None
    if isinstance(raw, Mapping):
        bottle_size = raw.get("bottle_size")
        if bottle_size is None:
            bottle_size = raw.get("bottleSize")
        ingredient = IngredientSnapshot(
            price=raw.get("price"),
            bottle_size=bottle_size,
            type=raw.get("type"),
            name=raw.get("name"),
        )

    return IngredientUsage(amount=data.get("amount"), unit=data.get("unit"), ingredient=ingredient)
