import math
import random

import pytest

from core.cost_calculator import (
    BOTTLE_SIZE_TO_ML,
    DASHES_PER_BOTTLE,
    ML_PER_OUNCE,
    IngredientSnapshot,
    IngredientUsage,
    SkipReason,
    bottle_size_ml,
    calculate_cost,
    calculate_cost_breakdown,
    display_cost,
    format_cost,
    unit_price,
    usage_from_mapping,
)

GIN = IngredientSnapshot(price=30.00, bottle_size="750ml", type="spirit", name="Gin")
BITTERS = IngredientSnapshot(price=10.00, type="bitters", name="Angostura")
LIME = IngredientSnapshot(price=2.00, bottle_size=None, type="garnish", name="Lime")


def usage(amount, unit, ingredient):
    return IngredientUsage(amount=amount, unit=unit, ingredient=ingredient)


@pytest.mark.parametrize("usages", [None, [], ()])
def test_empty_input_costs_nothing(usages):
    assert calculate_cost(usages) == 0
    breakdown = calculate_cost_breakdown(usages)
    assert breakdown.lines == ()
    assert breakdown.skipped == ()


def test_spirit_in_ounces():
    assert calculate_cost([usage(2, "oz", GIN)]) == pytest.approx(2.36588, rel=1e-4)


def test_spirit_in_ml_matches_ounces():
    assert calculate_cost([usage(44.36, "ml", GIN)]) == pytest.approx(1.7744, rel=1e-3)
    assert calculate_cost([usage(ML_PER_OUNCE * 1.5, "ml", GIN)]) == pytest.approx(
        calculate_cost([usage(1.5, "oz", GIN)])
    )


@pytest.mark.parametrize("unit", ["oz", "OZ", "ounce", "Ounces", " oz "])
def test_ounce_spellings(unit):
    assert calculate_cost([usage(1, unit, GIN)]) == pytest.approx(30.00 * ML_PER_OUNCE / 750)


def test_bitters_by_the_dash():
    assert calculate_cost([usage(3, "dash", BITTERS)]) == pytest.approx(0.15)
    bottled = IngredientSnapshot(price=10.00, bottle_size="200ml", type="bitters")
    assert calculate_cost([usage(3, "Dash", bottled)]) == pytest.approx(3 * 10.00 / DASHES_PER_BOTTLE)


def test_garnish_priced_per_piece():
    assert calculate_cost([usage(1, "piece", LIME)]) == pytest.approx(2.00)
    # non-bottled items ignore the unit
    assert calculate_cost([usage(2, "wedge", LIME)]) == pytest.approx(4.00)


def test_unrecognized_unit_on_bottle_contributes_zero():
    breakdown = calculate_cost_breakdown([usage(1, "splash", GIN), usage(1, "piece", LIME)])
    assert breakdown.total == pytest.approx(2.00)
    assert [(s.index, s.reason) for s in breakdown.skipped] == [(0, SkipReason.UNRECOGNIZED_UNIT)]
    assert breakdown.skipped[0].name == "Gin"
    assert breakdown.skipped[0].unit == "splash"


def test_null_price_contributes_zero():
    unpriced = [
        IngredientSnapshot(price=None, bottle_size="750ml", type="spirit"),
        IngredientSnapshot(price=None, type="bitters"),
        IngredientSnapshot(price=None, type="garnish"),
    ]
    for ingredient in unpriced:
        for unit in ("oz", "ml", "dash", "piece"):
            breakdown = calculate_cost_breakdown([usage(3, unit, ingredient)])
            assert breakdown.total == 0
            assert breakdown.skipped[0].reason == SkipReason.MISSING_PRICE


def test_bad_rows_do_not_spoil_the_rest():
    usages = [
        usage(2, "oz", GIN),
        usage(1, "oz", None),
        usage(None, "oz", GIN),
        usage(-1, "oz", GIN),
        usage(1, "oz", IngredientSnapshot(price=20.0, bottle_size="3L", type="spirit")),
        usage(3, "dash", BITTERS),
    ]
    breakdown = calculate_cost_breakdown(usages)
    assert breakdown.total == pytest.approx(2.36588 + 0.15, rel=1e-4)
    assert [line.index for line in breakdown.lines] == [0, 5]
    assert [(s.index, s.reason) for s in breakdown.skipped] == [
        (1, SkipReason.MISSING_INGREDIENT),
        (2, SkipReason.MISSING_AMOUNT),
        (3, SkipReason.NEGATIVE_AMOUNT),
        (4, SkipReason.UNKNOWN_BOTTLE_SIZE),
    ]


def test_non_numeric_values_are_skipped():
    spirit = {"price": 30.00, "bottleSize": "750ml", "type": "spirit", "name": "Gin"}
    usages = [
        usage_from_mapping({"amount": "two", "unit": "oz", "ingredient": spirit}),
        usage_from_mapping({"amount": 1, "unit": "oz", "ingredient": dict(spirit, price="n/a")}),
        None,
        usage_from_mapping({"amount": "1.5", "unit": "oz", "ingredient": spirit}),
        usage(1, "piece", LIME),
    ]
    breakdown = calculate_cost_breakdown(usages)
    assert breakdown.total == pytest.approx(1.5 * 30.00 * ML_PER_OUNCE / 750 + 2.00)
    assert [(s.index, s.reason) for s in breakdown.skipped] == [
        (0, SkipReason.INVALID_AMOUNT),
        (1, SkipReason.INVALID_PRICE),
        (2, SkipReason.MISSING_INGREDIENT),
    ]
    assert unit_price(IngredientSnapshot(price="n/a", bottle_size="750ml")) is None


@pytest.mark.parametrize("blank", ["", "   "])
def test_blank_bottle_size_is_priced_per_piece(blank):
    row = usage_from_mapping({
        "amount": 1, "unit": "piece",
        "ingredient": {"price": 2.0, "bottleSize": blank, "type": "garnish"},
    })
    breakdown = calculate_cost_breakdown([row])
    assert breakdown.total == pytest.approx(2.0)
    assert breakdown.skipped == ()
    assert breakdown.lines[0].basis == "piece"


def test_bitters_in_other_units_use_the_bottle():
    bottled = IngredientSnapshot(price=10.00, bottle_size="200ml", type="bitters")
    breakdown = calculate_cost_breakdown([usage(1, "oz", bottled)])
    assert breakdown.lines[0].basis == "oz"
    assert breakdown.total == pytest.approx(10.00 * ML_PER_OUNCE / 200)
    assert calculate_cost([usage(10, "ml", bottled)]) == pytest.approx(10.00 * 10 / 200)

    # no bottle size: priced per piece like any loose item
    assert calculate_cost([usage(1, "oz", BITTERS)]) == pytest.approx(10.00)


def test_order_does_not_matter():
    usages = [usage(2, "oz", GIN), usage(3, "dash", BITTERS), usage(1, "piece", LIME), usage(15, "ml", GIN)]
    expected = calculate_cost(usages)
    shuffled = list(usages)
    random.Random(7).shuffle(shuffled)
    assert calculate_cost(shuffled) == pytest.approx(expected)
    assert calculate_cost(list(reversed(usages))) == pytest.approx(expected)


def test_breakdown_lines():
    breakdown = calculate_cost_breakdown([usage(2, "oz", GIN), usage(3, "dash", BITTERS), usage(1, "piece", LIME)])
    assert [(line.basis, line.name) for line in breakdown.lines] == [
        ("oz", "Gin"),
        ("dash", "Angostura"),
        ("piece", "Lime"),
    ]
    assert breakdown.lines[1].unit_price == pytest.approx(0.05)
    assert breakdown.total == pytest.approx(sum(line.cost for line in breakdown.lines))


def test_inputs_are_not_mutated():
    usages = [usage(2, "OZ", GIN), usage(None, "oz", None)]
    before = list(usages)
    calculate_cost(usages)
    assert usages == before
    assert usages[0].unit == "OZ"


def test_nan_is_left_to_the_caller():
    corrupt = IngredientSnapshot(price=float("nan"), bottle_size="750ml", type="spirit")
    total = calculate_cost([usage(1, "oz", corrupt)])
    assert math.isnan(total)
    assert display_cost(total) == 0.0
    assert format_cost(total) == "0.00"


def test_no_rounding_inside_calculator():
    total = calculate_cost([usage(1, "oz", GIN)])
    assert total != round(total, 2)
    assert format_cost(total) == "1.18"


@pytest.mark.parametrize("size,ml", list(BOTTLE_SIZE_TO_ML.items()))
def test_bottle_sizes(size, ml):
    assert bottle_size_ml(size) == ml
    ingredient = IngredientSnapshot(price=10.0, bottle_size=size, type="spirit")
    assert unit_price(ingredient) == ("oz", pytest.approx(10.0 * ML_PER_OUNCE / ml))


def test_bottle_size_lookup_is_case_insensitive():
    assert bottle_size_ml("1l") == 1000
    assert bottle_size_ml("1.75l") == 1750
    assert bottle_size_ml("3L") is None
    assert bottle_size_ml(None) is None


def test_unit_price():
    assert unit_price(BITTERS) == ("dash", pytest.approx(0.05))
    assert unit_price(LIME) == ("piece", 2.00)
    assert unit_price(IngredientSnapshot(price=None, bottle_size="750ml")) is None
    assert unit_price(None) is None


def test_display_cost():
    assert display_cost(None) == 0.0
    assert display_cost(float("inf")) == 0.0
    assert display_cost(-1.0) == 0.0
    assert display_cost(3.01588) == 3.02
    assert format_cost(2) == "2.00"


def test_usage_from_mapping_accepts_loose_shapes():
    camel = usage_from_mapping(
        {"amount": 2, "unit": "oz", "ingredient": {"price": 30.0, "bottleSize": "750ml", "type": "spirit"}}
    )
    snake = usage_from_mapping(
        {"amount": 2, "unit": "oz", "ingredients": {"price": 30.0, "bottle_size": "750ml", "type": "spirit"}}
    )
    assert camel == snake
    assert calculate_cost([camel]) == pytest.approx(2.36588, rel=1e-4)

    orphan = usage_from_mapping({"amount": 1, "unit": "oz"})
    assert orphan.ingredient is None
    assert calculate_cost([orphan]) == 0
