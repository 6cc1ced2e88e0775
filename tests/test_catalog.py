"""Tests for catalog parsing and lookups."""

import pytest

from menu_planner.domain.catalog import Catalog, Category, generate_id_from_name
from menu_planner.services.catalog import (
    CatalogError,
    CatalogIndex,
    parse_catalog_payload,
)
from tests.conftest import (
    BURGER,
    COD_COMBO,
    SIDE_SALAD,
    sample_catalog,
)


def test_vegetarian_counterpart_of_combo() -> None:
    index = CatalogIndex(sample_catalog())

    assert index.vegetarian_counterpart("burger_combo") == SIDE_SALAD
    assert index.is_combo("burger_combo")


def test_vegetarian_counterpart_missing_for_plain_dish_and_unknown_id() -> None:
    index = CatalogIndex(sample_catalog())

    assert index.vegetarian_counterpart("curry") is None
    assert index.vegetarian_counterpart("nope") is None
    assert not index.is_combo("curry")


def test_combo_without_counterpart() -> None:
    index = CatalogIndex(sample_catalog())

    assert index.is_combo(COD_COMBO.id)
    assert index.vegetarian_counterpart(COD_COMBO.id) is None


def test_resolve_returns_combo_or_dish() -> None:
    index = CatalogIndex(sample_catalog())

    combo = index.resolve("burger_combo")
    dish = index.resolve("side_salad")

    assert combo is not None and combo.category is Category.MEAT
    assert dish == SIDE_SALAD
    assert index.resolve("burger") == BURGER


def test_combo_category_follows_main_dish() -> None:
    catalog = sample_catalog()
    categories = {combo.id: combo.category for combo in catalog.combos}

    assert categories["salmon_combo"] is Category.FISH
    assert categories["schnitzel_combo"] is Category.MEAT


def test_generate_id_from_name() -> None:
    assert generate_id_from_name("  Spicy Bean-Chili! ") == "spicy_bean_chili"
    assert generate_id_from_name("") == "unknown"
    assert generate_id_from_name(None) == "unknown"


def test_parse_catalog_payload_generates_and_reuses_ids() -> None:
    catalog = parse_catalog_payload(
        {
            "meals": [
                {"name": "Side Salad", "vegetarian": True, "category": "vegetarian"},
                {"id": "dal", "name": "Dal", "vegan": True, "category": "vegetarian"},
            ],
            "meal_combinations": [
                {
                    "name": "Burger Combo",
                    "meals": [
                        {"name": "Burger", "category": "meat"},
                        {"name": "Side Salad", "category": "vegetarian"},
                    ],
                }
            ],
        }
    )

    assert [dish.id for dish in catalog.dishes] == ["side_salad", "dal"]
    assert catalog.dishes[1].vegan
    combo = catalog.combos[0]
    assert combo.id == "burger_combo"
    assert combo.counterpart is not None
    assert combo.counterpart.id == "side_salad"
    assert combo.main_dish is not None
    assert combo.main_dish.category is Category.MEAT


def test_parse_catalog_payload_defaults_category_to_vegetarian() -> None:
    catalog = parse_catalog_payload({"meals": [{"name": "Soup"}]})

    assert catalog.dishes[0].category is Category.VEGETARIAN


def test_parse_catalog_payload_ignores_malformed_sections() -> None:
    assert parse_catalog_payload({"meals": "nope"}) == Catalog()


def test_parse_catalog_payload_rejects_unknown_category() -> None:
    payload = {"meals": [{"id": "steak", "name": "Steak", "category": "Meat"}]}

    with pytest.raises(CatalogError, match="Meat"):
        parse_catalog_payload(payload)


@pytest.mark.parametrize(
    "meals",
    [
        [
            {"name": "Steak", "category": "meat"},
            {"name": "Salmon", "category": "fish"},
            {"name": "Rice", "category": "vegetarian"},
        ],
        [
            {"name": "Steak", "category": "meat"},
            {"name": "Rice", "category": "vegetarian"},
            {"name": "Salad", "category": "vegetarian"},
        ],
        [{"name": "Rice", "category": "vegetarian"}],
    ],
)
def test_parse_catalog_payload_rejects_malformed_combo(
    meals: list[dict[str, object]],
) -> None:
    payload = {
        "meal_combinations": [{"id": "big_combo", "name": "Big", "meals": meals}]
    }

    with pytest.raises(CatalogError, match="Big"):
        parse_catalog_payload(payload)
