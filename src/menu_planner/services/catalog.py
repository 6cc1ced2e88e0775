"""Catalog lookups and catalog lifecycle."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from threading import RLock
from typing import TYPE_CHECKING, Protocol

from menu_planner.domain.catalog import (
    Catalog,
    Category,
    Combo,
    Dish,
    generate_id_from_name,
)

if TYPE_CHECKING:
    from menu_planner.services.options import OptionSetRepository
    from menu_planner.services.plans import PlanRepository
    from menu_planner.services.votes import BallotRepository

_logger = logging.getLogger(__name__)


class CatalogError(ValueError):
    """Raised when an uploaded catalog is malformed."""


class CatalogRepository(Protocol):
    """Persistence interface for the dish catalog."""

    def get_catalog(self) -> Catalog:
        """Return the current catalog generation."""

    def replace_catalog(self, catalog: Catalog) -> None:
        """Replace the stored catalog with a new generation."""


class CatalogIndex:
    """Constant-time lookups over one catalog generation."""

    def __init__(self, catalog: Catalog) -> None:
        self._dishes: dict[str, Dish] = {}
        self._combos: dict[str, Combo] = {}
        for dish in catalog.dishes:
            self._dishes.setdefault(dish.id, dish)
        for combo in catalog.combos:
            self._combos.setdefault(combo.id, combo)
            for dish in combo.dishes:
                self._dishes.setdefault(dish.id, dish)

    def resolve(self, option_id: str) -> Dish | Combo | None:
        """Return the combo or dish an option id refers to."""
        return self._combos.get(option_id) or self._dishes.get(option_id)

    def is_combo(self, option_id: str) -> bool:
        """Return true when the id names a combo."""
        return option_id in self._combos

    def vegetarian_counterpart(self, option_id: str) -> Dish | None:
        """Return the vegetarian dish bundled in a combo, if any."""
        combo = self._combos.get(option_id)
        if combo is None:
            return None
        return combo.counterpart


@dataclass
class CatalogService:
    """Application service for reading and replacing the catalog."""

    repository: CatalogRepository
    option_repository: OptionSetRepository
    ballot_repository: BallotRepository
    plan_repository: PlanRepository
    lock: RLock = field(default_factory=RLock)

    def get_catalog(self) -> Catalog:
        """Return the current catalog."""
        return self.repository.get_catalog()

    def save_catalog(self, payload: dict[str, object]) -> Catalog:
        """Store an uploaded catalog as a new generation.

        Options, ballots and the plan refer to the previous generation's ids,
        so they are cleared as well.
        """
        catalog = replace(
            parse_catalog_payload(payload),
            updated_at=datetime.now(tz=UTC).isoformat(),
        )
        with self.lock:
            self.repository.replace_catalog(catalog)
            self.option_repository.clear_options()
            self.ballot_repository.clear_ballots()
            self.plan_repository.clear_plan()
        _logger.info(
            "Catalog replaced: dishes=%s combos=%s",
            len(catalog.dishes),
            len(catalog.combos),
        )
        return catalog


def parse_catalog_payload(payload: dict[str, object]) -> Catalog:
    """Parse the ``{meals, meal_combinations}`` upload shape."""
    ids_by_name: dict[str, str] = {}
    dishes: list[Dish] = []
    for raw in _as_list(payload.get("meals")):
        dish = _parse_dish(raw, ids_by_name)
        ids_by_name[dish.name] = dish.id
        dishes.append(dish)

    combos: list[Combo] = []
    for raw in _as_list(payload.get("meal_combinations")):
        name = str(raw.get("name") or "")
        constituents = []
        for raw_dish in _as_list(raw.get("meals")):
            dish = _parse_dish(raw_dish, ids_by_name)
            ids_by_name[dish.name] = dish.id
            constituents.append(dish)
        combo = Combo(
            id=str(raw.get("id") or generate_id_from_name(name)),
            name=name,
            dishes=tuple(constituents),
        )
        _check_combo(combo)
        combos.append(combo)
    return Catalog(dishes=tuple(dishes), combos=tuple(combos))


def _check_combo(combo: Combo) -> None:
    """A combo holds one meat or fish dish and at most one vegetarian dish."""
    vegetarian = sum(dish.category is Category.VEGETARIAN for dish in combo.dishes)
    main = len(combo.dishes) - vegetarian
    if main != 1 or vegetarian > 1:
        raise CatalogError(
            f"Combo {combo.name!r} must contain exactly one meat or fish dish "
            "and at most one vegetarian dish"
        )


def _parse_dish(raw: dict[str, object], ids_by_name: dict[str, str]) -> Dish:
    name = str(raw.get("name") or "")
    dish_id = raw.get("id") or ids_by_name.get(name) or generate_id_from_name(name)
    raw_category = raw.get("category") or Category.VEGETARIAN.value
    try:
        category = Category(raw_category)
    except ValueError as exc:
        raise CatalogError(
            f"Unknown category {raw_category!r} for dish {name!r}"
        ) from exc
    return Dish(
        id=str(dish_id),
        name=name,
        category=category,
        vegan=bool(raw.get("vegan", False)),
    )


def _as_list(value: object) -> list[dict[str, object]]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, dict)]
