"""Domain models for the dish catalog."""

import re
from dataclasses import dataclass, field
from enum import Enum


class Category(Enum):
    """Menu category a dish or option belongs to."""

    MEAT = "meat"
    FISH = "fish"
    VEGETARIAN = "vegetarian"


@dataclass(frozen=True)
class Dish:
    """A single dish from the catalog."""

    id: str
    name: str
    category: Category
    vegan: bool = False


@dataclass(frozen=True)
class Combo:
    """A meat or fish dish bundled with an optional vegetarian counterpart."""

    id: str
    name: str
    dishes: tuple[Dish, ...]

    @property
    def main_dish(self) -> Dish | None:
        """Return the meat or fish constituent."""
        for dish in self.dishes:
            if dish.category is not Category.VEGETARIAN:
                return dish
        return None

    @property
    def counterpart(self) -> Dish | None:
        """Return the bundled vegetarian dish, if any."""
        for dish in self.dishes:
            if dish.category is Category.VEGETARIAN:
                return dish
        return None

    @property
    def category(self) -> Category | None:
        """Derive the combo category from its non-vegetarian dish."""
        main = self.main_dish
        return main.category if main else None


@dataclass(frozen=True)
class Catalog:
    """One generation of the dish catalog."""

    dishes: tuple[Dish, ...] = ()
    combos: tuple[Combo, ...] = ()
    updated_at: str | None = field(default=None, compare=False)


_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def generate_id_from_name(name: str | None) -> str:
    """Build a stable id from a display name."""
    if not name:
        return "unknown"
    return _NON_ALNUM.sub("_", name.strip().lower()).strip("_")
