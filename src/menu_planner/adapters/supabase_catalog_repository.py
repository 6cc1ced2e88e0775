"""Supabase-backed dish catalog repository."""

from dataclasses import dataclass
from datetime import UTC, datetime

from supabase import Client

from menu_planner.domain.catalog import Catalog, Category, Combo, Dish
from menu_planner.services.catalog import CatalogRepository


@dataclass
class SupabaseCatalogRepository(CatalogRepository):
    """Supabase implementation for the dish catalog tables."""

    client: Client

    def get_catalog(self) -> Catalog:
        """Return standalone dishes and combos, each sorted by name."""
        meals = self.client.table("meals").select("*").order("name").execute()
        combos = (
            self.client.table("meal_combinations").select("*").order("name").execute()
        )
        links = (
            self.client.table("combination_meals")
            .select("combination_id, meal_id")
            .execute()
        )
        metadata = (
            self.client.table("metadata")
            .select("value")
            .eq("key", "meals_database_updated")
            .limit(1)
            .execute()
        )
        dishes = {row["id"]: _parse_dish(row) for row in meals.data or []}
        members: dict[str, list[str]] = {}
        for row in links.data or []:
            members.setdefault(row["combination_id"], []).append(row["meal_id"])
        linked = {meal_id for ids in members.values() for meal_id in ids}
        return Catalog(
            dishes=tuple(dish for dish in dishes.values() if dish.id not in linked),
            combos=tuple(
                Combo(
                    id=row["id"],
                    name=str(row.get("name", "")),
                    dishes=tuple(
                        dishes[meal_id]
                        for meal_id in members.get(row["id"], [])
                        if meal_id in dishes
                    ),
                )
                for row in combos.data or []
            ),
            updated_at=metadata.data[0]["value"] if metadata.data else None,
        )

    def replace_catalog(self, catalog: Catalog) -> None:
        """Delete the stored catalog and insert the new generation."""
        self.client.table("combination_meals").delete().neq(
            "combination_id", ""
        ).execute()
        self.client.table("meal_combinations").delete().neq("id", "").execute()
        self.client.table("meals").delete().neq("id", "").execute()

        rows: dict[str, dict[str, object]] = {}
        for dish in catalog.dishes:
            rows.setdefault(dish.id, _dish_row(dish))
        for combo in catalog.combos:
            for dish in combo.dishes:
                rows.setdefault(dish.id, _dish_row(dish))
        if rows:
            self.client.table("meals").insert(list(rows.values())).execute()
        if catalog.combos:
            self.client.table("meal_combinations").insert(
                [{"id": combo.id, "name": combo.name} for combo in catalog.combos]
            ).execute()
            links = {
                (combo.id, dish.id) for combo in catalog.combos for dish in combo.dishes
            }
            if links:
                self.client.table("combination_meals").insert(
                    [
                        {"combination_id": combo_id, "meal_id": meal_id}
                        for combo_id, meal_id in sorted(links)
                    ]
                ).execute()
        self.client.table("metadata").upsert(
            {
                "key": "meals_database_updated",
                "value": catalog.updated_at
                or datetime.now(tz=UTC).isoformat(),
            }
        ).execute()


def _dish_row(dish: Dish) -> dict[str, object]:
    return {
        "id": dish.id,
        "name": dish.name,
        "vegetarian": dish.category is Category.VEGETARIAN,
        "vegan": dish.vegan,
        "category": dish.category.value,
    }


def _parse_dish(row: dict[str, object]) -> Dish:
    """Parse a meals row into a domain model."""
    return Dish(
        id=str(row["id"]),
        name=str(row.get("name", "")),
        category=Category(row.get("category") or Category.VEGETARIAN.value),
        vegan=bool(row.get("vegan", False)),
    )
