"""Supabase-backed weekly option repository."""

from dataclasses import dataclass

from supabase import Client

from menu_planner.domain.catalog import Category
from menu_planner.domain.options import CandidateOption, OptionSet
from menu_planner.services.options import OptionSetRepository


@dataclass
class SupabaseOptionSetRepository(OptionSetRepository):
    """Supabase implementation for the weekly_options table."""

    client: Client

    def get_options(self) -> OptionSet:
        """Return the option set in the order the restaurant listed it."""
        response = (
            self.client.table("weekly_options")
            .select("item_id, item_name, category, position")
            .order("position")
            .execute()
        )
        metadata = (
            self.client.table("metadata")
            .select("value")
            .eq("key", "weekly_options_updated")
            .limit(1)
            .execute()
        )
        grouped: dict[str, list[CandidateOption]] = {
            category.value: [] for category in Category
        }
        for row in response.data or []:
            bucket = grouped.get(str(row.get("category")))
            if bucket is not None:
                bucket.append(
                    CandidateOption(id=row["item_id"], name=row.get("item_name", ""))
                )
        return OptionSet.build(
            meat=grouped[Category.MEAT.value],
            fish=grouped[Category.FISH.value],
            vegetarian=grouped[Category.VEGETARIAN.value],
            last_updated=metadata.data[0]["value"] if metadata.data else None,
        )

    def replace_options(self, options: OptionSet) -> None:
        """Replace every stored option."""
        self.clear_options()
        rows = []
        for category in Category:
            for option in options.for_category(category):
                rows.append(
                    {
                        "item_id": option.id,
                        "item_name": option.name,
                        "category": category.value,
                        "position": len(rows),
                    }
                )
        if rows:
            self.client.table("weekly_options").insert(rows).execute()
        if options.last_updated:
            self.client.table("metadata").upsert(
                {"key": "weekly_options_updated", "value": options.last_updated}
            ).execute()

    def clear_options(self) -> None:
        """Delete every stored option."""
        self.client.table("weekly_options").delete().neq("item_id", "").execute()
