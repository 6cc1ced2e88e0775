"""Supabase-backed weekly plan repository."""

from dataclasses import dataclass
from datetime import datetime

from supabase import Client

from menu_planner.domain.plans import WeeklyPlan
from menu_planner.services.plans import PlanRepository

_PLAN_ROW_ID = 1


@dataclass
class SupabasePlanRepository(PlanRepository):
    """Supabase implementation for the single-row meal_plan table."""

    client: Client

    def get_plan(self) -> WeeklyPlan | None:
        """Return the stored plan, if any."""
        response = (
            self.client.table("meal_plan")
            .select("*")
            .eq("id", _PLAN_ROW_ID)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        row = response.data[0]
        generated_raw = row.get("generated_at")
        return WeeklyPlan(
            monday=row.get("monday"),
            tuesday=row.get("tuesday"),
            wednesday=row.get("wednesday"),
            thursday=row.get("thursday"),
            generated_at=datetime.fromisoformat(generated_raw)
            if isinstance(generated_raw, str) and generated_raw
            else None,
        )

    def save_plan(self, plan: WeeklyPlan) -> None:
        """Upsert the plan row."""
        self.client.table("meal_plan").upsert(
            {"id": _PLAN_ROW_ID, **plan.to_dict()}
        ).execute()

    def clear_plan(self) -> None:
        """Delete the plan row."""
        self.client.table("meal_plan").delete().eq("id", _PLAN_ROW_ID).execute()
