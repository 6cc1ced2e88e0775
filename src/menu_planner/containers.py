"""Dependency container wiring for the application."""

from dataclasses import dataclass
from threading import RLock

from supabase import create_client

from menu_planner.adapters.supabase_ballot_repository import SupabaseBallotRepository
from menu_planner.adapters.supabase_catalog_repository import (
    SupabaseCatalogRepository,
)
from menu_planner.adapters.supabase_option_repository import (
    SupabaseOptionSetRepository,
)
from menu_planner.adapters.supabase_plan_repository import SupabasePlanRepository
from menu_planner.config import Settings
from menu_planner.services.catalog import CatalogService
from menu_planner.services.options import OptionService
from menu_planner.services.plans import PlanService
from menu_planner.services.votes import VoteService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    catalog_service: CatalogService
    option_service: OptionService
    vote_service: VoteService
    plan_service: PlanService


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    catalog_repository = SupabaseCatalogRepository(supabase_client)
    option_repository = SupabaseOptionSetRepository(supabase_client)
    ballot_repository = SupabaseBallotRepository(supabase_client)
    plan_repository = SupabasePlanRepository(supabase_client)
    # One writer at a time across ballots, options, catalog and plan runs.
    write_lock = RLock()
    return AppContainer(
        settings=resolved_settings,
        catalog_service=CatalogService(
            repository=catalog_repository,
            option_repository=option_repository,
            ballot_repository=ballot_repository,
            plan_repository=plan_repository,
            lock=write_lock,
        ),
        option_service=OptionService(
            repository=option_repository,
            catalog_repository=catalog_repository,
            lock=write_lock,
        ),
        vote_service=VoteService(
            repository=ballot_repository,
            option_repository=option_repository,
            lock=write_lock,
        ),
        plan_service=PlanService(
            repository=plan_repository,
            catalog_repository=catalog_repository,
            option_repository=option_repository,
            ballot_repository=ballot_repository,
            lock=write_lock,
            allow_residual_conflict=resolved_settings.allow_residual_conflict,
        ),
    )
