"""Shared test fixtures."""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from threading import RLock

import pytest

from menu_planner.config import Settings
from menu_planner.containers import AppContainer
from menu_planner.domain.catalog import Catalog, Category, Combo, Dish
from menu_planner.domain.options import CandidateOption, OptionSet
from menu_planner.domain.plans import WeeklyPlan
from menu_planner.domain.votes import Ballot
from menu_planner.services.catalog import CatalogRepository, CatalogService
from menu_planner.services.options import OptionService, OptionSetRepository
from menu_planner.services.plans import PlanRepository, PlanService
from menu_planner.services.votes import BallotRepository, VoteService

FIXED_NOW = datetime(2026, 10, 19, 9, 30, tzinfo=UTC)

BURGER = Dish(id="burger", name="Burger", category=Category.MEAT)
SIDE_SALAD = Dish(id="side_salad", name="Side Salad", category=Category.VEGETARIAN)
SCHNITZEL = Dish(id="schnitzel", name="Schnitzel", category=Category.MEAT)
FRIES = Dish(id="fries", name="Fries", category=Category.VEGETARIAN, vegan=True)
SALMON = Dish(id="salmon", name="Salmon", category=Category.FISH)
POTATOES = Dish(id="potatoes", name="Potatoes", category=Category.VEGETARIAN)
COD = Dish(id="cod", name="Cod", category=Category.FISH)
CURRY = Dish(id="curry", name="Curry", category=Category.VEGETARIAN, vegan=True)
RICE_BOWL = Dish(id="rice_bowl", name="Rice Bowl", category=Category.VEGETARIAN)
LENTIL_SOUP = Dish(id="lentil_soup", name="Lentil Soup", category=Category.VEGETARIAN)

BURGER_COMBO = Combo(
    id="burger_combo", name="Burger Combo", dishes=(BURGER, SIDE_SALAD)
)
SCHNITZEL_COMBO = Combo(
    id="schnitzel_combo", name="Schnitzel Combo", dishes=(SCHNITZEL, FRIES)
)
SALMON_COMBO = Combo(id="salmon_combo", name="Salmon Combo", dishes=(SALMON, POTATOES))
COD_COMBO = Combo(id="cod_combo", name="Cod Combo", dishes=(COD,))


def option(entry: Dish | Combo) -> CandidateOption:
    return CandidateOption(id=entry.id, name=entry.name)


def make_ballot(
    guest_name: str,
    meat: str | None,
    fish: str | None,
    vegetarian: tuple[str | None, ...],
) -> Ballot:
    return Ballot(
        guest_name=guest_name,
        meat_option_id=meat,
        fish_option_id=fish,
        vegetarian_option_ids=vegetarian,
    )


def sample_catalog() -> Catalog:
    return Catalog(
        dishes=(CURRY, RICE_BOWL, LENTIL_SOUP),
        combos=(BURGER_COMBO, SCHNITZEL_COMBO, SALMON_COMBO, COD_COMBO),
    )


def sample_options() -> OptionSet:
    return OptionSet.build(
        meat=[option(BURGER_COMBO), option(SCHNITZEL_COMBO)],
        fish=[option(SALMON_COMBO), option(COD_COMBO)],
        vegetarian=[option(SIDE_SALAD), option(CURRY), option(RICE_BOWL)],
    )


def sample_ballots() -> list[Ballot]:
    """Burger wins meat; Side Salad and Curry lead the vegetarian vote."""
    return [
        make_ballot("Ada", "burger_combo", "salmon_combo", ("side_salad", "curry")),
        make_ballot("Ben", "burger_combo", "salmon_combo", ("side_salad", "curry")),
        make_ballot("Cleo", "burger_combo", "cod_combo", ("side_salad", "rice_bowl")),
        make_ballot("Dev", "schnitzel_combo", "cod_combo", ("curry", "rice_bowl")),
    ]


@dataclass
class InMemoryCatalogRepository(CatalogRepository):
    """In-memory catalog repository for tests."""

    catalog: Catalog = field(default_factory=Catalog)

    def get_catalog(self) -> Catalog:
        return self.catalog

    def replace_catalog(self, catalog: Catalog) -> None:
        self.catalog = catalog


@dataclass
class InMemoryOptionSetRepository(OptionSetRepository):
    """In-memory option set repository for tests."""

    options: OptionSet = field(default_factory=OptionSet)

    def get_options(self) -> OptionSet:
        return self.options

    def replace_options(self, options: OptionSet) -> None:
        self.options = options

    def clear_options(self) -> None:
        self.options = OptionSet()


@dataclass
class InMemoryBallotRepository(BallotRepository):
    """In-memory ballot repository for tests."""

    ballots: list[Ballot] = field(default_factory=list)

    def list_ballots(self) -> list[Ballot]:
        return list(self.ballots)

    def add_ballot(self, ballot: Ballot) -> Ballot:
        self.ballots.append(ballot)
        return ballot

    def clear_ballots(self) -> None:
        self.ballots.clear()


@dataclass
class InMemoryPlanRepository(PlanRepository):
    """In-memory plan repository for tests."""

    plan: WeeklyPlan | None = None
    saves: int = 0

    def get_plan(self) -> WeeklyPlan | None:
        return self.plan

    def save_plan(self, plan: WeeklyPlan) -> None:
        self.plan = plan
        self.saves += 1

    def clear_plan(self) -> None:
        self.plan = None


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="header.payload.signature",
    )


@pytest.fixture
def catalog_repository() -> InMemoryCatalogRepository:
    return InMemoryCatalogRepository(sample_catalog())


@pytest.fixture
def option_repository() -> InMemoryOptionSetRepository:
    return InMemoryOptionSetRepository(sample_options())


@pytest.fixture
def ballot_repository() -> InMemoryBallotRepository:
    return InMemoryBallotRepository()


@pytest.fixture
def plan_repository() -> InMemoryPlanRepository:
    return InMemoryPlanRepository()


@pytest.fixture
def container(
    settings: Settings,
    catalog_repository: InMemoryCatalogRepository,
    option_repository: InMemoryOptionSetRepository,
    ballot_repository: InMemoryBallotRepository,
    plan_repository: InMemoryPlanRepository,
) -> AppContainer:
    lock = RLock()
    return AppContainer(
        settings=settings,
        catalog_service=CatalogService(
            repository=catalog_repository,
            option_repository=option_repository,
            ballot_repository=ballot_repository,
            plan_repository=plan_repository,
            lock=lock,
        ),
        option_service=OptionService(
            repository=option_repository,
            catalog_repository=catalog_repository,
            lock=lock,
        ),
        vote_service=VoteService(
            repository=ballot_repository,
            option_repository=option_repository,
            lock=lock,
        ),
        plan_service=PlanService(
            repository=plan_repository,
            catalog_repository=catalog_repository,
            option_repository=option_repository,
            ballot_repository=ballot_repository,
            lock=lock,
            clock=lambda: FIXED_NOW,
        ),
    )
