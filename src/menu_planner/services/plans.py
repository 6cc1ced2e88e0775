"""Weekly plan assembly and the resolution workflow."""

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime
from threading import RLock
from typing import Protocol

from menu_planner.domain.catalog import Category
from menu_planner.domain.options import CandidateOption, OptionSet
from menu_planner.domain.plans import (
    FailureKind,
    ManualSelection,
    PlanFailure,
    PlanResult,
    WeeklyPlan,
)
from menu_planner.domain.votes import Ballot
from menu_planner.services.catalog import CatalogIndex, CatalogRepository
from menu_planner.services.conflicts import resolve_conflicts
from menu_planner.services.options import OptionSetRepository
from menu_planner.services.selection import select_top
from menu_planner.services.votes import VEGETARIAN_PICKS, BallotRepository, tally

_logger = logging.getLogger(__name__)

PLANNED_DAYS = 4


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


class PlanRepository(Protocol):
    """Persistence interface for the weekly plan."""

    def get_plan(self) -> WeeklyPlan | None:
        """Return the stored plan, if any."""

    def save_plan(self, plan: WeeklyPlan) -> None:
        """Store a plan, replacing any previous one."""

    def clear_plan(self) -> None:
        """Remove the stored plan."""


def assemble_plan(
    meat: CandidateOption,
    fish: CandidateOption,
    vegetarian: Sequence[CandidateOption],
    generated_at: datetime,
) -> PlanResult:
    """Map the four picks onto Monday to Thursday if they are all different."""
    ids = {meat.id, fish.id, *(option.id for option in vegetarian)}
    if len(vegetarian) != VEGETARIAN_PICKS or len(ids) < PLANNED_DAYS:
        return PlanFailure(
            kind=FailureKind.NON_UNIQUE_PLAN,
            message="Each selected meal must be different.",
        )
    return WeeklyPlan(
        monday=meat.name,
        tuesday=fish.name,
        wednesday=vegetarian[0].name,
        thursday=vegetarian[1].name,
        generated_at=generated_at,
    )


def resolve_weekly_plan(
    index: CatalogIndex,
    options: OptionSet,
    ballots: Sequence[Ballot],
    generated_at: datetime,
    *,
    allow_residual_conflict: bool = False,
) -> PlanResult:
    """Collapse ballots into a weekly plan.

    Pure over its inputs: the same catalog, options and ballots always give
    the same result.
    """
    for category in Category:
        if not options.for_category(category):
            return PlanFailure(
                kind=FailureKind.NO_CANDIDATE,
                message=f"No {category.value} options have been set.",
            )

    counts = tally(ballots)
    meat = select_top(options.meat, counts, 1)
    fish = select_top(options.fish, counts, 1)
    vegetarian = select_top(options.vegetarian, counts, VEGETARIAN_PICKS)
    if not meat or not fish:
        return PlanFailure(
            kind=FailureKind.INSUFFICIENT_VOTES,
            message="Could not pick a meat and a fish option.",
        )

    resolved = resolve_conflicts(
        index,
        options.vegetarian,
        counts,
        meat[0],
        fish[0],
        vegetarian,
        allow_residual_conflict=allow_residual_conflict,
    )
    if resolved is None:
        return PlanFailure(
            kind=FailureKind.UNRESOLVABLE_CONFLICT,
            message=(
                "Not enough distinct vegetarian options to avoid serving "
                "a dish twice."
            ),
        )
    return assemble_plan(meat[0], fish[0], resolved, generated_at)


@dataclass
class PlanService:
    """Runs resolution against stored data and persists the outcome."""

    repository: PlanRepository
    catalog_repository: CatalogRepository
    option_repository: OptionSetRepository
    ballot_repository: BallotRepository
    lock: RLock = field(default_factory=RLock)
    clock: Callable[[], datetime] = _utc_now
    allow_residual_conflict: bool = False

    def get_plan(self) -> WeeklyPlan:
        """Return the stored plan or an empty one."""
        return self.repository.get_plan() or WeeklyPlan.empty()

    def generate_plan(self) -> PlanResult:
        """Resolve the current ballots and store the plan on success."""
        with self.lock:
            index = CatalogIndex(self.catalog_repository.get_catalog())
            options = self.option_repository.get_options()
            ballots = self.ballot_repository.list_ballots()
            result = resolve_weekly_plan(
                index,
                options,
                ballots,
                self.clock(),
                allow_residual_conflict=self.allow_residual_conflict,
            )
            return self._store(result, source=f"{len(ballots)} ballots")

    def save_manual_plan(self, selection: ManualSelection) -> PlanResult:
        """Validate an operator's picks and store them as the plan."""
        with self.lock:
            options = self.option_repository.get_options()
            picks = [
                options.find(Category.MEAT, selection.monday_id),
                options.find(Category.FISH, selection.tuesday_id),
                options.find(Category.VEGETARIAN, selection.wednesday_id),
                options.find(Category.VEGETARIAN, selection.thursday_id),
            ]
            if any(pick is None for pick in picks):
                result: PlanResult = PlanFailure(
                    kind=FailureKind.INVALID_SELECTION,
                    message="Selected meals must be part of this week's options.",
                )
            else:
                meat, fish, *vegetarian = picks
                result = assemble_plan(meat, fish, vegetarian, self.clock())
            return self._store(result, source="manual selection")

    def reset(self) -> None:
        """Clear options, ballots and plan. The catalog is kept."""
        with self.lock:
            self.option_repository.clear_options()
            self.ballot_repository.clear_ballots()
            self.repository.clear_plan()
        _logger.info("System reset")

    def _store(self, result: PlanResult, source: str) -> PlanResult:
        if isinstance(result, PlanFailure):
            _logger.warning(
                "Plan not saved (%s): %s: %s",
                source,
                result.kind.value,
                result.message,
            )
            return result
        self.repository.save_plan(result)
        _logger.info("Plan saved from %s", source)
        return result
