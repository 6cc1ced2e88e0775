"""Guest ballots, validation, and vote tallying."""

import logging
from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from threading import RLock
from typing import Protocol

from menu_planner.domain.catalog import Category
from menu_planner.domain.options import OptionSet
from menu_planner.domain.votes import Ballot, VoteTally
from menu_planner.services.options import OptionSetRepository
from menu_planner.services.selection import rank_by_tally

_logger = logging.getLogger(__name__)

VEGETARIAN_PICKS = 2


class BallotRejectedError(ValueError):
    """Raised when a submitted ballot is not well formed."""


class BallotRepository(Protocol):
    """Persistence interface for guest ballots."""

    def list_ballots(self) -> list[Ballot]:
        """Return every stored ballot in submission order."""

    def add_ballot(self, ballot: Ballot) -> Ballot:
        """Append a ballot and return it as stored."""

    def clear_ballots(self) -> None:
        """Remove every stored ballot."""


@dataclass(frozen=True)
class OptionCount:
    """Vote count for one option, used for result charts."""

    option_id: str
    name: str
    votes: int


def tally(ballots: Iterable[Ballot]) -> VoteTally:
    """Count votes per option id.

    A ballot adds at most one vote to any option, even if its vegetarian
    pair repeats an id. Missing ids are skipped.
    """
    counts: Counter[str] = Counter()
    for ballot in ballots:
        picked = {ballot.meat_option_id, ballot.fish_option_id}
        picked.update(ballot.vegetarian_option_ids)
        counts.update(option_id for option_id in picked if option_id)
    return dict(counts)


@dataclass
class VoteService:
    """Application service for ballot submission and vote results."""

    repository: BallotRepository
    option_repository: OptionSetRepository
    lock: RLock = field(default_factory=RLock)

    def list_ballots(self) -> list[Ballot]:
        """Return all ballots."""
        return self.repository.list_ballots()

    def submit_ballot(
        self,
        guest_name: str,
        meat_option_id: str | None,
        fish_option_id: str | None,
        vegetarian_option_ids: list[str],
    ) -> Ballot:
        """Validate and append a guest ballot."""
        name = guest_name.strip()
        if not name:
            raise BallotRejectedError("Please enter your name.")
        with self.lock:
            options = self.option_repository.get_options()
            if not options.is_complete():
                raise BallotRejectedError("Weekly options have not been set yet.")
            if not _is_listed(options, Category.MEAT, meat_option_id):
                raise BallotRejectedError("Please select one meat option.")
            if not _is_listed(options, Category.FISH, fish_option_id):
                raise BallotRejectedError("Please select one fish option.")
            unique_veg = tuple(dict.fromkeys(vegetarian_option_ids))
            if len(vegetarian_option_ids) != VEGETARIAN_PICKS:
                raise BallotRejectedError(
                    "Please select exactly two vegetarian options."
                )
            if len(unique_veg) != VEGETARIAN_PICKS:
                raise BallotRejectedError(
                    "Please select two different vegetarian options."
                )
            for option_id in unique_veg:
                if options.find(Category.VEGETARIAN, option_id) is None:
                    raise BallotRejectedError(
                        f"Unknown vegetarian option: {option_id!r}"
                    )
            existing = self.repository.list_ballots()
            if any(ballot.guest_name == name for ballot in existing):
                raise BallotRejectedError(
                    "A vote with this name already exists. "
                    "Please use a different name."
                )
            ballot = self.repository.add_ballot(
                Ballot(
                    guest_name=name,
                    meat_option_id=meat_option_id,
                    fish_option_id=fish_option_id,
                    vegetarian_option_ids=unique_veg,
                    voted_at=datetime.now(tz=UTC),
                )
            )
        _logger.info("Ballot recorded: guest=%s", name)
        return ballot

    def vote_counts(self) -> dict[Category, list[OptionCount]]:
        """Return per-category counts ranked the way selection ranks them."""
        options = self.option_repository.get_options()
        counts = tally(self.repository.list_ballots())
        return {
            category: [
                OptionCount(
                    option_id=option.id,
                    name=option.name,
                    votes=counts.get(option.id, 0),
                )
                for option in rank_by_tally(options.for_category(category), counts)
            ]
            for category in Category
        }


def _is_listed(options: OptionSet, category: Category, option_id: str | None) -> bool:
    return bool(option_id) and options.find(category, option_id) is not None
