"""Most-popular selection over vote tallies."""

from collections.abc import Iterable, Mapping

from menu_planner.domain.options import CandidateOption


def rank_by_tally(
    options: Iterable[CandidateOption], tally: Mapping[str, int]
) -> list[CandidateOption]:
    """Order options by vote count, highest first.

    ``sorted`` is stable, so options with equal counts keep the order the
    restaurant listed them in.
    """
    return sorted(options, key=lambda option: tally.get(option.id, 0), reverse=True)


def select_top(
    options: Iterable[CandidateOption], tally: Mapping[str, int], n: int
) -> list[CandidateOption]:
    """Return the ``n`` most voted options, or fewer if the list is short."""
    return rank_by_tally(options, tally)[:n]
