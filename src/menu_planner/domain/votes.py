"""Domain models for guest voting."""

from dataclasses import dataclass
from datetime import datetime

VoteTally = dict[str, int]


@dataclass(frozen=True)
class Ballot:
    """One guest's vote for the week."""

    guest_name: str
    meat_option_id: str | None
    fish_option_id: str | None
    vegetarian_option_ids: tuple[str | None, ...]
    voted_at: datetime | None = None
