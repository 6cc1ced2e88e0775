"""Supabase-backed guest ballot repository."""

from dataclasses import dataclass
from datetime import datetime

from supabase import Client

from menu_planner.domain.votes import Ballot
from menu_planner.services.votes import BallotRepository


@dataclass
class SupabaseBallotRepository(BallotRepository):
    """Supabase implementation for the guest_votes table."""

    client: Client

    def list_ballots(self) -> list[Ballot]:
        """Return ballots ordered by submission time."""
        response = (
            self.client.table("guest_votes").select("*").order("voted_at").execute()
        )
        return [_parse_ballot(row) for row in response.data or []]

    def add_ballot(self, ballot: Ballot) -> Ballot:
        """Insert a ballot row and return it."""
        vegetarian = list(ballot.vegetarian_option_ids) + [None, None]
        response = (
            self.client.table("guest_votes")
            .insert(
                {
                    "guest_name": ballot.guest_name,
                    "meat_option_id": ballot.meat_option_id,
                    "fish_option_id": ballot.fish_option_id,
                    "veg_option_1_id": vegetarian[0],
                    "veg_option_2_id": vegetarian[1],
                    "voted_at": ballot.voted_at.isoformat()
                    if ballot.voted_at
                    else None,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to store guest vote")
        return _parse_ballot(response.data[0])

    def clear_ballots(self) -> None:
        """Delete every stored ballot."""
        self.client.table("guest_votes").delete().neq("guest_name", "").execute()


def _parse_ballot(row: dict[str, object]) -> Ballot:
    """Parse a guest_votes row into a domain model."""
    voted_raw = row.get("voted_at")
    return Ballot(
        guest_name=str(row.get("guest_name", "")),
        meat_option_id=row.get("meat_option_id"),
        fish_option_id=row.get("fish_option_id"),
        vegetarian_option_ids=tuple(
            value
            for value in (row.get("veg_option_1_id"), row.get("veg_option_2_id"))
            if value
        ),
        voted_at=datetime.fromisoformat(voted_raw)
        if isinstance(voted_raw, str) and voted_raw
        else None,
    )
