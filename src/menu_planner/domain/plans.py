"""Domain models for the weekly plan and resolution failures."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


@dataclass(frozen=True)
class WeeklyPlan:
    """The planned dish name per weekday. Friday is always leftovers."""

    monday: str | None
    tuesday: str | None
    wednesday: str | None
    thursday: str | None
    friday: None = None
    generated_at: datetime | None = None

    @classmethod
    def empty(cls) -> "WeeklyPlan":
        """Return a plan with nothing assigned."""
        return cls(monday=None, tuesday=None, wednesday=None, thursday=None)

    def to_dict(self) -> dict[str, object]:
        """Serialize the plan to its external record shape."""
        return {
            "monday": self.monday,
            "tuesday": self.tuesday,
            "wednesday": self.wednesday,
            "thursday": self.thursday,
            "friday": None,
            "generated_at": self.generated_at.isoformat()
            if self.generated_at
            else None,
        }


class FailureKind(Enum):
    """Reasons a resolution run can stop without a plan."""

    NO_CANDIDATE = "NoCandidate"
    INSUFFICIENT_VOTES = "InsufficientVotes"
    UNRESOLVABLE_CONFLICT = "UnresolvableConflict"
    NON_UNIQUE_PLAN = "NonUniquePlan"
    INVALID_SELECTION = "InvalidSelection"


@dataclass(frozen=True)
class PlanFailure:
    """A terminal, reported failure of one resolution run."""

    kind: FailureKind
    message: str


@dataclass(frozen=True)
class ManualSelection:
    """Operator-chosen option ids for Monday to Thursday."""

    monday_id: str
    tuesday_id: str
    wednesday_id: str
    thursday_id: str


PlanResult = WeeklyPlan | PlanFailure
