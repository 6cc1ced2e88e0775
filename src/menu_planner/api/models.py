"""Pydantic models for API request payloads."""

from pydantic import BaseModel, Field


class OptionPayload(BaseModel):
    """One candidate option as sent by the restaurant."""

    id: str
    name: str | None = None


class WeeklyOptionsPayload(BaseModel):
    """The restaurant's option lists."""

    meat_options: list[OptionPayload] = Field(default_factory=list)
    fish_options: list[OptionPayload] = Field(default_factory=list)
    vegetarian_options: list[OptionPayload] = Field(default_factory=list)


class BallotPayload(BaseModel):
    """A guest's vote."""

    guest_name: str
    meat_option_id: str | None = None
    fish_option_id: str | None = None
    vegetarian_option_ids: list[str] = Field(default_factory=list)


class ManualPlanPayload(BaseModel):
    """Operator-chosen option ids for Monday to Thursday."""

    monday: str
    tuesday: str
    wednesday: str
    thursday: str
