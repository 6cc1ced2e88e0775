"""Domain models for the weekly candidate options."""

from collections.abc import Iterable
from dataclasses import dataclass

from menu_planner.domain.catalog import Category


@dataclass(frozen=True)
class CandidateOption:
    """A selectable option: a bare vegetarian dish or a combo."""

    id: str
    name: str


@dataclass(frozen=True)
class OptionSet:
    """The restaurant's candidate options for the week."""

    meat: tuple[CandidateOption, ...] = ()
    fish: tuple[CandidateOption, ...] = ()
    vegetarian: tuple[CandidateOption, ...] = ()
    last_updated: str | None = None

    @classmethod
    def build(
        cls,
        meat: Iterable[CandidateOption],
        fish: Iterable[CandidateOption],
        vegetarian: Iterable[CandidateOption],
        last_updated: str | None = None,
    ) -> "OptionSet":
        """Create an option set with every category deduplicated by id."""
        return cls(
            meat=unique_by_id(meat),
            fish=unique_by_id(fish),
            vegetarian=unique_by_id(vegetarian),
            last_updated=last_updated,
        )

    def for_category(self, category: Category) -> tuple[CandidateOption, ...]:
        """Return the options listed under a category."""
        if category is Category.MEAT:
            return self.meat
        if category is Category.FISH:
            return self.fish
        return self.vegetarian

    def find(self, category: Category, option_id: str) -> CandidateOption | None:
        """Return the option with this id in a category, if listed."""
        for option in self.for_category(category):
            if option.id == option_id:
                return option
        return None

    def is_complete(self) -> bool:
        """Return true when every category has at least one option."""
        return bool(self.meat and self.fish and self.vegetarian)


def unique_by_id(options: Iterable[CandidateOption]) -> tuple[CandidateOption, ...]:
    """Drop repeated ids, keeping the first occurrence in order."""
    seen: set[str] = set()
    unique = []
    for option in options:
        if option.id in seen:
            continue
        seen.add(option.id)
        unique.append(option)
    return tuple(unique)
