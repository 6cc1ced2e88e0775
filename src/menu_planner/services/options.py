"""Services for the restaurant's weekly option set."""

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime
from threading import RLock
from typing import Protocol

from menu_planner.domain.catalog import Category
from menu_planner.domain.options import CandidateOption, OptionSet
from menu_planner.services.catalog import CatalogIndex, CatalogRepository

_logger = logging.getLogger(__name__)


class OptionSetError(ValueError):
    """Raised when an option set does not match the catalog."""


class OptionSetRepository(Protocol):
    """Persistence interface for the weekly option set."""

    def get_options(self) -> OptionSet:
        """Return the stored option set."""

    def replace_options(self, options: OptionSet) -> None:
        """Replace the stored option set."""

    def clear_options(self) -> None:
        """Remove every stored option."""


@dataclass
class OptionService:
    """Application service for the weekly candidate lists."""

    repository: OptionSetRepository
    catalog_repository: CatalogRepository
    lock: RLock = field(default_factory=RLock)

    def get_options(self) -> OptionSet:
        """Return the current option set."""
        return self.repository.get_options()

    def save_options(
        self,
        meat: list[dict[str, object]],
        fish: list[dict[str, object]],
        vegetarian: list[dict[str, object]],
    ) -> OptionSet:
        """Validate the candidate lists against the catalog and store them.

        A listed combo's vegetarian counterpart joins the vegetarian list.
        """
        with self.lock:
            index = CatalogIndex(self.catalog_repository.get_catalog())
            meat_options = _parse_options(meat, Category.MEAT, index)
            fish_options = _parse_options(fish, Category.FISH, index)
            vegetarian_options = _parse_options(vegetarian, Category.VEGETARIAN, index)
            for listed in [*meat_options, *fish_options]:
                counterpart = index.vegetarian_counterpart(listed.id)
                if counterpart is not None:
                    vegetarian_options.append(
                        CandidateOption(id=counterpart.id, name=counterpart.name)
                    )
            options = OptionSet.build(
                meat=meat_options,
                fish=fish_options,
                vegetarian=vegetarian_options,
                last_updated=datetime.now(tz=UTC).isoformat(),
            )
            self.repository.replace_options(options)
        _logger.info(
            "Weekly options saved: meat=%s fish=%s vegetarian=%s",
            len(options.meat),
            len(options.fish),
            len(options.vegetarian),
        )
        return options


def _parse_options(
    raw_options: list[dict[str, object]], category: Category, index: CatalogIndex
) -> list[CandidateOption]:
    parsed = []
    for raw in raw_options:
        option_id = str(raw.get("id") or "")
        entry = index.resolve(option_id)
        if entry is None:
            raise OptionSetError(f"Unknown option id: {option_id!r}")
        if entry.category is not category:
            raise OptionSetError(
                f"Option {option_id!r} does not belong to the {category.value} list"
            )
        name = raw.get("name") or entry.name
        parsed.append(CandidateOption(id=option_id, name=str(name)))
    return parsed
