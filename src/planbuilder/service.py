"""Application service for one plan-building session."""

from __future__ import annotations

from collections.abc import Callable
from typing import TypeVar

from loguru import logger

from .catalog_loader import load_catalog, load_catalog_from_dir
from .models import Catalog, Module, PlanSummary, PrerequisiteStatus
from .resolver import available_modules, ordering_violations, suggested_order
from .selection import SelectionEngine
from .settings import Settings

T = TypeVar("T")


def catalog_for(settings: Settings) -> Catalog:
    """Load the configured catalog directory, or the bundled content."""
    if settings.catalog_dir is not None:
        return load_catalog_from_dir(settings.catalog_dir)
    return load_catalog()


class PlanService:
    """Coordinates catalog, selection engine, and commit handoff."""

    def __init__(self, catalog: Catalog | None = None, settings: Settings | None = None) -> None:
        """Initialize service with an explicit catalog or one resolved from settings."""
        if catalog is None:
            catalog = catalog_for(settings or Settings())
        self.catalog = catalog
        self.engine = SelectionEngine(catalog)

    @property
    def selection(self) -> tuple[str, ...]:
        """Current ordered selection."""
        return self.engine.selection

    def toggle(self, module_id: str) -> tuple[str, ...]:
        """Toggle module membership."""
        return self.engine.toggle(module_id)

    def move(self, from_index: int, to_index: int) -> tuple[str, ...]:
        """Reposition one selected module."""
        return self.engine.move(from_index, to_index)

    def load_template(self, template_id: str) -> tuple[str, ...]:
        """Replace selection with a template."""
        return self.engine.load_template(template_id)

    def status(self, module_id: str) -> PrerequisiteStatus:
        """Prerequisite status for display hints."""
        return self.engine.status(module_id)

    def available(self) -> list[Module]:
        """Unselected modules that can be added without a cascade."""
        return available_modules(self.catalog, self.engine.selection)

    def summary(self) -> PlanSummary:
        """Return module count, total size, and out-of-order prerequisite pairs."""
        selection = self.engine.selection
        return PlanSummary(
            module_count=len(selection),
            total_size=sum(self.catalog.modules[module_id].size for module_id in selection),
            ordering_violations=ordering_violations(self.catalog, selection),
        )

    def suggested_order(self) -> tuple[str, ...]:
        """Prerequisite-respecting reordering of the current selection."""
        return suggested_order(self.catalog, self.engine.selection)

    def finalize(self) -> list[str]:
        """Return the ordered module ids."""
        return self.engine.finalize()

    def commit(self, submit: Callable[[list[str]], T]) -> T:
        """Hand the finalized plan to the project-creation collaborator."""
        plan = self.finalize()
        logger.info("Committing plan with {} modules", len(plan))
        return submit(plan)

    def reset(self) -> None:
        """Discard the current selection."""
        self.engine = SelectionEngine(self.catalog)
