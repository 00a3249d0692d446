"""Selection engine: the ordered set of modules chosen for one plan."""

from __future__ import annotations

from collections.abc import Iterable

from loguru import logger

from .errors import DependencyConflict, UnknownModule
from .models import Catalog, PrerequisiteStatus
from .resolver import cascade_order, move_entry, prerequisite_status, selected_dependents


class SelectionEngine:
    """Owns one mutable selection and applies cascade and guard rules to it.

    Every operation computes the complete new selection before assigning it, so
    a raised error always leaves the previous selection in place.
    """

    def __init__(self, catalog: Catalog, initial: Iterable[str] = ()) -> None:
        """Initialize engine over a catalog with an optional starting selection."""
        self.catalog = catalog
        seeded = tuple(initial)
        for module_id in seeded:
            self.catalog.module(module_id)
        if len(set(seeded)) != len(seeded):
            raise ValueError("Initial selection contains duplicate module ids.")
        self._selection: tuple[str, ...] = seeded

    @property
    def selection(self) -> tuple[str, ...]:
        """Current ordered selection."""
        return self._selection

    def __contains__(self, module_id: object) -> bool:
        return module_id in self._selection

    def __len__(self) -> int:
        return len(self._selection)

    def add(self, module_id: str) -> tuple[str, ...]:
        """Add a module, inserting missing prerequisites ahead of it."""
        self.catalog.module(module_id)
        if module_id in self._selection:
            return self._selection

        inserted = cascade_order(self.catalog, module_id, self._selection)
        if len(inserted) > 1:
            logger.debug("Adding {} with prerequisites {}", module_id, inserted[:-1])
        else:
            logger.debug("Adding {}", module_id)
        self._selection = self._selection + tuple(inserted)
        return self._selection

    def remove(self, module_id: str) -> tuple[str, ...]:
        """Remove a module unless a selected module depends on it."""
        if module_id not in self._selection:
            raise UnknownModule(module_id)

        blocking = selected_dependents(self.catalog, module_id, self._selection)
        if blocking:
            logger.info("Refused removal of {}; required by {}", module_id, ", ".join(blocking))
            raise DependencyConflict(module_id, blocking)

        logger.debug("Removing {}", module_id)
        self._selection = tuple(item for item in self._selection if item != module_id)
        return self._selection

    def toggle(self, module_id: str) -> tuple[str, ...]:
        """Remove module if selected, otherwise add it."""
        if module_id in self._selection:
            return self.remove(module_id)
        return self.add(module_id)

    def move(self, from_index: int, to_index: int) -> tuple[str, ...]:
        """Reposition one entry without regard to prerequisite edges."""
        self._selection = move_entry(self._selection, from_index, to_index)
        logger.debug("Moved position {} to {}", from_index, to_index)
        return self._selection

    def load_template(self, template_id: str) -> tuple[str, ...]:
        """Replace the selection with a template's module list, verbatim."""
        template = self.catalog.template(template_id)
        unknown = [module_id for module_id in template.module_ids if module_id not in self.catalog.modules]
        if unknown:
            raise ValueError(f"Template '{template.id}' references unknown modules: {', '.join(unknown)}")
        if len(set(template.module_ids)) != len(template.module_ids):
            raise ValueError(f"Template '{template.id}' lists a module more than once.")
        logger.debug("Loading template {} ({} modules)", template.id, len(template.module_ids))
        self._selection = template.module_ids
        return self._selection

    def status(self, module_id: str) -> PrerequisiteStatus:
        """Prerequisite status of a module against the current selection."""
        return prerequisite_status(self.catalog, module_id, self._selection)

    def finalize(self) -> list[str]:
        """Return the ordered module ids for handoff."""
        return list(self._selection)
