"""Pure prerequisite queries over a catalog and a selection."""

from __future__ import annotations

from collections.abc import Sequence

from loguru import logger

from .errors import CycleDetected, InvalidIndex
from .models import Catalog, Module, PrerequisiteStatus


def prerequisite_status(catalog: Catalog, module_id: str, selection: Sequence[str]) -> PrerequisiteStatus:
    """Report which direct prerequisites of a module are missing from the selection.

    Recomputed on every call; ``missing`` keeps the module's declared order.
    """
    module = catalog.module(module_id)
    if not module.prerequisites:
        return PrerequisiteStatus(module_id=module.id, has_prerequisites=False, satisfied=True, missing=())

    selected = set(selection)
    missing = tuple(dep for dep in module.prerequisites if dep not in selected)
    return PrerequisiteStatus(
        module_id=module.id,
        has_prerequisites=True,
        satisfied=not missing,
        missing=missing,
    )


def cascade_order(catalog: Catalog, module_id: str, selection: Sequence[str]) -> list[str]:
    """Return missing transitive prerequisites followed by the module, in insertion order.

    Prerequisites are emitted post-order so each one follows its own missing
    prerequisites. Raises CycleDetected if the walk re-enters its own path.
    """
    visiting: list[str] = []
    placed: set[str] = set()
    order: list[str] = []

    def visit(current: str) -> None:
        if current in placed:
            return
        if current in visiting:
            cycle_start = visiting.index(current)
            cycle_path = tuple(visiting[cycle_start:] + [current])
            logger.error("Catalog prerequisite cycle: {}", " -> ".join(cycle_path))
            raise CycleDetected(cycle_path)

        visiting.append(current)
        for prerequisite in prerequisite_status(catalog, current, selection).missing:
            visit(prerequisite)
        visiting.pop()
        placed.add(current)
        order.append(current)

    visit(module_id)
    return order


def selected_dependents(catalog: Catalog, module_id: str, selection: Sequence[str]) -> tuple[str, ...]:
    """Return selected modules that list module_id as a direct prerequisite."""
    return tuple(
        item for item in selection if item in catalog.modules and module_id in catalog.modules[item].prerequisites
    )


def move_entry(selection: Sequence[str], from_index: int, to_index: int) -> tuple[str, ...]:
    """Relocate one entry, shifting the ones in between."""
    length = len(selection)
    if not (0 <= from_index < length and 0 <= to_index < length):
        raise InvalidIndex(from_index, to_index, length)
    result = list(selection)
    moved = result.pop(from_index)
    result.insert(to_index, moved)
    return tuple(result)


def ordering_violations(catalog: Catalog, selection: Sequence[str]) -> tuple[tuple[str, str], ...]:
    """Return (dependent, prerequisite) pairs where the dependent is positioned first."""
    positions = {module_id: index for index, module_id in enumerate(selection)}
    violations: list[tuple[str, str]] = []
    for module_id in selection:
        module = catalog.modules.get(module_id)
        if module is None:
            continue
        for prerequisite in module.prerequisites:
            position = positions.get(prerequisite)
            if position is not None and position > positions[module_id]:
                violations.append((module_id, prerequisite))
    return tuple(violations)


def available_modules(catalog: Catalog, selection: Sequence[str]) -> list[Module]:
    """Return unselected modules whose prerequisites are all selected."""
    selected = set(selection)
    return [
        module
        for module in catalog.ordered_modules()
        if module.id not in selected and all(dep in selected for dep in module.prerequisites)
    ]


def suggested_order(catalog: Catalog, selection: Sequence[str]) -> tuple[str, ...]:
    """Reorder the selection so every selected prerequisite precedes its dependents.

    Walks the selection in its current order and pulls each prerequisite ahead
    of its first dependent. Only a suggestion; nothing applies it automatically.
    """
    selected = set(selection)
    visiting: list[str] = []
    placed: set[str] = set()
    order: list[str] = []

    def visit(current: str) -> None:
        if current in placed:
            return
        if current in visiting:
            cycle_path = tuple(visiting[visiting.index(current) :] + [current])
            logger.error("Catalog prerequisite cycle: {}", " -> ".join(cycle_path))
            raise CycleDetected(cycle_path)

        visiting.append(current)
        module = catalog.modules.get(current)
        for prerequisite in module.prerequisites if module is not None else ():
            if prerequisite in selected:
                visit(prerequisite)
        visiting.pop()
        placed.add(current)
        order.append(current)

    for module_id in selection:
        visit(module_id)
    return tuple(order)
