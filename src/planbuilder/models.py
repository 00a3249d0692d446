"""Core domain models for project plan assembly."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .errors import UnknownModule, UnknownTemplate


class Category(Enum):
    """Closed set of catalog groupings, valued by display label."""

    BRAND_STRATEGY = "Brand Strategy"
    VISUAL_IDENTITY = "Visual Identity"
    DIGITAL_MARKETING = "Digital Marketing"
    IMPLEMENTATION = "Implementation"


@dataclass(frozen=True)
class Module:
    """One reusable deliverable module."""

    id: str
    name: str
    category: Category
    description: str
    size: int
    prerequisites: tuple[str, ...] = ()
    sort_order: int = 0


@dataclass(frozen=True)
class Template:
    """Pre-curated module list that replaces a selection wholesale."""

    id: str
    name: str
    description: str
    module_ids: tuple[str, ...]


@dataclass(frozen=True)
class PrerequisiteStatus:
    """Whether a module's direct prerequisites are present in a selection."""

    module_id: str
    has_prerequisites: bool
    satisfied: bool
    missing: tuple[str, ...]


@dataclass(frozen=True)
class PlanSummary:
    """Totals and ordering diagnostics for a selection."""

    module_count: int
    total_size: int
    ordering_violations: tuple[tuple[str, str], ...]


@dataclass(frozen=True)
class Catalog:
    """Read-only module catalog plus template registry for one session."""

    modules: dict[str, Module]
    templates: dict[str, Template]

    def module(self, module_id: str) -> Module:
        """Return module by id or raise UnknownModule."""
        try:
            return self.modules[module_id]
        except KeyError:
            raise UnknownModule(module_id) from None

    def template(self, template_id: str) -> Template:
        """Return template by id or raise UnknownTemplate."""
        try:
            return self.templates[template_id]
        except KeyError:
            raise UnknownTemplate(template_id) from None

    def ordered_modules(self) -> list[Module]:
        """Return modules in catalog display order."""
        return sorted(self.modules.values(), key=lambda item: (item.sort_order, item.id))

    def modules_by_category(self) -> dict[Category, list[Module]]:
        """Group modules by category, in enum declaration order."""
        groups: dict[Category, list[Module]] = {category: [] for category in Category}
        for module in self.ordered_modules():
            groups[module.category].append(module)
        return {category: modules for category, modules in groups.items() if modules}
