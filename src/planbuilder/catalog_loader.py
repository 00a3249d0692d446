"""Load the module catalog and template registry from JSON resources."""

from __future__ import annotations

import json
from collections.abc import Iterable
from importlib import resources
from importlib.resources.abc import Traversable
from pathlib import Path
from typing import Any

from loguru import logger

from .models import Catalog, Category, Module, Template

CONTENT_PACKAGE = "planbuilder.content"
MODULES_DIR = "modules"
TEMPLATES_DIR = "templates"


def _category_from_label(module_id: str, label: object) -> Category:
    """Map a JSON category label onto the closed Category set."""
    try:
        return Category(str(label))
    except ValueError:
        raise ValueError(f"Module '{module_id}' has unknown category '{label}'.") from None


def _module_from_dict(raw: dict[str, Any]) -> Module:
    """Build a module from raw JSON content."""
    module_id = str(raw["id"])
    size = raw.get("size", 0)
    if isinstance(size, bool) or not isinstance(size, int):
        raise ValueError(f"Module '{module_id}' has non-integer size {size!r}.")
    if size <= 0:
        raise ValueError(f"Module '{module_id}' must have a positive size.")

    prerequisites: list[str] = []
    for item in raw.get("prerequisites", []):
        dep = str(item)
        if dep not in prerequisites:
            prerequisites.append(dep)

    return Module(
        id=module_id,
        name=str(raw.get("name", module_id)),
        category=_category_from_label(module_id, raw.get("category")),
        description=str(raw.get("description", "")),
        size=size,
        prerequisites=tuple(prerequisites),
        sort_order=int(raw.get("sort_order", 0)),
    )


def _template_from_dict(raw: dict[str, Any]) -> Template:
    """Build a template from raw JSON content."""
    template_id = str(raw["id"])
    module_ids = tuple(str(item) for item in raw.get("module_ids", []))
    if len(set(module_ids)) != len(module_ids):
        raise ValueError(f"Template '{template_id}' lists a module more than once.")
    return Template(
        id=template_id,
        name=str(raw.get("name", template_id)),
        description=str(raw.get("description", "")),
        module_ids=module_ids,
    )


def load_catalog() -> Catalog:
    """Load the bundled catalog."""
    root = resources.files(CONTENT_PACKAGE)
    return _build_catalog(
        _json_entries(root.joinpath(MODULES_DIR).iterdir()),
        _json_entries(root.joinpath(TEMPLATES_DIR).iterdir()),
    )


def load_catalog_from_dir(path: Path) -> Catalog:
    """Load a catalog from a directory holding modules/ and templates/ subdirectories."""
    modules_dir = path / MODULES_DIR
    if not modules_dir.is_dir():
        raise ValueError(f"Catalog directory '{path}' has no '{MODULES_DIR}' folder.")
    templates_dir = path / TEMPLATES_DIR
    template_files = templates_dir.glob("*.json") if templates_dir.is_dir() else []
    return _build_catalog(_json_entries(modules_dir.glob("*.json")), _json_entries(template_files))


def _json_entries(entries: Iterable[Traversable | Path]) -> list[dict[str, Any]]:
    """Read JSON objects from entries in stable name order."""
    payloads: list[dict[str, Any]] = []
    for entry in sorted(entries, key=lambda item: item.name):
        if entry.name.endswith(".json"):
            payloads.append(json.loads(entry.read_text(encoding="utf-8-sig")))
    return payloads


def _build_catalog(module_payloads: list[dict[str, Any]], template_payloads: list[dict[str, Any]]) -> Catalog:
    modules: dict[str, Module] = {}
    for raw in module_payloads:
        module = _module_from_dict(raw)
        if module.id in modules:
            raise ValueError(f"Duplicate module id: {module.id}")
        modules[module.id] = module
    _validate_module_dependencies(modules)

    templates: dict[str, Template] = {}
    for raw in template_payloads:
        template = _template_from_dict(raw)
        if template.id in templates:
            raise ValueError(f"Duplicate template id: {template.id}")
        templates[template.id] = template
    _validate_template_modules(modules, templates)

    logger.debug("Loaded catalog with {} modules and {} templates", len(modules), len(templates))
    return Catalog(modules=modules, templates=templates)


def _validate_module_dependencies(modules: dict[str, Module]) -> None:
    """Validate prerequisites exist and dependency graph has no cycles."""
    for module in modules.values():
        for prerequisite in module.prerequisites:
            if prerequisite == module.id:
                raise ValueError(f"Module '{module.id}' cannot depend on itself.")
            if prerequisite not in modules:
                raise ValueError(f"Module '{module.id}' has unknown prerequisite '{prerequisite}'.")

    visiting: set[str] = set()
    visited: set[str] = set()

    def visit(module_id: str, path: list[str]) -> None:
        if module_id in visited:
            return
        if module_id in visiting:
            cycle_start = path.index(module_id)
            cycle_path = path[cycle_start:] + [module_id]
            raise ValueError(f"Circular module dependency detected: {' -> '.join(cycle_path)}")

        visiting.add(module_id)
        path.append(module_id)
        for prerequisite in modules[module_id].prerequisites:
            visit(prerequisite, path)
        path.pop()
        visiting.remove(module_id)
        visited.add(module_id)

    for module_id in modules:
        visit(module_id, [])


def _validate_template_modules(modules: dict[str, Module], templates: dict[str, Template]) -> None:
    """Validate every template references catalog modules only."""
    for template in templates.values():
        for module_id in template.module_ids:
            if module_id not in modules:
                raise ValueError(f"Template '{template.id}' references unknown module '{module_id}'.")
