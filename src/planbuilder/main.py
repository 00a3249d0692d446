"""CLI entrypoint for assembling a project plan from catalog modules."""

from __future__ import annotations

import argparse
from collections.abc import Callable
from pathlib import Path

from pydantic import ValidationError

from .errors import DependencyConflict, SelectionError
from .logging_config import configure_logging
from .models import Module
from .service import PlanService
from .settings import LOG_LEVELS, Settings

InputFn = Callable[[str], str]
PrintFn = Callable[[str], None]
MENU_QUIT_COMMANDS = {"q"}
MENU_BACK_COMMANDS = {"b"}


def _service(settings: Settings) -> PlanService:
    """Create plan service from settings."""
    return PlanService(settings=settings)


def run(argv: list[str] | None = None) -> int:
    """Run the CLI application."""
    parser = argparse.ArgumentParser(prog="planbuilder", description="Assemble a project plan from catalog modules")
    parser.add_argument("command", nargs="?", default="plan", choices=["plan", "catalog", "templates"])
    parser.add_argument("--catalog-dir", type=Path, default=None, help="directory with modules/ and templates/ JSON")
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        default=None,
        help="stderr log level (default from PLANBUILDER_LOG_LEVEL)",
    )
    args = parser.parse_args(argv)

    overrides: dict[str, object] = {}
    if args.catalog_dir is not None:
        overrides["catalog_dir"] = args.catalog_dir
    if args.log_level is not None:
        overrides["log_level"] = args.log_level
    try:
        settings = Settings(**overrides)
    except ValidationError as exc:
        parser.error(f"invalid configuration: {exc}")
    configure_logging(settings.log_level, settings.log_file)

    if args.command == "catalog":
        _catalog_listing(_service(settings), print)
        return 0
    if args.command == "templates":
        _template_listing(_service(settings), print)
        return 0
    return plan_shell(settings)


def plan_shell(settings: Settings | None = None, input_fn: InputFn = input, print_fn: PrintFn = print) -> int:
    """Run menu-driven plan editor."""
    service = _service(settings or Settings())
    while True:
        summary = service.summary()
        print_fn("\n=== Project Plan ===")
        print_fn(f"{summary.module_count} modules • size {summary.total_size}")
        print_fn("1) Add or remove a module")
        print_fn("2) Move a module")
        print_fn("3) Load a template")
        print_fn("4) Show plan")
        print_fn("c) Commit")
        print_fn("q) Quit")
        choice = input_fn("Choose: ").strip().lower()

        if choice == "1":
            _toggle_flow(service, input_fn, print_fn)
        elif choice == "2":
            _move_flow(service, input_fn, print_fn)
        elif choice == "3":
            _template_flow(service, input_fn, print_fn)
        elif choice == "4":
            _show_plan_flow(service, print_fn)
        elif choice == "c":
            if _commit_flow(service, print_fn):
                return 0
        elif choice in MENU_QUIT_COMMANDS:
            print_fn("Plan discarded.")
            return 0
        else:
            print_fn("Invalid choice.")


def _module_label(service: PlanService, module_id: str) -> str:
    module = service.catalog.modules.get(module_id)
    return module.name if module is not None else module_id


def _toggle_flow(service: PlanService, input_fn: InputFn, print_fn: PrintFn) -> None:
    """Pick a catalog module and toggle its membership."""
    print_fn("\n=== Modules ===")
    numbered: list[Module] = []
    for category, modules in service.catalog.modules_by_category().items():
        print_fn(category.value)
        for module in modules:
            numbered.append(module)
            marker = "x" if module.id in service.selection else " "
            line = f"{len(numbered):>2}) [{marker}] {module.name} ({module.size})"
            status = service.status(module.id)
            if not status.satisfied:
                line += f"  Requires: {', '.join(_module_label(service, dep) for dep in status.missing)}"
            print_fn(line)
    print_fn("b) Back")
    choice = input_fn("Choose module: ").strip().lower()
    if choice in MENU_BACK_COMMANDS:
        return
    if not choice.isdigit() or not (1 <= int(choice) <= len(numbered)):
        print_fn("Invalid choice.")
        return

    target = numbered[int(choice) - 1]
    before = set(service.selection)
    try:
        after = service.toggle(target.id)
    except DependencyConflict as exc:
        names = ", ".join(_module_label(service, item) for item in exc.blocking)
        print_fn(f"Cannot remove this module. The following modules depend on it: {names}")
        return

    if target.id in before:
        print_fn(f"Removed {target.name}.")
        return
    print_fn(f"Added {target.name}.")
    cascaded = [item for item in after if item not in before and item != target.id]
    if cascaded:
        print_fn(f"Also added prerequisites: {', '.join(_module_label(service, item) for item in cascaded)}")


def _move_flow(service: PlanService, input_fn: InputFn, print_fn: PrintFn) -> None:
    """Move one plan entry to a new position."""
    if not service.selection:
        print_fn("No modules selected.")
        return
    _print_plan(service, print_fn)
    from_text = input_fn("Move from position: ").strip()
    to_text = input_fn("Move to position: ").strip()
    if not from_text.isdigit() or not to_text.isdigit():
        print_fn("Invalid choice.")
        return
    try:
        service.move(int(from_text) - 1, int(to_text) - 1)
    except SelectionError as exc:
        print_fn(f"Move failed: {exc}")
        return
    _print_plan(service, print_fn)


def _template_flow(service: PlanService, input_fn: InputFn, print_fn: PrintFn) -> None:
    """Replace the plan with a template chosen by number or id."""
    templates = _template_listing(service, print_fn)
    print_fn("b) Back")
    choice = input_fn("Choose template: ").strip()
    if choice.lower() in MENU_BACK_COMMANDS:
        return
    if choice.isdigit():
        index = int(choice) - 1
        if not (0 <= index < len(templates)):
            print_fn("Invalid choice.")
            return
        choice = templates[index]
    try:
        service.load_template(choice)
    except (SelectionError, ValueError) as exc:
        print_fn(f"Template not loaded: {exc}")
        return
    print_fn(f"Loaded template '{service.catalog.templates[choice].name}'.")


def _show_plan_flow(service: PlanService, print_fn: PrintFn) -> None:
    """Print the plan with ordering warnings."""
    print_fn("\n=== Plan ===")
    if not service.selection:
        print_fn("No modules selected.")
        return
    _print_plan(service, print_fn)
    summary = service.summary()
    print_fn(f"Total: {summary.module_count} modules, size {summary.total_size}")
    for dependent, prerequisite in summary.ordering_violations:
        print_fn(
            f"Warning: {_module_label(service, dependent)} comes before its prerequisite "
            f"{_module_label(service, prerequisite)}"
        )
    if summary.ordering_violations:
        suggestion = ", ".join(_module_label(service, item) for item in service.suggested_order())
        print_fn(f"Suggested order: {suggestion}")


def _commit_flow(service: PlanService, print_fn: PrintFn) -> bool:
    """Commit the plan; returns False when there is nothing to commit."""
    if not service.selection:
        print_fn("No modules selected.")
        return False
    plan = service.commit(lambda module_ids: module_ids)
    print_fn("Committed plan:")
    for module_id in plan:
        print_fn(f"- {module_id}")
    return True


def _print_plan(service: PlanService, print_fn: PrintFn) -> None:
    for position, module_id in enumerate(service.selection, start=1):
        module = service.catalog.modules[module_id]
        print_fn(f"{position:>2}) {module.name} [{module.category.value}] ({module.size})")


def _catalog_listing(service: PlanService, print_fn: PrintFn) -> None:
    """Print catalog modules grouped by category."""
    id_width = max((len(module_id) for module_id in service.catalog.modules), default=2)
    for category, modules in service.catalog.modules_by_category().items():
        print_fn(f"\n{category.value}")
        for module in modules:
            prerequisites = ", ".join(module.prerequisites) if module.prerequisites else "none"
            print_fn(f"  {module.id:<{id_width}} {module.name} (size {module.size}; requires {prerequisites})")


def _template_listing(service: PlanService, print_fn: PrintFn) -> list[str]:
    """Print registered templates and return their ids in listing order."""
    print_fn("\n=== Templates ===")
    template_ids = sorted(service.catalog.templates)
    if not template_ids:
        print_fn("No templates registered.")
    for idx, template_id in enumerate(template_ids, start=1):
        template = service.catalog.templates[template_id]
        print_fn(f"{idx}) {template.name} [{template.id}] - {len(template.module_ids)} modules")
        if template.description:
            print_fn(f"   {template.description}")
    return template_ids


def main_entry() -> None:
    """Console script entrypoint."""
    raise SystemExit(run())


if __name__ == "__main__":  # pragma: no cover
    main_entry()
