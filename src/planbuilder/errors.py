"""Error types raised by selection operations."""

from __future__ import annotations


class SelectionError(Exception):
    """Recoverable, caller-facing rejection of a selection operation."""


class DependencyConflict(SelectionError):
    """Removal blocked because selected modules still require the target."""

    def __init__(self, module_id: str, blocking: tuple[str, ...]) -> None:
        self.module_id = module_id
        self.blocking = blocking
        super().__init__(f"Cannot remove '{module_id}'; required by: {', '.join(blocking)}")


class InvalidIndex(SelectionError):
    """Move requested with an index outside the current selection."""

    def __init__(self, from_index: int, to_index: int, length: int) -> None:
        self.from_index = from_index
        self.to_index = to_index
        self.length = length
        super().__init__(f"Cannot move {from_index} -> {to_index}; selection has {length} entries")


class UnknownTemplate(SelectionError):
    """Template id is not registered."""

    def __init__(self, template_id: str) -> None:
        self.template_id = template_id
        super().__init__(f"Unknown template: {template_id}")


class UnknownModule(SelectionError):
    """Module id is not in the catalog, or not in the selection for removal."""

    def __init__(self, module_id: str) -> None:
        self.module_id = module_id
        super().__init__(f"Unknown module: {module_id}")


class CycleDetected(RuntimeError):
    """Prerequisite graph loops back on itself; the catalog is corrupt."""

    def __init__(self, path: tuple[str, ...]) -> None:
        self.path = path
        super().__init__(f"Circular module dependency detected: {' -> '.join(path)}")
