from __future__ import annotations

import sys
from collections.abc import Iterator
from pathlib import Path
from typing import Any

import pytest
from loguru import logger

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from planbuilder.models import Catalog, Category, Module, Template  # noqa: E402


def _build_catalog(
    edges: dict[str, list[str]], templates: dict[str, list[str]] | None = None, sizes: dict[str, int] | None = None
) -> Catalog:
    """Build an in-memory catalog from an id -> prerequisites mapping, without load-time validation."""
    modules = {
        module_id: Module(
            id=module_id,
            name=f"Module {module_id}",
            category=Category.BRAND_STRATEGY,
            description="",
            size=(sizes or {}).get(module_id, 1),
            prerequisites=tuple(prerequisites),
            sort_order=index,
        )
        for index, (module_id, prerequisites) in enumerate(edges.items())
    }
    registry = {
        template_id: Template(id=template_id, name=template_id, description="", module_ids=tuple(module_ids))
        for template_id, module_ids in (templates or {}).items()
    }
    return Catalog(modules=modules, templates=registry)


@pytest.fixture
def make_catalog() -> Any:
    return _build_catalog


@pytest.fixture
def abc_catalog() -> Catalog:
    """A <- B <- C chain with a 'startup-launch' template of [A, B]."""
    return _build_catalog({"A": [], "B": ["A"], "C": ["B"]}, templates={"startup-launch": ["A", "B"]})


@pytest.fixture
def log_messages() -> Iterator[list[str]]:
    """Collect loguru messages emitted during a test."""
    messages: list[str] = []
    handler_id = logger.add(lambda message: messages.append(message.record["message"]), level="DEBUG")
    try:
        yield messages
    finally:
        logger.remove(handler_id)
