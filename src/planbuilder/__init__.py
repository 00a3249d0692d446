"""planbuilder package."""

from __future__ import annotations

import tomllib
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

__all__ = ["__version__"]

# src/planbuilder/__init__.py -> repository root
_SOURCE_PYPROJECT = Path(__file__).resolve().parents[2] / "pyproject.toml"


def _source_version(pyproject: Path = _SOURCE_PYPROJECT) -> str | None:
    """Version declared by this checkout's pyproject.toml, for runs from src/."""
    if not pyproject.is_file():
        return None
    with pyproject.open("rb") as handle:
        project = tomllib.load(handle).get("project", {})
    if project.get("name") != "planbuilder":
        return None
    return project.get("version")


def _resolve_version() -> str:
    try:
        return version("planbuilder")
    except PackageNotFoundError:
        return _source_version() or "0+unknown"


__version__ = _resolve_version()
