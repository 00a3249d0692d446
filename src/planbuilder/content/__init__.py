"""Bundled catalog content."""
