"""Bundled JSON schemas for noticegen artifacts."""

from __future__ import annotations

import json
from functools import cache
from importlib.resources import files
from typing import Any

SCHEMA_SUFFIX = ".schema.json"


def available_schemas() -> tuple[str, ...]:
    """Sorted canonical schema names (without the .schema.json suffix)."""
    return tuple(
        sorted(
            item.name.removesuffix(SCHEMA_SUFFIX)
            for item in files(__name__).iterdir()
            if item.name.endswith(SCHEMA_SUFFIX)
        )
    )


@cache
def get_schema_json(name: str) -> dict[str, Any]:
    """Load a bundled schema by canonical name.

    Raises:
        KeyError: If no schema with that name is bundled
    """
    resource = files(__name__) / f"{name.removesuffix(SCHEMA_SUFFIX)}{SCHEMA_SUFFIX}"
    if not resource.is_file():
        raise KeyError(f"Schema not found: {name} (available: {', '.join(available_schemas())})")
    return json.loads(resource.read_text(encoding="utf-8"))
