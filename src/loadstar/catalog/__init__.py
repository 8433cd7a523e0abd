"""Static catalog of installable tools.

The catalog is packaged YAML data, validated into frozen Pydantic models the
first time it is read and shared for the life of the process.
"""

from __future__ import annotations

from functools import lru_cache
from importlib.resources import files

import yaml
from pydantic import TypeAdapter, ValidationError

from loadstar.catalog.models import (
    CaskDirective,
    CatalogEntry,
    Category,
    FormulaDirective,
    InstallDirective,
    PackageDirective,
    ScriptDirective,
    ShellDirective,
)
from loadstar.errors import CatalogError

__all__ = [
    "CaskDirective",
    "CatalogEntry",
    "Category",
    "FormulaDirective",
    "InstallDirective",
    "PackageDirective",
    "ScriptDirective",
    "ShellDirective",
    "by_category",
    "by_tag",
    "entries",
    "essential",
    "get",
    "parse_catalog",
]

_ENTRIES = TypeAdapter(list[CatalogEntry])


def parse_catalog(text: str) -> tuple[CatalogEntry, ...]:
    """Parse and validate catalog YAML.

    Raises:
        CatalogError: If the YAML is invalid, an entry fails validation,
            or two entries share an id.
    """
    try:
        raw = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise CatalogError(f"Catalog is not valid YAML: {e}") from e

    try:
        parsed = _ENTRIES.validate_python(raw or [])
    except ValidationError as e:
        raise CatalogError(f"Invalid catalog entry: {e}") from e

    seen: set[str] = set()
    for entry in parsed:
        if entry.id in seen:
            raise CatalogError(f"Duplicate catalog id: {entry.id}")
        seen.add(entry.id)

    return tuple(parsed)


@lru_cache(maxsize=1)
def entries() -> tuple[CatalogEntry, ...]:
    """Return every catalog entry in catalog order."""
    text = files("loadstar.catalog").joinpath("data/catalog.yml").read_text(
        encoding="utf-8"
    )
    return parse_catalog(text)


def get(entry_id: str) -> CatalogEntry:
    """Look up an entry by id.

    Raises:
        CatalogError: If no entry has this id.
    """
    for entry in entries():
        if entry.id == entry_id:
            return entry
    raise CatalogError(f"Unknown catalog id: {entry_id}")


def by_category(category: Category) -> list[CatalogEntry]:
    return [entry for entry in entries() if entry.category == category]


def by_tag(tag: str) -> list[CatalogEntry]:
    return [entry for entry in entries() if entry.has_tag(tag)]


def essential() -> list[CatalogEntry]:
    """Entries tagged ``essential``; these start out selected."""
    return by_tag("essential")
