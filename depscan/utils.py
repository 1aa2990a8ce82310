"""Helpers for deduplicating and identifying packages."""

from __future__ import annotations

from dataclasses import replace
from typing import Iterable

from depscan.types import Library, sort_libraries


def package_id(name: str, version: str) -> str:
    """Build the ``name@version`` identifier of a package."""
    return f"{name}@{version}"


def unique_strings(strings: Iterable[str]) -> list[str]:
    """Drop repeated strings, keeping the first occurrence of each."""
    return list(dict.fromkeys(strings))


def unique_libraries(libs: Iterable[Library]) -> list[Library]:
    """Deduplicate libraries by name and version, merging their locations.

    The first library seen for each name and version is kept; locations of
    later duplicates are appended and ordered by start line. The result is
    sorted by ID, name and version.
    """
    unique: dict[str, Library] = {}
    for lib in libs:
        key = package_id(lib.name, lib.version)
        existing = unique.get(key)
        if existing is None:
            unique[key] = lib
        elif lib.locations:
            merged = sorted(
                [*existing.locations, *lib.locations],
                key=lambda loc: loc.start_line,
            )
            unique[key] = replace(existing, locations=merged)
    return sort_libraries(unique.values())


def merge_maps(
    parent: dict[str, str] | None, child: dict[str, str]
) -> dict[str, str]:
    """Copy ``child`` into ``parent`` and return it; return ``child`` if there is no parent."""
    if parent is None:
        return child
    parent.update(child)
    return parent