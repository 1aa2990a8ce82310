"""Parser for Cargo.lock files."""

from __future__ import annotations

import logging
import tomllib
from dataclasses import dataclass
from typing import Any, BinaryIO

from depscan.types import (
    Dependency,
    Library,
    Location,
    ParseError,
    Parser,
    sort_dependencies,
    sort_libraries,
)
from depscan.utils import package_id

logger = logging.getLogger(__name__)


@dataclass
class PackagePosition:
    """First and last line of a package table in a lock file."""

    start: int = 0
    end: int = 0


@dataclass
class _PendingPackage:
    name: str = ""
    version: str = ""
    start: int = 0
    end: int = 0

    def close(self, line: int) -> None:
        if self.end == 0:
            self.end = line


def property_value(line: str) -> str:
    """Return the value of a ``key = "value"`` line, or an empty string."""
    parts = line.split("=")
    if len(parts) == 2:
        return parts[1].strip(' "')
    return ""


def index_package_lines(text: str) -> dict[str, PackagePosition]:
    """Map each package ID in a lock file to the lines its table spans."""
    index: dict[str, PackagePosition] = {}
    current = _PendingPackage()
    line_num = 1

    def record(pkg: _PendingPackage, last_line: int) -> None:
        if pkg.name:
            pkg.close(last_line)
            index[package_id(pkg.name, pkg.version)] = PackagePosition(pkg.start, pkg.end)

    for line in text.splitlines():
        stripped = line.strip()
        if stripped.startswith("["):
            record(current, line_num - 1)
            current = _PendingPackage(start=line_num)
        elif stripped.startswith("name ="):
            current.name = property_value(line)
        elif stripped.startswith("version ="):
            current.version = property_value(line)
        elif stripped == "":
            current.close(line_num - 1)
        line_num += 1

    record(current, line_num - 1)
    return index


def parse_dependencies(
    pkg_id: str, pkg: dict[str, Any], pkgs: dict[str, dict[str, Any]]
) -> Dependency | None:
    """Resolve the dependency entries of one lock file package.

    Entries are ``name``, ``name version`` or ``name version (source)``; a
    bare name is resolved through ``pkgs``, keyed by package name.
    """
    depends_on: list[str] = []
    for entry in pkg.get("dependencies", []):
        fields = entry.split()
        if len(fields) == 1:
            name = fields[0]
            found = pkgs.get(name)
            if found is None:
                logger.debug("can't find version for %s", name)
                continue
            depends_on.append(package_id(name, found.get("version", "")))
        elif len(fields) in (2, 3):
            depends_on.append(package_id(fields[0], fields[1]))
        else:
            logger.debug("wrong dependency format for %s", entry)
    if not depends_on:
        return None
    return Dependency(id=pkg_id, depends_on=sorted(depends_on))


class CargoParser(Parser):
    """Reads libraries and dependencies from a Cargo.lock file."""

    def parse(self, stream: BinaryIO) -> tuple[list[Library], list[Dependency]]:
        raw = stream.read()
        try:
            text = raw.decode("utf-8")
            lockfile = tomllib.loads(text)
        except (UnicodeDecodeError, tomllib.TOMLDecodeError) as exc:
            raise ParseError(f"decode error: {exc}") from exc

        packages = lockfile.get("package", [])
        if not isinstance(packages, list):
            raise ParseError("decode error: 'package' must be an array of tables")

        positions = index_package_lines(text)
        by_name = {pkg.get("name", ""): pkg for pkg in packages}

        libs: list[Library] = []
        deps: list[Dependency] = []
        for pkg in packages:
            name = pkg.get("name", "")
            version = pkg.get("version", "")
            pkg_id = package_id(name, version)
            lib = Library(id=pkg_id, name=name, version=version)
            pos = positions.get(pkg_id)
            if pos is not None:
                lib.locations = [Location(start_line=pos.start, end_line=pos.end)]
            libs.append(lib)
            dep = parse_dependencies(pkg_id, pkg, by_name)
            if dep is not None:
                deps.append(dep)
        return sort_libraries(libs), sort_dependencies(deps)