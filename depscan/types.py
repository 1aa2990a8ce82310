"""Core data types shared by all lock file and binary parsers."""

from __future__ import annotations

import abc
from dataclasses import dataclass, field
from enum import StrEnum
from typing import BinaryIO, Iterable


class RefType(StrEnum):
    """Kind of an external reference attached to a library."""

    WEBSITE = "website"
    LICENSE = "license"
    VCS = "vcs"
    ISSUE_TRACKER = "issue-tracker"
    OTHER = "other"


@dataclass(frozen=True)
class ExternalRef:
    """A link from a library to some external resource."""

    type: RefType
    url: str


@dataclass(frozen=True)
class Location:
    """A span of lines in the parsed file."""

    start_line: int = 0
    end_line: int = 0


@dataclass
class Library:
    """A package found in a dependency file."""

    id: str = ""
    name: str = ""
    version: str = ""
    dev: bool = False
    indirect: bool = False
    license: str = ""
    external_references: list[ExternalRef] = field(default_factory=list)
    locations: list[Location] = field(default_factory=list)
    file_path: str = ""


@dataclass
class Dependency:
    """The packages that one package depends on."""

    id: str
    depends_on: list[str] = field(default_factory=list)


class ParseError(ValueError):
    """Raised when a dependency file cannot be parsed."""


class Parser(abc.ABC):
    """Interface implemented by every dependency file parser."""

    @abc.abstractmethod
    def parse(self, stream: BinaryIO) -> tuple[list[Library], list[Dependency]]:
        """Parse the dependency file read from ``stream``."""


def library_sort_key(lib: Library) -> tuple[str, str, str]:
    """Order libraries by ID, then name, then version."""
    return (lib.id, lib.name, lib.version)


def sort_libraries(libs: Iterable[Library]) -> list[Library]:
    """Return the libraries sorted by :func:`library_sort_key`."""
    return sorted(libs, key=library_sort_key)


def sort_dependencies(deps: Iterable[Dependency]) -> list[Dependency]:
    """Return the dependencies sorted by ID."""
    return sorted(deps, key=lambda dep: dep.id)