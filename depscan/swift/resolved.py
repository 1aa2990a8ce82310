"""Parser for Swift Package Manager Package.resolved files."""

from __future__ import annotations

import json
import json.decoder
import json.scanner
from dataclasses import dataclass, field
from typing import Any, BinaryIO

from depscan.types import Dependency, Library, Location, ParseError, Parser, sort_libraries
from depscan.utils import package_id


@dataclass
class State:
    """The resolved state of a pinned package."""

    branch: Any = None
    revision: str = ""
    version: str = ""


@dataclass
class Pin:
    """A pinned package together with the lines its object spans."""

    package: str = ""
    repository_url: str = ""
    location: str = ""
    state: State = field(default_factory=State)
    start_line: int = 0
    end_line: int = 0


class _LocatedDict(dict):
    """A JSON object that remembers the lines of its braces."""

    start_line = 0
    end_line = 0


class _LineDecoder(json.JSONDecoder):
    """JSON decoder whose objects carry the lines they start and end on."""

    def __init__(self, text: str) -> None:
        super().__init__()
        self._text = text
        self.parse_object = self._located_object
        self.scan_once = json.scanner.py_make_scanner(self)

    def _line(self, pos: int) -> int:
        return self._text.count("\n", 0, pos) + 1

    def _located_object(self, s_and_end, *args, **kwargs):
        obj, end = json.decoder.JSONObject(s_and_end, *args, **kwargs)
        located = _LocatedDict(obj)
        located.start_line = self._line(s_and_end[1] - 1)
        located.end_line = self._line(end - 1)
        return located, end


def _field(obj: dict, key: str, kind: type, default: Any) -> Any:
    value = obj.get(key)
    if value is None:
        return default
    if not isinstance(value, kind) or (kind is int and isinstance(value, bool)):
        raise ParseError(f"decode error: {key!r} has the wrong type")
    return value


def _to_pin(raw: Any) -> Pin:
    if not isinstance(raw, _LocatedDict):
        raise ParseError("decode error: pin must be an object")
    state = _field(raw, "state", dict, {})
    return Pin(
        package=_field(raw, "package", str, ""),
        repository_url=_field(raw, "repositoryURL", str, ""),
        location=_field(raw, "location", str, ""),
        state=State(
            branch=state.get("branch"),
            revision=_field(state, "revision", str, ""),
            version=_field(state, "version", str, ""),
        ),
        start_line=raw.start_line,
        end_line=raw.end_line,
    )


def load_pins(text: str) -> tuple[int, list[Pin]]:
    """Decode a Package.resolved document into its format version and pins."""
    try:
        doc = _LineDecoder(text).decode(text)
    except ValueError as exc:
        raise ParseError(f"decode error: {exc}") from exc
    if not isinstance(doc, dict):
        raise ParseError("decode error: top level must be an object")
    version = _field(doc, "version", int, 0)
    holder = doc if version > 1 else _field(doc, "object", dict, {})
    return version, [_to_pin(raw) for raw in _field(holder, "pins", list, [])]


def library_name(pin: Pin, lock_version: int) -> str:
    """Name a pin by its repository URL without the scheme and ``.git`` suffix."""
    name = pin.location if lock_version > 1 else pin.repository_url
    return name.removeprefix("https://").removesuffix(".git")


class SwiftResolvedParser(Parser):
    """Reads pinned packages from a Package.resolved file."""

    def parse(self, stream: BinaryIO) -> tuple[list[Library], list[Dependency]]:
        try:
            text = stream.read().decode("utf-8")
        except UnicodeDecodeError as exc:
            raise ParseError(f"read error: {exc}") from exc
        version, pins = load_pins(text)
        libs = []
        for pin in pins:
            name = library_name(pin, version)
            libs.append(
                Library(
                    id=package_id(name, pin.state.version),
                    name=name,
                    version=pin.state.version,
                    locations=[Location(start_line=pin.start_line, end_line=pin.end_line)],
                )
            )
        return sort_libraries(libs), []