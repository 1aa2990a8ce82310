"""Parser for CocoaPods Podfile.lock files."""

from __future__ import annotations

import logging
from typing import Any, BinaryIO

import yaml

from depscan.types import Dependency, Library, ParseError, Parser, sort_dependencies
from depscan.utils import package_id, unique_libraries

logger = logging.getLogger(__name__)


def parse_dep(dep: str) -> Library:
    """Parse a pod entry such as ``AppCenter (4.2.0)`` into a library.

    Raises :class:`ParseError` when the entry carries no version in brackets.
    """
    parts = dep.split(" (")
    if len(parts) != 2:
        raise ParseError(f"Unable to determine cocoapods dependency: {dep!r}")
    name = parts[0]
    version = parts[1].strip().strip("()")
    return Library(id=package_id(name, version), name=name, version=version)


def _load_pods(raw: bytes) -> list[Any]:
    try:
        doc = yaml.safe_load(raw)
    except yaml.YAMLError as exc:
        raise ParseError(f"failed to decode cocoapods lock file: {exc}") from exc
    if doc is None:
        raise ParseError("failed to decode cocoapods lock file: empty document")
    if not isinstance(doc, dict):
        raise ParseError("failed to decode cocoapods lock file: top level must be a mapping")
    pods = doc.get("PODS")
    if pods is None:
        return []
    if not isinstance(pods, list):
        raise ParseError("failed to decode cocoapods lock file: PODS must be a sequence")
    return pods


def _child_name(child: Any) -> str:
    if not isinstance(child, str):
        raise ParseError(f"must be string: {child!r}")
    fields = child.split()
    if not fields:
        raise ParseError(f"empty cocoapods dependency: {child!r}")
    return fields[0]


class CocoaPodsParser(Parser):
    """Reads pods and their dependencies from a Podfile.lock file."""

    def parse(self, stream: BinaryIO) -> tuple[list[Library], list[Dependency]]:
        parsed: dict[str, Library] = {}
        children_of: dict[str, list[str]] = {}

        for pod in _load_pods(stream.read()):
            if isinstance(pod, str):
                try:
                    lib = parse_dep(pod)
                except ParseError as exc:
                    logger.debug("%s", exc)
                    continue
                parsed[lib.name] = lib
            elif isinstance(pod, dict) and all(isinstance(k, str) for k in pod):
                for dep, child_deps in pod.items():
                    try:
                        lib = parse_dep(dep)
                    except ParseError as exc:
                        logger.debug("%s", exc)
                        continue
                    parsed[lib.name] = lib
                    if not isinstance(child_deps, list):
                        raise ParseError(
                            f"invalid value of cocoapods direct dependency: {child_deps!r}"
                        )
                    children_of.setdefault(lib.name, []).extend(
                        _child_name(child) for child in child_deps
                    )

        deps = []
        for name, children in children_of.items():
            depends_on = [
                package_id(child, parsed[child].version if child in parsed else "")
                for child in children
            ]
            deps.append(Dependency(id=parsed[name].id, depends_on=depends_on))

        return unique_libraries(parsed.values()), sort_dependencies(deps)