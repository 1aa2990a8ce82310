"""Detects Rust crates embedded in binaries built with cargo-auditable."""

from __future__ import annotations

import json
import struct
import zlib
from dataclasses import dataclass, field
from typing import BinaryIO

from depscan.types import Dependency, Library, ParseError, Parser
from depscan.utils import package_id

RUNTIME = "runtime"
_ELF_SECTION = b".dep-v0"
_MACHO_SECTION = b"__dep_v0"
_MACHO_MAGICS = {
    b"\xfe\xed\xfa\xce": (">", False),
    b"\xce\xfa\xed\xfe": ("<", False),
    b"\xfe\xed\xfa\xcf": (">", True),
    b"\xcf\xfa\xed\xfe": ("<", True),
}


class UnrecognizedExecutableError(ParseError):
    """The data is not an ELF, PE or Mach-O executable."""

    def __init__(self, message: str = "unrecognized executable format") -> None:
        super().__init__(message)


class NonRustBinaryError(ParseError):
    """The executable carries no cargo-auditable dependency data."""

    def __init__(self, message: str = "non Rust auditable binary") -> None:
        super().__init__(message)


@dataclass
class AuditablePackage:
    """One package recorded in a binary's embedded dependency list."""

    name: str
    version: str
    source: str = ""
    kind: str = RUNTIME
    dependencies: list[int] = field(default_factory=list)
    root: bool = False


def _unpack(fmt: str, data: bytes, offset: int) -> tuple:
    try:
        return struct.unpack_from(fmt, data, offset)
    except struct.error as exc:
        raise ParseError(f"truncated executable: {exc}") from exc


def _elf_section(data: bytes) -> bytes | None:
    end = "<" if data[5] == 1 else ">"
    if data[4] == 2:
        shoff, meta, hdr = _unpack(end + "Q", data, 0x28)[0], 0x3A, end + "IIQQQQ"
    else:
        shoff, meta, hdr = _unpack(end + "I", data, 0x20)[0], 0x2E, end + "IIIIII"
    shentsize, shnum, shstrndx = _unpack(end + "HHH", data, meta)
    headers = [_unpack(hdr, data, shoff + i * shentsize) for i in range(shnum)]
    if shstrndx >= len(headers):
        return None
    str_off, str_size = headers[shstrndx][4:6]
    names = data[str_off:str_off + str_size]
    for name_off, sh_type, _, _, offset, size in headers:
        name = names[name_off:names.find(b"\0", name_off)]
        if name == _ELF_SECTION and sh_type != 8:
            return data[offset:offset + size]
    return None


def _pe_section(data: bytes) -> bytes | None:
    pe = _unpack("<I", data, 0x3C)[0]
    if data[pe:pe + 4] != b"PE\0\0":
        raise UnrecognizedExecutableError()
    nsections = _unpack("<H", data, pe + 6)[0]
    table = pe + 24 + _unpack("<H", data, pe + 20)[0]
    for i in range(nsections):
        name, vsize, _, raw_size, raw_ptr = _unpack("<8sIIII", data, table + i * 40)
        if name.rstrip(b"\0") == _ELF_SECTION:
            size = min(vsize, raw_size) if vsize else raw_size
            return data[raw_ptr:raw_ptr + size]
    return None


def _macho_section(data: bytes, end: str, is64: bool) -> bytes | None:
    ncmds = _unpack(end + "I", data, 16)[0]
    offset = 32 if is64 else 28
    segment_cmd, nsects_at, first, step, fmt = (
        (0x19, 64, 72, 80, "16s16sQQI") if is64 else (0x1, 48, 56, 68, "16s16sIII")
    )
    for _ in range(ncmds):
        cmd, cmdsize = _unpack(end + "II", data, offset)
        if cmd == segment_cmd:
            for i in range(_unpack(end + "I", data, offset + nsects_at)[0]):
                name, _, _, size, file_off = _unpack(end + fmt, data, offset + first + i * step)
                if name.rstrip(b"\0") == _MACHO_SECTION:
                    return data[file_off:file_off + size]
        if cmdsize == 0:
            break
        offset += cmdsize
    return None


def _find_section(data: bytes) -> bytes | None:
    if data[:4] == b"\x7fELF" and len(data) > 6:
        return _elf_section(data)
    if data[:2] == b"MZ":
        return _pe_section(data)
    if data[:4] in _MACHO_MAGICS:
        return _macho_section(data, *_MACHO_MAGICS[data[:4]])
    raise UnrecognizedExecutableError()


def read_dependency_info(data: bytes) -> list[AuditablePackage]:
    """Extract the cargo-auditable package list from executable bytes."""
    section = _find_section(data)
    if section is None:
        raise NonRustBinaryError()
    try:
        info = json.loads(zlib.decompressobj().decompress(section))
        return [
            AuditablePackage(
                name=pkg["name"],
                version=pkg["version"],
                source=pkg.get("source", ""),
                kind=pkg.get("kind", RUNTIME),
                dependencies=list(pkg.get("dependencies", [])),
                root=bool(pkg.get("root", False)),
            )
            for pkg in info.get("packages", [])
        ]
    except (zlib.error, ValueError, KeyError, TypeError, AttributeError) as exc:
        raise ParseError(f"invalid dependency data: {exc}") from exc


class RustBinaryParser(Parser):
    """Reports the runtime crates embedded in a Rust auditable binary."""

    def parse(self, stream: BinaryIO) -> tuple[list[Library], list[Dependency]]:
        packages = read_dependency_info(stream.read())
        libs: list[Library] = []
        deps: list[Dependency] = []
        for pkg in packages:
            if pkg.kind != RUNTIME:
                continue
            pkg_id = package_id(pkg.name, pkg.version)
            libs.append(
                Library(id=pkg_id, name=pkg.name, version=pkg.version, indirect=not pkg.root)
            )
            try:
                children = [packages[i] for i in pkg.dependencies]
            except IndexError as exc:
                raise ParseError(f"invalid dependency index in {pkg_id}") from exc
            child_ids = [package_id(c.name, c.version) for c in children if c.kind == RUNTIME]
            if child_ids:
                deps.append(Dependency(id=pkg_id, depends_on=child_ids))
        return libs, deps