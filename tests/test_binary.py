import io
import json
import struct
import zlib

import pytest

from depscan.rust.binary import (
    NonRustBinaryError,
    RustBinaryParser,
    UnrecognizedExecutableError,
    read_dependency_info,
)
from depscan.types import Dependency, Library, ParseError

INFO = {
    "packages": [
        {
            "name": "crate_with_features",
            "version": "0.1.0",
            "source": "local",
            "dependencies": [1, 2],
            "root": True,
        },
        {"name": "library_crate", "version": "0.1.0", "source": "local"},
        {"name": "build_helper", "version": "1.0.0", "source": "local", "kind": "build"},
    ]
}


def _elf(section_name: bytes, payload: bytes) -> bytes:
    shstrtab = b"\0" + section_name + b"\0.shstrtab\0"
    shstr_name = 1 + len(section_name) + 1
    payload_off = 64
    shstr_off = payload_off + len(payload)
    shoff = shstr_off + len(shstrtab)
    header = b"\x7fELF" + bytes([2, 1, 1]) + b"\0" * 9
    header += struct.pack("<HHIQQQIHHHHHH", 2, 62, 1, 0, 0, shoff, 0, 64, 0, 0, 64, 3, 2)
    sections = b"\0" * 64
    sections += struct.pack("<IIQQQQIIQQ", 1, 1, 0, 0, payload_off, len(payload), 0, 0, 1, 0)
    sections += struct.pack("<IIQQQQIIQQ", shstr_name, 3, 0, 0, shstr_off, len(shstrtab), 0, 0, 1, 0)
    return header + payload + shstrtab + sections


def _payload(info=INFO) -> bytes:
    return zlib.compress(json.dumps(info).encode())


def test_parse_elf():
    data = _elf(b".dep-v0", _payload())
    libs, deps = RustBinaryParser().parse(io.BytesIO(data))
    assert libs == [
        Library(id="crate_with_features@0.1.0", name="crate_with_features", version="0.1.0", indirect=False),
        Library(id="library_crate@0.1.0", name="library_crate", version="0.1.0", indirect=True),
    ]
    assert deps == [Dependency("crate_with_features@0.1.0", ["library_crate@0.1.0"])]


def test_read_dependency_info_kinds():
    packages = read_dependency_info(_elf(b".dep-v0", _payload()))
    assert [p.kind for p in packages] == ["runtime", "runtime", "build"]
    assert packages[0].root is True
    assert packages[0].dependencies == [1, 2]


def test_sad_path_dummy():
    with pytest.raises(UnrecognizedExecutableError, match="unrecognized executable format"):
        RustBinaryParser().parse(io.BytesIO(b"dummy content\n"))


def test_elf_without_section():
    with pytest.raises(NonRustBinaryError, match="non Rust auditable binary"):
        read_dependency_info(_elf(b".text", b"\x90" * 8))


def test_corrupt_payload():
    with pytest.raises(ParseError):
        read_dependency_info(_elf(b".dep-v0", b"not zlib data"))


def test_error_hierarchy():
    assert issubclass(UnrecognizedExecutableError, ParseError)
    assert str(NonRustBinaryError()) == "non Rust auditable binary"