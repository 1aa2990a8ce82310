# depscan

depscan reads the files that package managers leave behind and reports which
libraries a project uses and how they depend on each other. It understands:

- `Cargo.lock` files (old, mixed and v3 layouts), with the line range of each package
- Rust binaries built with `cargo auditable` (ELF, PE and Mach-O)
- CocoaPods `Podfile.lock` files
- Swift Package Manager `Package.resolved` files (v1 and v2), with line ranges

## Installation

```
pip install depscan
```

## Usage

Every parser has a `parse(stream)` method that takes an open binary file and
returns a pair: a list of `Library` records and a list of `Dependency` records
(both defined in `depscan.types`).

```python
from depscan.rust.cargo import CargoParser

with open("Cargo.lock", "rb") as f:
    libraries, dependencies = CargoParser().parse(f)

for lib in libraries:
    print(lib.id, lib.locations)

for dep in dependencies:
    print(dep.id, "->", ", ".join(dep.depends_on))
```

The other parsers work the same way:

```python
from depscan.rust.binary import RustBinaryParser
from depscan.swift.cocoapods import CocoaPodsParser
from depscan.swift.resolved import SwiftResolvedParser
```

Each library's identifier has the form `name@version` (see
`depscan.utils.package_id`).

What each parser returns:

- `CargoParser`: libraries sorted by identifier, each with the lines of its
  `[[package]]` table; dependencies sorted by identifier, each with a sorted
  `depends_on` list.
- `RustBinaryParser`: the runtime crates in the order the binary records them;
  crates that are not the root are marked `indirect`. Build-time crates are left
  out. `depscan.rust.binary.read_dependency_info` gives the raw embedded package
  list as `AuditablePackage` records.
- `CocoaPodsParser`: one library per pod, sorted by identifier, and the pods'
  dependencies sorted by identifier. Pod entries without a version in brackets
  are skipped.
- `SwiftResolvedParser`: libraries sorted by identifier, named by the pin's
  repository URL without `https://` and `.git`, each with the lines of its pin
  object. It reports no dependencies.

## Errors

A file that cannot be decoded raises `depscan.types.ParseError`, a subclass of
`ValueError`. For binaries, `depscan.rust.binary.UnrecognizedExecutableError`
means the file is not an executable format that depscan knows, and
`NonRustBinaryError` means the executable carries no `cargo auditable`
dependency data; both are `ParseError`s.

## Helpers

`depscan.utils` also provides `unique_strings`, `unique_libraries` (which merges
duplicate libraries by name and version, joins their locations and sorts the
result) and `merge_maps`. `depscan.types` provides `sort_libraries` and
`sort_dependencies`.

## What depscan does not do

depscan is a library only. It has no command-line tool, does not walk
directories to find lock files, and does not look libraries up in any
vulnerability database. Mach-O support covers single-architecture binaries.

## Running the tests

```
pip install -e ".[test]"
pytest
```